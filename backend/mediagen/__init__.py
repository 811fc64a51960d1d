"""mediagen — launch and track generative media operations on Vertex AI."""

__version__ = "0.1.0"

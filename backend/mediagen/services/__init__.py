"""Service layer: credentials, vendor transport, operation lifecycle, artifacts."""

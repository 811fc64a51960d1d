"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """mediagen service settings.

    Loaded from environment variables or .env file.
    """

    # --- Application ---
    APP_NAME: str = "mediagen"
    DEBUG: bool = False
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    # --- Google Cloud ---
    GOOGLE_CLOUD_PROJECT: str = ""  # overrides the project bound to the credentials
    GOOGLE_CLOUD_LOCATION: str = "us-central1"
    GOOGLE_SERVICE_ACCOUNT_B64: str = ""
    USE_AMBIENT_CREDENTIALS: bool = False

    # --- Vertex AI ---
    VERTEX_ENDPOINT: str = "https://{location}-aiplatform.googleapis.com"
    VERTEX_API_VERSION: str = "v1"
    VERTEX_LAUNCH_METHOD: str = "generateContent"
    VENDOR_TIMEOUT: float = 30.0

    # --- Model selection (media kind -> model id) ---
    IMAGE_MODEL: str = "gemini-2.5-flash-image"
    VIDEO_MODEL: str = "veo-3.0-generate-001"

    # --- Artifacts ---
    OUTPUT_STORAGE_URI: str = ""
    PUBLIC_STORAGE_BASE_URL: str = "https://storage.googleapis.com"

    @property
    def vertex_base_url(self) -> str:
        """Regional Vertex AI base URL including the API version."""
        endpoint = self.VERTEX_ENDPOINT.format(location=self.GOOGLE_CLOUD_LOCATION)
        return f"{endpoint.rstrip('/')}/{self.VERTEX_API_VERSION}"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    def model_for(self, media_kind: str) -> str:
        """Return the configured model id for a media kind (``IMAGE`` / ``VIDEO``)."""
        models = {
            "IMAGE": self.IMAGE_MODEL,
            "VIDEO": self.VIDEO_MODEL,
        }
        kind = getattr(media_kind, "value", media_kind)
        try:
            return models[kind]
        except KeyError:
            raise ValueError(f"Unsupported media kind: {media_kind}") from None

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()

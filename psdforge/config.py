"""Application configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # Fetch settings
    FETCH_TIMEOUT: float = 30.0  # Seconds
    MAX_TEMPLATE_BYTES: int = 50 * 1024 * 1024
    MAX_IMAGE_BYTES: int = 50 * 1024 * 1024

    # Image replacement
    RESAMPLE_METHOD: str = "bilinear"  # nearest, bilinear, bicubic, lanczos

    model_config = {"env_prefix": "PSDFORGE_"}


settings = Settings()

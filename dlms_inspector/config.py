"""Configuration module using pydantic for environment-based settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    # Output formatting
    JSON_INDENT: int = 2  # Indentation for display JSON and exports

    # Gurux translator
    GURUX_USE_LOGICAL_NAME: bool = True  # LN referencing (False = SN)

    # HTTP surface
    MAX_BATCH_SIZE: int = 500  # Max PDUs accepted by /parse/batch
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


settings = Settings()

"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

The service-account JSON is kept as a raw string here. It is parsed per
request by the relay core, so a malformed blob fails the request rather
than the process.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Image Relay API"
    api_version: str = "v1"

    # Google Cloud Storage Configuration
    gcs_service_account_json: str = Field(
        default="",
        description="Service-account key as a JSON document (needs client_email and private_key)."
    )
    gcs_bucket_name: str = Field(
        default="",
        description="Bucket that receives uploaded images"
    )
    gcs_token_uri: str = Field(
        default="https://oauth2.googleapis.com/token",
        description="OAuth token endpoint. Also used as the audience of the signed assertion."
    )
    gcs_upload_base_url: str = Field(
        default="https://storage.googleapis.com/upload/storage/v1",
        description="Base URL of the JSON API upload endpoint"
    )
    gcs_public_base_url: str = Field(
        default="https://storage.googleapis.com",
        description="Base URL used to build public object URLs"
    )
    gcs_mock_mode: bool = Field(
        default=False,
        description="Keep uploads in memory instead of calling Google. Enables local dev without credentials."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set based on mock mode settings.

        Returns list of missing required fields.
        This is separate from Pydantic validation because requirements
        depend on whether we're in mock mode.
        """
        missing = []

        if not self.gcs_bucket_name:
            missing.append("GCS_BUCKET_NAME")

        # Credentials only required if not in mock mode
        if not self.gcs_mock_mode and not self.gcs_service_account_json:
            missing.append("GCS_SERVICE_ACCOUNT_JSON")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    This is safe because settings don't change during runtime.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()

"""Configuration management with Pydantic settings."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PASSPHRASE_ENV = "IMGSIGN_IMAGE_SIGN_PASSWORD"
DEFAULT_ANNOTATION_PREFIX = "signature.imgsign.dev"


class Settings(BaseSettings):
    """imgsign configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="IMGSIGN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Signing service
    api_url: str = Field(
        default="http://localhost:8080",
        description="Base URL of the registry-adjacent signing service",
    )

    api_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        description="Timeout applied to each request against the signing service (seconds)",
    )

    # Key material
    signing_key: str | None = Field(
        default=None,
        description="Default key source (file path or inline PEM) when --key is omitted",
    )

    passphrase_env: str = Field(
        default=DEFAULT_PASSPHRASE_ENV,
        description="Environment variable consulted first for the private key passphrase",
    )

    # Registry credentials forwarded to the signing service
    registry_username: str | None = Field(
        default=None,
        description="Username for the registry holding the image",
    )

    registry_password: SecretStr | None = Field(
        default=None,
        description="Password or token for the registry holding the image",
    )

    annotation_prefix: str = Field(
        default=DEFAULT_ANNOTATION_PREFIX,
        description="Label prefix used for system-default signature annotations",
    )

    def has_registry_credentials(self) -> bool:
        """Return True when a registry username is configured."""
        return bool(self.registry_username)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings

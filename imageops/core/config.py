"""Application configuration using Pydantic Settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List, Union


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Service Identity
    SERVICE_NAME: str = "image-operations"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging Configuration
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_JSON: bool = True    # JSON logs (prod) vs pretty console (dev)
    DEBUG: bool = False      # Enable debug mode features

    # HTTP Server
    HOST: str = "0.0.0.0"
    PORT: int = 8088

    # Request Constraints
    MAX_UPLOAD_SIZE_MB: int = 10

    # Operation catalog
    # Names listed here answer 404 as if they did not exist.
    # Accepts a JSON list or a comma-separated string: "watermark,zoom"
    DISABLED_OPERATIONS: Union[List[str], str] = []

    # Encoder defaults, applied when a request leaves the field unset
    DEFAULT_QUALITY: int = 80
    DEFAULT_COMPRESSION: int = 6

    @field_validator('DEFAULT_QUALITY')
    @classmethod
    def validate_quality(cls, v: int) -> int:
        """Quality is a JPEG/WebP encoder setting in the 1-100 range."""
        if not 1 <= v <= 100:
            raise ValueError(f"DEFAULT_QUALITY must be between 1 and 100, got {v}")
        return v

    @field_validator('DEFAULT_COMPRESSION')
    @classmethod
    def validate_compression(cls, v: int) -> int:
        """PNG zlib compression level is 0-9."""
        if not 0 <= v <= 9:
            raise ValueError(f"DEFAULT_COMPRESSION must be between 0 and 9, got {v}")
        return v

    @field_validator('MAX_UPLOAD_SIZE_MB')
    @classmethod
    def validate_upload_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"MAX_UPLOAD_SIZE_MB must be positive, got {v}")
        return v

    @field_validator('DISABLED_OPERATIONS', mode='before')
    @classmethod
    def normalize_disabled_operations(cls, v: Union[List[str], str]) -> List[str]:
        """Operation names are matched case-insensitively."""
        if isinstance(v, str):
            v = v.split(",")
        return [name.strip().lower() for name in v if name.strip()]

    @property
    def is_debug_mode(self) -> bool:
        """Check if application is in debug mode."""
        return self.DEBUG or self.LOG_LEVEL.upper() == "DEBUG"

    @property
    def use_json_logs(self) -> bool:
        """Determine if JSON logging should be used.

        In production, always use JSON logs.
        Elsewhere LOG_JSON decides.
        """
        if self.ENVIRONMENT == "production":
            return True
        return self.LOG_JSON

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()

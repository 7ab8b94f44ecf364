"""Application settings, read from the environment and an optional .env file."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings configuration."""

    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Jigsaw Cutter API"

    # Fill image upload settings
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB

    # CORS settings
    BACKEND_CORS_ORIGINS: list[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"

    # Puzzle defaults
    DEFAULT_LINE_WIDTH: float = Field(default=1.5, gt=0)
    DXF_RESOLUTION: int = Field(default=16, ge=1)

    # Image aspect ratios (width / height) that decide grid orientation
    LANDSCAPE_ASPECT_THRESHOLD: float = 1.3
    PORTRAIT_ASPECT_THRESHOLD: float = 0.77

    class Config:
        """Pydantic configuration class."""

        case_sensitive = True
        env_file = ".env"

    @model_validator(mode="after")
    def validate_aspect_thresholds(self) -> "Settings":
        """Require PORTRAIT_ASPECT_THRESHOLD < 1 < LANDSCAPE_ASPECT_THRESHOLD."""
        if not self.PORTRAIT_ASPECT_THRESHOLD < 1.0 < self.LANDSCAPE_ASPECT_THRESHOLD:
            raise ValueError(
                "Aspect thresholds must satisfy PORTRAIT_ASPECT_THRESHOLD < 1 < LANDSCAPE_ASPECT_THRESHOLD, got "
                f"{self.PORTRAIT_ASPECT_THRESHOLD} and {self.LANDSCAPE_ASPECT_THRESHOLD}"
            )
        return self


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Create instance
settings = get_settings()

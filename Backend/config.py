"""
LiftLog Configuration
Load environment variables and define app settings.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "LiftLog"
    DEBUG: bool = True
    CORS_ORIGINS: list[str] = ["*"]

    # Muscle volume
    VOLUME_WINDOW_DAYS: int = 7
    VOLUME_DECIMALS: int = 2

    # Body map generation
    # Anterior and posterior views share one coordinate space, split on X.
    BODY_SPLIT_X: float = 3300.0
    # The bundled illustration is drawn under scale(0.1, -0.1), so Y grows upward.
    BODY_Y_AXIS_UP: bool = True
    BODY_SVG_INPUT: str = "data/body.svg"
    BODY_DATA_OUTPUT: str = "data/body_data.json"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Quick access
settings = get_settings()

# ============================================================
# Example .env file (create this in your project root):
# ============================================================
"""
# Muscle volume
VOLUME_WINDOW_DAYS=7

# Body map
BODY_SPLIT_X=3300
BODY_Y_AXIS_UP=true
BODY_SVG_INPUT=data/body.svg
BODY_DATA_OUTPUT=data/body_data.json
"""

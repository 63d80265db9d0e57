"""Engine configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # Variants
    max_images_per_variant: int = 6
    low_stock_threshold: int = 10
    shared_image_variant_count: int = 2

    # Generator
    enforce_unique_variants: bool = True

    class Config:
        """Pydantic configuration."""

        env_prefix = "VARIANT_ENGINE_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

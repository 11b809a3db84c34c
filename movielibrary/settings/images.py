"""Image pipeline and cache settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_MIB = 1024 * 1024


class ImageSettings(BaseSettings):
    """Image processing and cache configuration.

    Attributes:
        target_aspect: Width/height ratio images are cropped to.
        aspect_tolerance: Ratios closer than this to the target are kept.
        compression_quality: Lossy quality factor in (0, 1].
        cache_count_limit: Maximum number of decoded images in memory.
        cache_cost_limit: Maximum cumulative cost in bytes.
        bundled_dir: Directory of static assets shipped with the app.
    """

    target_aspect: float = Field(default=16.0 / 10.0, gt=0, alias="IMAGE_TARGET_ASPECT")
    aspect_tolerance: float = Field(default=0.01, ge=0, alias="IMAGE_ASPECT_TOLERANCE")
    compression_quality: float = Field(default=0.3, alias="IMAGE_COMPRESSION_QUALITY")
    cache_count_limit: int = Field(default=100, ge=0, alias="IMAGE_CACHE_COUNT")
    cache_cost_limit: int = Field(default=500 * _MIB, ge=0, alias="IMAGE_CACHE_COST")
    bundled_dir: Path | None = Field(default=None, alias="BUNDLED_ASSETS_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("compression_quality")
    @classmethod
    def validate_quality(cls, v: float) -> float:
        """Quality must be a fraction of the maximum."""
        if not 0 < v <= 1:
            raise ValueError("IMAGE_COMPRESSION_QUALITY must be in (0, 1]")
        return v

    @property
    def jpeg_quality(self) -> int:
        """Quality on Pillow's 1-100 JPEG scale."""
        return max(1, round(self.compression_quality * 100))

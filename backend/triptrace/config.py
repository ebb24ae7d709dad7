"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator, ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    host: str = Field(default="0.0.0.0", description="Bind address for the API server")
    port: int = Field(default=8000, description="Port for the API server")

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:8081", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Roads API (snap-to-roads) ===
    roads_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("roads_api_key", "google_maps_api_key"),
        description="Snap service credential; snapping is skipped when unset"
    )
    roads_api_url: str = Field(
        default="https://roads.googleapis.com/v1/snapToRoads",
        description="Snap-to-roads endpoint"
    )

    # === Snapping pipeline ===
    snap_max_gap_km: float = Field(default=0.5, gt=0)
    snap_max_points_per_request: int = Field(default=100, ge=2)
    snap_max_total_points: int = Field(default=500, ge=2)
    snap_chunk_overlap: int = Field(default=3, ge=0)
    snap_request_timeout_seconds: float = Field(default=10.0, gt=0)
    snap_total_timeout_seconds: float = Field(default=30.0, gt=0)
    snap_overlap_collapse_km: float = Field(default=0.01, ge=0)

    # === Point filter ===
    filter_max_accuracy_m: float = Field(default=25.0)
    filter_min_distance_m: float = Field(default=15.0)
    filter_max_speed_mps: float = Field(default=140.0)
    filter_max_reported_speed_mps: float = Field(default=45.0)
    filter_sharp_angle_deg: float = Field(default=140.0)
    filter_sharp_angle_max_distance_m: float = Field(default=60.0)
    filter_stationary_cluster_size: int = Field(default=4, ge=2)
    filter_stationary_radius_m: float = Field(default=30.0)
    filter_stationary_break_m: float = Field(default=30.0)
    filter_jump_threshold_m: float = Field(default=150.0)
    trace_max_points: int = Field(default=10000, ge=2)

    @field_validator('roads_api_key')
    @classmethod
    def blank_key_is_missing(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty or whitespace key the same as no key."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    @model_validator(mode='after')
    def check_chunk_overlap(self) -> "Settings":
        if self.snap_chunk_overlap >= self.snap_max_points_per_request:
            raise ValueError(
                "snap_chunk_overlap must be smaller than snap_max_points_per_request"
            )
        return self

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance
settings = Settings()

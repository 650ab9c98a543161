"""Engine configuration."""

from pydantic import BaseModel, ConfigDict, Field


class EngineConfig(BaseModel):
    """Tunable settings of the binding engine."""

    model_config = ConfigDict(extra="forbid")

    debounce_ms: int = Field(default=50, ge=0)
    cooldown_ms: int = Field(default=100, ge=0)
    shared_timer: bool = False
    max_pool_depth: int = Field(default=10, ge=1)
    default_destination: str | None = "${destination}"
    name_preview_limit: int = Field(default=3, ge=1)

"""Runtime settings using pydantic."""

from pydantic import BaseModel, Field, field_validator


class SyncSettings(BaseModel):
    """Sync engine and collaborator settings.

    Defaults are the values the agent is designed around. They are never read
    from a file or the environment; the CLI may override them per invocation.
    """

    poll_interval: float = Field(default=1.0, gt=0.0, le=60.0)
    change_threshold: int = Field(default=1, ge=0, le=100)
    transition_duration: float = Field(default=1.5, ge=0.0, le=60.0)
    transition_steps: int = Field(default=15, ge=1, le=1000)
    display_match: str = Field(default="dell", min_length=1)
    fallback_index: str = Field(default="1")
    m1ddc_path: str = Field(default="m1ddc")
    brightnessdiag_path: str = Field(default="/usr/libexec/corebrightnessdiag")
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

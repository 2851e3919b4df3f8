"""Backend modules for display discovery and brightness control."""

from brightsync.backends.display import (
    DisplayManager,
    DisplayEntry,
    parse_display_list,
    resolve_display_id,
)
from brightsync.backends.brightness import BrightnessController, clamp_brightness

__all__ = [
    "DisplayManager",
    "DisplayEntry",
    "parse_display_list",
    "resolve_display_id",
    "BrightnessController",
    "clamp_brightness",
]

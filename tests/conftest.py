"""
Shared test fixtures for the brightsync test suite.
"""

from typing import Optional

import pytest

from brightsync.backends.brightness import clamp_brightness
from brightsync.config import SyncSettings


class FakeBrightness:
    """In-memory stand-in for BrightnessController.

    `internal` is a list of readings handed out one per call (None means the
    read failed); the last reading repeats once the list is exhausted.
    """

    def __init__(self, internal=None, external: Optional[int] = None):
        self.internal = list(internal or [])
        self.external = external
        self.internal_reads = 0
        self.external_reads = 0
        self.writes: list[tuple[str, int]] = []
        self.raw_writes: list[float] = []

    async def get_internal_brightness(self) -> Optional[int]:
        self.internal_reads += 1
        if not self.internal:
            return None
        if len(self.internal) > 1:
            return self.internal.pop(0)
        return self.internal[0]

    async def get_brightness(self, display_id: str) -> Optional[int]:
        self.external_reads += 1
        return self.external

    async def set_brightness(self, display_id: str, value: float) -> bool:
        self.raw_writes.append(value)
        self.writes.append((display_id, clamp_brightness(value)))
        return True


class FakeDisplayManager:
    """Returns a fixed display id."""

    def __init__(self, display_id: Optional[str] = "1"):
        self.display_id = display_id

    async def resolve_external_display(self) -> Optional[str]:
        return self.display_id


@pytest.fixture
def fast_settings():
    """Settings with transitions that finish immediately."""
    return SyncSettings(poll_interval=0.01, transition_duration=0.0)


@pytest.fixture
def listing():
    """Typical `m1ddc display list` output with a Dell attached."""
    return "[0] Built-in (internal)\n[1] DELL U2720Q (hdmi)\n"

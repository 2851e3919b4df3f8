"""Brightness control via m1ddc and corebrightnessdiag."""

import asyncio
import logging
import math
import re
from typing import Optional

logger = logging.getLogger(__name__)

# corebrightnessdiag prints a plist; brightness is a 0.0-1.0 fraction
_INTERNAL_BRIGHTNESS_RE = re.compile(
    r"<key>DisplayServicesBrightness</key>\s*"
    r"<(?:real|integer)>([0-9.]+)</(?:real|integer)>"
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up."""
    return int(math.floor(value + 0.5))


def clamp_brightness(value: float) -> int:
    """Round a brightness value and clamp it to 0-100."""
    return max(0, min(100, round_half_up(value)))


def parse_internal_brightness(output: str) -> Optional[int]:
    """Extract built-in display brightness (0-100) from status-info output."""
    match = _INTERNAL_BRIGHTNESS_RE.search(output)
    if not match:
        return None

    try:
        fraction = float(match.group(1))
    except ValueError:
        return None

    if math.isnan(fraction):
        return None
    return clamp_brightness(fraction * 100)


class BrightnessController:
    """Read the built-in brightness and read/write an external display's."""

    def __init__(
        self,
        m1ddc_path: str = "m1ddc",
        brightnessdiag_path: str = "/usr/libexec/corebrightnessdiag",
    ):
        """Initialize brightness controller.

        Args:
            m1ddc_path: m1ddc executable used for DDC reads and writes
            brightnessdiag_path: corebrightnessdiag executable for the built-in panel
        """
        self.m1ddc_path = m1ddc_path
        self.brightnessdiag_path = brightnessdiag_path

    async def _run(self, *args: str) -> tuple[int, str, str]:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        assert proc.returncode is not None
        return proc.returncode, stdout.decode(), stderr.decode()

    async def get_internal_brightness(self) -> Optional[int]:
        """Get the built-in display brightness.

        Returns:
            Brightness value 0-100, or None on failure
        """
        try:
            returncode, stdout, stderr = await self._run(
                self.brightnessdiag_path, "status-info"
            )
        except FileNotFoundError:
            logger.error(f"{self.brightnessdiag_path} not found")
            return None
        except Exception as e:
            logger.error(f"Failed to read internal brightness: {e}")
            return None

        if returncode != 0:
            logger.error(f"Failed to read internal brightness: {stderr.strip()}")
            return None

        return parse_internal_brightness(stdout)

    async def get_brightness(self, display_id: str) -> Optional[int]:
        """Get current brightness for an external display.

        Args:
            display_id: m1ddc display number

        Returns:
            Brightness value, or None on failure
        """
        try:
            returncode, stdout, _ = await self._run(
                self.m1ddc_path, "display", display_id, "get", "luminance"
            )
        except FileNotFoundError:
            logger.error("m1ddc not found. Is it installed?")
            return None
        except Exception as e:
            logger.debug(f"Error getting brightness for display {display_id}: {e}")
            return None

        if returncode != 0:
            return None

        try:
            return int(stdout.strip())
        except ValueError:
            logger.debug(f"Unexpected m1ddc output: {stdout.strip()!r}")
            return None

    async def set_brightness(self, display_id: str, value: float) -> bool:
        """Set brightness for an external display.

        The value is rounded and clamped to 0-100. Failures are logged and
        dropped, never retried.

        Args:
            display_id: m1ddc display number
            value: Brightness value, may be fractional

        Returns:
            True on success, False on failure
        """
        level = clamp_brightness(value)

        try:
            returncode, _, stderr = await self._run(
                self.m1ddc_path, "display", display_id, "set", "luminance", str(level)
            )
        except FileNotFoundError:
            logger.error("m1ddc not found. Is it installed?")
            return False
        except Exception as e:
            logger.error(f"Failed to set brightness for display {display_id}: {e}")
            return False

        if returncode != 0:
            logger.error(
                f"Failed to set brightness for display {display_id}: {stderr.strip()}"
            )
            return False

        logger.debug(f"Set brightness on display {display_id} to {level}")
        return True

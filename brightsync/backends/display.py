"""Display discovery via m1ddc."""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# "[1] DELL U2720Q (4F1E3A2B-...)"
_ENTRY_RE = re.compile(r"^\[(\d+)\]\s+(.*?)\s+\((.*)$")


@dataclass
class DisplayEntry:
    """One line of `m1ddc display list` output."""

    index: str  # m1ddc display number, e.g. "1"
    name: str  # e.g. "DELL U2720Q"
    details: str = ""  # text after the opening parenthesis


def parse_display_list(listing: str) -> list[DisplayEntry]:
    """Parse `m1ddc display list` output into DisplayEntry objects.

    Example m1ddc output:
    [1] DELL U2720Q (4F1E3A2B-0000-0000-0000-000000000000)
    [2] LG HDR 4K (9A8B7C6D-0000-0000-0000-000000000000)

    Blank and malformed lines are skipped.
    """
    entries = []

    for line in listing.split("\n"):
        if not line.strip():
            continue

        match = _ENTRY_RE.match(line)
        if match:
            details = match.group(3).rstrip()
            if details.endswith(")"):
                details = details[:-1]
            entries.append(
                DisplayEntry(
                    index=match.group(1),
                    name=match.group(2).strip(),
                    details=details,
                )
            )

    return entries


def resolve_display_id(
    listing: str, match: str = "dell", fallback_index: str = "1"
) -> Optional[str]:
    """Pick the external display to control from raw listing text.

    The last entry whose name contains `match` (case-insensitive) wins. If
    none does but the listing mentions `[<fallback_index>]`, that index is
    used. Returns None when neither applies.
    """
    display_id: Optional[str] = None
    needle = match.lower()

    for entry in parse_display_list(listing):
        if needle in entry.name.lower():
            display_id = entry.index

    if display_id is None and f"[{fallback_index}]" in listing:
        display_id = fallback_index

    return display_id


class DisplayManager:
    """Lists displays through m1ddc and resolves the one to sync."""

    def __init__(
        self,
        m1ddc_path: str = "m1ddc",
        display_match: str = "dell",
        fallback_index: str = "1",
    ):
        self.m1ddc_path = m1ddc_path
        self.display_match = display_match
        self.fallback_index = fallback_index

    async def list_displays(self) -> Optional[str]:
        """Return raw `m1ddc display list` output, or None on failure."""
        try:
            proc = await asyncio.create_subprocess_exec(
                self.m1ddc_path,
                "display",
                "list",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await proc.communicate()

            if proc.returncode != 0:
                logger.error(f"Failed to list displays: {stderr.decode().strip()}")
                return None

            return stdout.decode()
        except FileNotFoundError:
            logger.error("m1ddc not found. Is it installed?")
            return None
        except Exception as e:
            logger.exception(f"Failed to list displays: {e}")
            return None

    async def discover_displays(self) -> list[DisplayEntry]:
        """List displays as parsed entries."""
        listing = await self.list_displays()
        if listing is None:
            return []
        return parse_display_list(listing)

    async def resolve_external_display(self) -> Optional[str]:
        """Find the external display id, or None if there is none."""
        listing = await self.list_displays()
        if listing is None:
            return None

        display_id = resolve_display_id(
            listing, match=self.display_match, fallback_index=self.fallback_index
        )
        if display_id is None:
            logger.debug(f"No display matching '{self.display_match}' in listing")
        return display_id

"""Brightness sync agent: polls the built-in display and eases the external one."""

import asyncio
import logging
import signal
from dataclasses import dataclass
from typing import Optional

from brightsync.backends.brightness import BrightnessController
from brightsync.backends.display import DisplayManager
from brightsync.config import SyncSettings
from brightsync.easing import transition_values

logger = logging.getLogger(__name__)


@dataclass
class SyncState:
    """Mutable sync state, owned by a single agent."""

    last_known_internal: Optional[int] = None  # None until the first good read
    is_transitioning: bool = False


class SyncAgent:
    """Keeps one external display in step with the built-in display."""

    def __init__(
        self,
        settings: Optional[SyncSettings] = None,
        display_manager: Optional[DisplayManager] = None,
        brightness: Optional[BrightnessController] = None,
    ):
        """Initialize the agent with settings and optional collaborators."""
        self.settings = settings or SyncSettings()
        self.display_manager = display_manager or DisplayManager(
            m1ddc_path=self.settings.m1ddc_path,
            display_match=self.settings.display_match,
            fallback_index=self.settings.fallback_index,
        )
        self.brightness = brightness or BrightnessController(
            m1ddc_path=self.settings.m1ddc_path,
            brightnessdiag_path=self.settings.brightnessdiag_path,
        )

        self.state = SyncState()

        # Shutdown coordination
        self._shutdown_event = asyncio.Event()
        self._transition: Optional[asyncio.Task] = None

    async def resolve_display(self) -> Optional[str]:
        """Find the external display to sync, or None."""
        display_id = await self.display_manager.resolve_external_display()
        if display_id is not None:
            logger.info(f"Found external display [ID: {display_id}]")
        return display_id

    async def run(self, display_id: str) -> None:
        """Sync once, then poll until shutdown is requested."""
        signals = self._setup_signal_handlers()

        try:
            await self.initial_sync(display_id)

            logger.info(
                f"Polling for brightness changes every "
                f"{self.settings.poll_interval:g} second(s)..."
            )
            await self._polling_loop(display_id)
        except asyncio.CancelledError:
            logger.info("Agent cancelled")
        finally:
            await self._cancel_transition()
            self._remove_signal_handlers(signals)
            logger.info("Agent shutdown complete")

    def stop(self) -> None:
        """Ask the polling loop to exit."""
        self._shutdown_event.set()

    def _setup_signal_handlers(self) -> list[signal.Signals]:
        """Register signal handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()
        installed = []

        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, lambda s=sig: self._handle_shutdown(s))
                installed.append(sig)
            except (NotImplementedError, RuntimeError):
                logger.debug(f"Cannot install handler for {sig.name}")

        return installed

    def _remove_signal_handlers(self, signals: list[signal.Signals]) -> None:
        loop = asyncio.get_running_loop()
        for sig in signals:
            loop.remove_signal_handler(sig)

    def _handle_shutdown(self, sig: signal.Signals) -> None:
        """Handle shutdown signal."""
        logger.info(f"Received {sig.name}, initiating graceful shutdown...")
        self._shutdown_event.set()

    async def initial_sync(self, display_id: str) -> Optional[int]:
        """Copy the built-in brightness to the external display without easing.

        Returns:
            The brightness that was applied, or None if it could not be read
        """
        current = await self.brightness.get_internal_brightness()
        if current is None:
            logger.warning("Could not read internal brightness.")
            return None

        logger.info(
            f"Initial built-in brightness is {current}%. "
            f"Syncing display {display_id}..."
        )
        await self.brightness.set_brightness(display_id, current)
        self.state.last_known_internal = current
        return current

    async def _polling_loop(self, display_id: str) -> None:
        """Run poll ticks on a fixed cadence until shutdown."""
        loop = asyncio.get_running_loop()
        interval = self.settings.poll_interval
        next_tick = loop.time() + interval

        while not self._shutdown_event.is_set():
            try:
                await asyncio.wait_for(
                    self._shutdown_event.wait(),
                    timeout=max(0.0, next_tick - loop.time()),
                )
                break  # Shutdown requested
            except asyncio.TimeoutError:
                pass  # Poll interval elapsed

            # Skip missed ticks rather than bursting to catch up
            next_tick = max(next_tick + interval, loop.time())

            try:
                await self.poll_once(display_id)
            except Exception as e:
                logger.exception(f"Error during brightness poll: {e}")

    async def poll_once(self, display_id: str) -> Optional[asyncio.Task]:
        """Run one poll tick.

        Returns:
            The transition task if this tick started one, else None
        """
        if self.state.is_transitioning:
            return None

        current = await self.brightness.get_internal_brightness()
        if current is None:
            return None

        # Another tick may have started a transition while we were reading
        if self.state.is_transitioning:
            return None

        last = self.state.last_known_internal
        if last is None:
            self.state.last_known_internal = current
            return None

        if abs(current - last) <= self.settings.change_threshold:
            return None

        logger.info(
            f"Detected brightness change: {last}% -> {current}%. Synchronizing..."
        )

        # Must be set before the first await of the transition
        self.state.is_transitioning = True
        self._transition = asyncio.create_task(
            self._sync_transition(display_id, last, current)
        )
        return self._transition

    async def _sync_transition(self, display_id: str, last: int, target: int) -> None:
        """Ease the external display to target, then record it."""
        try:
            start = await self.brightness.get_brightness(display_id)
            if start is None:
                start = last

            await self.ease_brightness(
                display_id, start, target, self.settings.transition_duration
            )
            self.state.last_known_internal = target
        except Exception as e:
            logger.exception(f"Brightness transition failed: {e}")
        finally:
            self.state.is_transitioning = False

    async def ease_brightness(
        self,
        display_id: str,
        start: float,
        end: float,
        duration: float = 1.5,
    ) -> None:
        """Ramp the external display from start to end over duration seconds.

        Step k is written at k * duration / steps seconds after the ramp
        began. Returns once the final write has been issued.
        """
        values = list(transition_values(start, end, self.settings.transition_steps))
        if not values:
            return

        loop = asyncio.get_running_loop()
        interval = duration / len(values)
        began = loop.time()

        for step, value in enumerate(values, start=1):
            delay = began + step * interval - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            await self.brightness.set_brightness(display_id, value)

    async def _cancel_transition(self) -> None:
        """Cancel an in-flight transition, if any."""
        task = self._transition
        if task is None or task.done():
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

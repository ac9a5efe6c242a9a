"""
Save file poller.

Every POLL_INTERVAL seconds:
  1. locate the save file if no path is cached
  2. stat it; skip unless the mtime is strictly newer than the last good read
  3. decode the configured slot, retrying once after RETRY_DELAY on a torn read
  4. record the mtime of the successful read
  5. drop duplicates and zeros, then publish to the hub and text file

Nothing in a tick raises on I/O trouble. A missing file means re-locating
on the next tick, a torn read means trying again next tick against the same
mtime.

The monitor is the only writer of save_path, last_mtime_ns and last_deaths,
so none of them are locked.
"""

from __future__ import annotations

import asyncio
import logging
import os
from enum import Enum
from typing import Callable, Optional

from .config import Config
from .counter import DeathCounter
from .errors import SaveNotFoundError
from .save.decoder import Profile, decode_slot_file
from .save.locator import resolve_save_path
from .sinks import TextFileSink

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.5
RETRY_DELAY = 0.05


class TickResult(Enum):
    """What one poll tick ended with."""

    LOCATE_FAILED = "locate_failed"
    STAT_FAILED = "stat_failed"
    UNCHANGED = "unchanged"
    READ_FAILED = "read_failed"
    DUPLICATE = "duplicate"
    ZERO = "zero"
    PUBLISHED = "published"


class SaveMonitor:
    """Turns save file modifications into death count publications."""

    def __init__(
        self,
        config: Config,
        counter: Optional[DeathCounter] = None,
        text_sink: Optional[TextFileSink] = None,
        interval: float = POLL_INTERVAL,
        retry_delay: float = RETRY_DELAY,
        locate: Optional[Callable[[], str]] = None,
    ):
        """
        Args:
            config: Loaded config; character_slot is fixed from here on
            counter: Hub to publish to
            text_sink: Text file output (None when disabled)
            interval: Seconds between ticks
            retry_delay: Pause before the single torn-read retry
            locate: Save path resolver, defaults to resolve_save_path(config)
        """
        self.slot = config.character_slot
        self.counter = counter
        self.text_sink = text_sink
        self.interval = interval
        self.retry_delay = retry_delay
        self._locate = locate or (lambda: resolve_save_path(config))

        self.save_path: Optional[str] = None
        self.last_mtime_ns: Optional[int] = None
        self.last_deaths: Optional[int] = None
        self.last_profile: Optional[Profile] = None
        self.publish_count = 0

    # =========================================================================
    # TICK
    # =========================================================================

    def read_profile(self, path: str) -> Optional[Profile]:
        """Open the save and decode the monitored slot; None on any failure."""
        try:
            with open(path, "rb") as f:
                return decode_slot_file(f, self.slot)
        except OSError as e:
            logger.debug(f"Read failed for {path}: {e}")
            return None

    async def tick(self) -> TickResult:
        """Run one poll step."""
        if self.save_path is None:
            try:
                self.save_path = self._locate()
            except SaveNotFoundError as e:
                logger.debug(f"Save not located: {e}")
                return TickResult.LOCATE_FAILED
            logger.info(f"Save file: {self.save_path}")

        try:
            mtime_ns = os.stat(self.save_path).st_mtime_ns
        except OSError as e:
            logger.debug(f"Stat failed, re-locating next tick: {e}")
            self.save_path = None
            self.last_mtime_ns = None
            return TickResult.STAT_FAILED

        if self.last_mtime_ns is not None and mtime_ns <= self.last_mtime_ns:
            return TickResult.UNCHANGED

        profile = self.read_profile(self.save_path)
        if profile is None:
            # Usually the game is mid-write
            await asyncio.sleep(self.retry_delay)
            profile = self.read_profile(self.save_path)
        if profile is None:
            logger.debug(f"Slot {self.slot} unreadable, retrying next tick")
            return TickResult.READ_FAILED

        # mtime and value de-dup are separate gates
        self.last_mtime_ns = mtime_ns
        self.last_profile = profile
        return self.observe(profile)

    def observe(self, profile: Profile) -> TickResult:
        """De-dup gate on a freshly decoded profile; publishes if it passes."""
        if profile.deaths == self.last_deaths:
            logger.debug(f"Death count unchanged at {profile.deaths}")
            return TickResult.DUPLICATE
        if profile.deaths == 0:
            # Uninitialised or unreadable counter, never a real event
            logger.debug(f"Ignoring zero death count for {profile.name!r}")
            return TickResult.ZERO

        self.last_deaths = profile.deaths
        self.publish(profile)
        return TickResult.PUBLISHED

    def publish(self, profile: Profile) -> None:
        if self.counter is not None:
            self.counter.update(profile.deaths, profile.name)
        if self.text_sink is not None:
            self.text_sink.write(profile.deaths)
        self.publish_count += 1
        logger.info(f"{profile.name} - Deaths: {profile.deaths}")

    # =========================================================================
    # LOOP
    # =========================================================================

    async def run(self) -> None:
        """Tick forever on a fixed period. Cancel the task to stop."""
        loop = asyncio.get_running_loop()
        logger.info(f"Monitoring character in slot {self.slot}")

        while True:
            started = loop.time()
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Poll tick failed: {e}", exc_info=True)

            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, self.interval - elapsed))

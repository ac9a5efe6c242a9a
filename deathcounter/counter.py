"""
Death counter broadcast hub.

Holds the latest published (deaths, name) pair and wakes any number of
subscribers when it changes. Each subscriber has room for exactly one pending
wakeup; if it has not consumed the previous one, the new notification is
dropped for that subscriber (it will read the latest value anyway). The
writer never blocks on a slow subscriber.
"""

from __future__ import annotations

import asyncio
import itertools
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Tuple


class ReadWriteLock:
    """Many concurrent readers or one writer."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class Subscription:
    """
    A subscriber's wakeup channel (capacity 1).

    Bound to the event loop it was created on; notify() may be called from
    any thread.
    """

    def __init__(self, token: int, loop: asyncio.AbstractEventLoop):
        self.token = token
        self._loop = loop
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)

    @property
    def pending(self) -> bool:
        return not self._queue.empty()

    def _offer(self) -> None:
        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            pass

    def notify(self) -> None:
        """Signal without blocking; a full channel is skipped."""
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._offer()
        elif not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._offer)

    async def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the next wakeup.

        Returns:
            True if woken, False on timeout
        """
        try:
            await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    def __repr__(self) -> str:
        return f"Subscription(token={self.token}, pending={self.pending})"


class DeathCounter:
    """Latest published death count plus its subscriber registry."""

    def __init__(self):
        self._lock = ReadWriteLock()
        self._deaths = 0
        self._name = ""
        self._closed = False
        self._subscribers: Dict[int, Subscription] = {}
        self._tokens = itertools.count(1)

    def update(self, deaths: int, name: str) -> None:
        """Replace the pair and wake every subscriber."""
        with self._lock.write():
            self._deaths = deaths
            self._name = name
            for sub in self._subscribers.values():
                sub.notify()

    def get(self) -> Tuple[int, str]:
        """Latest (deaths, name). Never waits on notification delivery."""
        with self._lock.read():
            return self._deaths, self._name

    def snapshot(self) -> Dict[str, object]:
        deaths, name = self.get()
        return {"deaths": deaths, "name": name}

    def subscribe(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> Subscription:
        """
        Register a new wakeup channel.

        Args:
            loop: Loop the subscriber waits on (default: the running loop)
        """
        if loop is None:
            loop = asyncio.get_running_loop()
        with self._lock.write():
            sub = Subscription(next(self._tokens), loop)
            self._subscribers[sub.token] = sub
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        """Remove a channel. Safe to call twice or with a wakeup pending."""
        with self._lock.write():
            self._subscribers.pop(sub.token, None)

    def close(self) -> None:
        """Mark the hub closed and wake everyone so open streams can finish."""
        with self._lock.write():
            self._closed = True
            for sub in self._subscribers.values():
                sub.notify()

    @property
    def closed(self) -> bool:
        with self._lock.read():
            return self._closed

    @property
    def subscriber_count(self) -> int:
        with self._lock.read():
            return len(self._subscribers)

"""Song metadata probe.

The playback element reports "metadata ready" (with a duration) or
"error" through a :class:`MetadataSignal`.  Waiting on it always has a
deadline and can be cancelled; a signal that never fires is a timeout,
never an indefinite suspension.
"""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)


class MetadataError(Exception):
    """The playback element reported an error loading the song."""


class MetadataTimeoutError(MetadataError):
    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"No metadata signal within {timeout:.1f}s")


class MetadataCancelled(MetadataError):
    """The caller cancelled the probe before a signal arrived."""


class MetadataSignal:
    """One-shot signal resolved by the playback element."""

    def __init__(self) -> None:
        self._future: asyncio.Future[float] = asyncio.get_running_loop().create_future()

    @property
    def done(self) -> bool:
        return self._future.done()

    def ready(self, duration: float) -> None:
        """Metadata loaded; *duration* in seconds."""
        if not self._future.done():
            self._future.set_result(float(duration))

    def error(self, reason: str = "") -> None:
        if not self._future.done():
            self._future.set_exception(MetadataError(reason or "metadata load failed"))

    async def wait(self, timeout: float, cancel: asyncio.Event | None = None) -> float:
        """Wait for the signal and return the duration.

        Raises ``MetadataTimeoutError`` after *timeout* seconds and
        ``MetadataCancelled`` if *cancel* is set first.
        """
        waiters: set[asyncio.Future] = {self._future}
        cancel_task: asyncio.Task | None = None
        if cancel is not None:
            cancel_task = asyncio.ensure_future(cancel.wait())
            waiters.add(cancel_task)

        try:
            done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if cancel_task is not None and not cancel_task.done():
                cancel_task.cancel()

        if self._future in done:
            return self._future.result()
        if cancel_task is not None and cancel_task in done:
            raise MetadataCancelled("metadata probe cancelled")
        raise MetadataTimeoutError(timeout)

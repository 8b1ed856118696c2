"""Player controller — acquisition cycles and playback operations.

Owns one :class:`PlaybackState`.  At most one acquisition cycle runs at a
time; a request arriving while one is in flight is dropped.  Each cycle is
tagged with a generation number and its result is discarded if
``cancel_pending()`` superseded it while the fetch was suspended.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable

from player.config import MusicConfig
from player.music_api import MusicAPI
from player_core.models import Song
from player_core.state import PlaybackState

logger = logging.getLogger(__name__)


class PlayerController:
    """Runtime state for one widget instance."""

    def __init__(
        self,
        api: MusicAPI,
        config: MusicConfig,
        *,
        rng: random.Random | None = None,
    ):
        self.api = api
        self.config = config
        self.rng = rng
        self.state = PlaybackState(
            page_size=config.page_size,
            volume=config.default_volume,
            is_shuffle=config.enable_shuffle,
            is_repeat=config.enable_repeat,
        )
        self._lock = asyncio.Lock()
        self._generation = 0

    @property
    def paged_mode(self) -> bool:
        """True when nothing is preloaded and pages are fetched one by one."""
        return self.config.preload_pages == 0

    def snapshot(self) -> dict[str, Any]:
        data = self.state.snapshot()
        data["autoPlay"] = self.config.enable_auto_play
        return data

    # ------------------------------------------------------------------
    # Acquisition cycles
    # ------------------------------------------------------------------

    async def _acquire(
        self,
        label: str,
        fetch: Callable[[], Awaitable[Any]],
        apply: Callable[[Any], None],
    ) -> bool:
        """Run one cycle: fetch (suspends), then apply if still current.

        Returns False if the request was dropped or its result went stale.
        """
        if self._lock.locked():
            logger.info("%s dropped: acquisition already in flight", label)
            return False

        async with self._lock:
            self._generation += 1
            generation = self._generation
            self.state.is_loading = True
            try:
                result = await fetch()
                if generation != self._generation:
                    logger.info("%s result discarded (superseded)", label)
                    return False
                apply(result)
                return True
            finally:
                if generation == self._generation:
                    self.state.is_loading = False

    def cancel_pending(self) -> None:
        """Supersede the in-flight cycle; its result will be ignored."""
        self._generation += 1
        self.state.is_loading = False

    async def refresh(self) -> bool:
        """Re-acquire the playlist from scratch; cursors reset to 0."""
        if self.paged_mode:
            return await self._acquire(
                "refresh",
                lambda: self.api.get_playlist(1, self.config.page_size),
                lambda page: self.state.apply_page(page, rng=self.rng),
            )

        return await self._acquire(
            "refresh",
            lambda: self.api.get_multiple_pages(self.config.preload_pages, self.config.page_size),
            lambda sel: self.state.rebuild(sel.songs, sel.total_pages, rng=self.rng),
        )

    async def load_random_selection(self) -> bool:
        """Replace the playlist with a random one-page pick of the whole source."""
        return await self._acquire(
            "load_random_selection",
            lambda: self.api.get_all_songs(self.config.page_size),
            lambda sel: self.state.rebuild(sel.songs, sel.total_pages, rng=self.rng),
        )

    async def load_page(self, page: int) -> bool:
        """Show *page*, fetching only when it is not already held.

        In preload mode a page past the preloaded range re-acquires enough
        pages to cover it, keeping the current song.  A page past the songs
        the source holds is shown empty.
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        total_pages = self.state.total_pages
        # The sample page for page N reports total_pages=1 with first_page=N: no upper bound.
        if total_pages >= self.state.first_page and page > total_pages:
            raise ValueError(f"page {page} out of range (1..{total_pages})")

        if self.state.covers_page(page) and self.state.full_playlist:
            self.state.show_page(page)
            return True

        if self.paged_mode:
            return await self._acquire(
                f"load_page({page})",
                lambda: self.api.get_playlist(page, self.config.page_size),
                lambda result: self.state.apply_page(result, rng=self.rng),
            )

        def apply(sel) -> None:
            self.state.rebuild(sel.songs, sel.total_pages, preserve_current=True, rng=self.rng)
            self.state.show_page(page)

        return await self._acquire(
            f"load_page({page})",
            lambda: self.api.get_multiple_pages(page, self.config.page_size),
            apply,
        )

    # ------------------------------------------------------------------
    # Playback operations (synchronous, no I/O)
    # ------------------------------------------------------------------

    def next(self) -> Song | None:
        return self.state.next()

    def prev(self) -> Song | None:
        return self.state.prev()

    def toggle_shuffle(self) -> bool:
        return self.state.toggle_shuffle(rng=self.rng)

    def toggle_repeat(self) -> bool:
        return self.state.toggle_repeat()

    def set_playing(self, playing: bool) -> None:
        self.state.set_playing(playing)

    def set_visible(self, visible: bool) -> None:
        self.state.set_visible(visible)

    def toggle_expanded(self) -> bool:
        return self.state.toggle_expanded()

    def set_volume(self, volume: float) -> float:
        return self.state.set_volume(volume)

    def update_progress(self, current_time: float, duration: float | None = None) -> None:
        self.state.update_progress(current_time, duration)

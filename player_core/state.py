"""Playback state: index spaces, visible page, UI flags.

``full_playlist`` is walked by ``current_index`` (linear playback) and
``shuffled_playlist`` by ``shuffle_index``; ``is_shuffle`` picks which one
is active.  ``shuffle_order[k]`` is the linear position of the k-th
shuffled song, which lets the current song survive a shuffle toggle.

A cursor equal to ``-1`` or ``len(list)`` means "no current song": that is
where ``next()``/``prev()`` stop when repeat is off.
"""

from __future__ import annotations

import random
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel

from player_core.models import PlaylistPage, Song
from player_core.paginator import DEFAULT_PAGE_SIZE
from player_core.shuffle import shuffle_order


class PlaybackState(BaseModel):
    """Sole owner of the playlists and cursors for one widget instance."""

    # Presentation
    is_visible: bool = True
    is_expanded: bool = False

    # Playback flags
    is_loading: bool = False
    is_playing: bool = False
    is_shuffle: bool = False
    is_repeat: bool = False

    current_time: float = 0.0
    duration: float = 0.0
    volume: float = 0.7

    # Pagination
    current_page: int = 1
    total_pages: int = 0
    page_size: int = DEFAULT_PAGE_SIZE
    first_page: int = 1  # page number of full_playlist[0]
    playlist: List[Song] = Field(default_factory=list)

    # Index spaces
    full_playlist: List[Song] = Field(default_factory=list)
    current_index: int = 0
    shuffled_playlist: List[Song] = Field(default_factory=list)
    shuffle_index: int = 0
    shuffle_order: List[int] = Field(default_factory=list, exclude=True)

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def active_list(self) -> List[Song]:
        return self.shuffled_playlist if self.is_shuffle else self.full_playlist

    @property
    def active_index(self) -> int:
        return self.shuffle_index if self.is_shuffle else self.current_index

    @computed_field(alias="currentSong")  # type: ignore[prop-decorator]
    @property
    def current_song(self) -> Optional[Song]:
        items = self.active_list
        index = self.active_index
        if 0 <= index < len(items):
            return items[index]
        return None

    def snapshot(self) -> dict[str, Any]:
        """Serialize for the rendering layer (camelCase keys)."""
        return self.model_dump(by_alias=True, mode="json")

    # ------------------------------------------------------------------
    # Rebuild (one per acquisition cycle)
    # ------------------------------------------------------------------

    def rebuild(
        self,
        songs: Sequence[Song],
        total_pages: int,
        *,
        first_page: int = 1,
        preserve_current: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Replace both playlists wholesale.

        Cursors go back to 0 unless *preserve_current* is set and the song
        playing now (matched by id) is still in *songs*.
        """
        previous = self.current_song if preserve_current else None
        page = self.current_page if preserve_current else first_page

        self.full_playlist = list(songs)
        self.total_pages = total_pages
        self.first_page = first_page
        self.current_index = 0
        self.shuffle_index = 0
        self.shuffle_order = []
        self.shuffled_playlist = []

        found = False
        if previous is not None:
            for i, song in enumerate(self.full_playlist):
                if song.id == previous.id:
                    self.current_index = i
                    found = True
                    break

        if self.is_shuffle:
            self._build_shuffle(rng)
            if found:
                self.shuffle_index = self.shuffle_order.index(self.current_index)

        if not self.covers_page(page):
            page = first_page
        self.show_page(page)

    def apply_page(self, result: PlaylistPage, *, rng: Optional[random.Random] = None) -> None:
        """Page-at-a-time mode: the fetched page *is* the full playlist."""
        self.rebuild(
            result.songs,
            result.pagination.total_pages,
            first_page=result.pagination.page,
            rng=rng,
        )

    def _build_shuffle(self, rng: Optional[random.Random] = None) -> None:
        self.shuffle_order = shuffle_order(len(self.full_playlist), rng=rng)
        self.shuffled_playlist = [self.full_playlist[i] for i in self.shuffle_order]

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def covers_page(self, page: int) -> bool:
        """True if *page* can be sliced out of the songs already held."""
        offset = (page - self.first_page) * self.page_size
        return page >= self.first_page and (offset < len(self.full_playlist) or page == self.first_page)

    def show_page(self, page: int) -> None:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        start = (page - self.first_page) * self.page_size
        self.playlist = self.full_playlist[start : start + self.page_size] if start >= 0 else []
        self.current_page = page

    def _follow_cursor(self) -> None:
        """Keep the visible page on the linear cursor."""
        if self.is_shuffle or not 0 <= self.current_index < len(self.full_playlist):
            return
        page = self.first_page + self.current_index // self.page_size
        if page != self.current_page:
            self.show_page(page)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def toggle_shuffle(self, rng: Optional[random.Random] = None) -> bool:
        """Switch index spaces, keeping the current song where possible."""
        if not self.is_shuffle:
            if len(self.shuffle_order) != len(self.full_playlist):
                self._build_shuffle(rng)
            if 0 <= self.current_index < len(self.full_playlist):
                self.shuffle_index = self.shuffle_order.index(self.current_index)
            else:
                self.shuffle_index = 0
            self.is_shuffle = True
        else:
            if 0 <= self.shuffle_index < len(self.shuffle_order):
                self.current_index = self.shuffle_order[self.shuffle_index]
            else:
                self.current_index = 0
            self.is_shuffle = False
            self._follow_cursor()
        return self.is_shuffle

    def toggle_repeat(self) -> bool:
        self.is_repeat = not self.is_repeat
        return self.is_repeat

    def next(self) -> Optional[Song]:
        return self._step(1)

    def prev(self) -> Optional[Song]:
        return self._step(-1)

    def _step(self, delta: int) -> Optional[Song]:
        n = len(self.active_list)
        if n == 0:
            return None

        index = self.active_index
        if self.is_repeat:
            if 0 <= index < n:
                index = (index + delta) % n
            else:
                index = 0 if delta > 0 else n - 1
        else:
            index = min(max(index + delta, -1), n)

        if self.is_shuffle:
            self.shuffle_index = index
        else:
            self.current_index = index
        self.current_time = 0.0
        self._follow_cursor()
        return self.current_song

    # ------------------------------------------------------------------
    # Signals from the playback element / UI
    # ------------------------------------------------------------------

    def set_playing(self, playing: bool) -> None:
        self.is_playing = playing

    def set_visible(self, visible: bool) -> None:
        self.is_visible = visible

    def toggle_expanded(self) -> bool:
        self.is_expanded = not self.is_expanded
        return self.is_expanded

    def set_volume(self, volume: float) -> float:
        self.volume = min(max(volume, 0.0), 1.0)
        return self.volume

    def update_progress(self, current_time: float, duration: Optional[float] = None) -> None:
        self.current_time = max(current_time, 0.0)
        if duration is not None:
            self.duration = max(duration, 0.0)

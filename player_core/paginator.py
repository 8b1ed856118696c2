"""Virtual pagination over a fully-fetched song collection.

The aggregator returns the whole playlist in one response; pages are
sliced out locally.
"""

from __future__ import annotations

import math
import random
from typing import Optional, Sequence

from player_core.models import Pagination, PlaylistPage, Song, SongSelection
from player_core.shuffle import permute

DEFAULT_PAGE_SIZE = 60


def total_pages_for(total: int, page_size: int) -> int:
    return math.ceil(total / page_size)


def _check_page_args(page: int, page_size: int) -> None:
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")


def get_page(
    all_songs: Sequence[Song],
    page: int,
    page_size: int = DEFAULT_PAGE_SIZE,
    *,
    playlist_id: int = 0,
    playlist_name: str = "",
) -> PlaylistPage:
    """Slice page *page* (1-based) out of *all_songs*."""
    _check_page_args(page, page_size)

    total = len(all_songs)
    total_pages = total_pages_for(total, page_size)
    start = (page - 1) * page_size

    return PlaylistPage(
        code=200,
        playlist_id=playlist_id,
        playlist_name=playlist_name,
        songs=list(all_songs[start : start + page_size]),
        pagination=Pagination(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )


def get_bulk_selection(
    all_songs: Sequence[Song],
    limit: int = DEFAULT_PAGE_SIZE,
    page_size: int = DEFAULT_PAGE_SIZE,
    *,
    rng: Optional[random.Random] = None,
) -> SongSelection:
    """Random pick of up to *limit* songs.

    ``total_pages`` is computed from the whole source collection, not from
    the selection.
    """
    _check_page_args(1, page_size)
    shuffled = permute(all_songs, rng=rng)
    return SongSelection(
        songs=shuffled[: min(limit, len(shuffled))],
        total_pages=total_pages_for(len(all_songs), page_size),
    )


def get_multi_page_preload(
    all_songs: Sequence[Song],
    pages: int,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> SongSelection:
    """First ``pages * page_size`` songs in source order."""
    _check_page_args(1, page_size)
    return SongSelection(
        songs=list(all_songs[: max(0, pages) * page_size]),
        total_pages=total_pages_for(len(all_songs), page_size),
    )

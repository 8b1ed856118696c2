"""Deterministic synthetic song sets for degraded mode.

Used whenever acquisition fails or comes back empty, so the widget always
has something playable.
"""

from __future__ import annotations

import math
from typing import List

from player_core.models import Pagination, PlaylistPage, Song, SongSelection

SAMPLE_AUDIO_URL = "https://www.soundjay.com/misc/sounds/bell-ringing-05.wav"
SAMPLE_PLAYLIST_NAME = "Sample Playlist"

BULK_SIZE = 100
BULK_TOTAL_PAGES = 5  # fixed, regardless of BULK_SIZE


def _cover_url(song_id: int) -> str:
    # Stable per-id colour so repeated fallbacks render identically.
    colour = (song_id * 2654435761) % 0xFFFFFF
    return f"https://via.placeholder.com/300x300/{colour:06x}/ffffff?text=Music{song_id}"


def synthetic_bulk() -> SongSelection:
    """100 sample songs, ids 1..100, reported as 5 pages."""
    songs: List[Song] = [
        Song(
            id=i,
            name=f"Sample Song {i}",
            artist=f"Sample Artist {math.ceil(i / 10)}",
            url=SAMPLE_AUDIO_URL,
            pic_url=_cover_url(i),
        )
        for i in range(1, BULK_SIZE + 1)
    ]
    return SongSelection(songs=songs, total_pages=BULK_TOTAL_PAGES)


def synthetic_page(page: int, page_size: int, *, playlist_id: int = 0) -> PlaylistPage:
    """A single two-song page that claims to be the whole playlist."""
    songs = [
        Song(
            id=1,
            name="Sample Song 1",
            artist="Sample Artist",
            url=SAMPLE_AUDIO_URL,
            pic_url="https://via.placeholder.com/300x300/4f46e5/ffffff?text=Music",
        ),
        Song(
            id=2,
            name="Sample Song 2",
            artist="Sample Artist 2",
            url=SAMPLE_AUDIO_URL,
            pic_url="https://via.placeholder.com/300x300/7c3aed/ffffff?text=Music",
        ),
    ]
    return PlaylistPage(
        code=200,
        playlist_id=playlist_id,
        playlist_name=SAMPLE_PLAYLIST_NAME,
        songs=songs,
        pagination=Pagination(
            page=page,
            page_size=page_size,
            total=len(songs),
            total_pages=1,
            has_next=False,
            has_prev=False,
        ),
    )

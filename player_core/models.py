"""Pydantic models shared across the application."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class Song(BaseModel):
    """Canonical representation of a track returned by the aggregator."""

    id: int
    name: str = ""
    artist: str = ""
    url: str = ""
    pic_url: str = ""


class Pagination(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class PlaylistPage(BaseModel):
    """One page of a playlist, as handed to the rendering layer."""

    code: int = 200
    playlist_id: int = 0
    playlist_name: str = ""
    songs: List[Song] = Field(default_factory=list)
    pagination: Pagination


class SongSelection(BaseModel):
    """Result of the bulk / multi-page acquisition paths.

    ``total_pages`` describes the *source* collection the songs were drawn
    from, not the selection itself.
    """

    songs: List[Song] = Field(default_factory=list)
    total_pages: int = 0


class SongMetadata(BaseModel):
    duration: float
    size: int = 0  # bytes, from content-length

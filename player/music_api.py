"""Acquisition boundary — the widget's only way to get songs.

Every acquisition method resolves to *something playable*: aggregator
failures of any kind, and empty results, are logged and replaced by the
deterministic fallback data.  Nothing here raises for network reasons.

Functions:
- get_playlist        → one PlaylistPage (2-song fallback)
- get_all_songs       → random selection of the whole playlist (bulk fallback)
- get_multiple_pages  → first N pages in order (bulk fallback)
- validate_song_url / get_song_metadata → per-song helpers
- search_songs / get_recommended_songs  → stubs, always empty
"""

from __future__ import annotations

import asyncio
import logging
import random

import httpx

from player.aggregator import (
    AcquisitionError,
    AggregatorClient,
    AggregatorTimeout,
    EmptyResultError,
    HttpError,
    NetworkError,
)
from player.config import MusicConfig
from player.metadata import MetadataError, MetadataSignal
from player_core import fallback, paginator
from player_core.models import PlaylistPage, Song, SongMetadata, SongSelection
from player_core.normalizer import normalize_all

logger = logging.getLogger(__name__)

PLAYLIST_NAME = "Online Playlist"
DEFAULT_RETRIES = 2
DEFAULT_METADATA_TIMEOUT = 10.0

_BACKOFF_BASE = 0.5  # seconds
_BACKOFF_CAP = 8.0  # seconds
_JITTER_MAX = 0.25  # seconds


class MusicAPI:
    """Acquisition paths over one :class:`AggregatorClient`."""

    def __init__(
        self,
        client: AggregatorClient,
        config: MusicConfig,
        *,
        retries: int = DEFAULT_RETRIES,
        backoff_base: float = _BACKOFF_BASE,
        metadata_timeout: float = DEFAULT_METADATA_TIMEOUT,
    ):
        self.client = client
        self.config = config
        self.retries = retries
        self.backoff_base = backoff_base
        self.metadata_timeout = metadata_timeout

    @property
    def playlist_id(self) -> int:
        return self.config.meting_api.playlist_id

    # ------------------------------------------------------------------
    # Fetch + normalise (raises)
    # ------------------------------------------------------------------

    async def fetch_songs(self, retries: int | None = None) -> list[Song]:
        """Fetch and normalise the whole remote playlist.

        Transport failures and HTTP 429/5xx are retried up to *retries*
        extra times with exponential backoff.  Timeouts and malformed
        bodies are not retried.

        Raises
        ------
        AcquisitionError
            Including ``EmptyResultError`` when the playlist has no songs.
        """
        retries = max(0, self.retries if retries is None else retries)

        for attempt in range(retries + 1):
            try:
                records = await self.client.fetch_all()
                break
            except AggregatorTimeout:
                raise
            except (NetworkError, HttpError) as exc:
                if isinstance(exc, HttpError) and not exc.retryable:
                    raise
                if attempt >= retries:
                    raise
                logger.warning("Aggregator attempt %d/%d failed: %s", attempt + 1, retries + 1, exc)
                await self._backoff_sleep(attempt)

        songs = normalize_all(records)
        if not songs:
            raise EmptyResultError("Aggregator returned no songs")
        logger.debug("Fetched %d songs", len(songs))
        return songs

    async def _backoff_sleep(self, attempt: int) -> None:
        """Exponential backoff with jitter, capped at ``_BACKOFF_CAP``."""
        if self.backoff_base <= 0:
            return
        delay = min(self.backoff_base * (2 ** attempt) + random.uniform(0, _JITTER_MAX), _BACKOFF_CAP)
        logger.debug("Backoff sleep %.2fs (attempt %d)", delay, attempt + 1)
        await asyncio.sleep(delay)

    # ------------------------------------------------------------------
    # Acquisition paths (never raise for acquisition failures)
    # ------------------------------------------------------------------

    async def get_playlist(
        self,
        page: int = 1,
        page_size: int | None = None,
        retries: int | None = None,
    ) -> PlaylistPage:
        """One page of the remote playlist, or the two-song sample page."""
        page_size = page_size or self.config.page_size
        try:
            songs = await self.fetch_songs(retries)
        except AcquisitionError as exc:
            _log_fallback("get_playlist", exc)
            return fallback.synthetic_page(page, page_size, playlist_id=self.playlist_id)

        return paginator.get_page(
            songs,
            page,
            page_size,
            playlist_id=self.playlist_id,
            playlist_name=PLAYLIST_NAME,
        )

    async def get_all_songs(
        self,
        limit: int | None = None,
        retries: int | None = None,
    ) -> SongSelection:
        """Random pick of ``limit`` songs (default: one page) from the playlist."""
        limit = limit or self.config.page_size
        try:
            songs = await self.fetch_songs(retries)
        except AcquisitionError as exc:
            _log_fallback("get_all_songs", exc)
            return fallback.synthetic_bulk()

        selection = paginator.get_bulk_selection(songs, limit, self.config.page_size)
        logger.info("Selected %d of %d songs", len(selection.songs), len(songs))
        return selection

    async def get_multiple_pages(
        self,
        pages: int = 5,
        page_size: int | None = None,
        retries: int | None = None,
    ) -> SongSelection:
        """The first *pages* pages of the playlist, in order."""
        page_size = page_size or self.config.page_size
        try:
            songs = await self.fetch_songs(retries)
        except AcquisitionError as exc:
            _log_fallback("get_multiple_pages", exc)
            return fallback.synthetic_bulk()

        selection = paginator.get_multi_page_preload(songs, pages, page_size)
        logger.info("Preloaded %d songs (%d pages requested)", len(selection.songs), pages)
        return selection

    # ------------------------------------------------------------------
    # Per-song helpers
    # ------------------------------------------------------------------

    async def validate_song_url(self, url: str) -> bool:
        """True if a HEAD request to *url* succeeds."""
        try:
            async with self.client.http_client() as http:
                resp = await asyncio.wait_for(http.head(url), timeout=self.client.timeout)
        except (httpx.HTTPError, asyncio.TimeoutError) as exc:
            logger.debug("Song URL %s not reachable: %s", url, exc)
            return False
        return resp.is_success

    async def get_song_metadata(
        self,
        url: str,
        signal: MetadataSignal,
        *,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> SongMetadata | None:
        """Size from ``content-length`` plus duration from the playback element.

        Returns ``None`` if the song is unreachable, the element reports an
        error, the probe is cancelled, or no signal arrives in time.
        """
        timeout = self.metadata_timeout if timeout is None else timeout
        try:
            async with self.client.http_client() as http:
                resp = await asyncio.wait_for(http.head(url), timeout=self.client.timeout)
        except (httpx.HTTPError, asyncio.TimeoutError) as exc:
            logger.debug("Metadata HEAD for %s failed: %s", url, exc)
            return None
        if not resp.is_success:
            return None

        try:
            size = int(resp.headers.get("content-length", "0"))
        except ValueError:
            size = 0

        try:
            duration = await signal.wait(timeout, cancel)
        except MetadataError as exc:
            logger.warning("Metadata probe for %s failed: %s", url, exc)
            return None
        return SongMetadata(duration=duration, size=size)

    async def search_songs(self, query: str, page: int = 1, page_size: int | None = None) -> list[Song]:
        """Not supported by the aggregator; always empty."""
        logger.info("Search not implemented (query=%r, page=%d, page_size=%s)", query, page, page_size)
        return []

    async def get_recommended_songs(self, count: int = 10) -> list[Song]:
        """Not supported by the aggregator; always empty."""
        logger.info("Recommendations not implemented (count=%d)", count)
        return []


def _log_fallback(path: str, exc: AcquisitionError) -> None:
    logger.warning("%s: %s (%s), using sample data", path, type(exc).__name__, exc)

"""Meting aggregator HTTP client.

Features:
  - Hard per-request deadline; on expiry the request task is cancelled,
    which aborts the HTTP exchange
  - Error taxonomy for diagnostics (network / HTTP / format / empty)
  - Injectable transport for tests
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from player.config import MetingConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_TIMEOUT = 15.0  # seconds

_HEADERS = {"Accept": "application/json"}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class AcquisitionError(Exception):
    """Base class for everything that can go wrong fetching a playlist."""


class NetworkError(AcquisitionError):
    """Transport failure (DNS, connection reset, TLS, …)."""


class AggregatorTimeout(NetworkError):
    """The request did not complete before the deadline and was aborted."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Aggregator request aborted after {timeout:.1f}s")


class HttpError(AcquisitionError):
    """The aggregator answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}")

    @property
    def retryable(self) -> bool:
        return self.status_code == 429 or self.status_code >= 500


class FormatError(AcquisitionError):
    """The body was not a JSON array of records."""


class EmptyResultError(AcquisitionError):
    """Well-formed response containing zero songs."""


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class AggregatorClient:
    """Fetches the raw track list for one configured playlist."""

    def __init__(
        self,
        meting: MetingConfig,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.meting = meting
        self.timeout = timeout
        self._transport = transport

    @property
    def params(self) -> dict[str, str]:
        return {
            "server": self.meting.server,
            "type": self.meting.type,
            "id": self.meting.id,
        }

    def http_client(self) -> httpx.AsyncClient:
        """New ``httpx.AsyncClient`` on the configured transport.

        The deadline is enforced around the whole exchange, so the client
        itself carries no timeout.
        """
        return httpx.AsyncClient(
            transport=self._transport,
            timeout=None,
            follow_redirects=True,
        )

    async def fetch_all(self) -> list[Any]:
        """GET the playlist and return the decoded record list.

        Raises
        ------
        AggregatorTimeout
            Deadline expired; the in-flight request was cancelled.
        NetworkError
            Transport failure, redirect loop or unusable URL.
        HttpError
            Non-2xx response.
        FormatError
            Body could not be decoded or is not a JSON array.
        """
        logger.debug("Calling aggregator %s with %s", self.meting.api, self.params)
        try:
            resp = await asyncio.wait_for(self._get(), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise AggregatorTimeout(self.timeout) from exc
        except httpx.DecodingError as exc:
            raise FormatError(f"Undecodable body: {exc}") from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise NetworkError(f"{type(exc).__name__}: {exc}") from exc

        if not resp.is_success:
            raise HttpError(resp.status_code, resp.reason_phrase)

        try:
            data = resp.json()
        except ValueError as exc:
            raise FormatError(f"Undecodable body: {exc}") from exc

        if not isinstance(data, list):
            raise FormatError(f"Expected a JSON array, got {type(data).__name__}")
        return data

    async def _get(self) -> httpx.Response:
        async with self.http_client() as client:
            return await client.get(self.meting.api, params=self.params, headers=_HEADERS)

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from .schema import ForecastPayload


@dataclass(frozen=True)
class CacheEntry:
    etag: Optional[str] = None
    last_modified: Optional[str] = None
    payload: Optional[ForecastPayload] = None


class PayloadCache:
    """Remembers the last validated forecast blob per URL with its validators.

    The upstream host may send an ``ETag``, a ``Last-Modified`` date, both, or
    neither; whichever arrived is replayed on the next request.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, CacheEntry] = {}

    def get_conditional_headers(self, url: str) -> Dict[str, str]:
        entry = self._entries.get(url)
        if entry is None or entry.payload is None:
            return {}
        headers: Dict[str, str] = {}
        if entry.etag:
            headers["If-None-Match"] = entry.etag
        if entry.last_modified:
            headers["If-Modified-Since"] = entry.last_modified
        return headers

    def store(self, url: str, response: httpx.Response, payload: ForecastPayload) -> None:
        self._entries[url] = CacheEntry(
            etag=response.headers.get("ETag"),
            last_modified=response.headers.get("Last-Modified"),
            payload=payload,
        )

    def get_payload(self, url: str) -> Optional[ForecastPayload]:
        entry = self._entries.get(url)
        return entry.payload if entry else None

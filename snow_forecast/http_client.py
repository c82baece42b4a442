from __future__ import annotations

import time
from typing import Dict, Optional

import httpx

from .cache import PayloadCache
from .config import FetchConfig, app_config
from .logging import get_logger
from .schema import ForecastPayload

logger = get_logger(__name__)


DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SnowForecastBot/1.0)"


class HttpFetcher:
    """HTTP client wrapper with retry/backoff and conditional-request caching."""

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        *,
        max_attempts: int = 3,
        backoff_factor: float = 0.5,
        timeout: float = 10.0,
        cache: Optional[PayloadCache] = None,
    ) -> None:
        self.client = client or httpx.Client(
            timeout=timeout,
            headers={"User-Agent": DEFAULT_USER_AGENT},
        )
        self.max_attempts = max_attempts
        self.backoff_factor = backoff_factor
        self.cache = cache or PayloadCache()

    @classmethod
    def from_config(cls, config: Optional[FetchConfig] = None, **kwargs) -> "HttpFetcher":
        config = config or app_config.fetch
        return cls(
            max_attempts=config.max_attempts,
            backoff_factor=config.backoff_factor,
            timeout=config.timeout,
            **kwargs,
        )

    def fetch(
        self, url: str, *, extra_headers: Optional[Dict[str, str]] = None, trace_id: str | None = None
    ) -> httpx.Response:
        headers: Dict[str, str] = {}
        headers.update(self.cache.get_conditional_headers(url))
        if extra_headers:
            headers.update(extra_headers)

        for attempt in range(1, self.max_attempts + 1):
            try:
                logger.info("http.fetch", trace_id=trace_id, url=url, attempt=attempt)
                return self.client.get(url, headers=headers)
            except httpx.RequestError as exc:
                logger.warning(
                    "http.fetch.retry",
                    trace_id=trace_id,
                    url=url,
                    attempt=attempt,
                    error=str(exc),
                )
                if attempt == self.max_attempts:
                    raise
                time.sleep(self.backoff_factor * (2 ** (attempt - 1)))
        raise RuntimeError("Unexpected fetch state")

    def fetch_payload(self, url: Optional[str] = None, *, trace_id: str | None = None) -> ForecastPayload:
        """Download and validate the forecast blob, reusing it on ``304``."""

        url = url or app_config.fetch.data_url
        response = self.fetch(url, trace_id=trace_id)

        if response.status_code == 304:
            cached = self.cache.get_payload(url)
            if cached is not None:
                logger.info("http.fetch.not_modified", trace_id=trace_id, url=url)
                return cached

        response.raise_for_status()
        payload = ForecastPayload.model_validate(response.json())
        self.cache.store(url, response, payload)
        return payload

"""HTTP page fetcher — httpx-based implementation of the page fetch capability."""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from itchmeta.logger import component_logger

DEFAULT_TIMEOUT = 30.0

_DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


class PageFetcher(Protocol):
    """Fetch raw document text for a URL, or ``None`` on any failure."""

    def __call__(self, url: str) -> str | None: ...


class HttpPageFetcher:
    """Single-shot GET with a bounded timeout and no retries.

    Transport errors and non-2xx responses are logged and reported as
    ``None``; they never propagate to the caller.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = "",
        proxy: str = "",
        log: Any = None,
    ) -> None:
        self._timeout = timeout
        self._user_agent = user_agent
        self._proxy = proxy
        self._log = log or component_logger("fetcher")

    @classmethod
    def from_config(cls, config: Any, log: Any = None) -> HttpPageFetcher:
        return cls(
            timeout=config.request_timeout,
            user_agent=config.user_agent,
            proxy=config.proxy_url,
            log=log,
        )

    def _http_client(self, **kwargs: Any) -> httpx.Client:
        """Create an httpx Client with browser-like headers and optional proxy."""
        headers = dict(_DEFAULT_HEADERS)
        if self._user_agent:
            headers["User-Agent"] = self._user_agent
        kwargs.setdefault("headers", headers)
        kwargs.setdefault("follow_redirects", True)
        if self._proxy:
            kwargs.setdefault("proxy", self._proxy)
        return httpx.Client(**kwargs)

    def __call__(self, url: str) -> str | None:
        try:
            with self._http_client(timeout=self._timeout) as client:
                resp = client.get(url)
                resp.raise_for_status()
                self._log.debug(f"Fetched {url} ({len(resp.text)} chars)")
                return resp.text
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._log.error(f"Failed to fetch URL {url}: {e}")
            return None

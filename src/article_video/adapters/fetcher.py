"""HTTP fetching with bounded retries and exponential backoff."""

import time
from typing import Callable, Optional

import requests

from article_video.errors import FetchError
from article_video.ports.interfaces import IPageFetcher

USER_AGENT = "Mozilla/5.0 (compatible; ArticleVideo/1.0; +https://github.com/article-video)"
DEFAULT_TIMEOUT = 20


def is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code < 600


class ResilientFetcher(IPageFetcher):
    """
    GET with retries on transport errors, 429 and 5xx. Other 4xx are returned as-is.

    The wait after failed attempt i is base_backoff_ms * 2**i. Instances hold no
    state besides the session, so concurrent calls with different arguments are fine.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._session = session or requests.Session()
        self._sleep = sleep
        self._timeout = timeout

    def fetch(
        self,
        url: str,
        max_attempts: int = 3,
        base_backoff_ms: int = 700,
        **request_kwargs,
    ) -> requests.Response:
        request_kwargs.setdefault("timeout", self._timeout)
        last_error: Optional[FetchError] = None

        for attempt in range(max(1, max_attempts)):
            try:
                response = self._session.get(url, **request_kwargs)
            except requests.RequestException as e:
                last_error = FetchError(f"Request to {url} failed: {e}")
                last_error.__cause__ = e
            else:
                if not is_retryable_status(response.status_code):
                    return response
                last_error = FetchError(f"HTTP {response.status_code}", status_code=response.status_code)

            if attempt < max_attempts - 1:
                delay_ms = base_backoff_ms * (2 ** attempt)
                print(f"  ⚠️  {last_error} (attempt {attempt + 1}/{max_attempts}), retrying in {delay_ms} ms")
                self._sleep(delay_ms / 1000.0)

        raise last_error

    def fetch_text(self, url: str) -> str:
        response = self.fetch(url, max_attempts=2, base_backoff_ms=400, headers={"User-Agent": USER_AGENT})
        if not response.ok:
            raise FetchError(f"Failed to fetch URL (status {response.status_code})", status_code=response.status_code)
        return response.text

    def fetch_bytes(self, url: str) -> Optional[bytes]:
        try:
            response = self.fetch(url, max_attempts=1, headers={"User-Agent": USER_AGENT})
        except FetchError as e:
            print(f"  ⚠️  Could not download {url}: {e}")
            return None
        if not response.ok:
            print(f"  ⚠️  Could not download {url}: HTTP {response.status_code}")
            return None
        return response.content

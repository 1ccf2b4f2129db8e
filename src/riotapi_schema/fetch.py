"""HTTP fetcher wrapper around httpx.

Every request is retried exactly once before giving up.
"""

import httpx

from riotapi_schema.errors import FetchError

DEFAULT_TIMEOUT = 30.0

MAX_ATTEMPTS = 2

HEADERS = {
    "User-Agent": "riotapi-schema",
    "Accept": "text/html,application/json;q=0.9,*/*;q=0.8",
}


class Fetcher:
    """Fetches page text over a shared httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = DEFAULT_TIMEOUT):
        self.client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True, headers=HEADERS)

    async def __aenter__(self) -> "Fetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.client.aclose()

    async def fetch(self, url: str) -> str:
        """GET ``url`` and return the body text. Raises FetchError after the retry fails."""
        error: Exception | None = None
        for _ in range(MAX_ATTEMPTS):
            try:
                response = await self.client.get(url)
                response.raise_for_status()
                return response.text
            except httpx.HTTPError as e:
                error = e
        raise FetchError(url, error)

"""
Document fetcher for Launchscope.
Every page the pipeline reads goes through here, so status and transport
failures surface as one error type.
"""
from typing import Optional, Union

import httpx

from launchscope.config import config
from launchscope.exceptions import NetworkError
from launchscope.utils.logger import StageLogger


class DocumentFetcher:
    """
    Async HTTP fetcher.

    When constructed with a client, that client is reused for every call
    (tests pass one built on httpx.MockTransport). Otherwise a short-lived
    client is opened per request. No retries are attempted.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Union[float, None] = config.REQUEST_TIMEOUT,
    ):
        self.client = client
        self.timeout = timeout
        self.logger = StageLogger("document_fetcher")

    async def fetch_text(self, url: str) -> str:
        """Fetch a page and return its decoded body."""
        response = await self._get(url, accept=self._get_headers()["Accept"])
        return response.text

    async def fetch_bytes(self, url: str, accept: str = "*/*") -> bytes:
        """Fetch a binary asset."""
        response = await self._get(url, accept=accept)
        return response.content

    async def _get(self, url: str, accept: str) -> httpx.Response:
        headers = self._get_headers()
        headers["Accept"] = accept

        self.logger.log_action("fetch", "started", url=url)

        try:
            if self.client is not None:
                response = await self.client.get(url, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            self.logger.log_error(
                f"Failed to fetch URL: {str(e)}",
                error_type="transport_error",
                url=url
            )
            raise NetworkError(f"Request failed: {str(e)}", url=url) from e

        if not response.is_success:
            self.logger.log_fetch(url, response.status_code, "http_error")
            raise NetworkError(
                f"HTTP error! status: {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        self.logger.log_fetch(
            url,
            response.status_code,
            "ok",
            content_length=len(response.content)
        )
        return response

    def _get_headers(self) -> dict:
        """Get request headers mimicking a browser."""
        return {
            "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }

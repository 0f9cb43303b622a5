"""
HTTP transport for provider adapters

Wraps an httpx.AsyncClient bound to a provider base URL and applies the retry
policy. Adapters never retry on their own.
"""
import asyncio
import logging
from collections.abc import Mapping

import httpx


logger = logging.getLogger(__name__)


class HttpTransport:
    """
    Issues GET requests against a single provider with exponential backoff.

    Retries on transient network errors (timeouts, connection errors) and 5xx
    responses. Does NOT retry on 4xx HTTP errors (client errors).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_factor: float = 2.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.max_retries = max(1, max_retries)
        self.backoff_factor = backoff_factor
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    async def get_with_headers(
        self,
        path: str,
        query: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> bytes:
        """
        GET a provider path and return the raw body

        Args:
            path: Path relative to the base URL
            query: Optional query parameters
            headers: Request headers

        Returns:
            Response body bytes

        Raises:
            httpx.HTTPError: If the request fails after all retries
        """
        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                response = await self._client.get(
                    path,
                    params=dict(query) if query else None,
                    headers=dict(headers) if headers else None,
                )
                response.raise_for_status()
                logger.debug(
                    "GET %s%s -> %s (%s bytes)",
                    self.base_url,
                    path,
                    response.status_code,
                    len(response.content),
                )
                return response.content

            except (httpx.TimeoutException, httpx.ConnectError) as e:
                # Transient network errors - retry
                last_error = e
                if attempt < self.max_retries - 1:
                    wait_time = self.backoff_factor ** attempt
                    logger.warning(
                        f"Request attempt {attempt + 1}/{self.max_retries} for {path} failed "
                        f"(transient error): {type(e).__name__}. Retrying in {wait_time:.1f}s..."
                    )
                    await asyncio.sleep(wait_time)
                else:
                    logger.error(f"Request for {path} failed after {self.max_retries} attempts (transient error)")

            except httpx.HTTPStatusError as e:
                if 400 <= e.response.status_code < 500:
                    logger.error(f"HTTP {e.response.status_code} (client error) for {path}")
                    raise

                # 5xx server error - retry
                last_error = e
                if attempt < self.max_retries - 1:
                    wait_time = self.backoff_factor ** attempt
                    logger.warning(
                        f"Request attempt {attempt + 1}/{self.max_retries} for {path} failed "
                        f"(HTTP {e.response.status_code} server error). Retrying in {wait_time:.1f}s..."
                    )
                    await asyncio.sleep(wait_time)
                else:
                    logger.error(
                        f"Request for {path} failed after {self.max_retries} attempts "
                        f"(HTTP {e.response.status_code})"
                    )

        if last_error:
            raise last_error

        raise RuntimeError(f"Failed to GET {path} after {self.max_retries} attempts")

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

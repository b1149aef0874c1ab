"""
HTTP transport for the DailyMed REST API.

DailyMed provides drug label data via a REST API:
https://dailymed.nlm.nih.gov/dailymed/app-support-web-services.cfm

All upstream failures are translated into UpstreamError here, once, so
the resource modules only deal with response shapes.

Usage:
    from dailymed_mcp.api.client import DailyMedClient

    async with DailyMedClient() as client:
        page = await client.fetch_page("/ndcs.json", {}, 1, 25, NDC.from_api, "NDCs")
"""

from typing import Any, Callable, TypeVar

import httpx

from dailymed_mcp.api.pagination import Page, page_from_metadata
from dailymed_mcp.config import settings
from dailymed_mcp.errors import UpstreamError
from dailymed_mcp.logging import get_logger

logger = get_logger(__name__, component="client")

T = TypeVar("T")


def _clean_params(params: dict[str, Any]) -> dict[str, Any]:
    """Drop unset filters and render booleans the way DailyMed expects."""
    cleaned = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = str(value).lower()
        cleaned[key] = value
    return cleaned


class DailyMedClient:
    """
    Async DailyMed API client.

    Wraps a single httpx.AsyncClient configured with the base URL,
    headers and the overall request timeout from settings.

    Example:
        async with DailyMedClient() as client:
            payload = await client.get_json("/drugnames.json", {"drug_name": "aspirin"})
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API base URL. Defaults to settings.base_url
            timeout: Overall request timeout in seconds. Defaults to settings.request_timeout
            transport: Optional httpx transport (tests pass an httpx.MockTransport)
        """
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.max_page_size = settings.max_api_page_size
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Accept": "application/json",
                "User-Agent": settings.user_agent,
            },
            timeout=timeout or settings.request_timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()
        logger.debug("client_closed")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        try:
            response = await self._http.get(path, params=_clean_params(params or {}))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("request_failed_http", path=path, status=e.response.status_code)
            raise UpstreamError(
                f"DailyMed API Error: {e.response.status_code} - {e.response.reason_phrase}"
            ) from e
        except httpx.RequestError as e:
            logger.warning("request_failed", path=path, error=str(e))
            raise UpstreamError(
                f"DailyMed API Error: No response received from server ({e.__class__.__name__})"
            ) from e
        return response

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        GET a JSON endpoint.

        Raises:
            UpstreamError: On HTTP errors, network failures or a non-JSON body
        """
        response = await self._get(path, params)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"DailyMed API Error: invalid JSON from {path}") from e

    async def get_bytes(self, path: str) -> bytes:
        """GET a raw endpoint (SPL XML)."""
        response = await self._get(path)
        return response.content

    async def get_data(
        self, path: str, params: dict[str, Any] | None, what: str
    ) -> tuple[list, dict]:
        """
        GET a listing endpoint and return its data list and metadata.

        Raises:
            UpstreamError: If the payload has no "data" list
        """
        payload = await self.get_json(path, params)
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise UpstreamError(f"Unexpected response structure for {what}")
        return payload["data"], payload.get("metadata") or {}

    async def fetch_page(
        self,
        path: str,
        params: dict[str, Any],
        page: int,
        page_size: int,
        parse_item: Callable[[dict], T],
        what: str,
    ) -> Page[T]:
        """
        Fetch one server-side page and map its items.

        Filters are forwarded verbatim; page size is capped at the API
        maximum while the reported page size stays the requested one.
        """
        query = {
            **params,
            "page": page,
            "pagesize": min(page_size, self.max_page_size),
        }
        logger.debug("fetching_page", path=path, page=page, page_size=page_size)

        items, metadata = await self.get_data(path, query, what)
        total_elements = metadata.get("total_elements")

        return page_from_metadata(
            [parse_item(item) for item in items],
            page=page,
            page_size=page_size,
            total_elements=int(total_elements) if total_elements else None,
        )

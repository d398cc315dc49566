"""
Query executor service: runs a translated query against the listings API.

Simple filter-only queries travel as GET query strings. Queries whose
descriptor carries a structured body (polygons, boolean filter expressions,
image search items) are sent as a POST with that body as JSON.
"""

from typing import Any

import httpx
import structlog

from homefinder.config import RepliersConfig
from homefinder.constants import SEARCH_FAILED_MESSAGE
from homefinder.models.search import ErrorKind, Listing, QueryDescriptor, SearchError
from homefinder.services.repliers import auth_headers

logger = structlog.get_logger(__name__)


def augment_url(url: str, select_param: str = "select=*") -> str:
    """Append the field-selection parameter, extending an existing query string."""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{select_param}"


def requires_post(descriptor: QueryDescriptor) -> bool:
    """A descriptor is sent as POST only when its body is a non-empty object."""
    return isinstance(descriptor.body, dict) and len(descriptor.body) > 0


class QueryExecutor:
    """Client for the Repliers listings endpoint."""

    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient,
        repliers_config: RepliersConfig | None = None,
    ):
        self.api_key = api_key
        self.repliers_config = repliers_config or RepliersConfig()
        self._client = client

    async def execute(self, descriptor: QueryDescriptor) -> list[Listing] | SearchError:
        """
        Fetch the listings described by a translated query.

        Args:
            descriptor: URL and optional body produced by the translator.

        Returns:
            The listings in the order the API returned them (empty when the
            response has no ``listings`` field), or a SearchError tagged
            EXECUTION_FAILED on a non-success status or an unusable URL.

        Raises:
            httpx.HTTPError: On transport-level failures (connection, timeout).
        """
        url = augment_url(descriptor.url, self.repliers_config.select_param)
        headers = auth_headers(self.api_key, self.repliers_config)

        try:
            if requires_post(descriptor):
                logger.info("listings_request_sent", method="POST", url=url)
                response = await self._client.post(url, json=descriptor.body, headers=headers)
            else:
                logger.info("listings_request_sent", method="GET", url=url)
                response = await self._client.get(url, headers=headers)
        except httpx.InvalidURL as e:
            # The URL comes from the NLP service, not from us
            logger.warning("listings_url_invalid", url=url, error=str(e))
            return SearchError(kind=ErrorKind.EXECUTION_FAILED, message=SEARCH_FAILED_MESSAGE)

        if not response.is_success:
            logger.warning("listings_request_failed", status_code=response.status_code)
            return SearchError(
                kind=ErrorKind.EXECUTION_FAILED,
                message=SEARCH_FAILED_MESSAGE,
                status_code=response.status_code,
            )

        try:
            data: Any = response.json()
        except ValueError as e:
            logger.warning("listings_response_invalid", error=str(e))
            return SearchError(
                kind=ErrorKind.EXECUTION_FAILED,
                message=SEARCH_FAILED_MESSAGE,
                status_code=response.status_code,
            )

        listings = self._extract_listings(data)
        if listings is None:
            logger.warning("listings_response_invalid", error="unexpected response shape")
            return SearchError(
                kind=ErrorKind.EXECUTION_FAILED,
                message=SEARCH_FAILED_MESSAGE,
                status_code=response.status_code,
            )

        logger.info("listings_fetched", count=len(listings))
        return listings

    @staticmethod
    def _extract_listings(data: Any) -> list[Listing] | None:
        """
        Pull the listings array out of a listings API response.

        Args:
            data: Decoded JSON body

        Returns:
            The listings (empty when the field is absent or null), or None when
            the body is not shaped like a listings response.
        """
        if not isinstance(data, dict):
            return None
        listings = data.get("listings")
        if listings is None:
            return []
        if not isinstance(listings, list):
            return None
        return listings

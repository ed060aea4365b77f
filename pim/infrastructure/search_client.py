"""Search index HTTP client.

Talks to an Elasticsearch-compatible REST API to read product counts
and to index product documents.
"""

import json
from typing import Any

import httpx
import structlog

from pim.infrastructure.config import settings

logger = structlog.get_logger()


class SearchClientError(Exception):
    """Error from a search index API call."""

    def __init__(
        self, index: str, message: str, status_code: int | None = None
    ) -> None:
        self.index = index
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{index}] {message}")


def _ndjson(lines: list[dict[str, Any]]) -> str:
    """Encode documents as newline-delimited JSON (trailing newline included)."""
    return "".join(json.dumps(line) + "\n" for line in lines)


class SearchClient:
    """HTTP client for the search index.

    Index names are passed per call so one client can serve several
    indexes.

    Example usage:
        client = SearchClient("http://localhost:9200")
        result = await client.search("pim_catalog_product", {"size": 0})
        await client.close()
    """

    NDJSON_HEADERS = {"Content-Type": "application/x-ndjson"}

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        request_id: str | None = None,
    ) -> None:
        """Initialize search client.

        Args:
            base_url: Base URL of the search engine.
            timeout: Request timeout in seconds.
            request_id: Optional request ID for correlation.
        """
        self.base_url = base_url
        self.timeout = timeout
        self.request_id = request_id
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {}
            if self.request_id:
                headers["X-Opaque-Id"] = self.request_id
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def create_index(self, index: str, mappings: dict[str, Any]) -> bool:
        """Create an index unless it already exists.

        Args:
            index: Index name.
            mappings: Field mappings of the index.

        Returns:
            True if the index was created, False if it already existed.

        Raises:
            SearchClientError: On API or transport error.
        """
        try:
            client = await self._get_client()
            exists = await client.head(f"/{index}")
            if exists.status_code == 200:
                return False
            response = await client.put(f"/{index}", json={"mappings": mappings})
        except httpx.RequestError as e:
            logger.error("Index creation request failed", index=index, error=str(e))
            raise SearchClientError(index, f"Request failed: {str(e)}") from e

        if response.status_code != 200:
            raise SearchClientError(
                index,
                f"Index creation failed: {response.text}",
                response.status_code,
            )

        logger.info("Index created", index=index)
        return True

    async def search(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        """Run one search request.

        Args:
            index: Index name.
            body: Search request body (query, aggregations...).

        Returns:
            Decoded search response.

        Raises:
            SearchClientError: On API or transport error.
        """
        try:
            client = await self._get_client()
            response = await client.post(f"/{index}/_search", json=body)
        except httpx.RequestError as e:
            logger.error("Search request failed", index=index, error=str(e))
            raise SearchClientError(index, f"Request failed: {str(e)}") from e

        if response.status_code != 200:
            raise SearchClientError(
                index,
                f"Search failed: {response.text}",
                response.status_code,
            )
        return response.json()

    async def msearch(
        self, index: str, bodies: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Run several search requests in one round trip.

        Args:
            index: Index name.
            bodies: Search request bodies.

        Returns:
            One decoded response per body, in the same order.

        Raises:
            SearchClientError: On API or transport error, or when any
                single search of the batch failed.
        """
        if not bodies:
            return []

        lines: list[dict[str, Any]] = []
        for body in bodies:
            lines.append({})
            lines.append(body)

        try:
            client = await self._get_client()
            response = await client.post(
                f"/{index}/_msearch",
                content=_ndjson(lines),
                headers=self.NDJSON_HEADERS,
            )
        except httpx.RequestError as e:
            logger.error("Multi-search request failed", index=index, error=str(e))
            raise SearchClientError(index, f"Request failed: {str(e)}") from e

        if response.status_code != 200:
            raise SearchClientError(
                index,
                f"Multi-search failed: {response.text}",
                response.status_code,
            )

        responses = response.json().get("responses", [])
        for position, item in enumerate(responses):
            if "error" in item:
                raise SearchClientError(
                    index,
                    f"Search #{position} of multi-search failed: {item['error']}",
                    item.get("status"),
                )
        return responses

    async def bulk_index(
        self,
        index: str,
        documents: list[dict[str, Any]],
        refresh: bool = False,
    ) -> int:
        """Index documents, replacing those with the same ``id``.

        Args:
            index: Index name.
            documents: Documents to index; each must carry an ``id``.
            refresh: Whether to make the documents searchable immediately.

        Returns:
            Number of documents indexed.

        Raises:
            SearchClientError: On API or transport error, or when any
                document was rejected.
        """
        if not documents:
            return 0

        lines: list[dict[str, Any]] = []
        for document in documents:
            lines.append({"index": {"_index": index, "_id": document["id"]}})
            lines.append(document)

        params = {"refresh": "true"} if refresh else None
        try:
            client = await self._get_client()
            response = await client.post(
                "/_bulk",
                content=_ndjson(lines),
                headers=self.NDJSON_HEADERS,
                params=params,
            )
        except httpx.RequestError as e:
            logger.error("Bulk index request failed", index=index, error=str(e))
            raise SearchClientError(index, f"Request failed: {str(e)}") from e

        if response.status_code != 200:
            raise SearchClientError(
                index,
                f"Bulk index failed: {response.text}",
                response.status_code,
            )

        data = response.json()
        if data.get("errors"):
            raise SearchClientError(index, "Some documents were rejected by the index")

        logger.info("Documents indexed", index=index, count=len(documents))
        return len(documents)


# Global client instance
_search_client: SearchClient | None = None


def get_search_client() -> SearchClient:
    """Get the search client singleton.

    Returns:
        SearchClient configured from settings.
    """
    global _search_client
    if _search_client is None:
        _search_client = SearchClient(
            base_url=settings.search_url,
            timeout=settings.search_timeout,
        )
    return _search_client

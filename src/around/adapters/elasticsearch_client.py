"""Elasticsearch REST client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from around.domain.errors import IndexStoreError


class IndexClient(Protocol):
    """Interface for the document index operations the service needs."""

    async def ping(self) -> None:
        """Raise if the index store is unreachable."""

    async def index_exists(self, index: str) -> bool:
        """Return true when the index exists."""

    async def create_index(self, index: str, body: dict[str, object]) -> None:
        """Create an index with the given settings and mappings."""

    async def index_document(
        self,
        index: str,
        document_id: str,
        document: dict[str, object],
        refresh: bool = False,
    ) -> None:
        """Create or replace a document by id."""

    async def search(self, index: str, query: dict[str, object]) -> dict[str, object]:
        """Run a query and return the raw search response."""


@dataclass
class HttpxElasticsearchClient(IndexClient):
    """HTTPX-backed Elasticsearch client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(cls, base_url: str, timeout: float = 10.0) -> "HttpxElasticsearchClient":
        """Create an Elasticsearch client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def ping(self) -> None:
        """Check that the cluster answers."""
        await self._request("GET", "/")

    async def index_exists(self, index: str) -> bool:
        """Return true when the index exists."""
        try:
            response = await self.http_client.head(
                f"{self.base_url}/{index}", timeout=self.timeout
            )
        except httpx.HTTPError as exc:
            raise IndexStoreError(f"Index lookup failed for {index}") from exc
        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        _raise_for_status(response)
        return True

    async def create_index(self, index: str, body: dict[str, object]) -> None:
        """Create an index."""
        await self._request("PUT", f"/{index}", json=body)

    async def index_document(
        self,
        index: str,
        document_id: str,
        document: dict[str, object],
        refresh: bool = False,
    ) -> None:
        """Create or replace a document by id."""
        params = {"refresh": "true"} if refresh else None
        await self._request(
            "PUT", f"/{index}/_doc/{document_id}", json=document, params=params
        )

    async def search(self, index: str, query: dict[str, object]) -> dict[str, object]:
        """Run a query against one index."""
        return await self._request("POST", f"/{index}/_search", json={"query": query})

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, object] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, object]:
        try:
            response = await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                params=params,
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise IndexStoreError(f"{method} {path} failed: {exc}") from exc
        _raise_for_status(response)
        return response.json()


def _raise_for_status(response: httpx.Response) -> None:
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise IndexStoreError(
            f"{exc.request.method} {exc.request.url.path} returned "
            f"{response.status_code}: {response.text[:200]}"
        ) from exc

"""Shared test fixtures."""

import copy
import math
from dataclasses import dataclass, field
from typing import BinaryIO

import pytest

from around.adapters.elasticsearch_client import IndexClient
from around.adapters.elasticsearch_post_repository import ElasticsearchPostRepository
from around.adapters.elasticsearch_user_repository import ElasticsearchUserRepository
from around.config import Settings
from around.containers import AppContainer
from around.domain.errors import BlobStoreError, IndexStoreError
from around.services.posts import BlobUploader, PostService
from around.services.search import GeoSearchService
from around.services.tokens import TokenService
from around.services.users import UserService

EARTH_RADIUS_KM = 6371.0088


@dataclass
class FakeIndexClient(IndexClient):
    """In-memory index supporting term, geo-distance and bool queries."""

    indices: dict[str, dict[str, dict[str, object]]] = field(default_factory=dict)
    created: dict[str, dict[str, object]] = field(default_factory=dict)
    writes: list[tuple[str, str, bool]] = field(default_factory=list)
    queries: list[tuple[str, dict[str, object]]] = field(default_factory=list)
    fail: bool = False
    closed: bool = False

    def _check(self) -> None:
        if self.fail:
            raise IndexStoreError("index store unavailable")

    async def ping(self) -> None:
        self._check()

    async def index_exists(self, index: str) -> bool:
        self._check()
        return index in self.indices

    async def create_index(self, index: str, body: dict[str, object]) -> None:
        self._check()
        self.indices.setdefault(index, {})
        self.created[index] = body

    async def index_document(
        self,
        index: str,
        document_id: str,
        document: dict[str, object],
        refresh: bool = False,
    ) -> None:
        self._check()
        self.indices.setdefault(index, {})[document_id] = copy.deepcopy(document)
        self.writes.append((index, document_id, refresh))

    async def search(self, index: str, query: dict[str, object]) -> dict[str, object]:
        self._check()
        self.queries.append((index, query))
        hits = [
            {"_index": index, "_id": document_id, "_source": copy.deepcopy(source)}
            for document_id, source in self.indices.get(index, {}).items()
            if _matches(query, source)
        ]
        return {"hits": {"total": {"value": len(hits)}, "hits": hits}}

    async def close(self) -> None:
        self.closed = True


def _matches(query: dict[str, object], source: dict[str, object]) -> bool:
    (kind, body), *_ = query.items()
    if kind == "match_all":
        return True
    if kind == "term":
        (name, value), *_ = body.items()
        return source.get(name) == value
    if kind == "geo_distance":
        return _within_distance(body, source)
    if kind == "bool":
        clauses = []
        for occur in ("must", "filter"):
            clause = body.get(occur, [])
            clauses.extend(clause if isinstance(clause, list) else [clause])
        return all(_matches(clause, source) for clause in clauses)
    raise AssertionError(f"Unsupported query: {kind}")


def _within_distance(body: dict[str, object], source: dict[str, object]) -> bool:
    distance_km = float(str(body["distance"]).removesuffix("km"))
    (name, center), *_ = (
        (key, value) for key, value in body.items() if key != "distance"
    )
    point = source.get(name)
    if not isinstance(point, dict):
        return False
    try:
        lat, lon = float(point["lat"]), float(point["lon"])
    except (KeyError, TypeError, ValueError):
        return False
    return haversine_km(center["lat"], center["lon"], lat, lon) <= distance_km


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


@dataclass
class FakeBlobUploader(BlobUploader):
    """Blob uploader that keeps uploaded bytes in memory."""

    objects: dict[tuple[str, str], bytes] = field(default_factory=dict)
    content_types: dict[str, str | None] = field(default_factory=dict)

    async def upload(
        self,
        stream: BinaryIO,
        bucket_name: str,
        object_id: str,
        content_type: str | None = None,
    ) -> str:
        self.objects[(bucket_name, object_id)] = stream.read()
        self.content_types[object_id] = content_type
        return (
            "https://storage.googleapis.com/download/storage/v1/b/"
            f"{bucket_name}/o/{object_id}?alt=media"
        )


@dataclass
class FailingBlobUploader(BlobUploader):
    """Blob uploader whose bucket is missing."""

    async def upload(
        self,
        stream: BinaryIO,
        bucket_name: str,
        object_id: str,
        content_type: str | None = None,
    ) -> str:
        raise BlobStoreError(f"bucket {bucket_name} not found")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        gcs_bucket="test-bucket",
        jwt_signing_key="test-signing-key-0123456789abcdef",
        elasticsearch_url="http://es.test:9200",
    )


@pytest.fixture
def index_client() -> FakeIndexClient:
    return FakeIndexClient()


@pytest.fixture
def blob_uploader() -> FakeBlobUploader:
    return FakeBlobUploader()


@pytest.fixture
def user_service(settings: Settings, index_client: FakeIndexClient) -> UserService:
    return UserService(ElasticsearchUserRepository(index_client, settings.user_index))


@pytest.fixture
def post_repository(
    settings: Settings, index_client: FakeIndexClient
) -> ElasticsearchPostRepository:
    return ElasticsearchPostRepository(index_client, settings.post_index)


@pytest.fixture
def post_service(
    settings: Settings,
    blob_uploader: FakeBlobUploader,
    post_repository: ElasticsearchPostRepository,
) -> PostService:
    return PostService(
        uploader=blob_uploader,
        repository=post_repository,
        bucket_name=settings.gcs_bucket,
    )


@pytest.fixture
def search_service(
    settings: Settings, post_repository: ElasticsearchPostRepository
) -> GeoSearchService:
    return GeoSearchService(
        repository=post_repository,
        default_distance_km=settings.default_search_distance_km,
    )


@pytest.fixture
def token_service(settings: Settings) -> TokenService:
    return TokenService(signing_key=settings.jwt_signing_key)


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    index_client: FakeIndexClient,
    user_service: UserService,
    token_service: TokenService,
    post_service: PostService,
    search_service: GeoSearchService,
) -> AppContainer:
    async def close_resources() -> None:
        await index_client.close()

    return AppContainer(
        settings=settings,
        index_client=index_client,
        user_service=user_service,
        token_service=token_service,
        post_service=post_service,
        search_service=search_service,
        close_resources=close_resources,
    )


@pytest.fixture
def auth_headers(token_service: TokenService) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_service.issue_token('alice')}"}

"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from around.adapters.elasticsearch_client import HttpxElasticsearchClient, IndexClient
from around.adapters.elasticsearch_post_repository import ElasticsearchPostRepository
from around.adapters.elasticsearch_user_repository import ElasticsearchUserRepository
from around.adapters.gcs_blob_uploader import GcsBlobUploader
from around.config import Settings
from around.services.posts import PostService
from around.services.search import GeoSearchService
from around.services.tokens import TokenService
from around.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    index_client: IndexClient
    user_service: UserService
    token_service: TokenService
    post_service: PostService
    search_service: GeoSearchService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    index_client = HttpxElasticsearchClient.create(
        resolved_settings.elasticsearch_url,
        timeout=resolved_settings.index_request_timeout,
    )
    user_repository = ElasticsearchUserRepository(
        index_client, resolved_settings.user_index
    )
    post_repository = ElasticsearchPostRepository(
        index_client, resolved_settings.post_index
    )
    blob_uploader = GcsBlobUploader.create(resolved_settings.gcp_project_id)
    token_service = TokenService(
        signing_key=resolved_settings.jwt_signing_key,
        algorithm=resolved_settings.jwt_algorithm,
        ttl=timedelta(hours=resolved_settings.token_ttl_hours),
    )
    post_service = PostService(
        uploader=blob_uploader,
        repository=post_repository,
        bucket_name=resolved_settings.gcs_bucket,
    )
    search_service = GeoSearchService(
        repository=post_repository,
        default_distance_km=resolved_settings.default_search_distance_km,
    )

    async def close_resources() -> None:
        await index_client.close()
        blob_uploader.close()

    return AppContainer(
        settings=resolved_settings,
        index_client=index_client,
        user_service=UserService(user_repository),
        token_service=token_service,
        post_service=post_service,
        search_service=search_service,
        close_resources=close_resources,
    )

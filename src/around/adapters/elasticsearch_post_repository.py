"""Elasticsearch-backed post repository."""

from dataclasses import dataclass

from pydantic import ValidationError

from around.adapters.elasticsearch_client import IndexClient
from around.domain.posts import HitDecodeError, Post
from around.services.posts import PostRepository


@dataclass
class ElasticsearchPostRepository(PostRepository):
    """Elasticsearch implementation for post persistence and search."""

    client: IndexClient
    index: str

    async def save_post(self, post_id: str, post: Post) -> None:
        """Write the post with refresh so the next search sees it."""
        await self.client.index_document(
            self.index, post_id, post.model_dump(), refresh=True
        )

    async def search(self, query: dict[str, object]) -> list[Post | HitDecodeError]:
        """Run a query and decode each hit into a post or a decode error."""
        response = await self.client.search(self.index, query)
        return [_decode_hit(hit) for hit in response.get("hits", {}).get("hits", [])]


def _decode_hit(hit: dict[str, object]) -> Post | HitDecodeError:
    document_id = str(hit.get("_id", ""))
    try:
        return Post.model_validate(hit.get("_source"))
    except ValidationError as exc:
        return HitDecodeError(
            document_id=document_id, reason=f"{exc.error_count()} validation errors"
        )

"""Post ingestion: upload the image, then index the post."""

import logging
import math
from dataclasses import dataclass
from typing import BinaryIO, Protocol
from uuid import uuid4

from around.domain.errors import ImageMissingError
from around.domain.posts import HitDecodeError, Location, Post

_logger = logging.getLogger(__name__)


class BlobUploader(Protocol):
    """Interface for storing images in a public blob store."""

    async def upload(
        self,
        stream: BinaryIO,
        bucket_name: str,
        object_id: str,
        content_type: str | None = None,
    ) -> str:
        """Store the stream as a public object and return its URL."""


class PostRepository(Protocol):
    """Persistence interface for posts in the document index."""

    async def save_post(self, post_id: str, post: Post) -> None:
        """Write a post and make it visible to subsequent searches."""

    async def search(self, query: dict[str, object]) -> list[Post | HitDecodeError]:
        """Run a query against posts and decode every hit."""


def parse_coordinate(raw: str | None) -> float:
    """Parse a coordinate string, falling back to 0.0 when unparsable."""
    if raw is None:
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        return 0.0
    # nan and inf are not valid JSON numbers for the index.
    return value if math.isfinite(value) else 0.0


@dataclass
class PostService:
    """Coordinates the blob upload and index write for a new post."""

    uploader: BlobUploader
    repository: PostRepository
    bucket_name: str

    async def ingest(  # noqa: PLR0913
        self,
        author: str,
        message: str,
        raw_lat: str | None,
        raw_lon: str | None,
        image: BinaryIO | None,
        content_type: str | None = None,
    ) -> Post:
        """Upload the image and index the post; return the stored post.

        An image that was uploaded is left in place if the index write fails.
        """
        location = Location(
            lat=parse_coordinate(raw_lat), lon=parse_coordinate(raw_lon)
        )
        post_id = str(uuid4())
        if image is None:
            raise ImageMissingError("Image is not available")

        url = await self.uploader.upload(
            image, self.bucket_name, post_id, content_type=content_type
        )
        _logger.info("Image uploaded: post_id=%s url=%s", post_id, url)

        post = Post(user=author, message=message, location=location, url=url)
        await self.repository.save_post(post_id, post)
        _logger.info("Post indexed: post_id=%s user=%s", post_id, author)
        return post

"""Index mappings and startup creation."""

import logging

from around.adapters.elasticsearch_client import IndexClient
from around.config import Settings

_logger = logging.getLogger(__name__)

POST_INDEX_BODY: dict[str, object] = {
    "mappings": {
        "properties": {
            "user": {"type": "keyword"},
            "message": {"type": "text"},
            "location": {"type": "geo_point"},
            "url": {"type": "keyword"},
        }
    }
}

USER_INDEX_BODY: dict[str, object] = {
    "mappings": {
        "properties": {
            "username": {"type": "keyword"},
            "password": {"type": "keyword", "index": False},
            "age": {"type": "integer"},
            "gender": {"type": "keyword"},
        }
    }
}


async def ensure_indices(client: IndexClient, settings: Settings) -> None:
    """Create the post and user indices if they do not exist yet."""
    await client.ping()
    for index, body in (
        (settings.post_index, POST_INDEX_BODY),
        (settings.user_index, USER_INDEX_BODY),
    ):
        if await client.index_exists(index):
            continue
        await client.create_index(index, body)
        _logger.info("Created index: %s", index)

"""Elasticsearch-backed user repository."""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from around.adapters.elasticsearch_client import IndexClient
from around.domain.models import User
from around.services.users import UserRepository

_logger = logging.getLogger(__name__)


@dataclass
class ElasticsearchUserRepository(UserRepository):
    """Elasticsearch implementation for user persistence."""

    client: IndexClient
    index: str

    async def find_by_username(self, username: str) -> list[User]:
        """Return users with an exact username match."""
        response = await self.client.search(
            self.index, {"term": {"username": username}}
        )
        users = []
        for hit in response.get("hits", {}).get("hits", []):
            try:
                users.append(User.model_validate(hit.get("_source")))
            except ValidationError:
                _logger.warning("Skipping undecodable user: id=%s", hit.get("_id"))
        return users

    async def username_exists(self, username: str) -> bool:
        """Return true when any document matches, decodable or not."""
        response = await self.client.search(
            self.index, {"term": {"username": username}}
        )
        return bool(response.get("hits", {}).get("hits"))

    async def save_user(self, user: User) -> None:
        """Write the user keyed by username."""
        await self.client.index_document(
            self.index, user.username, user.model_dump(), refresh=True
        )

"""User-related business logic."""

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from around.domain.errors import IndexStoreError
from around.domain.models import User
from around.services.passwords import hash_password, verify_password

_logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-z0-9_]+$")


class UserRepository(Protocol):
    """Persistence interface for user records."""

    async def find_by_username(self, username: str) -> list[User]:
        """Return users whose username matches exactly."""

    async def username_exists(self, username: str) -> bool:
        """Return true when any stored record has this username."""

    async def save_user(self, user: User) -> None:
        """Persist a user keyed by username."""


def is_valid_username(username: str) -> bool:
    """Return true when the username only uses lowercase alnum and underscore."""
    return USERNAME_PATTERN.fullmatch(username) is not None


def validate_signup(user: User) -> bool:
    """Check a signup payload before it reaches storage."""
    return bool(user.username and user.password) and is_valid_username(
        user.username
    )


@dataclass
class UserService:
    """Application service for signup and credential checks."""

    repository: UserRepository

    async def verify_credentials(self, username: str, password: str) -> bool:
        """Return true when the username exists and the password matches."""
        try:
            matches = await self.repository.find_by_username(username)
        except IndexStoreError:
            _logger.exception("User lookup failed: username=%s", username)
            return False
        if not matches:
            return False
        # First decoded hit decides.
        user = matches[0]
        return user.username == username and verify_password(password, user.password)

    async def create_user(self, user: User) -> bool:
        """Create a user unless the username is taken; return true on success.

        The existence check and the write are not atomic, so two concurrent
        signups for the same username can both succeed and the last write wins.
        """
        try:
            taken = await self.repository.username_exists(user.username)
        except IndexStoreError:
            _logger.exception("User lookup failed: username=%s", user.username)
            return False
        if taken:
            _logger.info("User already exists: username=%s", user.username)
            return False
        stored = user.model_copy(update={"password": hash_password(user.password)})
        try:
            await self.repository.save_user(stored)
        except IndexStoreError:
            _logger.exception("Saving user failed: username=%s", user.username)
            return False
        _logger.info("User created: username=%s", user.username)
        return True

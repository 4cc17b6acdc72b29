"""Domain models for users and identities."""

from dataclasses import dataclass

from pydantic import BaseModel


class User(BaseModel):
    """A user document as stored in the user index."""

    username: str = ""
    password: str = ""
    age: int = 0
    gender: str = ""


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity extracted from a verified session token."""

    username: str

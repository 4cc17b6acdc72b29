"""Models for geo-tagged posts."""

from dataclasses import dataclass

from pydantic import BaseModel


class Location(BaseModel):
    """Geographic point in decimal degrees."""

    lat: float
    lon: float


class Post(BaseModel):
    """A post as stored in the index and returned by search."""

    user: str
    message: str
    location: Location
    url: str


@dataclass(frozen=True)
class HitDecodeError:
    """A search hit whose source could not be decoded into a post."""

    document_id: str
    reason: str

"""Geo-distance search over indexed posts."""

import logging
import math
from dataclasses import dataclass

from around.domain.posts import HitDecodeError, Post
from around.services.posts import PostRepository

_logger = logging.getLogger(__name__)

DEFAULT_DISTANCE_KM = 200.0


def parse_distance_km(raw: str | None, default_km: float) -> float:
    """Parse a search radius in kilometers, falling back to the default."""
    if raw is None or not raw.strip():
        return default_km
    try:
        value = float(raw)
    except ValueError:
        _logger.warning("Ignoring unparsable search range: %r", raw)
        return default_km
    if not math.isfinite(value) or value < 0:
        _logger.warning("Ignoring out-of-range search range: %r", raw)
        return default_km
    return value


def format_distance(distance_km: float) -> str:
    """Render kilometers as an index distance string such as ``1.5km``."""
    number = f"{distance_km:.6f}".rstrip("0").rstrip(".")
    return f"{number}km"


def build_geo_distance_query(
    lat: float, lon: float, distance: str
) -> dict[str, object]:
    """Build a query matching posts within ``distance`` of a point."""
    return {
        "bool": {
            "must": {"match_all": {}},
            "filter": {
                "geo_distance": {
                    "distance": distance,
                    "location": {"lat": lat, "lon": lon},
                }
            },
        }
    }


@dataclass
class GeoSearchService:
    """Finds posts near a point."""

    repository: PostRepository
    default_distance_km: float = DEFAULT_DISTANCE_KM

    async def search(
        self, lat: float, lon: float, range_km: str | None = None
    ) -> list[Post]:
        """Return posts within the range (km) of the point, in index order."""
        distance_km = parse_distance_km(range_km, self.default_distance_km)
        distance = format_distance(distance_km)
        _logger.info("Search received: lat=%s lon=%s distance=%s", lat, lon, distance)
        query = build_geo_distance_query(lat, lon, distance)
        posts: list[Post] = []
        for hit in await self.repository.search(query):
            if isinstance(hit, HitDecodeError):
                _logger.warning(
                    "Skipping undecodable post: id=%s reason=%s",
                    hit.document_id,
                    hit.reason,
                )
                continue
            posts.append(hit)
        return posts

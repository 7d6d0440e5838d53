"""
Celestial Object Catalogs

Loads and caches a small table of bright objects from a YAML data file and
resolves object names for named gotos.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import deal
import yaml
from cachetools import TTLCache, cached

from starbook.api.core.exceptions import ObjectNotFoundError


logger = logging.getLogger(__name__)


__all__ = [
    "CelestialObject",
    "ObjectResolver",
    "StaticCatalog",
    "get_all_objects",
    "load_catalogs",
]


@dataclass(frozen=True)
class CelestialObject:
    """Represents a celestial object with coordinates and metadata."""

    name: str
    ra_degrees: float
    dec_degrees: float
    magnitude: float | None = None
    object_type: str = "star"
    distance: float | None = None
    common_name: str | None = None
    catalog: str = ""

    def matches_search(self, query: str) -> bool:
        """Check if object matches search query."""
        query_lower = query.lower()
        return bool(
            query_lower in self.name.lower() or (self.common_name and query_lower in self.common_name.lower())
        )

    def matches_name(self, name: str) -> bool:
        """Exact, case-insensitive match on the name or common name; 'M 31' matches 'M31'."""
        key = "".join(name.lower().split())
        names = [self.name] if self.common_name is None else [self.name, self.common_name]
        return any(key == "".join(candidate.lower().split()) for candidate in names)


class ObjectResolver(Protocol):
    """Anything able to turn an object name into coordinates."""

    def find_object(self, name: str) -> CelestialObject | None: ...


# Cache for loaded catalogs (TTL=3600 seconds / 1 hour)
_catalog_cache: TTLCache[Any, dict[str, list[CelestialObject]]] = TTLCache(maxsize=8, ttl=3600)


def _get_catalogs_path() -> Path:
    """Get the path to the bundled objects.yaml file."""
    # We're in: src/starbook/api/catalogs/
    # Data is in: src/starbook/data/
    data_path = Path(__file__).parent.parent.parent / "data" / "objects.yaml"
    if not data_path.exists():
        raise ObjectNotFoundError(f"Could not find objects.yaml at {data_path}")
    return data_path


@cached(_catalog_cache)
def load_catalogs(path: Path | None = None) -> dict[str, list[CelestialObject]]:
    """
    Load all catalogs from a YAML file.

    Results are cached for performance.

    Args:
        path: Catalog file (default: the bundled objects.yaml)

    Returns:
        Dictionary mapping catalog names to lists of CelestialObject instances
    """
    catalogs_path = path or _get_catalogs_path()
    logger.debug(f"Loading catalogs from {catalogs_path}")

    with catalogs_path.open("r", encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    all_catalogs: dict[str, list[CelestialObject]] = {}
    for catalog_name, objects_data in data.items():
        all_catalogs[catalog_name] = [
            CelestialObject(
                name=str(obj_data["name"]),
                ra_degrees=float(obj_data["ra_degrees"]),
                dec_degrees=float(obj_data["dec_degrees"]),
                magnitude=obj_data.get("magnitude"),
                object_type=obj_data.get("type", "star"),
                distance=obj_data.get("distance"),
                common_name=obj_data.get("common_name"),
                catalog=catalog_name,
            )
            for obj_data in objects_data or []
        ]
        logger.debug(f"Loaded {len(all_catalogs[catalog_name])} objects from catalog '{catalog_name}'")

    return all_catalogs


@deal.post(lambda result: isinstance(result, list), message="Must return list of objects")
def get_all_objects() -> list[CelestialObject]:
    """Get all objects from all bundled catalogs."""
    return [obj for objects in load_catalogs().values() for obj in objects]


class StaticCatalog:
    """
    In-memory object table with linear name lookup.

    Exact matches on name or common name win; otherwise the first object whose
    name contains the query is returned.
    """

    def __init__(self, objects: list[CelestialObject] | None = None):
        self._objects = list(objects) if objects is not None else get_all_objects()

    def __len__(self) -> int:
        return len(self._objects)

    @deal.pre(lambda self, name: bool(name and name.strip()), message="Name must be non-empty")  # type: ignore[misc,arg-type]
    def find_object(self, name: str) -> CelestialObject | None:
        """
        Look up an object by name.

        Args:
            name: Object name, e.g. 'M31', 'vega' or 'Andromeda Galaxy'

        Returns:
            Matching object or None
        """
        for obj in self._objects:
            if obj.matches_name(name):
                return obj
        query = name.strip()
        return next((obj for obj in self._objects if obj.matches_search(query)), None)

    def search(self, query: str) -> list[CelestialObject]:
        """All objects whose name or common name contains the query."""
        return [obj for obj in self._objects if obj.matches_search(query)]

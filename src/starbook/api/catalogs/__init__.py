"""Object catalogs used to resolve names for gotos."""

from starbook.api.catalogs.catalogs import (
    CelestialObject,
    ObjectResolver,
    StaticCatalog,
    get_all_objects,
    load_catalogs,
)


__all__ = [
    "CelestialObject",
    "ObjectResolver",
    "StaticCatalog",
    "get_all_objects",
    "load_catalogs",
]

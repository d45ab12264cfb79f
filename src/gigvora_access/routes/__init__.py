"""Route access registry for the Gigvora web application."""
from __future__ import annotations

from gigvora_access.routes.collections import ROUTE_COLLECTIONS
from gigvora_access.routes.registry import (
    RouteAccess,
    RouteEntry,
    create_route_id,
    flatten_routes,
    infer_title_from_path,
    to_absolute_path,
)

__all__ = [
    "ROUTE_COLLECTIONS",
    "RouteAccess",
    "RouteEntry",
    "create_route_id",
    "flatten_routes",
    "infer_title_from_path",
    "to_absolute_path",
]

"""Route administration helpers."""

from .service import create_route, delete_route, get_route, list_routes, route_stats, update_route

__all__ = [
    "list_routes",
    "get_route",
    "create_route",
    "update_route",
    "delete_route",
    "route_stats",
]

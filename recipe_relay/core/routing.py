from __future__ import annotations

from starlette.requests import Request


def safe_route_label(request: Request) -> str:
    """
    Return the route template (e.g. /recipe) for logs and metric labels.

    Falls back to "unmatched" when routing didn't match (404) or the request
    was served by a mount (static files), so raw paths never leak into labels.
    """

    route = request.scope.get("route")
    path = getattr(route, "path", None)
    if isinstance(path, str) and path:
        return path
    return "unmatched"

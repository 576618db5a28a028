from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, Union

from frontendlogging.conf import get_option


@dataclass(frozen=True)
class PluginStaticRoute:
    plugin_id: str
    directory: str


RouteSource = Union[Iterable[PluginStaticRoute], Callable[[], Iterable[PluginStaticRoute]]]


def get_routes_from_settings() -> Iterator[PluginStaticRoute]:
    for plugin_id, directory in get_option("FRONTEND_PLUGIN_STATIC_ROUTES"):
        yield PluginStaticRoute(plugin_id=plugin_id, directory=directory)


class PluginRouteRegistry:
    """
    Read-only, ordered view of the static asset directories of installed
    plugins. Iteration order is the order the routes were registered in and
    is what the location resolver uses to pick the first matching route.

    The registry holds on to ``routes`` rather than copying it, and reads it
    again on every iteration, so plugins installed later are picked up.
    ``routes`` is either a re-iterable collection (list, tuple, ...) or a
    zero-argument callable returning the current routes.
    """

    def __init__(self, routes: RouteSource = ()) -> None:
        self._routes = routes

    @classmethod
    def from_settings(cls) -> PluginRouteRegistry:
        return cls(get_routes_from_settings)

    def __iter__(self) -> Iterator[PluginStaticRoute]:
        routes = self._routes() if callable(self._routes) else self._routes
        return iter(routes)

    def get(self, plugin_id: str) -> Optional[PluginStaticRoute]:
        for route in self:
            if route.plugin_id == plugin_id:
                return route
        return None

    def __repr__(self) -> str:
        return f"<PluginRouteRegistry: {[r.plugin_id for r in self]!r}>"

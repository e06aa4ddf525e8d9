"""RouteTable — ordered routes plus the name index.

Routes are stored in an indexable list (first match wins at dispatch).
Registrars hold the table and an integer index, never the Route itself.
"""

import logging
from collections.abc import Iterator

from wren.routing.route import Route

logger = logging.getLogger("wren.routing")


class RouteTable:
    """Ordered routes and a name -> path template index."""

    __slots__ = ("_names", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._names: dict[str, str] = {}

    def append(self, route: Route) -> int:
        """Add *route* and return its index."""
        self._routes.append(route)
        if route.name is not None:
            self.set_name(route.name, route.path)
        return len(self._routes) - 1

    def set_name(self, name: str, path: str) -> None:
        """Point *name* at *path*. A duplicate name silently takes over."""
        previous = self._names.get(name)
        if previous is not None and previous != path:
            logger.warning("Route name %r reassigned from %r to %r", name, previous, path)
        self._names[name] = path

    def path_for(self, name: str) -> str | None:
        return self._names.get(name)

    @property
    def names(self) -> dict[str, str]:
        """A copy of the name index."""
        return dict(self._names)

    def __getitem__(self, index: int) -> Route:
        return self._routes[index]

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

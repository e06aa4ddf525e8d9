"""RouteRegistrar — post-registration handle on one route.

Returned by ``Router.add_route`` and the verb helpers for fluent chaining::

    router.get("/users", UserController.index).name("users.index").middleware("auth")
"""

from __future__ import annotations

from typing import Any

from wren.middleware.pipeline import as_refs
from wren.routing.route import Route
from wren.routing.table import RouteTable


class RouteRegistrar:
    """Mutates the table entry at ``index``; changes are visible immediately."""

    __slots__ = ("_index", "_table")

    def __init__(self, table: RouteTable, index: int) -> None:
        self._table = table
        self._index = index

    @property
    def route(self) -> Route:
        """The live route entry."""
        return self._table[self._index]

    def name(self, name: str) -> RouteRegistrar:
        """Name the route and register it in the name index."""
        route = self._table[self._index]
        route.name = name
        self._table.set_name(name, route.path)
        return self

    def middleware(self, *middleware: Any) -> RouteRegistrar:
        """Append middleware after any inherited from groups."""
        route = self._table[self._index]
        for mw in middleware:
            route.middleware.extend(as_refs(mw))
        return self

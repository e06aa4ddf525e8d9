"""Router — registration, group context, reverse lookup and dispatch.

Routes are matched in registration order; the first route whose method
and path template fit the request wins. No specificity scoring.

Registration is a bootstrap phase. After ``freeze()`` (or simply after
the last registration) the table is read-only, and ``handle()`` is safe
to call from several threads at once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from wren.config import AppConfig
from wren.controllers import ControllerResolver
from wren.error_pages import ErrorPages
from wren.errors import ConfigurationError, HTTPError
from wren.http.request import Request, normalize_path
from wren.http.response import Response
from wren.middleware.pipeline import (
    Pipeline,
    Resolver,
    as_refs,
    import_resolver,
    resolve_middleware,
)
from wren.negotiation import to_response
from wren.routing.groups import GroupContextStack, GroupFrame
from wren.routing.patterns import compile_path, match_path, substitute
from wren.routing.registrar import RouteRegistrar
from wren.routing.route import METHODS, Route, RouteMatch, coerce_action
from wren.routing.table import RouteTable

logger = logging.getLogger("wren.routing")

# (action, method, path suffix) in registration order; "create" precedes "{id}"
RESOURCE_ACTIONS: tuple[tuple[str, str, str], ...] = (
    ("index", "GET", ""),
    ("create", "GET", "/create"),
    ("store", "POST", ""),
    ("show", "GET", "/{id}"),
    ("edit", "GET", "/{id}/edit"),
    ("update", "PUT", "/{id}"),
    ("destroy", "DELETE", "/{id}"),
)


class Router:
    """Route table plus the machinery to fill it and dispatch against it.

    Usage::

        router = Router()
        router.get("/", lambda request: "Hello World")

        def admin(r: Router) -> None:
            r.get("/users", (AdminController, "users")).name("admin.users")

        router.group(prefix="admin", middleware=["auth"], body=admin)

        response = router.handle(Request.create("GET", "/admin/users"))
    """

    __slots__ = ("_controllers", "_errors", "_frozen", "_groups", "_resolver", "_table", "config")

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        resolver: Resolver | None = None,
        controllers: ControllerResolver | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self._resolver = resolver or import_resolver(self.config.middleware_aliases)
        self._controllers = controllers or ControllerResolver(self.config.controller_namespace)
        self._errors = ErrorPages(self.config)
        self._table = RouteTable()
        self._groups = GroupContextStack()
        self._frozen = False

    # -- Registration --

    def add_route(
        self,
        method: str,
        path: str,
        action: Any,
        name: str | None = None,
    ) -> RouteRegistrar:
        """Register a route under the currently open groups.

        The group prefix is prepended to *path* and the result normalized
        (one leading slash, no trailing slash except ``/``). Group
        middleware is inherited ahead of anything added later through the
        returned registrar.
        """
        if self._frozen:
            msg = f"Cannot add route {method} {path!r}: router is frozen."
            raise ConfigurationError(msg)

        verb = method.upper()
        if verb not in METHODS:
            msg = f"Unsupported HTTP method {method!r}. Use one of: {', '.join(sorted(METHODS))}"
            raise ConfigurationError(msg)

        full_path = normalize_path(self._groups.effective_prefix() + "/" + path.lstrip("/"))
        route = Route(
            method=verb,
            path=full_path,
            action=coerce_action(action),
            middleware=self._groups.effective_middleware(),
            name=name,
        )
        index = self._table.append(route)
        logger.debug("Registered %s %s%s", verb, full_path, f" as {name!r}" if name else "")
        return RouteRegistrar(self._table, index)

    def get(self, path: str, action: Any, name: str | None = None) -> RouteRegistrar:
        return self.add_route("GET", path, action, name)

    def post(self, path: str, action: Any, name: str | None = None) -> RouteRegistrar:
        return self.add_route("POST", path, action, name)

    def put(self, path: str, action: Any, name: str | None = None) -> RouteRegistrar:
        return self.add_route("PUT", path, action, name)

    def patch(self, path: str, action: Any, name: str | None = None) -> RouteRegistrar:
        return self.add_route("PATCH", path, action, name)

    def delete(self, path: str, action: Any, name: str | None = None) -> RouteRegistrar:
        return self.add_route("DELETE", path, action, name)

    def any(self, path: str, action: Any, name: str | None = None) -> RouteRegistrar:
        """Register a route that answers every HTTP method."""
        return self.add_route("ANY", path, action, name)

    @contextmanager
    def _group_scope(self, frame: GroupFrame) -> Iterator[Router]:
        self._groups.push(frame)
        try:
            yield self
        finally:
            self._groups.pop()

    def group(
        self,
        prefix: str = "",
        middleware: Any = (),
        body: Callable[[Router], Any] | None = None,
    ) -> Any:
        """Open a group: routes registered inside inherit *prefix* and *middleware*.

        With *body*, calls ``body(router)`` inside the group and closes it,
        even if *body* raises. Without *body*, returns a context manager::

            with router.group(prefix="api", middleware=[ApiKey()]) as api:
                api.get("/users", list_users)   # -> /api/users
        """
        refs = tuple(as_refs(middleware)) if middleware else ()
        frame = GroupFrame(prefix=prefix, middleware=refs)
        scope = self._group_scope(frame)
        if body is None:
            return scope
        with scope:
            body(self)
        return None

    def resource(
        self,
        name: str,
        controller: Any,
        *,
        only: Iterable[str] | None = None,
        except_: Iterable[str] | None = None,
    ) -> None:
        """Register the RESTful CRUD routes for *controller* under ``/name``.

        ===========  ======  ===================  ==============
        action       method  path                 route name
        ===========  ======  ===================  ==============
        index        GET     /name                name.index
        create       GET     /name/create         name.create
        store        POST    /name                name.store
        show         GET     /name/{id}           name.show
        edit         GET     /name/{id}/edit      name.edit
        update       PUT     /name/{id}           name.update
        destroy      DELETE  /name/{id}           name.destroy
        update       PATCH   /name/{id}           (unnamed)
        ===========  ======  ===================  ==============

        *only* and *except_* filter by action; unknown action names are ignored.
        """
        base = "/" + name.strip("/")
        wanted = set(only) if only is not None else {action for action, _, _ in RESOURCE_ACTIONS}
        wanted -= set(except_ or ())

        for action, method, suffix in RESOURCE_ACTIONS:
            if action not in wanted:
                continue
            self.add_route(method, base + suffix, (controller, action)).name(f"{name}.{action}")

        if "update" in wanted:
            self.patch(f"{base}/{{id}}", (controller, "update"))

    def api_resource(
        self,
        name: str,
        controller: Any,
        *,
        only: Iterable[str] | None = None,
        except_: Iterable[str] | None = None,
    ) -> None:
        """Like ``resource`` without the ``create`` and ``edit`` form routes."""
        self.resource(name, controller, only=only, except_=[*(except_ or ()), "create", "edit"])

    def freeze(self) -> None:
        """End registration and check every route's wiring.

        Compiles each path template, resolves each middleware reference
        and checks each controller action, so malformed templates, unknown
        middleware and missing controllers or methods raise
        ``ConfigurationError`` here instead of on the first request that
        reaches them.
        """
        for route in self._table:
            compile_path(route.path)
            for ref in route.middleware:
                resolve_middleware(ref, self._resolver)
            route.action.check(self._controllers)
        self._frozen = True

    # -- Introspection --

    @property
    def routes(self) -> tuple[Route, ...]:
        """Registered routes in match order."""
        return tuple(self._table)

    @property
    def names(self) -> dict[str, str]:
        """Route name -> path template."""
        return self._table.names

    @property
    def group_depth(self) -> int:
        return self._groups.depth

    # -- Reverse lookup --

    def url_for(self, name: str, params: Mapping[str, object] | None = None) -> str | None:
        """Build the path of a named route, or ``None`` for an unknown name.

        Placeholders without a value in *params* are left as ``{key}``.
        """
        template = self._table.path_for(name)
        if template is None:
            return None
        return substitute(template, params or {})

    resolve_name = url_for

    # -- Dispatch --

    def match(self, method: str, path: str) -> RouteMatch | None:
        """First route, in registration order, that fits *method* and *path*."""
        verb = method.upper()
        for route in self._table:
            if not route.allows(verb):
                continue
            params = match_path(route.path, path)
            if params is not None:
                logger.debug("Matched %s %s -> %s", verb, path, route.path)
                return RouteMatch(route=route, path_params=params)
        return None

    def handle(self, request: Request) -> Response:
        """Resolve *request* to a Response without sending it.

        Unmatched requests get the 404 page. ``HTTPError`` raised by
        middleware or the action becomes a response with its status;
        ``ConfigurationError`` propagates.
        """
        found = self.match(request.method, request.path)
        if found is None:
            logger.debug("No route for %s %s", request.method, request.path)
            return self._errors.not_found(request)

        route = found.route
        params = found.path_params
        request = request.with_path_params(params)

        def terminal(req: Request) -> Response:
            return to_response(route.action.invoke(req, params, self._controllers))

        try:
            result = (
                Pipeline(self._resolver)
                .send(request)
                .through(route.middleware)
                .then(terminal)
            )
        except HTTPError as exc:
            return self._errors.from_http_error(exc, request)
        return to_response(result)

    def dispatch(self, request: Request, write: Callable[[bytes], Any]) -> None:
        """``handle(request)`` then write the response bytes through *write*."""
        self.handle(request).send(write)

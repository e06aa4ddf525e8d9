"""Wren — the request-resolution core of a small synchronous web framework.

Match a request to a route, run the route's middleware, call its action,
turn the result into a response.

Basic usage::

    from wren import Request, Router

    router = Router()
    router.get("/", lambda request: "Hello World")
    router.get("/users/{id}", lambda request, id: {"id": id}).name("users.show")

    router.handle(Request.create("GET", "/users/42"))   # 200, {"id": "42"}
    router.url_for("users.show", {"id": "7"})            # "/users/7"
"""

__version__ = "0.1.0"
__all__ = [
    "AppConfig",
    "ConfigurationError",
    "ControllerResolver",
    "GroupStackError",
    "HTTPError",
    "Middleware",
    "Next",
    "NotFound",
    "Pipeline",
    "Request",
    "Response",
    "RouteRegistrar",
    "Router",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from wren.routing.router import Router

        return Router

    if name == "RouteRegistrar":
        from wren.routing.registrar import RouteRegistrar

        return RouteRegistrar

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "ControllerResolver":
        from wren.controllers import ControllerResolver

        return ControllerResolver

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name in ("Middleware", "Next"):
        from wren.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "Pipeline":
        from wren.middleware.pipeline import Pipeline

        return Pipeline

    if name in ("WrenError", "ConfigurationError", "GroupStackError", "HTTPError", "NotFound"):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

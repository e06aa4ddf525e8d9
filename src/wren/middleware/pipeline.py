"""Pipeline — onion-ordered middleware composition around a terminal handler.

One Pipeline per dispatch::

    response = (
        Pipeline(resolver)
        .send(request)
        .through([Registered(timing), ByIdentifier("auth")])
        .then(lambda req: action(req))
    )

The first middleware in the list runs outermost: its "before" code runs
first and its "after" code runs last.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from wren._internal.imports import import_string
from wren.errors import ConfigurationError
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.protocol import Middleware, MiddlewareFunc, Next

logger = logging.getLogger("wren.middleware")

# Maps a middleware identifier to an instance (or a class to instantiate).
# Raises ImportError or LookupError (e.g. KeyError) for an unknown identifier.
type Resolver = Callable[[str], Any]


@dataclass(frozen=True, slots=True)
class Registered:
    """A middleware supplied as a live object."""

    instance: Any


@dataclass(frozen=True, slots=True)
class ByIdentifier:
    """A middleware named by identifier, looked up at dispatch time."""

    name: str


type MiddlewareRef = Registered | ByIdentifier


def as_ref(middleware: Any) -> MiddlewareRef:
    """Coerce a user-supplied middleware value into a reference.

    Strings become ``ByIdentifier``; references pass through; anything
    else (instances, classes, functions) becomes ``Registered``.
    """
    match middleware:
        case Registered() | ByIdentifier():
            return middleware
        case str():
            return ByIdentifier(middleware)
        case _:
            return Registered(middleware)


def as_refs(middleware: Any) -> list[MiddlewareRef]:
    """Coerce one middleware value or an iterable of them into references."""
    if isinstance(middleware, str | Registered | ByIdentifier) or not isinstance(
        middleware, Iterable
    ):
        return [as_ref(middleware)]
    return [as_ref(mw) for mw in middleware]


def import_resolver(aliases: Mapping[str, str] | None = None) -> Resolver:
    """Build the default resolver: alias lookup, then import string."""
    table = dict(aliases or {})

    def resolve(name: str) -> Any:
        target = table.get(name, name)
        return import_string(target)

    return resolve


def _instantiate(obj: Any, label: str) -> Any:
    """Instantiate classes with no arguments; return other objects as-is."""
    if not inspect.isclass(obj):
        return obj
    try:
        return obj()
    except TypeError as exc:
        msg = f"Middleware {label!r} could not be instantiated without arguments: {exc}"
        raise ConfigurationError(msg) from exc


def resolve_middleware(ref: MiddlewareRef, resolver: Resolver) -> MiddlewareFunc:
    """Turn a middleware reference into a ``(request, next)`` callable.

    Raises ``ConfigurationError`` if the identifier cannot be resolved or
    the resolved object has neither a callable ``handle`` nor is callable.
    """
    match ref:
        case ByIdentifier(name=name):
            try:
                obj = resolver(name)
            except (ImportError, LookupError) as exc:
                msg = f"Middleware not found: {name!r} ({exc})"
                raise ConfigurationError(msg) from exc
            logger.debug("Resolved middleware %r -> %r", name, obj)
            instance = _instantiate(obj, name)
            label = name
        case Registered(instance=obj):
            label = getattr(obj, "__qualname__", type(obj).__qualname__)
            instance = _instantiate(obj, label)
        case _:
            msg = f"Invalid middleware reference: {ref!r}"
            raise ConfigurationError(msg)

    if isinstance(instance, Middleware) and callable(instance.handle):
        return instance.handle
    if callable(instance):
        return instance

    msg = (
        f"Middleware {label!r} must define handle(request, next) "
        f"or be callable as (request, next)."
    )
    raise ConfigurationError(msg)


class Pipeline:
    """Composes middleware around a terminal handler and runs it once.

    Not reused across requests.
    """

    __slots__ = ("_middleware", "_request", "_resolver")

    def __init__(self, resolver: Resolver | None = None) -> None:
        self._resolver = resolver or import_resolver()
        self._request: Request | None = None
        self._middleware: Sequence[MiddlewareRef] = ()

    def send(self, request: Request) -> Pipeline:
        """Set the request that enters the chain."""
        self._request = request
        return self

    def through(self, middleware: Iterable[Any]) -> Pipeline:
        """Set the middleware, outermost first."""
        self._middleware = [as_ref(mw) for mw in middleware]
        return self

    def then(self, terminal: Next) -> Response:
        """Build the chain around *terminal* and invoke it with the request."""
        if self._request is None:
            msg = "Pipeline.send(request) must be called before then()."
            raise RuntimeError(msg)

        handler: Next = terminal
        for ref in reversed(self._middleware):
            # Resolve while building so a bad identifier fails before any middleware runs
            mw = resolve_middleware(ref, self._resolver)

            def layer(
                req: Request,
                _mw: Callable[..., Response] = mw,
                _next: Next = handler,
            ) -> Response:
                return _mw(req, _next)

            handler = layer

        return handler(self._request)

"""Route, RouteMatch and the two action variants."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from wren.errors import ConfigurationError
from wren.http.request import Request
from wren.middleware.pipeline import MiddlewareRef

if TYPE_CHECKING:
    from wren.controllers import ControllerResolver

# ANY matches every request method
METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "ANY"})


@dataclass(frozen=True, slots=True)
class Invocable:
    """An action that is a plain callable: ``func(request, *params)``."""

    func: Callable[..., Any]

    def invoke(
        self,
        request: Request,
        params: Mapping[str, str],
        controllers: ControllerResolver,  # noqa: ARG002
    ) -> Any:
        return self.func(request, *params.values())

    def check(self, controllers: ControllerResolver) -> None:  # noqa: ARG002
        """Plain callables need no wiring."""


@dataclass(frozen=True, slots=True)
class ControllerAction:
    """An action naming a controller and one of its methods.

    *controller* is a class, an instance, or an import string; it is
    instantiated through the router's ``ControllerResolver`` on each call.
    """

    controller: Any
    method: str

    def check(self, controllers: ControllerResolver) -> None:
        """Raise ``ConfigurationError`` unless the controller resolves and has the method."""
        target = controllers.resolve(self.controller)
        if not callable(getattr(target, self.method, None)):
            msg = f"Method {self.method!r} not found in controller {_label(target)!r}"
            raise ConfigurationError(msg)

    def invoke(
        self,
        request: Request,
        params: Mapping[str, str],
        controllers: ControllerResolver,
    ) -> Any:
        instance = controllers.instantiate(self.controller)
        bound = getattr(instance, self.method, None)
        if not callable(bound):
            msg = f"Method {self.method!r} not found in controller {type(instance).__qualname__!r}"
            raise ConfigurationError(msg)
        return bound(request, *params.values())


def _label(target: Any) -> str:
    return getattr(target, "__qualname__", type(target).__qualname__)


type Action = Invocable | ControllerAction


def coerce_action(action: Any) -> Action:
    """Normalize a registration-time action value.

    Accepts an ``Invocable``/``ControllerAction``, a ``(controller, "method")``
    pair, or any callable. Raises ``ConfigurationError`` for anything else.
    """
    match action:
        case Invocable() | ControllerAction():
            return action
        case (controller, str(method)):
            return ControllerAction(controller, method)
        case _ if callable(action):
            return Invocable(action)
        case _:
            msg = (
                f"Invalid route action {action!r}: must be a callable "
                "or a (controller, 'method') pair."
            )
            raise ConfigurationError(msg)


@dataclass(slots=True)
class Route:
    """A registered route.

    Mutable only through its ``RouteRegistrar`` (name and middleware);
    method, path and action are fixed at registration.
    """

    method: str
    path: str
    action: Action
    middleware: list[MiddlewareRef] = field(default_factory=list)
    name: str | None = None

    def allows(self, method: str) -> bool:
        """True if this route answers *method*."""
        return self.method == "ANY" or self.method == method


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]

"""Controller resolution for ``(controller, "method")`` route actions.

The router only needs ``instantiate(identifier)``; how controllers are
built is pluggable through *factory* (e.g. a DI container).
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from wren._internal.imports import import_string
from wren.errors import ConfigurationError

logger = logging.getLogger("wren.routing")


class ControllerResolver:
    """Turns a controller identifier into an instance.

    Identifiers may be:
    - an instance — returned as-is
    - a class — built with *factory* (defaults to calling it with no args)
    - an import string — ``"myapp.controllers:UserController"``; when it
      doesn't import and a *namespace* is set, ``namespace + "." + identifier``
      is tried next (``"UserController"`` -> ``"myapp.controllers.UserController"``)
    """

    __slots__ = ("_factory", "namespace")

    def __init__(
        self,
        namespace: str = "",
        factory: Callable[[type], Any] | None = None,
    ) -> None:
        self.namespace = namespace.strip(".")
        self._factory = factory

    def instantiate(self, identifier: Any) -> Any:
        """Return a controller instance for *identifier*.

        Raises ``ConfigurationError`` if a string identifier cannot be
        imported or a class cannot be instantiated.
        """
        target = self.resolve(identifier)
        if not inspect.isclass(target):
            return target

        if self._factory is not None:
            return self._factory(target)
        try:
            return target()
        except TypeError as exc:
            msg = f"Controller {target.__qualname__!r} could not be instantiated: {exc}"
            raise ConfigurationError(msg) from exc

    def resolve(self, identifier: Any) -> Any:
        """Return the class or instance *identifier* names, without instantiating it."""
        return self._lookup(identifier) if isinstance(identifier, str) else identifier

    def _lookup(self, identifier: str) -> Any:
        candidates = [identifier]
        if self.namespace:
            candidates.append(f"{self.namespace}.{identifier}")

        errors: list[str] = []
        for candidate in candidates:
            try:
                obj = import_string(candidate)
            except ImportError as exc:
                errors.append(str(exc))
                continue
            logger.debug("Resolved controller %r -> %r", identifier, obj)
            return obj

        msg = f"Controller not found: {identifier!r} ({'; '.join(errors)})"
        raise ConfigurationError(msg)

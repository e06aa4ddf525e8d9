"""Wren exception hierarchy.

Shared across Router, Pipeline, registration and handlers so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when routes, middleware or controllers are wired incorrectly.

    Deterministic in registration-time input: unknown verbs, bad actions,
    unresolvable middleware or controllers, malformed path templates.
    Never converted to a response by the router.
    """


class GroupStackError(ConfigurationError):
    """Raised when a group context frame is popped with none pushed."""


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by middleware or route actions. ``Router.handle`` catches
    these and turns them into a response with the same status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 (conventional name in web frameworks)
    """404 — no route matched the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)

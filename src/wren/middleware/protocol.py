"""Middleware protocol and Next type alias.

A middleware is any object with a ``handle`` method::

    class Timing:
        def handle(self, request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = next(request)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")

or any plain callable with the same shape::

    def timing(request: Request, next: Next) -> Response: ...

No base class required. The pipeline checks the shape, not the lineage.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from wren.http.request import Request
from wren.http.response import Response

# The next handler in the middleware chain
type Next = Callable[[Request], Response]


@runtime_checkable
class Middleware(Protocol):
    """Protocol for class-based wren middleware.

    Call ``next(request)`` to continue the chain, or return a Response
    without calling it to short-circuit::

        class RequireToken:
            def handle(self, request: Request, next: Next) -> Response:
                if request.header("Authorization") is None:
                    return Response.unauthorized()
                return next(request)
    """

    def handle(self, request: Request, next: Next) -> Response: ...


# Closure-based middleware
type MiddlewareFunc = Callable[[Request, Next], Response]

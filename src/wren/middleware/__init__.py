"""Middleware — Protocol-based, no inheritance required.

A middleware is any object with ``handle(request, next) -> Response``
or any callable ``(request, next) -> Response``.

Built-in middleware:
    AuthMiddleware -- rejects requests without a valid credential header
"""

from wren.middleware.builtin import AuthConfig, AuthMiddleware
from wren.middleware.pipeline import ByIdentifier, Pipeline, Registered
from wren.middleware.protocol import Middleware, Next

__all__ = [
    "AuthConfig",
    "AuthMiddleware",
    "ByIdentifier",
    "Middleware",
    "Next",
    "Pipeline",
    "Registered",
]

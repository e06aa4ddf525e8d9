"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from http import HTTPStatus
from typing import Any

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"


def _reason(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Unknown"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = HTML_CONTENT_TYPE
    headers: tuple[tuple[str, str], ...] = ()

    # -- Factories --

    @classmethod
    def json(
        cls,
        data: Any,
        status: int = 200,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Serialize *data* as a JSON body."""
        body = json_module.dumps(data, ensure_ascii=False, separators=(",", ":"), default=str)
        return cls(
            body=body,
            status=status,
            content_type=JSON_CONTENT_TYPE,
            headers=tuple((headers or {}).items()),
        )

    @classmethod
    def redirect(cls, url: str, status: int = 302) -> Response:
        return cls(body="", status=status).with_header("Location", url)

    @classmethod
    def not_found(cls, body: str = "<h1>404 — Not Found</h1>") -> Response:
        return cls(body=body, status=404)

    @classmethod
    def unauthorized(cls, body: str = "<h1>401 — Unauthorized</h1>") -> Response:
        return cls(body=body, status=401)

    @classmethod
    def forbidden(cls, body: str = "<h1>403 — Forbidden</h1>") -> Response:
        return cls(body=body, status=403)

    @classmethod
    def server_error(cls, body: str = "<h1>500 — Server Error</h1>") -> Response:
        return cls(body=body, status=500)

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_body(self, body: str | bytes) -> Response:
        """Return a new Response with a different body."""
        return replace(self, body=body)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header.

        ``Content-Type`` replaces ``content_type`` instead of adding a pair.
        """
        if name.lower() == "content-type":
            return replace(self, content_type=value)
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        response = self
        for name, value in headers.items():
            response = response.with_header(name, value)
        return response

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Getters --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Last value set for *name* (case-insensitive), including Content-Type."""
        if name.lower() == "content-type":
            return self.content_type
        for key, value in reversed(self.headers):
            if key.lower() == name.lower():
                return value
        return default

    @property
    def all_headers(self) -> tuple[tuple[str, str], ...]:
        """Headers as they go on the wire, Content-Type first."""
        return (("Content-Type", self.content_type), *self.headers)

    @property
    def is_redirect(self) -> bool:
        return self.status in (301, 302, 303, 307, 308)

    @property
    def is_successful(self) -> bool:
        return 200 <= self.status < 300

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    # -- Sending --

    def send(self, write: Callable[[bytes], Any]) -> None:
        """Write the response as HTTP/1.1 bytes through *write*.

        Status line, headers (with ``Content-Length``), blank line, body.
        """
        body = self.body_bytes
        lines = [f"HTTP/1.1 {self.status} {_reason(self.status)}"]
        lines.extend(f"{name}: {value}" for name, value in self.all_headers)
        lines.append(f"Content-Length: {len(body)}")
        head = "\r\n".join(lines) + "\r\n\r\n"
        write(head.encode("latin-1") + body)

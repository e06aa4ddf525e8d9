"""Immutable HTTP request.

Frozen snapshot of method, path, query, body and headers. The router
reads ``method`` and ``path``; everything else is for actions and
middleware.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from wren.http.headers import Headers


def normalize_path(path: str) -> str:
    """Collapse to a single leading slash and drop trailing slashes.

    ``""`` and ``"///"`` both become ``"/"``.
    """
    return "/" + path.strip("/")


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` never includes the query string. ``path_params`` is empty
    until the router binds the parameters of the matched route onto a
    copy via ``with_path_params``.
    """

    method: str
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    body: Mapping[str, Any] = field(default_factory=dict)
    headers: Headers = field(default_factory=Headers)
    path_params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers(self.headers))

    # -- Factory --

    @classmethod
    def create(
        cls,
        method: str,
        target: str,
        *,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] = (),
        body: Mapping[str, Any] | None = None,
    ) -> Request:
        """Build a Request from a method and a request target.

        The query string is split off *target* and parsed; the remaining
        path is normalized with ``normalize_path``::

            Request.create("get", "/users/?page=2")
            # Request(method="GET", path="/users", query={"page": "2"}, ...)
        """
        parts = urlsplit(target)
        return cls(
            method=method,
            path=normalize_path(parts.path),
            query=dict(parse_qsl(parts.query, keep_blank_values=True)),
            body=dict(body or {}),
            headers=Headers(headers),
        )

    def with_path_params(self, params: Mapping[str, str]) -> Request:
        """Return a copy carrying the matched route's path parameters."""
        return replace(self, path_params=dict(params))

    # -- Computed properties --

    @property
    def uri(self) -> str:
        """The request path (alias used by routing code)."""
        return self.path

    @property
    def url(self) -> str:
        """Path plus the re-encoded query string."""
        if not self.query:
            return self.path
        qs = "&".join(f"{k}={v}" for k, v in self.query.items())
        return f"{self.path}?{qs}"

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def is_ajax(self) -> bool:
        """True when sent by ``XMLHttpRequest``."""
        return self.headers.get("x-requested-with") == "XMLHttpRequest"

    @property
    def expects_json(self) -> bool:
        """True when the client asked for JSON or the request is AJAX."""
        accept = self.headers.get("accept") or ""
        return "application/json" in accept or self.is_ajax

    def is_method(self, method: str) -> bool:
        return self.method == method.upper()

    # -- Input --

    def input(self, key: str, default: Any = None) -> Any:
        """Value from the body, falling back to the query string."""
        if key in self.body:
            return self.body[key]
        return self.query.get(key, default)

    def query_param(self, key: str, default: str | None = None) -> str | None:
        return self.query.get(key, default)

    def post(self, key: str, default: Any = None) -> Any:
        return self.body.get(key, default)

    def all(self) -> dict[str, Any]:
        """Query and body merged; body values win."""
        return {**self.query, **self.body}

    def only(self, keys: Iterable[str]) -> dict[str, Any]:
        merged = self.all()
        return {k: merged[k] for k in keys if k in merged}

    def except_(self, keys: Iterable[str]) -> dict[str, Any]:
        excluded = set(keys)
        return {k: v for k, v in self.all().items() if k not in excluded}

    def has(self, key: str) -> bool:
        return key in self.body or key in self.query

    def filled(self, key: str) -> bool:
        """True if *key* is present and not ``None`` or ``""``."""
        value = self.input(key)
        return value is not None and value != ""

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name, default)

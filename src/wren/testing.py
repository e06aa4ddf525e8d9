"""Test client for wren routers.

Uses the same Request and Response types as production. Calls
``Router.handle`` directly — no sockets, no byte parsing.
"""

from collections.abc import Mapping
from typing import Any

from wren.http.request import Request
from wren.http.response import Response
from wren.routing.router import Router


class TestClient:
    """Synchronous test client.

    Usage::

        client = TestClient(router)
        response = client.get("/users/42")
        assert response.status == 200
    """

    __test__ = False  # Tell pytest this is not a test class
    __slots__ = ("router",)

    def __init__(self, router: Router) -> None:
        self.router = router

    def request(
        self,
        method: str,
        target: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Response:
        """Send a request with any method."""
        return self.router.handle(
            Request.create(method, target, headers=headers or {}, body=body)
        )

    def get(self, target: str, *, headers: Mapping[str, str] | None = None) -> Response:
        return self.request("GET", target, headers=headers)

    def post(
        self,
        target: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Response:
        return self.request("POST", target, headers=headers, body=body)

    def put(
        self,
        target: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Response:
        return self.request("PUT", target, headers=headers, body=body)

    def patch(
        self,
        target: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Response:
        return self.request("PATCH", target, headers=headers, body=body)

    def delete(self, target: str, *, headers: Mapping[str, str] | None = None) -> Response:
        return self.request("DELETE", target, headers=headers)

    def options(self, target: str, *, headers: Mapping[str, str] | None = None) -> Response:
        return self.request("OPTIONS", target, headers=headers)

"""Built-in middleware: authentication gate.

Register it directly or by alias::

    aliases = {"auth": "wren.middleware.builtin:AuthMiddleware"}
    router = Router(AppConfig(middleware_aliases=aliases))
    with router.group(prefix="admin", middleware=["auth"]):
        ...
"""

from collections.abc import Callable
from dataclasses import dataclass

from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """Where the credential comes from and what happens without one.

    *verify* receives the raw header value; without it any non-empty
    value passes. With *redirect_to* set, browsers are redirected there
    instead of getting a 401. Requests that expect JSON always get a 401.
    """

    header: str = "Authorization"
    verify: Callable[[str], bool] | None = None
    redirect_to: str | None = None


class AuthMiddleware:
    """Short-circuits requests that carry no valid credential."""

    __slots__ = ("config",)

    def __init__(self, config: AuthConfig | None = None) -> None:
        self.config = config or AuthConfig()

    def _authenticated(self, request: Request) -> bool:
        credential = request.header(self.config.header)
        if not credential:
            return False
        if self.config.verify is None:
            return True
        return self.config.verify(credential)

    def handle(self, request: Request, next: Next) -> Response:
        if self._authenticated(request):
            return next(request)

        if request.expects_json:
            return Response.json({"error": "Unauthenticated"}, status=401)
        if self.config.redirect_to is not None:
            return Response.redirect(self.config.redirect_to)
        return Response.unauthorized()

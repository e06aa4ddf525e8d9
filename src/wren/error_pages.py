"""Error responses for unmatched routes and raised HTTPErrors.

The 404 page comes from a kida template when ``error_template_dir`` holds
``not_found_template``; otherwise from ``AppConfig.not_found_body``.
"""

import logging
from pathlib import Path

from kida import Environment, FileSystemLoader

from wren.config import AppConfig
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response

logger = logging.getLogger("wren.server")


class ErrorPages:
    """Builds error responses for one router.

    The kida environment is created on first use and reused afterward.
    """

    __slots__ = ("_config", "_env")

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._env: Environment | None = None

    def _template_path(self) -> Path | None:
        directory = self._config.error_template_dir
        if directory is None:
            return None
        path = Path(directory) / self._config.not_found_template
        return path if path.is_file() else None

    def _environment(self) -> Environment:
        if self._env is None:
            self._env = Environment(
                loader=FileSystemLoader(str(self._config.error_template_dir)),
                autoescape=True,
            )
        return self._env

    def not_found(self, request: Request) -> Response:
        """404 response for a request no route matched."""
        logger.debug("404 %s %s", request.method, request.path)
        if self._template_path() is not None:
            template = self._environment().get_template(self._config.not_found_template)
            body = template.render({"method": request.method, "path": request.path})
            return Response.not_found(body)

        body = self._config.not_found_body
        if self._config.debug:
            body = f"{body}\n<p>No route matches {request.method} {request.path}</p>"
        return Response.not_found(body)

    def from_http_error(self, exc: HTTPError, request: Request) -> Response:
        """Response for an HTTPError raised by an action or middleware."""
        logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
        if exc.status == 404 and exc.detail in ("", "Not Found"):
            response = self.not_found(request)
        else:
            detail = exc.detail or f"Error {exc.status}"
            if self._config.debug and exc.detail:
                detail = f"{exc.status}: {exc.detail}"
            response = Response(body=detail, status=exc.status)
        for name, value in exc.headers:
            response = response.with_header(name, value)
        return response

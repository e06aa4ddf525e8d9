"""Router configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(
            error_template_dir="templates/errors",
            middleware_aliases={"auth": "myapp.middleware:AuthMiddleware"},
        )
    """

    debug: bool = False

    # Error pages
    error_template_dir: str | Path | None = None
    not_found_template: str = "404.html"
    not_found_body: str = "<h1>404 — Page Not Found</h1>"

    # Controllers: module prefix tried when an identifier doesn't import as given
    controller_namespace: str = ""

    # Middleware: short name -> "package.module:Attr"
    middleware_aliases: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

"""Path template compilation.

A template is slash-delimited: literal segments match themselves,
``{name}`` segments match one or more characters other than ``/``::

    compile_path("/posts/{post}/comments/{comment}").fullmatch("/posts/1/comments/5")
"""

import re
from collections.abc import Mapping
from functools import lru_cache

from wren.errors import ConfigurationError

PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")

# A single placeholder segment never matches an empty segment or a slash
SEGMENT_PATTERN = r"[^/]+"


@lru_cache(maxsize=1024)
def compile_path(template: str) -> re.Pattern[str]:
    """Compile a path template into an anchored regex.

    Raises ``ConfigurationError`` for a segment with stray braces or a
    repeated placeholder name.
    """
    seen: set[str] = set()
    parts: list[str] = []
    for segment in template.split("/"):
        m = PLACEHOLDER.fullmatch(segment)
        if m is not None:
            name = m.group(1)
            if name in seen:
                msg = f"Duplicate placeholder {{{name}}} in route path {template!r}"
                raise ConfigurationError(msg)
            seen.add(name)
            parts.append(f"(?P<{name}>{SEGMENT_PATTERN})")
        elif "{" in segment or "}" in segment:
            msg = (
                f"Malformed placeholder {segment!r} in route path {template!r}. "
                "Placeholders must fill a whole segment: /users/{id}"
            )
            raise ConfigurationError(msg)
        else:
            parts.append(re.escape(segment))
    return re.compile("^" + "/".join(parts) + "$")


def match_path(template: str, path: str) -> dict[str, str] | None:
    """Match *path* against *template*; return bound params in template order."""
    m = compile_path(template).fullmatch(path)
    if m is None:
        return None
    return m.groupdict()


def substitute(template: str, params: Mapping[str, object]) -> str:
    """Replace ``{key}`` for every supplied key; leave the rest literal.

    Values are inserted raw, without URL-escaping.
    """

    def _replace(m: re.Match[str]) -> str:
        key = m.group(1)
        if key in params:
            return str(params[key])
        return m.group(0)

    return PLACEHOLDER.sub(_replace, template)

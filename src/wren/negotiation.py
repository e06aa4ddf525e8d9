"""Content negotiation — maps action return values to Response objects.

isinstance-based dispatch, no magic, fully predictable.
"""

import dataclasses
from typing import Any

from wren.http.response import Response


def to_response(value: Any) -> Response:
    """Convert a route action's return value to a Response.

    Dispatch order:

    1. ``Response``                  -> pass through
    2. ``None``                      -> empty 200
    3. ``str``                       -> 200, text/html
    4. ``bytes``                     -> 200, application/octet-stream
    5. ``dict`` / ``list`` / ``tuple`` -> 200, application/json
    6. dataclass instance            -> 200, application/json (``asdict``)
    7. anything else                 -> 200, ``str(value)``
    """
    match value:
        case Response():
            return value
        case None:
            return Response(body="")
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list() | tuple():
            return Response.json(value)
        case _ if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return Response.json(dataclasses.asdict(value))
        case _:
            return Response(body=str(value))

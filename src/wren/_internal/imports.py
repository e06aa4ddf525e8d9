"""Import-string resolution shared by middleware and controller lookup.

Accepts ``"package.module:Attr"`` and the dotted ``"package.module.Attr"``
form. Resolution failures are reported as ``ImportError`` so callers can
translate them into their own error type.
"""

import importlib
from typing import Any


def import_string(target: str) -> Any:
    """Resolve an import string to the object it names.

    Raises:
        ImportError: If the module cannot be imported, the attribute
            does not exist, or the string has no attribute part.
    """
    module_path, sep, attr_name = target.partition(":")
    if not sep:
        module_path, _, attr_name = target.rpartition(".")
    if not module_path or not attr_name:
        msg = f"{target!r} is not a 'module:attribute' import string"
        raise ImportError(msg)

    module = importlib.import_module(module_path)
    try:
        return getattr(module, attr_name)
    except AttributeError as exc:
        msg = f"Module {module_path!r} has no attribute {attr_name!r}"
        raise ImportError(msg) from exc

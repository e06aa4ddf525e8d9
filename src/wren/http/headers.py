"""Immutable, case-insensitive HTTP headers.

Implements ``Mapping[str, str]``. Stores name/value pairs in arrival
order; lookups compare names case-insensitively.
"""

from collections.abc import Iterable, Iterator, Mapping


def _normalize(name: str) -> str:
    return name.replace("_", "-").replace(" ", "-").lower()


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header.
    Underscores and spaces in names are treated as dashes, so
    ``X_Requested_With`` finds ``X-Requested-With``.
    """

    __slots__ = ("_raw",)

    def __init__(
        self,
        raw: Mapping[str, str] | Iterable[tuple[str, str]] = (),
    ) -> None:
        pairs = raw.items() if isinstance(raw, Mapping) else raw
        object.__setattr__(self, "_raw", tuple((str(k), str(v)) for k, v in pairs))

    def __getitem__(self, key: str) -> str:
        key_norm = _normalize(key)
        for name, value in self._raw:
            if _normalize(name) == key_norm:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_norm = _normalize(key)
        return any(_normalize(name) == key_norm for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = _normalize(name)
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        key_norm = _normalize(key)
        return [value for name, value in self._raw if _normalize(name) == key_norm]

    @property
    def raw(self) -> tuple[tuple[str, str], ...]:
        """Header pairs exactly as supplied."""
        return self._raw

"""Group context — prefix and middleware inherited by nested registrations.

Each ``Router.group(...)`` pushes a ``GroupFrame`` for the duration of
its body and pops it afterward, so every route registered inside picks
up the accumulated prefix and middleware, outermost group first.
"""

from dataclasses import dataclass

from wren.errors import GroupStackError
from wren.middleware.pipeline import MiddlewareRef


@dataclass(frozen=True, slots=True)
class GroupFrame:
    """One open group: its path prefix and middleware."""

    prefix: str = ""
    middleware: tuple[MiddlewareRef, ...] = ()


class GroupContextStack:
    """LIFO stack of open group frames."""

    __slots__ = ("_frames",)

    def __init__(self) -> None:
        self._frames: list[GroupFrame] = []

    def push(self, frame: GroupFrame) -> None:
        self._frames.append(frame)

    def pop(self) -> GroupFrame:
        """Remove and return the innermost frame.

        Raises ``GroupStackError`` if no frame is open.
        """
        if not self._frames:
            msg = "Group context stack is empty: pop() without a matching push()."
            raise GroupStackError(msg)
        return self._frames.pop()

    @property
    def depth(self) -> int:
        return len(self._frames)

    def effective_prefix(self) -> str:
        """``/a/b`` for frames ``a`` then ``b``; empty prefixes are skipped."""
        return "".join(
            "/" + frame.prefix.strip("/") for frame in self._frames if frame.prefix.strip("/")
        )

    def effective_middleware(self) -> list[MiddlewareRef]:
        """All frames' middleware, outermost frame first."""
        return [mw for frame in self._frames for mw in frame.middleware]

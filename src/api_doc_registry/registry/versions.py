"""Which API versions a handler belongs to."""

from typing import Callable, Iterable


class VersionResolver:
    """Resolves a handler's versions, walking up its ancestry when needed.

    Args:
        parent: returns a handler's parent, or None at the top.
        is_root: True for the base handler (and for None).
        default_version: the answer when nothing in the chain declares versions.
    """

    def __init__(self, parent: Callable, is_root: Callable, default_version: str):
        self._parent = parent
        self._is_root = is_root
        self.default_version = default_version
        self._declared: dict = {}

    def declare(self, handler, versions: Iterable[str]) -> None:
        self._declared[handler] = list(dict.fromkeys(versions))

    def declared(self, handler) -> list[str]:
        return list(self._declared.get(handler, []))

    def resolve(self, handler) -> list[str]:
        """Versions declared by the handler or its nearest declaring ancestor."""
        while True:
            if handler is None:
                return [self.default_version]
            declared = self._declared.get(handler)
            if declared:
                return list(declared)
            if self._is_root(handler):
                return [self.default_version]
            handler = self._parent(handler)

    def reset(self) -> None:
        self._declared.clear()

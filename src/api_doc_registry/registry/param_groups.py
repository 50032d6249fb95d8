"""Reusable, named parameter-schema fragments.

A group is stored as a builder returning a list of ParamDsl. Builders are
only called when a method description is built, so a group may refer to
another group that gets defined later.
"""

from typing import Callable

from api_doc_registry.errors import ParamGroupNotDefined
from api_doc_registry.registry.dsl import ParamDsl

ParamGroupBuilder = Callable[[], list[ParamDsl]]


class ParamGroupRegistry:
    def __init__(self, name_of: Callable):
        self._name_of = name_of
        self._groups: dict[str, ParamGroupBuilder] = {}

    def _key(self, handler, name: str) -> str:
        handler_name = handler if isinstance(handler, str) else self._name_of(handler)
        return f"{handler_name}#{name}"

    def define(self, handler, name: str, builder: ParamGroupBuilder) -> None:
        self._groups[self._key(handler, name)] = builder

    def get(self, handler, name: str) -> ParamGroupBuilder:
        key = self._key(handler, name)
        if key not in self._groups:
            raise ParamGroupNotDefined(key)
        return self._groups[key]

    def expand(self, handler, name: str) -> list[ParamDsl]:
        return list(self.get(handler, name)())

    def __contains__(self, key: str) -> bool:
        return key in self._groups

    def __len__(self) -> int:
        return len(self._groups)

    def reset(self) -> None:
        self._groups.clear()

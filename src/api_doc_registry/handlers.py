"""Handler identity adapter.

The registry never inspects the web framework directly. Everything it
needs to know about a handler (its name, its parent, where it lives in the
URL space) goes through a HandlerAdapter.
"""

import re

HANDLER_SUFFIXES = ("Controller", "Handler")


class HandlerAdapter:
    """Describes handlers implemented as Python classes.

    Args:
        root: the base handler class. It terminates ancestry walks and
            never yields a resource name. Defaults to ``object``.
    """

    def __init__(self, root: type = object):
        self.root = root

    def is_handler(self, obj) -> bool:
        return isinstance(obj, type)

    def is_root(self, handler) -> bool:
        return handler is None or handler is self.root

    def name(self, handler) -> str:
        """``module.QualName``, as used in ignore lists and param-group keys."""
        return f"{handler.__module__}.{handler.__qualname__}"

    def parent(self, handler):
        """Immediate ancestor, or None once the root is reached."""
        if self.is_root(handler):
            return None
        bases = handler.__bases__
        return bases[0] if bases else None

    def short_name(self, handler) -> str:
        """``WidgetsHandler`` -> ``widgets``, ``ApiKeysController`` -> ``api_keys``."""
        name = handler.__name__
        for suffix in HANDLER_SUFFIXES:
            if name.endswith(suffix) and name != suffix:
                name = name[: -len(suffix)]
                break
        return _snake_case(name)

    def path(self, handler) -> str | None:
        """Handler location such as ``api/v2/admin/widgets``, if it declares one."""
        return vars(handler).get("handler_path")


def _snake_case(name: str) -> str:
    name = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name).lower()

"""Resolve registered handler methods against the live routing table.

The routing table belongs to the web framework and is only read here.
Route targets may be wrapped in mounted sub-applications; they are
unwrapped until something answers ``handler_for``.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

import structlog

from api_doc_registry.config import DocConfig
from api_doc_registry.errors import VerbClassificationError

logger = structlog.get_logger(__name__)

API_METHODS = ("GET", "POST", "PUT", "PATCH", "OPTIONS", "DELETE")

FORMAT_SUFFIX = "(.:format)"


@dataclass(frozen=True)
class HandlerTarget:
    """Route target dispatching straight to a handler."""

    handler: Any

    def handler_for(self, defaults: dict) -> Any:
        return self.handler


@dataclass(frozen=True)
class MountedApp:
    """Route target delegating to a nested routable (constraints, namespaces, mounts)."""

    app: Any


@dataclass(frozen=True)
class RouteEntry:
    """One routing-table record.

    Attributes:
        path: path pattern, e.g. ``/api/v1/widgets/:id(.:format)``.
        verb: verb pattern, e.g. ``GET`` or ``GET|POST``.
        app: route target (HandlerTarget, MountedApp or anything shaped like them).
        defaults: route defaults; ``action`` names the handler method.
        constraints: route constraints; ``method`` pins a single verb.
    """

    path: str
    verb: str
    app: Any
    defaults: dict = field(default_factory=dict)
    constraints: dict = field(default_factory=dict)

    @property
    def action(self) -> str | None:
        return self.defaults.get("action")


@dataclass(frozen=True)
class ResolvedRoute:
    path: str
    verb: str

    def to_json(self) -> dict:
        return {"path": self.path, "verb": self.verb}


class RoutingTable(Protocol):
    """What the resolver needs from the framework's router."""

    @property
    def routes(self) -> list[RouteEntry]: ...

    def reload(self) -> None: ...


class StaticRoutingTable:
    """Routing table backed by a list, optionally filled by a loader on reload."""

    def __init__(self, routes: list[RouteEntry] | None = None,
                 loader: Callable[[], list[RouteEntry]] | None = None):
        self._routes = list(routes or [])
        self._loader = loader

    @property
    def routes(self) -> list[RouteEntry]:
        return self._routes

    def reload(self) -> None:
        if self._loader is not None:
            self._routes = list(self._loader())


def route_handler(route: RouteEntry):
    """Unwrap nested targets until one names a handler; None if none does."""
    target = route.app
    seen = set()
    while target is not None and id(target) not in seen:
        seen.add(id(target))
        if hasattr(target, "handler_for"):
            return target.handler_for(route.defaults)
        target = getattr(target, "app", None)
    return None


class RouteResolver:
    """Finds the API routes reaching a handler action and normalizes them."""

    def __init__(self, table: RoutingTable, config: DocConfig | None = None):
        self.table = table
        self.config = config or DocConfig()
        self._api_routes: list[RouteEntry] | None = None

    def api_routes(self) -> list[RouteEntry]:
        """Routes under any configured API base URL. Loaded once until invalidated."""
        if self._api_routes is None:
            if not self.table.routes:
                logger.info("routing_table_reload")
                self.table.reload()

            prefixes = "|".join(re.escape(url) for url in self.config.api_base_url.values())
            regex = re.compile(rf"\A(?:{prefixes})")
            self._api_routes = [r for r in self.table.routes if regex.match(r.path)]
            logger.debug("api_routes_loaded", count=len(self._api_routes))
        return self._api_routes

    def invalidate(self) -> None:
        self._api_routes = None

    def resolve_routes_for(self, handler, method_name) -> list[ResolvedRoute]:
        method_name = str(method_name)
        routes = [
            r for r in self.api_routes()
            if route_handler(r) == handler and r.action == method_name
        ]
        return [ResolvedRoute(path=self.normalize_path(r.path), verb=self.human_verb(r)) for r in routes]

    def normalize_path(self, path: str) -> str:
        """Drop base-URL prefixes, the optional format suffix and group parentheses."""
        for base_url in self.config.api_base_url.values():
            path = path.replace(f"{base_url}/", "/")
        path = path.replace(FORMAT_SUFFIX, "")
        return path.replace("(", "").replace(")", "")

    def human_verb(self, route: RouteEntry) -> str:
        """The single HTTP verb a route answers to.

        Raises:
            VerbClassificationError: the route maps to no verb or to several,
                or its verb pattern is malformed.
        """
        try:
            pattern = re.compile(_normalize_verb_pattern(route.verb))
        except re.error as e:
            raise VerbClassificationError(route.path) from e
        verbs = [v for v in API_METHODS if pattern.fullmatch(v)]
        if len(verbs) != 1:
            verbs = [v for v in API_METHODS if v == route.constraints.get("method")]
            if not verbs:
                raise VerbClassificationError(route.path)
        return verbs[0]


def _normalize_verb_pattern(verb: str | None) -> str:
    pattern = verb or ""
    if pattern.startswith("^"):
        pattern = pattern[1:]
    if pattern.endswith("$"):
        pattern = pattern[:-1]
    return pattern

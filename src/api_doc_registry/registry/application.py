"""The versioned metadata registry.

Handler discovery registers resources and methods here; rendering and the
checksum coordinator read from it. The registry does no locking: all
registration (and ``reset``) must finish before concurrent lookups start,
and a rebuild has to be serialized against readers by the caller.
"""

import structlog

from api_doc_registry.config import DocConfig
from api_doc_registry.errors import ResolutionError
from api_doc_registry.handlers import HandlerAdapter
from api_doc_registry.registry.descriptions import MethodDescription, ResourceDescription
from api_doc_registry.registry.dsl import MethodDsl, ResourceDsl
from api_doc_registry.registry.param_groups import ParamGroupBuilder, ParamGroupRegistry
from api_doc_registry.registry.versions import VersionResolver

logger = structlog.get_logger(__name__)

SEPARATOR = "#"


class MetadataRegistry:
    """Resource and method descriptions organized by API version.

    Args:
        config: registry settings; defaults to ``DocConfig()``.
        handlers: adapter describing handlers; defaults to a class-based adapter.
        route_resolver: used when rendering methods documented with ``api_from_routes``.
    """

    def __init__(self, config: DocConfig | None = None, handlers: HandlerAdapter | None = None,
                 route_resolver=None):
        self.config = config or DocConfig()
        self.handlers = handlers or HandlerAdapter()
        self.route_resolver = route_resolver
        self.versions = VersionResolver(
            parent=self.handlers.parent,
            is_root=self.handlers.is_root,
            default_version=self.config.default_version,
        )
        self.param_groups = ParamGroupRegistry(self.handlers.name)
        self._index: dict[str, dict[str, ResourceDescription]] = {}
        self._resource_names: dict = {}

    def reset(self) -> None:
        """Forget everything registered so far."""
        self._index = {}
        self._resource_names = {}
        self.param_groups.reset()
        self.versions.reset()
        logger.debug("registry_reset")

    # -- registration -------------------------------------------------------

    def available_versions(self) -> list[str]:
        return sorted(self._index)

    def set_resource_name(self, handler, name: str) -> None:
        self._resource_names[handler] = name

    def declare_versions(self, handler, versions) -> None:
        self.versions.declare(handler, versions)

    def add_param_group(self, handler, name: str, builder: ParamGroupBuilder) -> None:
        self.param_groups.define(handler, name, builder)

    def get_param_group(self, handler, name: str) -> ParamGroupBuilder:
        return self.param_groups.get(handler, name)

    def define_method(self, handler, method_name, dsl: MethodDsl | None = None) -> MethodDescription | None:
        """Register a method under each of its versions.

        One MethodDescription is created per version. The one built for the
        first version processed is returned.
        """
        if self.ignored(handler, method_name):
            return None

        dsl = dsl or MethodDsl()
        versions = dsl.api_versions or self.versions.resolve(handler)
        resource_name = self.derive_resource_name(handler)

        def expand_group(group_name):
            return self.param_groups.expand(handler, group_name)

        first = None
        for version in versions:
            resource = self.lookup_resource(f"{version}{SEPARATOR}{resource_name}")
            if resource is None:
                resource = self.define_resource(handler, version)
            if resource is None:
                continue

            method_description = MethodDescription(method_name, resource, dsl, expand_group=expand_group)
            resource.add_method(method_description)
            logger.debug("method_defined", version=version, resource=resource.name, method=method_description.name)
            if first is None:
                first = method_description

        return first

    def define_resource(self, handler, version: str, dsl: ResourceDsl | None = None) -> ResourceDescription | None:
        """Create the resource for ``version``, or merge ``dsl`` into an existing one."""
        if self.ignored(handler):
            return None

        resource_name = self.derive_resource_name(handler)
        if resource_name is None:
            return None

        resources = self._index.setdefault(version, {})
        resource = resources.get(resource_name)
        if resource is not None:
            if dsl is not None:
                resource.update_from_dsl(dsl)
            return resource

        resource = ResourceDescription(handler, resource_name, version, dsl)
        resources[resource_name] = resource
        logger.debug("resource_defined", version=version, resource=resource_name)
        return resource

    def remove_method(self, resource_ref, versions, method_name) -> None:
        resource_name = self.derive_resource_name(resource_ref)
        for version in versions:
            resource = self.lookup_resource(f"{version}{SEPARATOR}{resource_name}")
            if resource is not None and resource.remove_method(method_name) is not None:
                logger.debug("method_removed", version=version, resource=resource_name, method=str(method_name))

    # -- lookup ---------------------------------------------------------------

    def lookup_method(self, resource_ref, method_name=None) -> MethodDescription | None:
        """Find a method description.

        ``resource_ref`` is either a handler (``method_name`` required) or a
        string: ``"widgets#show"``, ``"v2#widgets#show"``, or ``"v2#widgets"``
        together with ``method_name``.
        """
        if isinstance(resource_ref, str):
            crumbs = resource_ref.split(SEPARATOR)
            if method_name is None:
                method_name = crumbs.pop()
            resource = self.lookup_resource(SEPARATOR.join(crumbs))
        elif self.handlers.is_handler(resource_ref):
            resource = self.lookup_resource(resource_ref)
        else:
            raise ResolutionError(f"Resource {resource_ref!r} does not exist.")

        if resource is None:
            return None
        return resource.method(method_name)

    __getitem__ = lookup_method

    def lookup_resource(self, resource_ref, version: str | None = None) -> ResourceDescription | None:
        """Find a resource by ``"name"``, ``"version#name"`` or handler."""
        if isinstance(resource_ref, str):
            crumbs = resource_ref.split(SEPARATOR)
            if len(crumbs) == 2:
                version = crumbs[0]
            version = version or self.config.default_version
            return self._index.get(version, {}).get(crumbs[-1])

        resource_name = self.derive_resource_name(resource_ref)
        if resource_name is None:
            return None
        if version:
            resource_name = f"{version}{SEPARATOR}{resource_name}"

        resource = self.lookup_resource(resource_name)
        # a same-named resource owned by another handler is not a match
        if resource is not None and resource.handler == resource_ref:
            return resource
        return None

    def lookup_all_versions(self, resource_ref) -> list[ResourceDescription]:
        found = [self.lookup_resource(resource_ref, version) for version in self.available_versions()]
        return [r for r in found if r is not None]

    def lookup_all_method_versions(self, resource_ref, method_name) -> list[MethodDescription]:
        found = [r.method(method_name) for r in self.lookup_all_versions(resource_ref)]
        return [m for m in found if m is not None]

    def derive_resource_name(self, handler) -> str | None:
        """Resource name for a handler (strings are already names).

        Raises:
            ResolutionError: ``handler`` is neither a string nor a handler.
        """
        if isinstance(handler, str):
            return handler
        if not self.handlers.is_handler(handler):
            raise ResolutionError(f"Can not resolve resource {handler!r} name.")
        if handler in self._resource_names:
            return self._resource_names[handler]
        if self.handlers.is_root(handler):
            return None

        path = self.handlers.path(handler)
        if self.config.namespaced_resources and path:
            return path.replace(self._version_prefix(handler), "").replace("/", "-")
        return self.handlers.short_name(handler)

    def _version_prefix(self, handler) -> str:
        version = self.versions.resolve(handler)[0]
        base_url = self.config.api_base_url_for(version)
        if base_url is None:
            return "/"
        return base_url[1:] + "/"

    # -- policy ---------------------------------------------------------------

    def ignored(self, handler, method_name=None) -> bool:
        name = handler if isinstance(handler, str) else self.handlers.name(handler)
        if name in self.config.ignored:
            return True
        return method_name is not None and f"{name}{SEPARATOR}{method_name}" in self.config.ignored

    def active_dsl(self) -> bool:
        """Whether annotations need interpreting at all in this setup."""
        config = self.config
        return config.validate_params or not config.use_cache or config.force_dsl

    @property
    def locale(self) -> str | None:
        if self.config.locale is None:
            return None
        return self.config.locale(None)

    @locale.setter
    def locale(self, value: str | None) -> None:
        if self.config.locale is not None:
            self.config.locale(value)

    def translate(self, text, lang: str | None = None):
        if self.config.translate is None:
            return text
        return self.config.translate(text, lang)

    # -- rendering ------------------------------------------------------------

    def routes_for(self, handler, method_name) -> list:
        if self.route_resolver is None:
            return []
        return self.route_resolver.resolve_routes_for(handler, method_name)

    def to_json(self, version: str, resource_name: str | None = None, method_name=None,
                lang: str | None = None) -> dict | None:
        """Documentation tree for one version, or None for an unknown version."""
        if version not in self._index:
            return None

        if not resource_name:
            # resources without methods (base handlers and the like) stay hidden
            resources = {
                name: resource.to_json(self, lang=lang)
                for name, resource in self._index[version].items()
                if resource.methods
            }
        else:
            resource = self._index[version].get(resource_name)
            resources = [resource.to_json(self, method_name, lang)] if resource is not None else []

        url_args = version if self.config.version_in_url else ""
        return {
            "docs": {
                "name": self.config.app_name,
                "info": self.translate(self.config.app_info.get(version), lang),
                "copyright": self.config.copyright,
                "doc_url": self.config.full_doc_url(url_args),
                "api_url": self.config.api_base_url_for(version),
                "resources": resources,
            }
        }

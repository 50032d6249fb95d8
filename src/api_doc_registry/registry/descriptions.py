"""Documentation entities held by the MetadataRegistry.

A ResourceDescription is one resource within one version and owns its
MethodDescriptions by name. A method visible in several versions gets one
MethodDescription per version, each bound to that version's resource.

Rendering goes through ``to_json(registry, ...)``; the registry supplies
URLs, translations and route lookups so these classes stay free of
configuration.
"""

from typing import Callable

from api_doc_registry.registry.dsl import MethodDsl, ParamDsl, ResourceDsl

GroupExpander = Callable[[str], list[ParamDsl]]


class ParamDescription:
    """One node of a method's parameter schema."""

    def __init__(self, dsl: ParamDsl, method_description: "MethodDescription",
                 parent: "ParamDescription | None" = None,
                 expand_group: GroupExpander | None = None):
        self.name = dsl.name
        self.param_type = dsl.param_type
        self.required = dsl.required
        self.description = dsl.description
        self.missing_message = dsl.missing_message
        self.allow_nil = dsl.allow_nil
        self.method_description = method_description
        self.parent = parent

        child_dsls = list(dsl.params)
        for group in dsl.param_groups:
            child_dsls.extend(expand_group(group))
        self.params = [
            ParamDescription(child, method_description, parent=self, expand_group=expand_group)
            for child in child_dsls
        ]

    @property
    def parents_path(self) -> list[str]:
        """Names from the schema root down to this parameter."""
        path = []
        node = self
        while node is not None:
            path.insert(0, node.name)
            node = node.parent
        return path

    @property
    def full_name(self) -> str:
        """``user[address][city]`` style name used in forms and messages."""
        head, *rest = self.parents_path
        return head + "".join(f"[{name}]" for name in rest)

    def param(self, name: str) -> "ParamDescription | None":
        return next((p for p in self.params if p.name == name), None)

    def to_json(self, translate, lang: str | None = None) -> dict:
        data = {
            "name": self.name,
            "full_name": self.full_name,
            "description": translate(self.description, lang),
            "required": self.required,
            "allow_nil": self.allow_nil,
            "expected_type": self.param_type,
        }
        if self.params:
            data["params"] = [p.to_json(translate, lang) for p in self.params]
        return data

    def __repr__(self) -> str:
        return f"<ParamDescription {self.full_name}>"


class MethodDescription:
    """Documentation of one operation of a resource within one version."""

    def __init__(self, name: str, resource: "ResourceDescription", dsl: MethodDsl | None = None,
                 expand_group: GroupExpander | None = None):
        dsl = dsl or MethodDsl()
        self.name = str(name)
        self.resource = resource
        self.short_description = dsl.short_description
        self.full_description = dsl.full_description
        self.apis = list(dsl.apis)
        self.api_from_routes = dsl.api_from_routes
        self.errors = list(dsl.errors)
        self.formats = list(dsl.formats) or list(resource.formats)
        self.examples = list(dsl.examples)
        self.see = list(dsl.see)
        self.deprecated = dsl.deprecated
        self.metadata = dsl.metadata

        param_dsls = list(dsl.params)
        for group in dsl.param_groups:
            param_dsls.extend(expand_group(group))
        self.params = [ParamDescription(p, self, expand_group=expand_group) for p in param_dsls]

    @property
    def version(self) -> str:
        return self.resource.version

    @property
    def parents_path(self) -> list[str]:
        # top-level params have no ancestors
        return []

    def param(self, name: str) -> ParamDescription | None:
        return next((p for p in self.params if p.name == name), None)

    def doc_url(self, registry) -> str:
        return f"{self.resource.doc_url(registry)}/{self.name}"

    def to_json(self, registry, lang: str | None = None) -> dict:
        translate = registry.translate
        api_base = registry.config.api_base_url_for(self.version) or ""

        apis = [
            {
                "api_url": f"{api_base}{api.path}",
                "http_method": api.http_method,
                "short_description": translate(api.short_description, lang),
            }
            for api in self.apis
        ]
        if self.api_from_routes:
            for route in registry.routes_for(self.resource.handler, self.name):
                apis.append({
                    "api_url": f"{api_base}{route.path}",
                    "http_method": route.verb,
                    "short_description": translate(self.short_description, lang),
                })

        return {
            "doc_url": self.doc_url(registry),
            "name": self.name,
            "apis": apis,
            "formats": self.formats,
            "full_description": translate(self.full_description, lang),
            "errors": [{"code": e.code, "description": translate(e.description, lang)} for e in self.errors],
            "params": [p.to_json(translate, lang) for p in self.params],
            "examples": self.examples,
            "metadata": self.metadata,
            "see": self.see,
            "deprecated": self.deprecated,
        }

    def __repr__(self) -> str:
        return f"<MethodDescription {self.version}#{self.resource.name}#{self.name}>"


class ResourceDescription:
    """One API resource within one version."""

    def __init__(self, handler, name: str, version: str, dsl: ResourceDsl | None = None):
        self.handler = handler
        self.name = name
        self.version = version
        self.short_description = None
        self.full_description = None
        self.formats: list[str] = []
        self.deprecated = False
        self.metadata = None
        self.order = None
        self._methods: dict[str, MethodDescription] = {}
        if dsl is not None:
            self.update_from_dsl(dsl)

    def update_from_dsl(self, dsl: ResourceDsl) -> None:
        """Merge annotations; fields the DSL leaves unset keep their value."""
        for field in ("short_description", "full_description", "formats", "deprecated", "metadata", "order"):
            value = getattr(dsl, field)
            if value is not None:
                setattr(self, field, value)

    @property
    def methods(self) -> list[MethodDescription]:
        return list(self._methods.values())

    def method(self, name) -> MethodDescription | None:
        return self._methods.get(str(name))

    def add_method(self, method_description: MethodDescription) -> None:
        self._methods[method_description.name] = method_description

    def remove_method(self, name) -> MethodDescription | None:
        return self._methods.pop(str(name), None)

    @property
    def display_name(self) -> str:
        return self.name.replace("-", " ").replace("_", " ").title()

    def doc_url(self, registry) -> str:
        if registry.config.version_in_url:
            return registry.config.full_doc_url(f"{self.version}/{self.name}")
        return registry.config.full_doc_url(self.name)

    def to_json(self, registry, method_name=None, lang: str | None = None) -> dict:
        translate = registry.translate
        methods = self.methods
        if method_name is not None:
            methods = [m for m in methods if m.name == str(method_name)]

        return {
            "doc_url": self.doc_url(registry),
            "id": self.name,
            "api_url": registry.config.api_base_url_for(self.version),
            "name": self.display_name,
            "short_description": translate(self.short_description, lang),
            "full_description": translate(self.full_description, lang),
            "version": self.version,
            "formats": self.formats,
            "metadata": self.metadata,
            "deprecated": self.deprecated,
            "methods": [m.to_json(registry, lang) for m in methods],
        }

    def __repr__(self) -> str:
        return f"<ResourceDescription {self.version}#{self.name}>"

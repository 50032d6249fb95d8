"""Annotation payloads collected from handler code.

Handler discovery turns annotations into these models and hands them to
the MetadataRegistry. They mirror what a developer writes next to a
handler and carry no registry state.
"""

from typing import Any, Callable

from pydantic import BaseModel


class ParamDsl(BaseModel):
    """A declared request parameter, possibly with nested children."""

    name: str
    param_type: str = "string"  # string / integer / boolean / array / object
    required: bool = False
    description: str = ""
    missing_message: str | Callable[[], str] | None = None
    allow_nil: bool = False
    params: list["ParamDsl"] = []  # children for object/array params
    param_groups: list[str] = []  # groups expanded into this param's children


class ApiDsl(BaseModel):
    """An explicitly documented path for a method."""

    http_method: str
    path: str
    short_description: str = ""


class ErrorDsl(BaseModel):
    code: int
    description: str = ""


class MethodDsl(BaseModel):
    api_versions: list[str] = []
    apis: list[ApiDsl] = []
    api_from_routes: bool = False
    short_description: str = ""
    full_description: str = ""
    params: list[ParamDsl] = []
    param_groups: list[str] = []
    errors: list[ErrorDsl] = []
    formats: list[str] = []
    examples: list[str] = []
    see: list[str] = []
    deprecated: bool = False
    metadata: dict[str, Any] | None = None


class ResourceDsl(BaseModel):
    """Resource-level annotations. Unset fields never override earlier ones."""

    short_description: str | None = None
    full_description: str | None = None
    formats: list[str] | None = None
    deprecated: bool | None = None
    metadata: dict[str, Any] | None = None
    order: int | None = None

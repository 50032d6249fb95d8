"""Configuration for the documentation registry.

Values come from code or from a YAML file; callbacks (locale, translate)
can only be set in code.
"""

from pathlib import Path
from typing import Callable

import yaml
from pydantic import BaseModel, ValidationError

from api_doc_registry.errors import ConfigError


class DocConfig(BaseModel):
    """Registry-wide settings consumed as read-only lookups."""

    app_name: str = "Another API"
    copyright: str | None = None
    app_info: dict[str, str] = {}  # version -> description
    default_version: str = "1.0"
    api_base_url: dict[str, str] = {"1.0": "/api"}  # version -> prefix
    doc_base_url: str = "/apipie"
    version_in_url: bool = True
    ignored: list[str] = []  # "pkg.module.Handler" or "pkg.module.Handler#method"
    namespaced_resources: bool = False
    cache_dir: Path | None = None
    use_cache: bool = False
    update_checksum: bool = False
    validate_params: bool = True
    force_dsl: bool = False
    default_locale: str = "en"
    locale: Callable[[str | None], str | None] | None = None
    translate: Callable[[str | None, str | None], str | None] | None = None

    def api_base_url_for(self, version: str) -> str | None:
        return self.api_base_url.get(version)

    def full_doc_url(self, path: str = "") -> str:
        """Documentation URL for the given sub-path, without a trailing slash."""
        url = self.doc_base_url.rstrip("/")
        if path:
            url = f"{url}/{path.lstrip('/')}"
        return url or "/"


def load_config(file_path: Path) -> DocConfig:
    """Load a DocConfig from a YAML file."""
    text = file_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {file_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{file_path} must contain a mapping, got {type(data).__name__}")

    try:
        return DocConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {file_path}: {e}") from e

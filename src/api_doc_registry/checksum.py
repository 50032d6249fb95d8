"""Documentation checksum for cache invalidation.

The digest covers every version's documentation tree, read either from
the JSON cache (``{cache_dir}/{doc_base_url}/{version}.json``) or built
live from the registry. It is memoized; callers bust it explicitly after
changing documentation.
"""

import hashlib
import json
from pathlib import Path
from typing import Callable

import structlog

from api_doc_registry.config import DocConfig
from api_doc_registry.registry.application import MetadataRegistry

logger = structlog.get_logger(__name__)

Discover = Callable[[MetadataRegistry], None]


def cache_base(cache_dir: Path, doc_base_url: str) -> Path:
    return Path(cache_dir) / doc_base_url.strip("/")


def load_cached_docs(base: Path) -> dict[str, object]:
    """Read every ``{version}.json`` under ``base``, keyed by version.

    A missing directory yields an empty mapping. Files that cannot be read
    or parsed are skipped with a warning.
    """
    docs = {}
    if not base.is_dir():
        return docs
    for path in sorted(base.glob("*.json")):
        try:
            docs[path.stem] = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("cache_file_skipped", path=str(path), error=str(e))
    return docs


def digest(all_docs: dict) -> str:
    """MD5 hex digest of the canonical JSON form of ``all_docs``."""
    canonical = json.dumps(all_docs, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)
    return hashlib.md5(canonical.encode("utf-8")).hexdigest()


class ChecksumCoordinator:
    """Computes and memoizes the documentation checksum.

    Args:
        registry: the metadata registry to read live documentation from.
        discover: populates an empty registry (scans handler code). Called
            on a reload and when a live checksum finds no versions.
    """

    def __init__(self, registry: MetadataRegistry, discover: Discover | None = None):
        self.registry = registry
        self.discover = discover
        self._checksum: str | None = None

    @property
    def config(self) -> DocConfig:
        return self.registry.config

    def collect(self) -> dict:
        """Version -> documentation mapping the checksum is computed over."""
        if self.config.use_cache and self.config.cache_dir is not None:
            return load_cached_docs(cache_base(self.config.cache_dir, self.config.doc_base_url))

        if not self.registry.available_versions():
            self.reload_documentation()
        return {version: self.registry.to_json(version) for version in self.registry.available_versions()}

    def compute(self) -> str:
        all_docs = self.collect()
        result = digest(all_docs)
        logger.info("checksum_computed", versions=sorted(all_docs), checksum=result)
        return result

    def checksum(self) -> str:
        if self._checksum is None:
            self._checksum = self.compute()
        return self._checksum

    def bust(self) -> None:
        self._checksum = None

    def reload_documentation(self) -> None:
        """Rebuild the registry from scratch.

        Readers must be quiesced while this runs.
        """
        registry = self.registry
        old_locale = registry.locale
        registry.locale = self.config.default_locale
        try:
            registry.reset()
            if self.discover is not None:
                self.discover(registry)
            if registry.route_resolver is not None:
                registry.route_resolver.invalidate()
            if self.config.update_checksum:
                self.bust()
            logger.info("documentation_reloaded", versions=registry.available_versions())
        finally:
            registry.locale = old_locale

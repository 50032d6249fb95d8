import json
from unittest.mock import MagicMock

from api_doc_registry.checksum import ChecksumCoordinator, cache_base, digest, load_cached_docs
from api_doc_registry.config import DocConfig
from api_doc_registry.handlers import HandlerAdapter
from api_doc_registry.registry.application import MetadataRegistry
from api_doc_registry.registry.dsl import MethodDsl


class BaseHandler:
    pass


class WidgetsHandler(BaseHandler):
    pass


def _make_registry(**overrides) -> MetadataRegistry:
    config = DocConfig(default_version="v1", api_base_url={"v1": "/api/v1", "v2": "/api/v2"}, **overrides)
    return MetadataRegistry(config=config, handlers=HandlerAdapter(root=BaseHandler))


def _discover(registry: MetadataRegistry) -> None:
    registry.define_method(WidgetsHandler, "index", MethodDsl(short_description="List widgets"))
    registry.define_method(WidgetsHandler, "show", MethodDsl(api_versions=["v2"]))


class TestDigest:
    def test_key_order_does_not_matter(self):
        assert digest({"a": 1, "b": {"x": 1, "y": 2}}) == digest({"b": {"y": 2, "x": 1}, "a": 1})

    def test_fixed_length(self):
        assert len(digest({})) == 32


class TestLiveChecksum:
    def test_empty_registry_triggers_discovery(self):
        registry = _make_registry()
        discover = MagicMock(side_effect=_discover)
        coordinator = ChecksumCoordinator(registry, discover=discover)

        coordinator.compute()

        discover.assert_called_once_with(registry)
        assert registry.available_versions() == ["v1", "v2"]

    def test_deterministic(self):
        registry = _make_registry()
        _discover(registry)
        coordinator = ChecksumCoordinator(registry)
        assert coordinator.compute() == coordinator.compute()

    def test_memoized_until_busted(self):
        registry = _make_registry()
        _discover(registry)
        coordinator = ChecksumCoordinator(registry)
        before = coordinator.checksum()

        registry.define_method(WidgetsHandler, "destroy", MethodDsl(short_description="Delete"))
        assert coordinator.checksum() == before

        coordinator.bust()
        assert coordinator.checksum() != before

    def test_reload_busts_when_configured(self):
        registry = _make_registry(update_checksum=True)
        coordinator = ChecksumCoordinator(registry, discover=_discover)
        before = coordinator.checksum()

        coordinator.discover = lambda r: r.define_method(WidgetsHandler, "index", MethodDsl(short_description="Changed"))
        coordinator.reload_documentation()

        assert coordinator.checksum() != before
        assert registry.available_versions() == ["v1"]

    def test_reload_restores_locale(self):
        state = {"locale": "fr"}

        def locale(value):
            if value is not None:
                state["locale"] = value
            return state["locale"]

        seen = []
        registry = _make_registry(locale=locale, default_locale="en")
        coordinator = ChecksumCoordinator(registry, discover=lambda r: seen.append(r.locale))

        coordinator.reload_documentation()

        assert seen == ["en"]
        assert state["locale"] == "fr"


class TestCachedChecksum:
    def _write_cache(self, tmp_path, docs: dict):
        base = cache_base(tmp_path, "/apipie")
        base.mkdir(parents=True)
        for version, doc in docs.items():
            (base / f"{version}.json").write_text(json.dumps(doc), encoding="utf-8")
        return base

    def test_reads_cache_files(self, tmp_path):
        self._write_cache(tmp_path, {"v1": {"docs": {"name": "A"}}, "v2": {"docs": {"name": "B"}}})
        registry = _make_registry(use_cache=True, cache_dir=tmp_path)
        discover = MagicMock()

        result = ChecksumCoordinator(registry, discover=discover).compute()

        assert result == digest({"v1": {"docs": {"name": "A"}}, "v2": {"docs": {"name": "B"}}})
        discover.assert_not_called()

    def test_missing_directory_is_empty(self, tmp_path):
        assert load_cached_docs(tmp_path / "nope") == {}

    def test_unparsable_file_skipped(self, tmp_path):
        base = self._write_cache(tmp_path, {"v1": {"docs": {}}})
        (base / "v2.json").write_text("{not json", encoding="utf-8")
        assert load_cached_docs(base) == {"v1": {"docs": {}}}

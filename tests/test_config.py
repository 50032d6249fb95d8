import pytest

from api_doc_registry.config import DocConfig, load_config
from api_doc_registry.errors import ConfigError


class TestDocConfig:
    def test_defaults(self):
        config = DocConfig()
        assert config.default_version == "1.0"
        assert config.api_base_url_for("1.0") == "/api"
        assert config.api_base_url_for("9.9") is None

    def test_full_doc_url(self):
        config = DocConfig(doc_base_url="/docs/")
        assert config.full_doc_url() == "/docs"
        assert config.full_doc_url("v1/widgets") == "/docs/v1/widgets"


class TestLoadConfig:
    def test_load_yaml(self, tmp_path):
        f = tmp_path / "apidoc.yaml"
        f.write_text(
            "app_name: Widget API\n"
            "default_version: v2\n"
            "api_base_url:\n  v1: /api/v1\n  v2: /api/v2\n"
            "ignored:\n  - HealthHandler\n"
            "namespaced_resources: true\n",
            encoding="utf-8",
        )
        config = load_config(f)
        assert config.app_name == "Widget API"
        assert config.api_base_url == {"v1": "/api/v1", "v2": "/api/v2"}
        assert config.ignored == ["HealthHandler"]
        assert config.namespaced_resources is True

    def test_empty_file(self, tmp_path):
        f = tmp_path / "empty.yaml"
        f.write_text("", encoding="utf-8")
        assert load_config(f) == DocConfig()

    def test_non_mapping_rejected(self, tmp_path):
        f = tmp_path / "list.yaml"
        f.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config(f)

    def test_invalid_field_rejected(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("use_cache: [1, 2]\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(f)

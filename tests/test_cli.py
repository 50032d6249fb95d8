import json

from click.testing import CliRunner

from api_doc_registry.checksum import digest
from api_doc_registry.cli import main


def _write_cache(root, doc_base_url="apipie", docs=None):
    base = root / doc_base_url
    base.mkdir(parents=True)
    for version, doc in (docs or {}).items():
        (base / f"{version}.json").write_text(json.dumps(doc), encoding="utf-8")


class TestCliChecksum:
    def test_prints_digest(self, tmp_path):
        docs = {"v1": {"docs": {"name": "A"}}}
        _write_cache(tmp_path, docs=docs)

        runner = CliRunner()
        result = runner.invoke(main, ["checksum", str(tmp_path)])

        assert result.exit_code == 0
        assert result.output.strip() == digest(docs)

    def test_doc_base_url_from_config(self, tmp_path):
        docs = {"v2": {"docs": {"name": "B"}}}
        _write_cache(tmp_path, doc_base_url="docs", docs=docs)
        config = tmp_path / "apidoc.yaml"
        config.write_text("doc_base_url: /docs\n", encoding="utf-8")

        runner = CliRunner()
        result = runner.invoke(main, ["--config", str(config), "checksum", str(tmp_path)])

        assert result.exit_code == 0
        assert result.output.strip() == digest(docs)

    def test_bad_config(self, tmp_path):
        config = tmp_path / "apidoc.yaml"
        config.write_text("- nope\n", encoding="utf-8")

        runner = CliRunner()
        result = runner.invoke(main, ["--config", str(config), "checksum", str(tmp_path)])

        assert result.exit_code != 0
        assert "must contain a mapping" in result.output


class TestCliVersions:
    def test_lists_versions(self, tmp_path):
        _write_cache(tmp_path, docs={"v2": {}, "v1": {}})

        runner = CliRunner()
        result = runner.invoke(main, ["versions", str(tmp_path)])

        assert result.exit_code == 0
        assert result.output.split() == ["v1", "v2"]

    def test_empty_cache(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["versions", str(tmp_path), "--doc-base-url", "/other"])

        assert result.exit_code == 0
        assert "No cached documentation" in result.output

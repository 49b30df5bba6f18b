"""Tests for apidocs.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from apidocs.config import ConfigError, DocsConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    root = tmp_path.resolve()
    assert isinstance(config, DocsConfig)
    assert config.root == root
    assert config.source_dir == root / "src"
    assert config.source_root == root
    assert config.output_dir == root / "docs" / "api"
    assert config.docs_path == "/docs/api"
    assert config.extension == "md"
    assert config.suffixes == [".ts"]
    assert config.exclude_paths == []
    assert config.link_matching == "word"
    assert config.watch_interval == pytest.approx(1.0)
    assert config.source_label == "TypeScript source"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".apidocs.yml"
    config_file.write_text(
        """
source_dir: server/src
source_root: .
output_dir: docs/content/docs/api
docs_path: /docs/api/
extension: .md
suffixes: [ts, .d.ts]
exclude_paths:
  - "e2e/"
  - "*.spec.ts"
link_matching: substring
watch_interval: 0.5
source_label: Vendure TypeScript source
""",
        encoding="utf-8",
    )

    config = load_config(config_file)
    root = tmp_path.resolve()

    assert config.source_dir == root / "server" / "src"
    assert config.source_root == root / "."
    assert config.output_dir == root / "docs" / "content" / "docs" / "api"
    assert config.docs_path == "/docs/api"
    assert config.extension == "md"
    assert config.suffixes == [".ts", ".d.ts"]
    assert config.exclude_paths == ["e2e/", "*.spec.ts"]
    assert config.link_matching == "substring"
    assert config.watch_interval == pytest.approx(0.5)
    assert config.source_label == "Vendure TypeScript source"


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".apidocs.yml").write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".apidocs.yml").write_text("source_dir: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_unknown_link_matching(tmp_path: Path) -> None:
    (tmp_path / ".apidocs.yml").write_text("link_matching: fuzzy\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_positive_interval(tmp_path: Path) -> None:
    (tmp_path / ".apidocs.yml").write_text("watch_interval: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".apidocs.yml").write_text("\n", encoding="utf-8")
    assert load_config(tmp_path) == DocsConfig.defaults(tmp_path)

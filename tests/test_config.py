"""Tests for cluster-view config loader (cluster-view.yaml)."""

from pathlib import Path

import pytest

from cluster_view.config import ClusterViewConfig, find_config, load_config

# --- find_config ---


class TestFindConfig:
    def test_finds_in_start_dir(self, tmp_path: Path):
        cfg = tmp_path / "cluster-view.yaml"
        cfg.write_text("cache: ./cache.jsonl\n", encoding="utf-8")
        assert find_config(tmp_path) == cfg

    def test_finds_in_parent(self, tmp_path: Path):
        cfg = tmp_path / "cluster-view.yaml"
        cfg.write_text("cache: ./cache.jsonl\n", encoding="utf-8")
        child = tmp_path / "sub" / "deep"
        child.mkdir(parents=True)
        assert find_config(child) == cfg

    def test_returns_none_when_missing(self, tmp_path: Path):
        assert find_config(tmp_path) is None

    def test_ignores_directories_named_config(self, tmp_path: Path):
        (tmp_path / "cluster-view.yaml").mkdir()
        assert find_config(tmp_path) is None


# --- load_config ---


class TestLoadConfig:
    def test_explicit_path(self, tmp_path: Path):
        cfg_path = tmp_path / "cluster-view.yaml"
        cfg_path.write_text(
            "cache: ./cache.jsonl\naccounts: ./accounts.yaml\n"
            "endpoint_url: http://localhost:4566\nmax_workers: 4\n"
            "include: [TAGS, STATISTICS]\nlog_level: debug\n",
            encoding="utf-8",
        )
        cfg = load_config(cfg_path)
        assert cfg.config_path == cfg_path.resolve()
        assert cfg.cache == str((tmp_path / "cache.jsonl").resolve())
        assert cfg.accounts == str((tmp_path / "accounts.yaml").resolve())
        assert cfg.endpoint_url == "http://localhost:4566"
        assert cfg.max_workers == 4
        assert cfg.include == ["TAGS", "STATISTICS"]
        assert cfg.log_level == "DEBUG"

    def test_explicit_path_not_found(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_auto_discover(self, tmp_path: Path, monkeypatch):
        cfg_path = tmp_path / "cluster-view.yaml"
        cfg_path.write_text("cache: ./my-cache.jsonl\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        cfg = load_config()
        assert cfg.cache == str((tmp_path / "my-cache.jsonl").resolve())

    def test_no_config_returns_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        cfg = load_config()
        assert cfg == ClusterViewConfig()
        assert cfg.max_workers == 1
        assert cfg.log_level == "WARNING"

    def test_auto_discover_disabled(self, tmp_path: Path, monkeypatch):
        (tmp_path / "cluster-view.yaml").write_text("cache: x\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert load_config(auto_discover=False).cache is None

    def test_empty_file(self, tmp_path: Path):
        cfg_path = tmp_path / "cluster-view.yaml"
        cfg_path.write_text("", encoding="utf-8")
        cfg = load_config(cfg_path)
        assert cfg.cache is None
        assert cfg.include == []

    def test_non_mapping_rejected(self, tmp_path: Path):
        cfg_path = tmp_path / "cluster-view.yaml"
        cfg_path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Expected a YAML mapping"):
            load_config(cfg_path)

    @pytest.mark.parametrize("value", ["0", "-2", "many", "true"])
    def test_invalid_max_workers(self, tmp_path: Path, value):
        cfg_path = tmp_path / "cluster-view.yaml"
        cfg_path.write_text(f"max_workers: {value}\n", encoding="utf-8")
        with pytest.raises(ValueError, match="max_workers"):
            load_config(cfg_path)

    def test_include_must_be_list(self, tmp_path: Path):
        cfg_path = tmp_path / "cluster-view.yaml"
        cfg_path.write_text("include: TAGS\n", encoding="utf-8")
        with pytest.raises(ValueError, match="'include' must be a list"):
            load_config(cfg_path)

    @pytest.mark.parametrize("value", ["verbose", "trace", "5"])
    def test_invalid_log_level(self, tmp_path: Path, value):
        cfg_path = tmp_path / "cluster-view.yaml"
        cfg_path.write_text(f"log_level: {value}\n", encoding="utf-8")
        with pytest.raises(ValueError, match="'log_level' must be one of"):
            load_config(cfg_path)

    @pytest.mark.parametrize("value", ["critical", "Info", "ERROR"])
    def test_log_level_case_insensitive(self, tmp_path: Path, value):
        cfg_path = tmp_path / "cluster-view.yaml"
        cfg_path.write_text(f"log_level: {value}\n", encoding="utf-8")
        assert load_config(cfg_path).log_level == value.upper()

    @pytest.mark.parametrize("key", ["cache", "accounts"])
    def test_non_string_path_rejected(self, tmp_path: Path, key):
        cfg_path = tmp_path / "cluster-view.yaml"
        cfg_path.write_text(f"{key}: 5\n", encoding="utf-8")
        with pytest.raises(ValueError, match=f"'{key}' must be a path string"):
            load_config(cfg_path)

    def test_non_string_endpoint_rejected(self, tmp_path: Path):
        cfg_path = tmp_path / "cluster-view.yaml"
        cfg_path.write_text("endpoint_url: [a, b]\n", encoding="utf-8")
        with pytest.raises(ValueError, match="'endpoint_url' must be a string"):
            load_config(cfg_path)

"""Tests for the cluster-view CLI."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from cluster_view.cache.keys import get_cluster_key
from cluster_view.cli.main import cli
from cluster_view.models import ClusterDetail, DescribeClustersResult

ACCOUNTS_YAML = """\
accounts:
  - name: acct1
    account_id: "123456789012"
  - name: legacy
    type: aws
"""


class FakeEcsClient:
    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def describe_clusters(
        self,
        cluster_names: Sequence[str],
        include: Sequence[str] | None = None,
    ) -> DescribeClustersResult:
        self.calls.append(list(cluster_names))
        return DescribeClustersResult(clusters=[
            ClusterDetail(clusterName=name, status="ACTIVE", runningTasksCount=2)
            for name in cluster_names
        ])


class FakeClientProvider:
    client = FakeEcsClient()

    def __init__(self, endpoint_url: str | None = None) -> None:
        self.endpoint_url = endpoint_url

    def get_amazon_ecs(self, credentials, region, read_only=True):
        return self.client


def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def project(tmp_path: Path, monkeypatch) -> Path:
    lines = []
    for account, region, count in [("acct1", "us-west-2", 120), ("acct1", "us-east-1", 2)]:
        for i in range(count):
            name = f"{region}-{i:03d}"
            lines.append(json.dumps({
                "namespace": "clusters",
                "id": get_cluster_key(account, region, name),
                "attributes": {"account": account, "region": region, "clusterName": name},
            }))
    (tmp_path / "cache.jsonl").write_text("\n".join(lines) + "\n", encoding="utf-8")
    (tmp_path / "accounts.yaml").write_text(ACCOUNTS_YAML, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    FakeClientProvider.client = FakeEcsClient()
    return tmp_path


# --- list command ---


class TestListCommand:
    def test_list(self, project: Path):
        result = runner().invoke(cli, ["list"])
        assert result.exit_code == 0
        assert "us-east-1-000" in result.output
        assert "122 cluster(s) cached." in result.output

    def test_list_filtered_json(self, project: Path):
        result = runner().invoke(cli, ["list", "--region", "us-east-1", "--json-output"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [c["name"] for c in data] == ["us-east-1-000", "us-east-1-001"]
        assert data[0]["account"] == "acct1"

    def test_list_empty(self, project: Path):
        result = runner().invoke(cli, ["list", "--account", "nobody"])
        assert result.exit_code == 0
        assert "No clusters found." in result.output

    def test_bad_config_log_level_reported(self, project: Path):
        (project / "cluster-view.yaml").write_text("log_level: verbose\n", encoding="utf-8")
        result = runner().invoke(cli, ["list"])
        assert result.exit_code == 0
        assert "ignoring config file" in result.output
        assert "log_level" in result.output
        assert "122 cluster(s) cached." in result.output

    def test_bad_log_level_flag_rejected(self, project: Path):
        result = runner().invoke(cli, ["--log-level", "verbose", "list"])
        assert result.exit_code == 2


# --- describe command ---


class TestDescribeCommand:
    @patch("cluster_view.cli.main.AmazonClientProvider", FakeClientProvider)
    def test_describe(self, project: Path):
        result = runner().invoke(cli, ["describe", "acct1", "us-west-2"])
        assert result.exit_code == 0
        assert "120 cluster(s) described." in result.output
        assert [len(c) for c in FakeClientProvider.client.calls] == [100, 20]

    @patch("cluster_view.cli.main.AmazonClientProvider", FakeClientProvider)
    def test_describe_json(self, project: Path):
        result = runner().invoke(cli, ["describe", "acct1", "us-east-1", "--json-output"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [d["clusterName"] for d in data] == ["us-east-1-000", "us-east-1-001"]
        assert data[0]["runningTasksCount"] == 2

    @patch("cluster_view.cli.main.AmazonClientProvider", FakeClientProvider)
    def test_describe_no_clusters(self, project: Path):
        result = runner().invoke(cli, ["describe", "acct1", "eu-west-1"])
        assert result.exit_code == 0
        assert "No clusters described" in result.output
        assert FakeClientProvider.client.calls == []

    @patch("cluster_view.cli.main.AmazonClientProvider", FakeClientProvider)
    def test_describe_unknown_account(self, project: Path):
        result = runner().invoke(cli, ["describe", "unknown-acct", "us-west-2"])
        assert result.exit_code == 1
        assert "Unknown account: unknown-acct" in result.output
        assert FakeClientProvider.client.calls == []

    @patch("cluster_view.cli.main.AmazonClientProvider", FakeClientProvider)
    def test_describe_non_ecs_account(self, project: Path):
        result = runner().invoke(cli, ["describe", "legacy", "us-west-2"])
        assert result.exit_code == 1
        assert "Invalid credentials" in result.output

    @patch("cluster_view.cli.main.AmazonClientProvider", FakeClientProvider)
    def test_describe_bad_include(self, project: Path):
        result = runner().invoke(cli, [
            "describe", "acct1", "us-west-2", "--include", "everything",
        ])
        assert result.exit_code == 1
        assert "EVERYTHING" in result.output

    def test_describe_missing_accounts_file(self, project: Path):
        result = runner().invoke(cli, [
            "describe", "acct1", "us-west-2", "--accounts", "nope.yaml",
        ])
        assert result.exit_code == 1
        assert "Accounts file not found" in result.output


# --- validate command ---


class TestValidateCommand:
    def test_validate_ok(self, project: Path):
        result = runner().invoke(cli, ["validate"])
        assert result.exit_code == 0
        assert "accounts: 2 account(s) loaded" in result.output
        assert "cache: 122 cluster(s) readable" in result.output
        assert "All 2 config(s) valid." in result.output

    def test_validate_bad_accounts(self, project: Path):
        (project / "accounts.yaml").write_text("accounts: nope\n", encoding="utf-8")
        result = runner().invoke(cli, ["validate"])
        assert result.exit_code == 1
        assert "1 error(s) found." in result.output

    def test_validate_nothing(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner().invoke(cli, ["validate"])
        assert result.exit_code == 0
        assert "No config files found" in result.output


class TestVersion:
    def test_version(self):
        result = runner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

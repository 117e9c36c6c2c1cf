# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
CLI tests for the quota commands, run through click's CliRunner against a
YAML network file.
"""

import json

import pytest
import yaml
from click.testing import CliRunner

import netquota.core.config as config_module
from cli import cli
from netquota.core.config import NetQuotaConfig


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    monkeypatch.setattr(config_module, "_config", NetQuotaConfig())


def run(network_file, *args):
    runner = CliRunner()
    return runner.invoke(cli, ["--network", str(network_file), *args])


def saved_sites(network_file):
    return {s["blog_id"]: s for s in yaml.safe_load(network_file.read_text())["sites"]}


class TestListCommand:
    def test_list_table(self, network_file):
        result = run(network_file, "list")
        assert result.exit_code == 0
        assert "quota_used_percent" in result.output
        assert "http://example.com/blog/" in result.output
        assert "98.50" in result.output

    def test_list_min_used_pct(self, network_file):
        result = run(network_file, "list", "--min-used-pct", "95", "--format", "ids")
        assert result.exit_code == 0
        assert result.output.strip() == "3 4"

    def test_list_union_of_thresholds(self, network_file):
        result = run(
            network_file, "list", "--min-used", "1000000", "--min-used-pct", "50",
            "--format", "ids",
        )
        assert result.output.strip() == "2 3 4"

    def test_list_fields_csv(self, network_file):
        result = run(network_file, "list", "--fields", "blog_id, quota", "--format", "csv")
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "blog_id,quota",
            "1,100",
            "2,1024",
            "3,10000",
            "4,100",
        ]

    def test_list_count(self, network_file):
        result = run(network_file, "list", "--min-used", "900", "--format", "count")
        assert result.output.strip() == "2"

    def test_list_by_blog_id(self, network_file):
        result = run(network_file, "list", "--blog_id", "2", "--format", "ids")
        assert result.output.strip() == "2"

    def test_list_rejects_bad_percent(self, network_file):
        result = run(network_file, "list", "--min-used-pct", "150")
        assert result.exit_code == 2

    def test_unknown_field(self, network_file):
        result = run(network_file, "list", "--fields", "nope")
        assert result.exit_code == 1
        assert "Error: Invalid field: nope" in result.output

    def test_list_single_field(self, network_file):
        result = run(network_file, "list", "--field", "url", "--min-used", "900")
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "http://example.com/shop/",
            "http://example.com/blog/",
        ]

    def test_list_single_field_json(self, network_file):
        result = run(network_file, "list", "--field=quota", "--format", "json")
        assert json.loads(result.output) == [100, 1024, 10000, 100]

    def test_unknown_single_field(self, network_file):
        result = run(network_file, "list", "--field", "siteurl")
        assert result.exit_code == 1
        assert "Error: Invalid field: siteurl" in result.output


class TestGetCommand:
    def test_get(self, network_file):
        result = run(network_file, "get", "3", "--format", "json")
        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {
                "blog_id": 3,
                "url": "http://example.com/blog/",
                "quota": 10000,
                "quota_used": 9850.0,
                "quota_used_percent": 98.5,
            }
        ]

    def test_get_current_site(self, network_file):
        result = run(network_file, "get", "--format", "ids")
        assert result.output.strip() == "1"

    @pytest.mark.parametrize("blog_id", ["99", "abc", "0"])
    def test_get_unknown(self, network_file, blog_id):
        result = run(network_file, "get", blog_id)
        assert result.exit_code == 1
        assert "Error: Site not found." in result.output

    def test_get_single_field(self, network_file):
        result = run(network_file, "get", "3", "--field=quota_used_percent")
        assert result.exit_code == 0
        assert result.output.strip() == "98.50"


class TestMutationCommands:
    def test_set(self, network_file):
        result = run(network_file, "set", "2", "10g")
        assert result.exit_code == 0
        assert "Success: Quota is now 10240 MB for http://example.com/shop/." in result.output
        assert saved_sites(network_file)[2]["quota_mb"] == 10240

    def test_set_network_default_removes_override(self, network_file):
        result = run(network_file, "set", "3", "100")
        assert result.exit_code == 0
        assert "Quota is now 100 MB" in result.output
        assert "quota_mb" not in saved_sites(network_file)[3]

    def test_add(self, network_file):
        result = run(network_file, "add", "3", "3g")
        assert result.exit_code == 0
        assert "Quota is now 13072 MB for http://example.com/blog/." in result.output
        assert saved_sites(network_file)[3]["quota_mb"] == 13072

    def test_add_current_site(self, network_file):
        result = run(network_file, "add", "3500")
        assert result.exit_code == 0
        assert saved_sites(network_file)[1]["quota_mb"] == 3600

    def test_subtract_below_zero(self, network_file):
        result = run(network_file, "subtract", "1", "5g")
        assert result.exit_code == 0
        assert "Quota is now -5020 MB for http://example.com/." in result.output
        assert saved_sites(network_file)[1]["quota_mb"] == -5020

    @pytest.mark.parametrize("command", ["set", "add", "subtract"])
    def test_bad_quota_changes_nothing(self, network_file, command):
        before = network_file.read_text()
        result = run(network_file, command, "2", "5.5g")
        assert result.exit_code == 1
        assert "Error: Error parsing quota value" in result.output
        assert network_file.read_text() == before

    @pytest.mark.parametrize("command", ["set", "add"])
    @pytest.mark.parametrize("blog_id", ["42", "abc"])
    def test_unknown_site(self, network_file, command, blog_id):
        result = run(network_file, command, blog_id, "1g")
        assert result.exit_code == 1
        assert "Error: Site not found." in result.output

    def test_subtract_unknown_site(self, network_file):
        result = run(network_file, "subtract", "42", "1g")
        assert result.exit_code == 1
        assert "Error: Site with ID 42 not found." in result.output

    def test_subtract_non_numeric_site(self, network_file):
        before = network_file.read_text()
        result = run(network_file, "subtract", "abc", "1g")
        assert result.exit_code == 1
        assert "Error: Site with ID 0 not found." in result.output
        assert network_file.read_text() == before

    def test_too_many_arguments(self, network_file):
        result = run(network_file, "add", "1", "2", "3")
        assert result.exit_code == 2


def test_not_multisite(network_file, network_data):
    network_data["multisite"] = False
    network_file.write_text(yaml.safe_dump(network_data))

    for args in (
        ["list"],
        ["get", "1"],
        ["get", "abc"],
        ["set", "1", "1g"],
        ["set", "abc", "1g"],
        ["subtract", "abc", "1g"],
        ["add", "1", "2", "3"],
    ):
        result = run(network_file, *args)
        assert result.exit_code == 1
        assert "Error: This is not a multisite installation." in result.output


def test_missing_network_file(tmp_path):
    result = run(tmp_path / "missing.yaml", "list")
    assert result.exit_code == 1
    assert "Error: Network file not found" in result.output


@pytest.mark.parametrize(
    "content",
    [
        "sites:\n  - siteurl: http://x\n    used_mb: 1\n",
        "sites:\n  - blog_id: 1\n    used_mb: lots\n",
    ],
)
def test_malformed_network_file(tmp_path, content):
    path = tmp_path / "network.yaml"
    path.write_text(content)

    result = run(path, "list")
    assert result.exit_code == 1
    assert "Error: Invalid network file" in result.output
    assert "Traceback" not in result.output

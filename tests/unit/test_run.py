"""Tests for the surtgate command line (check / surts)."""

from __future__ import annotations

import os

import pytest
from typer.testing import CliRunner

from surtgate import config as config_module
from surtgate.run import EXIT_NO_WHITELIST, app

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_default_paths(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATHS", [])


class TestCheckCommand:
    def test_include_and_exclude(self, write_whitelist):
        path = write_whitelist(["http://example.com/allowed/"])
        result = runner.invoke(app, [
            "check",
            "--file", path,
            "http://www.example.com/allowed/page.html",
            "http://example.com/private",
        ])
        assert result.exit_code == 0, result.output
        assert "INCLUDE\thttp://www.example.com/allowed/page.html" in result.output
        assert "EXCLUDE\thttp://example.com/private" in result.output

    def test_malformed_url_excluded(self, write_whitelist):
        path = write_whitelist(["com,example)/"])
        result = runner.invoke(app, ["check", "--file", path, "http://"])
        assert result.exit_code == 0, result.output
        assert "EXCLUDE\thttp://" in result.output

    def test_file_from_env(self, write_whitelist, monkeypatch):
        monkeypatch.setenv("SURTGATE_WHITELIST_FILE", write_whitelist(["com,example)/"]))
        result = runner.invoke(app, ["check", "http://example.com/x"])
        assert result.exit_code == 0, result.output
        assert "INCLUDE\thttp://example.com/x" in result.output

    def test_file_from_config(self, tmp_path, write_whitelist):
        whitelist = write_whitelist(["example.org"])
        config_path = os.path.join(str(tmp_path), "config.yaml")
        with open(config_path, "w") as f:
            f.write(f"version: 1\nwhitelist:\n  file: {whitelist}\n  canonicalizer: aggressive\n")
        result = runner.invoke(app, ["check", "--config", config_path, "http://example.org/a"])
        assert result.exit_code == 0, result.output
        assert "INCLUDE\thttp://example.org/a" in result.output

    def test_no_file_configured(self):
        result = runner.invoke(app, ["check", "--config", "/nonexistent/config.yaml", "http://example.com/"])
        assert result.exit_code == EXIT_NO_WHITELIST

    def test_missing_whitelist_file(self, tmp_path):
        missing = os.path.join(str(tmp_path), "missing.txt")
        result = runner.invoke(app, ["check", "--file", missing, "http://example.com/"])
        assert result.exit_code == EXIT_NO_WHITELIST
        assert "INCLUDE" not in result.output


class TestSurtsCommand:
    def test_prints_terms_most_specific_first(self):
        result = runner.invoke(app, ["surts", "http://www.example.com/a/b.html"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "com,example)/a/b.html",
            "com,example)/a/",
            "com,example)/a",
            "com,example)/",
            "com,example",
        ]

    def test_aggressive_canonicalizer(self):
        result = runner.invoke(app, ["surts", "--canonicalizer", "aggressive", "example.com/a"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == "com,example)/a"

    def test_unknown_canonicalizer(self):
        result = runner.invoke(app, ["surts", "--canonicalizer", "fuzzy", "example.com/a"])
        assert result.exit_code == 2

    def test_malformed_url(self):
        result = runner.invoke(app, ["surts", "http://"])
        assert result.exit_code == 1

"""Tests for argument parsing and the entry point."""

import os
from unittest.mock import patch

import pytest

from args import parse_args
from buildpack import main
from common.errors import StepError
from constants import Constants, ExitCodes


class TestArgParsing:

    def test_supply(self):
        ns = parse_args(["supply", "/build", "/cache", "/deps", "0"])
        assert ns.action == "supply"
        assert (ns.BUILD_DIR, ns.CACHE_DIR, ns.DEPS_DIR, ns.DEPS_IDX) == ("/build", "/cache", "/deps", "0")
        assert ns.LOG_LEVEL is None

    def test_finalize_release_file(self):
        ns = parse_args(["finalize", "/b", "/c", "/d", "2", "--release-file", "/tmp/r.yml"])
        assert ns.action == "finalize"
        assert ns.RELEASE_FILE == "/tmp/r.yml"

    def test_finalize_default_release_file(self):
        assert parse_args(["finalize", "/b", "/c", "/d", "2"]).RELEASE_FILE == Constants.RELEASE_YAML

    def test_options(self):
        ns = parse_args(["supply", "/b", "/c", "/d", "0", "--buildpack-dir", "/bp", "--loglevel", "DEBUG"])
        assert ns.BUILDPACK_DIR == "/bp"
        assert ns.LOG_LEVEL == "DEBUG"

    def test_missing_positionals(self):
        with pytest.raises(SystemExit):
            parse_args(["supply", "/b"])

    def test_action_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


@patch("buildpack.configure_logging")
class TestMain:

    def test_success(self, _logging):
        with patch.dict("buildpack.ACTIONS", {"finalize": lambda args: None}):
            assert main(["finalize", "/b", "/c", "/d", "0"]) == ExitCodes.SUCCESS.value

    def test_failure_exit_code(self, _logging, caplog):
        def boom(args):
            raise StepError("php version", ValueError("no default"))

        with patch.dict("buildpack.ACTIONS", {"supply": boom}):
            assert main(["supply", "/b", "/c", "/d", "0"]) == ExitCodes.FAILURE.value
        assert "php version: no default" in caplog.text

    def test_missing_manifest_fails(self, _logging, tmp_path):
        argv = ["supply", str(tmp_path / "app"), str(tmp_path / "cache"), str(tmp_path / "deps"), "0",
                "--buildpack-dir", str(tmp_path)]
        assert main(argv) == ExitCodes.FAILURE.value

    def test_loglevel_exported(self, _logging, monkeypatch):
        monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "INFO")
        with patch.dict("buildpack.ACTIONS", {"finalize": lambda args: None}):
            main(["finalize", "/b", "/c", "/d", "0", "--loglevel", "DEBUG"])
        assert os.environ[Constants.ENV_LOG_LEVEL] == "DEBUG"

"""Tests for showwhen CLI commands and configuration."""

import json
import logging
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from showwhen.cli.main import cli
from showwhen.config import CliConfig, configure_logging


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def rules_dir(tmp_path):
    rules = tmp_path / "rules"
    rules.mkdir()
    (rules / "elements.yaml").write_text(
        textwrap.dedent(
            """
            rules:
              - name: button-label
                showWhen:
                  - "element.tag === 'button'"
              - name: deep-nesting
                showWhen: "tree.depth > 3"
            """
        )
    )
    return rules


@pytest.fixture
def context_file(tmp_path):
    path = tmp_path / "context.json"
    path.write_text(json.dumps({"element": {"tag": "button", "childCount": 3}, "tree": {"depth": 1}}))
    return path


class TestEval:
    def test_eval_with_assignments(self, runner):
        result = runner.invoke(
            cli, ["eval", "element.tag === 'button'", "--set", "element.tag=button"]
        )
        assert result.exit_code == 0
        assert result.output == "true\n"

    def test_eval_with_context_file(self, runner, context_file):
        result = runner.invoke(
            cli, ["eval", "element.childCount == '3'", "--context", str(context_file)]
        )
        assert result.exit_code == 0
        assert result.output.strip() == "true"

    def test_assignments_override_context_file(self, runner, context_file):
        result = runner.invoke(
            cli,
            ["eval", "tree.depth", "--context", str(context_file), "--set", "tree.depth=5"],
        )
        assert result.exit_code == 0
        assert result.output.strip() == "5"

    def test_prints_values(self, runner):
        result = runner.invoke(cli, ["eval", "element.tag", "--set", "element.tag=button"])
        assert result.output.strip() == '"button"'

        result = runner.invoke(cli, ["eval", "[1, 'a', null]"])
        assert result.output.strip() == '[1.0, "a", null]'

        result = runner.invoke(cli, ["eval", "element.tag.missing", "--set", "element.tag=a"])
        assert result.output.strip() == "undefined"

    def test_bool_flag(self, runner):
        result = runner.invoke(
            cli, ["eval", "element.tag", "--set", "element.tag=button", "--bool"]
        )
        assert result.output.strip() == "true"

    def test_syntax_error(self, runner):
        result = runner.invoke(cli, ["eval", "element.tag ==="])
        assert result.exit_code == 1
        assert "Syntax error: Unexpected token: ''" in result.output

    def test_security_error(self, runner):
        result = runner.invoke(cli, ["eval", "window.location"])
        assert result.exit_code == 1
        assert "Security error: Access to 'window' is not allowed" in result.output

    def test_bad_assignment(self, runner):
        result = runner.invoke(cli, ["eval", "a", "--set", "novalue"])
        assert result.exit_code == 1
        assert "Invalid assignment 'novalue'" in result.output

    def test_context_file_must_be_mapping(self, runner, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        result = runner.invoke(cli, ["eval", "a", "--context", str(path)])

        assert result.exit_code == 1
        assert "context must be a mapping" in result.output


class TestValidate:
    def test_validate_succeeds(self, runner, rules_dir):
        result = runner.invoke(cli, ["validate", str(rules_dir)])
        assert result.exit_code == 0
        assert "Checked 2 rule(s), 2 expression(s)." in result.output
        assert "All show-when expressions are valid." in result.output

    def test_validate_reports_syntax_errors(self, runner, rules_dir):
        (rules_dir / "broken.yaml").write_text(
            "rules:\n  - name: broken\n    showWhen: ['(a && b']\n"
        )

        result = runner.invoke(cli, ["validate", str(rules_dir)])

        assert result.exit_code == 1
        assert "rule 'broken' showWhen[0]: Expected rparen, got eof ('')" in result.output
        assert "1 syntax error(s) found" in result.output

    def test_validate_uses_configured_path(self, runner, rules_dir, monkeypatch):
        monkeypatch.setenv("SHOWWHEN_RULES_PATH", str(rules_dir))

        result = runner.invoke(cli, ["validate"])

        assert result.exit_code == 0

    def test_validate_missing_default_path(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("SHOWWHEN_RULES_PATH", str(tmp_path / "absent"))

        result = runner.invoke(cli, ["validate"])

        assert result.exit_code == 1
        assert "Rules path not found" in result.output

    def test_validate_malformed_rule_file(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("rules: nope\n")

        result = runner.invoke(cli, ["validate", str(path)])

        assert result.exit_code == 1
        assert "top-level 'rules' list" in result.output


class TestCheck:
    def test_check_lists_shown_rules(self, runner, rules_dir, context_file):
        result = runner.invoke(cli, ["check", str(rules_dir), "--context", str(context_file)])

        assert result.exit_code == 0
        assert "✓ button-label" in result.output
        assert "✗ deep-nesting" in result.output
        assert "1 of 2 rule(s) shown." in result.output

    def test_check_treats_failures_as_hidden(self, runner, rules_dir):
        result = runner.invoke(cli, ["check", str(rules_dir)])

        assert result.exit_code == 0
        assert "0 of 2 rule(s) shown." in result.output


class TestConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SHOWWHEN_LOG_LEVEL", raising=False)
        monkeypatch.delenv("SHOWWHEN_RULES_PATH", raising=False)

        config = CliConfig.from_env()

        assert config.log_level == "WARNING"
        assert config.rules_path == Path("rules")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SHOWWHEN_LOG_LEVEL", "debug")
        monkeypatch.setenv("SHOWWHEN_RULES_PATH", "/etc/showwhen")

        config = CliConfig.from_env()

        assert config.log_level == "DEBUG"
        assert config.rules_path == Path("/etc/showwhen")

    def test_configure_logging_sets_package_level(self):
        configure_logging("info")
        assert logging.getLogger("showwhen").level == logging.INFO
        configure_logging("WARNING")

    def test_configure_logging_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            configure_logging("chatty")

    def test_invalid_log_level_option(self, runner):
        result = runner.invoke(cli, ["--log-level", "chatty", "eval", "true"])
        assert result.exit_code == 2

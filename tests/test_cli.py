#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Unit tests for the auto-commit command line entry point."""

import os
import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from auto_commit import __version__
from auto_commit.cli.main import run_auto_commit
from auto_commit.delivery import CommitDelivery


class FakeController:
    """Record how the entry point wires the controller."""

    instances: list["FakeController"] = []
    exit_code = 0

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs
        self.run_calls = 0
        FakeController.instances.append(self)

    def run(self) -> int:
        self.run_calls += 1
        return FakeController.exit_code


@pytest.fixture
def fake_controller(monkeypatch: pytest.MonkeyPatch):
    FakeController.instances = []
    FakeController.exit_code = 0
    monkeypatch.setattr("auto_commit.cli.main.AutoCommitController", FakeController)
    monkeypatch.setattr("auto_commit.cli.main.load_dotenv", lambda: False)
    for key in ("AUTO_COMMIT_MODEL", "AUTO_COMMIT_TOKEN_LIMIT", "AUTO_COMMIT_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)
    return FakeController


def test_main_invokes_controller_run_and_exits(fake_controller):
    result = CliRunner().invoke(run_auto_commit, [])

    assert result.exit_code == 0
    assert len(fake_controller.instances) == 1
    assert fake_controller.instances[0].run_calls == 1


def test_main_propagates_failure_exit_code(fake_controller):
    fake_controller.exit_code = 1

    result = CliRunner().invoke(run_auto_commit, [])

    assert result.exit_code == 1


def test_default_flags_build_interactive_delivery(fake_controller):
    CliRunner().invoke(run_auto_commit, [])

    kwargs = fake_controller.instances[0].kwargs
    delivery = kwargs["delivery"]
    assert isinstance(delivery, CommitDelivery)
    assert (delivery.dry_run, delivery.review, delivery.force) == (False, False, False)
    assert kwargs["show_progress"] is True
    assert kwargs["assembler"].token_limit == 20_000


def test_all_flags_are_forwarded(fake_controller):
    result = CliRunner().invoke(run_auto_commit, ["--dry-run", "--review", "--force", "-vv"])

    assert result.exit_code == 0
    kwargs = fake_controller.instances[0].kwargs
    delivery = kwargs["delivery"]
    assert (delivery.dry_run, delivery.review, delivery.force) == (True, True, True)
    assert kwargs["show_progress"] is False


def test_short_flags(fake_controller):
    CliRunner().invoke(run_auto_commit, ["-r", "-f"])

    delivery = fake_controller.instances[0].kwargs["delivery"]
    assert delivery.review and delivery.force and not delivery.dry_run


def test_verbose_logging_disables_progress(fake_controller):
    CliRunner().invoke(run_auto_commit, ["-v"])

    assert fake_controller.instances[0].kwargs["show_progress"] is False


def test_quiet_keeps_progress(fake_controller):
    CliRunner().invoke(run_auto_commit, ["-qq"])

    assert fake_controller.instances[0].kwargs["show_progress"] is True


def test_agent_factory_uses_model_from_environment(fake_controller, monkeypatch):
    monkeypatch.setenv("AUTO_COMMIT_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-key")

    CliRunner().invoke(run_auto_commit, [])

    agent = fake_controller.instances[0].kwargs["agent_factory"]()
    assert agent.model == "gpt-4o-mini"


def test_agent_factory_without_api_key_fails_fast(fake_controller, monkeypatch):
    from auto_commit.errors import ApiKeyMissingError

    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    CliRunner().invoke(run_auto_commit, [])

    with pytest.raises(ApiKeyMissingError):
        fake_controller.instances[0].kwargs["agent_factory"]()


def test_invalid_configuration_exits_non_zero(fake_controller, monkeypatch):
    monkeypatch.setenv("AUTO_COMMIT_TOKEN_LIMIT", "lots")

    result = CliRunner().invoke(run_auto_commit, [])

    assert result.exit_code == 1
    assert "Invalid auto-commit configuration" in result.output
    assert fake_controller.instances == []


def test_version_option():
    result = CliRunner().invoke(run_auto_commit, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_flags():
    result = CliRunner().invoke(run_auto_commit, ["-h"])

    assert result.exit_code == 0
    for flag in ("--dry-run", "--review", "--force", "--verbose", "--quiet"):
        assert flag in result.output


def test_missing_api_key_prints_a_single_diagnostic(tmp_path):
    """The real entry point reports a fatal error on exactly one stderr line."""

    env = {
        key: value
        for key, value in os.environ.items()
        if key != "OPENAI_API_KEY" and not key.startswith("AUTO_COMMIT_")
    }
    root = str(Path(__file__).resolve().parents[1])
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [root, env.get("PYTHONPATH")]))

    result = subprocess.run(
        [sys.executable, "-m", "auto_commit"],
        cwd=tmp_path,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=False,
    )

    lines = [line for line in result.stderr.splitlines() if line.strip()]
    assert result.returncode == 1
    assert lines == ["❌ Please set the OPENAI_API_KEY environment variable."]

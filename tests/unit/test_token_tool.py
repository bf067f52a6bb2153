"""Tests for the token operator script."""

import importlib.util
import json
from pathlib import Path

import pytest

from src.modules.auth.domain.entities import DeviceClass

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "token_tool.py"


@pytest.fixture
def token_tool(monkeypatch, token_service):
    spec = importlib.util.spec_from_file_location("token_tool", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    monkeypatch.setattr(module, "get_token_service", lambda: token_service)
    monkeypatch.setattr(module, "setup_logging", lambda: None)
    return module


def test_issue_prints_token(token_tool, token_service, capsys) -> None:
    exit_code = token_tool.main(["issue", "--username", "alice", "--device", "tablet"])

    assert exit_code == 0
    token = capsys.readouterr().out.strip().splitlines()[-1]
    assert token_service.username_of(token) == "alice"
    assert token_service.parse_claims(token).claims.audience == "tablet"


def test_inspect_valid_token_json(token_tool, token_service, capsys) -> None:
    token = token_service.issue("alice", DeviceClass.MOBILE)
    capsys.readouterr()

    exit_code = token_tool.main(["inspect", token, "--json"])

    assert exit_code == 0
    report = json.loads(capsys.readouterr().out)
    assert report["state"] == "valid"
    assert report["error"] is None
    assert report["subject"] == "alice"
    assert report["audience"] == "mobile"


def test_inspect_garbage(token_tool, capsys) -> None:
    exit_code = token_tool.main(["inspect", "garbage"])

    assert exit_code == 1
    out = capsys.readouterr().out
    assert any(line.startswith("state") and "malformed" in line for line in out.splitlines())


def test_configuration_error_exit_code(monkeypatch, token_tool, capsys) -> None:
    from src.core.domain.exceptions import ConfigurationError

    def broken():
        raise ConfigurationError("JWT secret must not be empty")

    monkeypatch.setattr(token_tool, "get_token_service", broken)

    assert token_tool.main(["issue", "--username", "alice"]) == 2
    assert "JWT secret must not be empty" in capsys.readouterr().err

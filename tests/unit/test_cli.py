"""
Unit tests for policylink.cli - Command-Line Interface.

Tests argument parsing, command routing, and the output of the commands that
need no reachable services.
"""

import json
import sys

import pytest

from policylink.cli import build_parser, main
from policylink.settings import clear_settings_cache

_URL_KEYS = [
    "LLM_SHIELD_URL",
    "LLM_COSTOPS_URL",
    "LLM_GOVERNANCE_URL",
    "LLM_EDGE_AGENT_URL",
    "INCIDENT_MANAGER_URL",
    "SENTINEL_URL",
    "LLM_SCHEMA_REGISTRY_URL",
    "LLM_CONFIG_MANAGER_URL",
    "LLM_OBSERVATORY_URL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Run from an empty directory with no service URLs in the environment."""
    monkeypatch.chdir(tmp_path)
    for key in _URL_KEYS:
        monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


def test_parser_builds_successfully():
    """Test parser can be built without errors."""
    parser = build_parser()
    assert parser is not None


def test_parser_list_command():
    """Test parsing list command."""
    parser = build_parser()
    args = parser.parse_args(["integrations", "list"])
    assert args.command == "integrations"
    assert args.action == "list"
    assert callable(args.func)


def test_parser_status_command():
    """Test parsing status command."""
    parser = build_parser()
    args = parser.parse_args(["integrations", "status"])
    assert args.command == "integrations"
    assert args.action == "status"


def test_parser_log_level():
    """Test global --log-level flag."""
    parser = build_parser()
    args = parser.parse_args(["--log-level", "DEBUG", "integrations", "list"])
    assert args.log_level == "DEBUG"


def test_parser_invalid_action_raises():
    """Test parser rejects unknown actions."""
    parser = build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["integrations", "restart"])


def test_main_without_command_exits(monkeypatch: pytest.MonkeyPatch):
    """Test bare invocation prints help and exits non-zero."""
    monkeypatch.setattr(sys, "argv", ["policylink"])
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 1


def test_list_prints_configured_urls(monkeypatch: pytest.MonkeyPatch, capsys):
    """Test list shows base URLs for configured slots and null for the rest."""
    monkeypatch.setenv("LLM_OBSERVATORY_URL", "http://obs:9000")
    monkeypatch.setattr(sys, "argv", ["policylink", "integrations", "list"])

    main()

    listing = json.loads(capsys.readouterr().out)
    assert listing["observatory"] == "http://obs:9000"
    assert listing["shield"] is None
    assert len(listing) == 9


def test_status_with_nothing_configured(monkeypatch: pytest.MonkeyPatch, capsys):
    """Test status reports every slot as not configured."""
    monkeypatch.setattr(sys, "argv", ["policylink", "integrations", "status"])

    main()

    status = json.loads(capsys.readouterr().out)
    assert set(status.values()) == {"not_configured"}
    assert len(status) == 9


def test_cli_module_importable():
    """Test CLI modules can be imported."""
    import policylink.cli
    import policylink.cli.__main__

    assert policylink.cli is not None

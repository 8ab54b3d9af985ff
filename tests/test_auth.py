"""Tests for token providers and logging setup."""

import logging
import subprocess

import pytest

from agentic_readiness.errors import RegistryUnavailable
from agentic_readiness.hub import auth
from agentic_readiness.hub.auth import GcloudToken, StaticToken, token_provider
from agentic_readiness.logger import get_logger, setup_logging


def test_static_token():
    assert StaticToken("abc")() == "abc"


def test_provider_selection():
    assert isinstance(token_provider("abc"), StaticToken)
    assert isinstance(token_provider(""), GcloudToken)


def test_gcloud_token(monkeypatch):
    monkeypatch.setattr(auth.shutil, "which", lambda binary: "/usr/bin/gcloud")
    monkeypatch.setattr(
        auth.subprocess,
        "run",
        lambda cmd, **kw: subprocess.CompletedProcess(cmd, 0, stdout="ya29.token\n", stderr=""),
    )
    assert GcloudToken()() == "ya29.token"


def test_gcloud_not_logged_in(monkeypatch):
    monkeypatch.setattr(auth.shutil, "which", lambda binary: "/usr/bin/gcloud")
    monkeypatch.setattr(
        auth.subprocess,
        "run",
        lambda cmd, **kw: subprocess.CompletedProcess(cmd, 1, stdout="", stderr="not logged in"),
    )
    with pytest.raises(RegistryUnavailable, match="not logged in"):
        GcloudToken()()


def test_gcloud_missing(monkeypatch):
    monkeypatch.setattr(auth.shutil, "which", lambda binary: None)
    with pytest.raises(RegistryUnavailable):
        GcloudToken()()


def test_module_loggers_share_package_namespace(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    root = setup_logging(level="DEBUG")
    assert root.level == logging.DEBUG
    assert get_logger("hub.client").name == "agentic_readiness.hub.client"
    assert get_logger("agentic_readiness.cli").name == "agentic_readiness.cli"


def test_unknown_log_level_is_config_error(monkeypatch):
    from agentic_readiness.errors import ConfigError

    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ConfigError, match="VERBOSE"):
        setup_logging(level="INFO")

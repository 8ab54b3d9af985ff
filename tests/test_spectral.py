"""Tests for the Spectral runner, with the subprocess stubbed out."""

import json
import subprocess
import tempfile
from pathlib import Path

import pytest

from agentic_readiness.errors import ToolingFailure
from agentic_readiness.lint import spectral
from agentic_readiness.lint.findings import Severity
from agentic_readiness.lint.spectral import SpectralRunner


def _write_spec(tmpdir: str) -> Path:
    path = Path(tmpdir) / "openapi.yaml"
    path.write_text("openapi: 3.0.3\ninfo:\n  title: Orders API\n  version: 1.0.0\npaths: {}\n")
    return path


def _stub_run(monkeypatch, returncode=0, stdout="[]", stderr=""):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

    monkeypatch.setattr(spectral.shutil, "which", lambda binary: f"/usr/bin/{binary}")
    monkeypatch.setattr(spectral.subprocess, "run", fake_run)
    return calls


def test_clean_spec(monkeypatch):
    calls = _stub_run(monkeypatch)
    with tempfile.TemporaryDirectory() as tmpdir:
        spec = _write_spec(tmpdir)
        assert SpectralRunner().lint(spec) == []
    assert calls[0][:3] == ["spectral", "lint", str(spec)]
    assert "--format" in calls[0] and "json" in calls[0]


def test_findings_with_exit_code_one_are_not_a_failure(monkeypatch):
    output = json.dumps([{"code": "r", "message": "m", "path": [], "severity": 0}])
    _stub_run(monkeypatch, returncode=1, stdout=output)
    with tempfile.TemporaryDirectory() as tmpdir:
        findings = SpectralRunner().lint(_write_spec(tmpdir))
    assert [f.severity for f in findings] == [Severity.ERROR]


def test_ruleset_is_passed(monkeypatch):
    calls = _stub_run(monkeypatch)
    with tempfile.TemporaryDirectory() as tmpdir:
        ruleset = Path(tmpdir) / ".spectral.yaml"
        ruleset.write_text("extends: spectral:oas\n")
        SpectralRunner(ruleset=ruleset).lint(_write_spec(tmpdir))
    assert calls[0][-2:] == ["--ruleset", str(ruleset)]


def test_crash_exit_code_is_tooling_failure(monkeypatch):
    _stub_run(monkeypatch, returncode=2, stdout="", stderr="Invalid ruleset")
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(ToolingFailure, match="Invalid ruleset"):
            SpectralRunner().lint(_write_spec(tmpdir))


def test_missing_binary(monkeypatch):
    monkeypatch.setattr(spectral.shutil, "which", lambda binary: None)
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(ToolingFailure, match="not found on PATH"):
            SpectralRunner(binary="no-such-spectral").lint(_write_spec(tmpdir))


def test_timeout(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs.get("timeout"))

    monkeypatch.setattr(spectral.shutil, "which", lambda binary: "/usr/bin/spectral")
    monkeypatch.setattr(spectral.subprocess, "run", fake_run)
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(ToolingFailure, match="timed out"):
            SpectralRunner(timeout=5).lint(_write_spec(tmpdir))


def test_missing_spec():
    with pytest.raises(ToolingFailure, match="Specification not found"):
        SpectralRunner().lint("/nonexistent/openapi.yaml")


def test_missing_ruleset():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(ToolingFailure, match="Ruleset not found"):
            SpectralRunner(ruleset=Path(tmpdir) / "nope.yaml").lint(_write_spec(tmpdir))

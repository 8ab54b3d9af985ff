"""Finding model and Spectral JSON parsing."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Any, Iterable

from agentic_readiness.errors import InvalidInput, ToolingFailure


class Severity(IntEnum):
    """Spectral severity; a lower value is more severe."""

    ERROR = 0
    WARNING = 1
    INFO = 2
    HINT = 3

    @classmethod
    def parse(cls, raw: Any) -> "Severity":
        """Accept Spectral's integer encoding or a severity name."""
        if isinstance(raw, Severity):
            return raw
        if isinstance(raw, int) and not isinstance(raw, bool):
            try:
                return cls(raw)
            except ValueError:
                raise InvalidInput(f"Unknown severity value: {raw!r}")
        if isinstance(raw, str):
            member = _SEVERITY_NAMES.get(raw.strip().lower())
            if member is not None:
                return member
        raise InvalidInput(f"Unknown severity value: {raw!r}")


_SEVERITY_NAMES = {
    "error": Severity.ERROR,
    "warn": Severity.WARNING,
    "warning": Severity.WARNING,
    "info": Severity.INFO,
    "information": Severity.INFO,
    "hint": Severity.HINT,
}


@dataclass(frozen=True)
class Finding:
    """A single lint rule violation or notice."""

    severity: Severity
    message: str
    path: str = ""  # e.g. "paths./orders.get.operationId"
    code: str = ""  # Rule id
    source: str = ""
    line: int | None = None

    @classmethod
    def from_spectral(cls, item: dict) -> "Finding":
        if not isinstance(item, dict):
            raise InvalidInput(f"Finding must be an object, got {type(item).__name__}")
        if "severity" not in item:
            raise InvalidInput(f"Finding has no severity: {item.get('code', '?')}")

        raw_path = item.get("path", [])
        if isinstance(raw_path, list):
            path = ".".join(str(p) for p in raw_path)
        else:
            path = str(raw_path or "")

        line = None
        start = (item.get("range") or {}).get("start") or {}
        if isinstance(start.get("line"), int):
            line = start["line"] + 1  # Spectral lines are zero-based

        return cls(
            severity=Severity.parse(item["severity"]),
            message=str(item.get("message", "")),
            path=path,
            code=str(item.get("code", "")),
            source=str(item.get("source", "") or ""),
            line=line,
        )


def parse_findings(items: Iterable[dict]) -> list[Finding]:
    """Convert decoded Spectral output into Finding records."""
    return [Finding.from_spectral(item) for item in items]


def parse_spectral_json(text: str) -> list[Finding]:
    """Parse the text of a ``spectral lint --format json`` run.

    Empty output means no findings. Output that is not a JSON array is a
    tooling problem, not a lint result.
    """
    if not text.strip():
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ToolingFailure(f"Linter output is not valid JSON: {e}")
    if not isinstance(data, list):
        raise ToolingFailure(f"Linter output must be a JSON array, got {type(data).__name__}")
    return parse_findings(data)


def load_findings(path: str | Path) -> list[Finding]:
    """Load findings from a saved Spectral JSON report."""
    p = Path(path)
    if not p.is_file():
        raise ToolingFailure(f"Findings file not found: {p}")
    return parse_spectral_json(p.read_text(encoding="utf-8"))

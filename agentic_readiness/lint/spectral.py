"""Spectral runner — the finding source for the pipeline.

Spectral exits 0 when nothing at or above its fail severity was found
and 1 when something was. Both are successful lint runs. Any other exit
code, a missing binary, a timeout or unreadable output means the linter
itself did not run.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from agentic_readiness.errors import ToolingFailure
from agentic_readiness.lint.findings import Finding, parse_spectral_json
from agentic_readiness.logger import get_logger

logger = get_logger(__name__)

LINT_EXIT_CODES = (0, 1)


class SpectralRunner:
    """Runs ``spectral lint`` against an OpenAPI document."""

    def __init__(
        self,
        binary: str = "spectral",
        ruleset: str | Path | None = None,
        working_dir: str | Path | None = None,
        timeout: int = 120,
    ):
        self.binary = binary
        self.ruleset = str(ruleset) if ruleset else ""
        self.working_dir = Path(working_dir) if working_dir else Path.cwd()
        self.timeout = timeout

    def command(self, spec_path: str | Path) -> list[str]:
        cmd = [self.binary, "lint", str(spec_path), "--format", "json", "--quiet"]
        if self.ruleset:
            cmd += ["--ruleset", self.ruleset]
        return cmd

    def lint(self, spec_path: str | Path) -> list[Finding]:
        """Lint ``spec_path`` and return its findings.

        Raises:
            ToolingFailure: the linter could not run to completion.
        """
        path = Path(spec_path)
        if not path.is_file():
            raise ToolingFailure(f"Specification not found: {path}")
        if self.ruleset and not Path(self.ruleset).is_file():
            raise ToolingFailure(f"Ruleset not found: {self.ruleset}")
        if shutil.which(self.binary) is None:
            raise ToolingFailure(
                f"Linter '{self.binary}' not found on PATH. "
                "Install it with: npm install -g @stoplight/spectral-cli"
            )

        cmd = self.command(path)
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                cwd=self.working_dir,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise ToolingFailure(f"Linter timed out after {self.timeout}s")
        except OSError as e:
            raise ToolingFailure(f"Linter could not be started: {e}")

        if proc.returncode not in LINT_EXIT_CODES:
            raise ToolingFailure(
                f"Linter exited with code {proc.returncode}: {proc.stderr.strip()[:2000]}"
            )

        findings = parse_spectral_json(proc.stdout)
        logger.info("Linted %s: %d finding(s)", path, len(findings))
        return findings

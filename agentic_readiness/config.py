"""Runtime configuration.

Values come from the process environment, optionally seeded from a
``.env`` file. Cloud Build passes substitutions with a leading
underscore (``_PROJECT_ID``); those take precedence over the plain
names used for local runs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values, load_dotenv

from agentic_readiness.errors import ConfigError

DEFAULT_ENDPOINT = "https://apihub.googleapis.com/v1"
DEFAULT_TIMEOUT = 30.0
HANDOFF_FILE = "readiness.env"
HANDOFF_KEY = "READINESS_LEVEL"


def _env(*names: str, default: str = "") -> str:
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return default


@dataclass
class Settings:
    """Settings shared by the CLI and the pipeline."""

    project_id: str = ""
    location: str = ""
    api_id: str = ""
    version_id: str = ""
    owner_email: str = ""
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
    access_token: str = ""
    spectral_bin: str = "spectral"
    spectral_ruleset: str = ""

    @classmethod
    def from_env(cls, env_file: str | Path | None = ".env") -> "Settings":
        """Build settings from the environment after loading ``env_file``.

        Variables already set in the environment are not overridden by
        the file.
        """
        if env_file and Path(env_file).is_file():
            load_dotenv(env_file, override=False)

        timeout_raw = _env("API_HUB_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigError(f"API_HUB_TIMEOUT must be a number, got '{timeout_raw}'")

        return cls(
            project_id=_env("_PROJECT_ID", "PROJECT_ID"),
            location=_env("_API_HUB_REGION", "API_HUB_REGION"),
            api_id=_env("_API_ID", "API_ID"),
            version_id=_env("_VERSION", "VERSION"),
            owner_email=_env("API_OWNER_EMAIL"),
            endpoint=_env("API_HUB_ENDPOINT", default=DEFAULT_ENDPOINT),
            timeout=timeout,
            access_token=_env("API_HUB_TOKEN"),
            spectral_bin=_env("SPECTRAL_BIN", default="spectral"),
            spectral_ruleset=_env("SPECTRAL_RULESET"),
        )

    def require(self, *fields: str) -> None:
        """Raise ConfigError listing every named field that is empty."""
        fields = fields or ("project_id", "location")
        missing = [f for f in fields if not str(getattr(self, f, "")).strip()]
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")


def write_handoff(level_id: str, path: str | Path = HANDOFF_FILE) -> Path:
    """Write the readiness level for the next build step to pick up."""
    out = Path(path)
    out.write_text(f"{HANDOFF_KEY}={level_id}\n", encoding="utf-8")
    return out


def read_handoff(path: str | Path = HANDOFF_FILE) -> str:
    """Read the level written by :func:`write_handoff`; empty if absent."""
    p = Path(path)
    if not p.is_file():
        return ""
    return (dotenv_values(p).get(HANDOFF_KEY) or "").strip()

"""Bearer token providers for API Hub calls.

A provider is any zero-argument callable returning an access token
string. The client calls it once per request; gcloud caches its own
credentials so repeated calls are cheap.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import Callable

from agentic_readiness.errors import RegistryUnavailable

TokenProvider = Callable[[], str]


class StaticToken:
    """Fixed token, e.g. from ``API_HUB_TOKEN`` or a test."""

    def __init__(self, token: str):
        self.token = token

    def __call__(self) -> str:
        if not self.token:
            raise RegistryUnavailable("No access token configured")
        return self.token


class GcloudToken:
    """Token from ``gcloud auth print-access-token``."""

    def __init__(self, binary: str = "gcloud", timeout: int = 30):
        self.binary = binary
        self.timeout = timeout

    def __call__(self) -> str:
        if shutil.which(self.binary) is None:
            raise RegistryUnavailable(f"'{self.binary}' not found on PATH; cannot obtain a token")
        try:
            proc = subprocess.run(
                [self.binary, "auth", "print-access-token"],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise RegistryUnavailable(f"Token request timed out after {self.timeout}s")

        token = proc.stdout.strip()
        if proc.returncode != 0 or not token:
            raise RegistryUnavailable(
                f"gcloud could not print an access token: {proc.stderr.strip()[:500]}"
            )
        return token


def token_provider(access_token: str = "") -> TokenProvider:
    """Static token when one is configured, gcloud otherwise."""
    return StaticToken(access_token) if access_token else GcloudToken()

"""Shared fixtures: an in-memory API Hub behind httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from agentic_readiness.hub.auth import StaticToken
from agentic_readiness.hub.client import ApiHubClient

ENDPOINT = "https://hub.test/v1"
PROJECT = "demo-project"
LOCATION = "us-central1"
PARENT = f"projects/{PROJECT}/locations/{LOCATION}"

_ID_PARAMS = ("attributeId", "apiId", "versionId", "specId")


class FakeHub:
    """Minimal API Hub: GET / POST ?<kind>Id= / PATCH ?updateMask=attributes."""

    def __init__(self):
        self.resources: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self._failures: list[tuple[str, str, int, str]] = []
        self.network_error = False
        self.timeout_on: str | None = None  # HTTP method that times out

    def fail(self, method: str, suffix: str, status: int, body: str = '{"error": "boom"}'):
        """Answer ``method`` on names ending in ``suffix`` with ``status``."""
        self._failures.append((method, suffix, status, body))

    def seed(self, name: str, **fields) -> dict:
        self.resources[name] = {"name": name, **fields}
        return self.resources[name]

    def calls(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.network_error:
            raise httpx.ConnectError("connection refused", request=request)
        if request.method == self.timeout_on:
            raise httpx.ReadTimeout("read timed out", request=request)

        name = request.url.path.removeprefix("/v1/")
        for method, suffix, status, body in self._failures:
            if request.method == method and name.endswith(suffix):
                return httpx.Response(status, text=body)

        if request.method == "GET":
            if name in self.resources:
                return httpx.Response(200, json=self.resources[name])
            return httpx.Response(404, json={"error": {"code": 404, "status": "NOT_FOUND"}})

        if request.method == "POST":
            resource_id = next(
                request.url.params[p] for p in _ID_PARAMS if p in request.url.params
            )
            full = f"{name}/{resource_id}"
            if full in self.resources:
                return httpx.Response(409, json={"error": {"code": 409, "status": "ALREADY_EXISTS"}})
            self.resources[full] = {**json.loads(request.content), "name": full}
            return httpx.Response(200, json=self.resources[full])

        if request.method == "PATCH":
            if name not in self.resources:
                return httpx.Response(404, json={"error": {"code": 404}})
            body = json.loads(request.content)
            for field in request.url.params.get("updateMask", "").split(","):
                self.resources[name][field] = body[field]
            return httpx.Response(200, json=self.resources[name])

        return httpx.Response(405)


@pytest.fixture
def hub() -> FakeHub:
    return FakeHub()


@pytest.fixture
def client(hub):
    http = httpx.Client(transport=httpx.MockTransport(hub.handler))
    c = ApiHubClient(
        PROJECT,
        LOCATION,
        StaticToken("test-token"),
        endpoint=ENDPOINT,
        http_client=http,
    )
    yield c
    c.close()

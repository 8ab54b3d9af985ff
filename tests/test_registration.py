"""Tests for API/version registration."""

import base64
import json
import tempfile
from pathlib import Path

import pytest

from agentic_readiness.errors import InvalidInput
from agentic_readiness.hub.models import EnsureOutcome
from agentic_readiness.hub.registration import ApiRegistrar, RegistrationTarget, slugify
from conftest import PARENT

SPEC_TEXT = """\
openapi: 3.0.3
info:
  title: Agentic Orders API
  version: 1.2.0
paths: {}
"""


def _write_spec(tmpdir: str, text: str = SPEC_TEXT) -> Path:
    path = Path(tmpdir) / "openapi.yaml"
    path.write_text(text)
    return path


def test_register_creates_api_and_version(client, hub):
    target = RegistrationTarget(api_id="orders-api", version_id="v1", display_name="Orders API",
                                owner_email="owner@example.com")
    assert ApiRegistrar(client).register(target) == ("orders-api", "v1")

    api = hub.resources[f"{PARENT}/apis/orders-api"]
    assert api["displayName"] == "Orders API"
    assert api["owner"] == {"email": "owner@example.com"}
    assert f"{PARENT}/apis/orders-api/versions/v1" in hub.resources


def test_register_twice_is_idempotent(client, hub):
    registrar = ApiRegistrar(client)
    target = RegistrationTarget(api_id="orders-api", version_id="v1")
    registrar.register(target)
    posts = len(hub.calls("POST"))

    assert registrar.ensure_api(target) == EnsureOutcome.ALREADY_EXISTS
    assert registrar.ensure_version(target) == EnsureOutcome.ALREADY_EXISTS
    assert len(hub.calls("POST")) == posts


def test_version_conflict_is_success(client, hub):
    hub.fail("POST", "/versions", 409)
    target = RegistrationTarget(api_id="orders-api", version_id="v1")
    assert ApiRegistrar(client).register(target) == ("orders-api", "v1")


def test_upload_spec(client, hub):
    with tempfile.TemporaryDirectory() as tmpdir:
        spec = _write_spec(tmpdir)
        target = RegistrationTarget(api_id="orders-api", version_id="v1",
                                    spec_path=str(spec), upload_spec=True)
        ApiRegistrar(client).register(target)

    post = hub.calls("POST")[-1]
    assert post.url.params["specId"] == "openapi"
    body = json.loads(post.content)
    assert body["specType"]["enumValues"]["values"][0]["id"] == "openapi"
    assert body["contents"]["mimeType"] == "application/yaml"
    assert base64.b64decode(body["contents"]["contents"]).decode() == SPEC_TEXT


def test_from_openapi_derives_ids():
    with tempfile.TemporaryDirectory() as tmpdir:
        target = RegistrationTarget.from_openapi(_write_spec(tmpdir))
    assert target.api_id == "agentic-orders-api"
    assert target.version_id == "1-2-0"
    assert target.display_name == "Agentic Orders API"


def test_from_openapi_explicit_ids_win():
    with tempfile.TemporaryDirectory() as tmpdir:
        target = RegistrationTarget.from_openapi(
            _write_spec(tmpdir), api_id="orders", version_id="v1", owner_email="a@b.c"
        )
    assert (target.api_id, target.version_id) == ("orders", "v1")
    assert target.owner_email == "a@b.c"


def test_from_openapi_without_info_needs_ids():
    with tempfile.TemporaryDirectory() as tmpdir:
        spec = _write_spec(tmpdir, "openapi: 3.0.3\npaths: {}\n")
        with pytest.raises(InvalidInput):
            RegistrationTarget.from_openapi(spec)


def test_slugify():
    assert slugify("Human-Centric Orders API") == "human-centric-orders-api"
    assert slugify(" v1.0 (beta) ") == "v1-0-beta"

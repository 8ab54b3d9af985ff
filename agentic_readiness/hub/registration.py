"""API registration — make sure the API and version exist in the hub.

Each step checks for the resource first and treats "already there" (or a
409 from a concurrent creator) as success, so registering the same
target twice is harmless.
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from pathlib import Path

import yaml

from agentic_readiness.errors import InvalidInput
from agentic_readiness.hub.client import ApiHubClient
from agentic_readiness.hub.models import EnsureOutcome
from agentic_readiness.logger import get_logger

logger = get_logger(__name__)

OPENAPI_SPEC_TYPE = {
    "enumValues": {"values": [{"id": "openapi", "displayName": "OpenAPI Spec"}]}
}


def slugify(value: str) -> str:
    """Lowercase resource id: letters, digits and hyphens only."""
    slug = re.sub(r"[^a-z0-9-]+", "-", value.strip().lower()).strip("-")
    return re.sub(r"-{2,}", "-", slug)


@dataclass
class RegistrationTarget:
    """What to register: an API, one of its versions, optionally a spec."""

    api_id: str
    version_id: str
    display_name: str = ""
    version_display_name: str = ""
    owner_email: str = ""
    spec_path: str = ""
    upload_spec: bool = False

    @classmethod
    def from_openapi(
        cls,
        spec_path: str | Path,
        api_id: str = "",
        version_id: str = "",
        display_name: str = "",
        **kwargs,
    ) -> "RegistrationTarget":
        """Fill ids and names from the document's ``info`` block when not given."""
        path = Path(spec_path)
        info: dict = {}
        try:
            with open(path) as f:
                doc = yaml.safe_load(f) or {}
            if isinstance(doc, dict):
                info = doc.get("info") or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not read info block from %s: %s", path, e)

        title = str(info.get("title", "") or "")
        api_id = api_id or slugify(title)
        version_id = version_id or slugify(str(info.get("version", "") or ""))
        if not api_id or not version_id:
            raise InvalidInput(
                f"Cannot derive API/version ids from {path}; pass them explicitly"
            )
        return cls(
            api_id=api_id,
            version_id=version_id,
            display_name=display_name or title or api_id,
            spec_path=str(path),
            **kwargs,
        )


class ApiRegistrar:
    """Registers APIs and versions through an :class:`ApiHubClient`."""

    def __init__(self, client: ApiHubClient):
        self.client = client

    def ensure_api(self, target: RegistrationTarget) -> EnsureOutcome:
        if self.client.get_api(target.api_id) is not None:
            logger.info("API %s already exists", target.api_id)
            return EnsureOutcome.ALREADY_EXISTS

        body: dict = {"displayName": target.display_name or target.api_id}
        if target.owner_email:
            body["owner"] = {"email": target.owner_email}
        outcome = self.client.create_api(target.api_id, body)
        logger.info("API %s: %s", target.api_id, outcome.value)
        return outcome

    def ensure_version(self, target: RegistrationTarget) -> EnsureOutcome:
        if self.client.get_version(target.api_id, target.version_id) is not None:
            logger.info("Version %s/%s already exists", target.api_id, target.version_id)
            return EnsureOutcome.ALREADY_EXISTS

        body = {"displayName": target.version_display_name or target.version_id}
        outcome = self.client.create_version(target.api_id, target.version_id, body)
        logger.info("Version %s/%s: %s", target.api_id, target.version_id, outcome.value)
        return outcome

    def upload_spec(self, target: RegistrationTarget) -> EnsureOutcome:
        path = Path(target.spec_path)
        mime = "application/json" if path.suffix == ".json" else "application/yaml"
        body = {
            "displayName": path.name,
            "specType": OPENAPI_SPEC_TYPE,
            "contents": {
                "contents": base64.b64encode(path.read_bytes()).decode("ascii"),
                "mimeType": mime,
            },
        }
        spec_id = slugify(path.stem) or "openapi"
        return self.client.create_spec(target.api_id, target.version_id, spec_id, body)

    def register(self, target: RegistrationTarget) -> tuple[str, str]:
        """Ensure the API and version exist; return ``(api_id, version_id)``."""
        self.ensure_api(target)
        self.ensure_version(target)
        if target.upload_spec and target.spec_path:
            self.upload_spec(target)
        return target.api_id, target.version_id

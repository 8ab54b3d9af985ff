"""API Hub REST client — the attribute store.

All operations are single blocking round-trips with no local caching.
Creation is idempotent: a resource that already exists, or that a
concurrent caller created first (HTTP 409), is reported as
``EnsureOutcome.ALREADY_EXISTS`` rather than raised.
"""

from __future__ import annotations

import httpx

from agentic_readiness.config import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT
from agentic_readiness.errors import ConfigError, RegistryError, RegistryUnavailable
from agentic_readiness.hub.auth import TokenProvider
from agentic_readiness.hub.models import (
    AssignmentResult,
    AttributeDefinition,
    EnsureOutcome,
    enum_values_payload,
)
from agentic_readiness.logger import get_logger

logger = get_logger(__name__)

HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _json_body(resp: httpx.Response, what: str) -> dict:
    """Decode a success reply; anything but a JSON object is a registry error."""
    if not resp.content:
        return {}
    try:
        data = resp.json()
    except ValueError:
        raise RegistryError(f"{what} returned a non-JSON body", resp.status_code, resp.text)
    if not isinstance(data, dict):
        raise RegistryError(f"{what} returned a non-object body", resp.status_code, resp.text)
    return data



class ApiHubClient:
    """Client for one API Hub instance (project + location)."""

    def __init__(
        self,
        project: str,
        location: str,
        token_provider: TokenProvider,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
    ):
        if not project or not project.strip():
            raise ConfigError("API Hub project is required")
        if not location or not location.strip():
            raise ConfigError("API Hub location is required")

        self.project = project
        self.location = location
        self.endpoint = endpoint.rstrip("/")
        self._token_provider = token_provider
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ApiHubClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # -- resource names ------------------------------------------------------

    @property
    def parent(self) -> str:
        return f"projects/{self.project}/locations/{self.location}"

    def attribute_name(self, attribute_id: str) -> str:
        return f"{self.parent}/attributes/{attribute_id}"

    def api_name(self, api_id: str) -> str:
        return f"{self.parent}/apis/{api_id}"

    def version_name(self, api_id: str, version_id: str) -> str:
        return f"{self.api_name(api_id)}/versions/{version_id}"

    # -- transport -----------------------------------------------------------

    def _request(
        self,
        method: str,
        name: str,
        params: dict | None = None,
        json: dict | None = None,
    ) -> httpx.Response:
        token = self._token_provider()
        url = f"{self.endpoint}/{name}"
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        logger.debug("%s %s %s", method, url, params or "")
        try:
            return self._http.request(method, url, params=params, json=json, headers=headers)
        except httpx.TimeoutException as exc:
            raise RegistryUnavailable(f"{method} {name} timed out: {exc}")
        except httpx.RequestError as exc:
            raise RegistryUnavailable(f"{method} {name} failed: {exc}")

    def _get(self, name: str) -> dict | None:
        """GET a resource; None when the registry says it does not exist."""
        resp = self._request("GET", name)
        if resp.status_code == HTTP_NOT_FOUND:
            return None
        if not _is_success(resp.status_code):
            raise RegistryError(f"GET {name} failed", resp.status_code, resp.text)
        return _json_body(resp, f"GET {name}")

    def _create(self, collection: str, id_param: str, resource_id: str, body: dict) -> EnsureOutcome:
        resp = self._request("POST", collection, params={id_param: resource_id}, json=body)
        if _is_success(resp.status_code):
            return EnsureOutcome.CREATED
        if resp.status_code == HTTP_CONFLICT:
            # A concurrent creator won the race; the resource exists.
            logger.info("%s/%s already exists (409)", collection, resource_id)
            return EnsureOutcome.ALREADY_EXISTS
        raise RegistryError(
            f"Failed to create {collection}/{resource_id}", resp.status_code, resp.text
        )

    # -- attributes ----------------------------------------------------------

    def get_attribute(self, attribute_id: str) -> AttributeDefinition | None:
        data = self._get(self.attribute_name(attribute_id))
        return AttributeDefinition.from_payload(data) if data is not None else None

    def ensure_attribute(self, definition: AttributeDefinition) -> EnsureOutcome:
        """Create ``definition`` unless an attribute with its id exists."""
        if self.get_attribute(definition.attribute_id) is not None:
            logger.info("Attribute %s already exists", definition.attribute_id)
            return EnsureOutcome.ALREADY_EXISTS

        logger.info("Attribute %s not found, creating", definition.attribute_id)
        return self._create(
            f"{self.parent}/attributes",
            "attributeId",
            definition.attribute_id,
            definition.to_payload(),
        )

    # -- versions ------------------------------------------------------------

    def get_api(self, api_id: str) -> dict | None:
        return self._get(self.api_name(api_id))

    def create_api(self, api_id: str, body: dict) -> EnsureOutcome:
        return self._create(f"{self.parent}/apis", "apiId", api_id, body)

    def get_version(self, api_id: str, version_id: str) -> dict | None:
        return self._get(self.version_name(api_id, version_id))

    def create_version(self, api_id: str, version_id: str, body: dict) -> EnsureOutcome:
        return self._create(f"{self.api_name(api_id)}/versions", "versionId", version_id, body)

    def create_spec(self, api_id: str, version_id: str, spec_id: str, body: dict) -> EnsureOutcome:
        return self._create(
            f"{self.version_name(api_id, version_id)}/specs", "specId", spec_id, body
        )

    def get_assigned_values(self, api_id: str, version_id: str, attribute_id: str) -> list[str]:
        """Value ids currently assigned for ``attribute_id`` on a version."""
        version = self.get_version(api_id, version_id)
        if version is None:
            raise RegistryError(
                f"Version {api_id}/{version_id} not found", HTTP_NOT_FOUND, ""
            )
        return _value_ids(version.get("attributes", {}), self.attribute_name(attribute_id))

    def assign_attribute(
        self,
        api_id: str,
        version_id: str,
        attribute_id: str,
        value_id: str,
    ) -> AssignmentResult:
        """Set ``attribute_id`` on a version to exactly ``[value_id]``.

        The update mask covers the whole attributes map, so the current
        map is read first and only this attribute's entry is replaced.
        """
        name = self.version_name(api_id, version_id)
        attr_name = self.attribute_name(attribute_id)

        current = self.get_version(api_id, version_id)
        if current is None:
            raise RegistryError(f"Version {api_id}/{version_id} not found", HTTP_NOT_FOUND, "")

        attributes = dict(current.get("attributes") or {})
        attributes[attr_name] = enum_values_payload([value_id])

        resp = self._request(
            "PATCH",
            name,
            params={"updateMask": "attributes"},
            json={"attributes": attributes},
        )
        if not _is_success(resp.status_code):
            raise RegistryError(f"Failed to assign {attribute_id} on {name}", resp.status_code, resp.text)

        logger.info("Assigned %s=%s to %s/%s", attribute_id, value_id, api_id, version_id)
        body = _json_body(resp, f"PATCH {name}")
        values = _value_ids(body.get("attributes", {}), attr_name) or [value_id]
        return AssignmentResult(
            api_id=api_id,
            version_id=version_id,
            attribute_name=attr_name,
            values=values,
            status_code=resp.status_code,
        )


def _value_ids(attributes: dict, attr_name: str) -> list[str]:
    entry = attributes.get(attr_name) or {}
    return [v.get("id", "") for v in entry.get("enumValues", {}).get("values", [])]

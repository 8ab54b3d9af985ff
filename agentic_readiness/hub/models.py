"""Registry data models — attribute definitions and call outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from agentic_readiness.lint.classifier import ReadinessLevel


class AttributeScope(Enum):
    """Which resource type an attribute can be attached to."""

    SCOPE_UNSPECIFIED = "SCOPE_UNSPECIFIED"
    API = "API"
    VERSION = "VERSION"
    SPEC = "SPEC"
    API_OPERATION = "API_OPERATION"
    DEPLOYMENT = "DEPLOYMENT"
    DEPENDENCY = "DEPENDENCY"
    DEFINITION = "DEFINITION"
    EXTERNAL_API = "EXTERNAL_API"
    PLUGIN = "PLUGIN"


class AttributeDataType(Enum):
    DATA_TYPE_UNSPECIFIED = "DATA_TYPE_UNSPECIFIED"
    ENUM = "ENUM"
    JSON = "JSON"
    STRING = "STRING"
    URI = "URI"


class EnsureOutcome(Enum):
    """Result of an idempotent create."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


@dataclass(frozen=True)
class AllowedValue:
    id: str
    display_name: str

    def to_payload(self) -> dict:
        return {"id": self.id, "displayName": self.display_name}


@dataclass
class AttributeDefinition:
    """An enumerated attribute in the registry, keyed by its id."""

    attribute_id: str
    display_name: str
    description: str = ""
    scope: AttributeScope = AttributeScope.VERSION
    data_type: AttributeDataType = AttributeDataType.ENUM
    allowed_values: list[AllowedValue] = field(default_factory=list)
    cardinality: int = 1
    name: str = ""  # Fully-qualified resource name, set by the registry

    def to_payload(self) -> dict:
        """Body for the attribute create call."""
        payload = {
            "displayName": self.display_name,
            "description": self.description,
            "scope": self.scope.value,
            "dataType": self.data_type.value,
            "cardinality": self.cardinality,
        }
        if self.allowed_values:
            payload["allowedValues"] = [v.to_payload() for v in self.allowed_values]
        return payload

    @classmethod
    def from_payload(cls, data: dict) -> "AttributeDefinition":
        name = data.get("name", "")
        return cls(
            attribute_id=name.rsplit("/", 1)[-1],
            display_name=data.get("displayName", ""),
            description=data.get("description", ""),
            scope=_member(AttributeScope, data.get("scope"), AttributeScope.SCOPE_UNSPECIFIED),
            data_type=_member(
                AttributeDataType, data.get("dataType"), AttributeDataType.DATA_TYPE_UNSPECIFIED
            ),
            allowed_values=[
                AllowedValue(id=v.get("id", ""), display_name=v.get("displayName", ""))
                for v in data.get("allowedValues", [])
            ],
            cardinality=_cardinality(data.get("cardinality", 1)),
            name=name,
        )

    @property
    def allowed_ids(self) -> list[str]:
        return [v.id for v in self.allowed_values]


def _member(enum_cls, raw, unspecified):
    """Enum member for ``raw``; values this client does not know map to ``unspecified``."""
    try:
        return enum_cls(raw)
    except ValueError:
        return unspecified


def _cardinality(raw) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 1


READINESS_ATTRIBUTE_ID = "agentic-readiness"

READINESS_ATTRIBUTE = AttributeDefinition(
    attribute_id=READINESS_ATTRIBUTE_ID,
    display_name="Agentic Readiness",
    description=(
        "Indicates the level of AI agent readiness "
        "(Low=Passive, Medium=Proactive, High=Autonomous)."
    ),
    scope=AttributeScope.VERSION,
    data_type=AttributeDataType.ENUM,
    allowed_values=[
        AllowedValue(id=level.id, display_name=level.display_name)
        for level in sorted(ReadinessLevel)
    ],
    cardinality=1,
)


def enum_values_payload(value_ids: list[str]) -> dict:
    """Attribute value set in the shape the registry expects."""
    return {"enumValues": {"values": [{"id": v} for v in value_ids]}}


@dataclass
class AssignmentResult:
    """Outcome of patching an attribute onto an API version."""

    api_id: str
    version_id: str
    attribute_name: str
    values: list[str] = field(default_factory=list)
    status_code: int = 0

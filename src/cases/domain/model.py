"""Domain model for case records.

Python attributes are snake_case; the JSON wire format keeps the field
names the dashboard and the case producers already exchange.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class InvalidCase(ValueError):
    """Raised when a payload cannot be turned into a case record."""


class CaseNotFound(Exception):
    """Raised when no case matches the requested identifier."""

    def __init__(self, case_id):
        super().__init__(f"Case with ID {case_id} not found in store.")
        self.case_id = case_id


# attribute name -> JSON name
WIRE_NAMES = {
    "id": "id",
    "title": "title",
    "status": "status",
    "created_at": "createdAt",
    "summary": "summary",
    "applicant_name": "applicantName",
    "postal_code": "postalCode",
    "original_cv_url": "original_cv_url",
    "redacted_cv_url": "redacted_cv_url",
    "email_subject": "email_subject",
    "email_body": "email_body",
    "confirm_url": "confirm_url",
    "contacts": "contacts",
}
ATTRIBUTE_NAMES = {wire: attr for attr, wire in WIRE_NAMES.items()}

# contacts are fixed at creation
IMMUTABLE_FIELDS = {"contacts"}

OPEN_STATUS = "Offen"


def parse_case_id(value: Any) -> Optional[int]:
    """Parse an identifier from a path, query or body value. None if not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Contact:
    firma: str
    email: str
    plz: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Contact":
        if not isinstance(data, dict):
            raise InvalidCase(f"Contact must be an object, got {type(data).__name__}")
        return cls(
            firma=str(data.get("firma") or ""),
            email=str(data.get("email") or ""),
            plz=str(data.get("plz") or ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"firma": self.firma, "email": self.email, "plz": self.plz}


@dataclass
class CaseRecord:
    id: int
    title: str = ""
    status: str = ""
    created_at: str = ""              # ISO timestamp as sent by the producer
    summary: str = ""
    applicant_name: str = ""
    postal_code: str = ""
    original_cv_url: str = ""
    redacted_cv_url: str = ""
    email_subject: str = ""
    email_body: str = ""              # HTML
    confirm_url: Optional[str] = None
    contacts: List[Contact] = field(default_factory=list)

    @property
    def has_confirm_url(self) -> bool:
        return bool(self.confirm_url)

    @property
    def is_open(self) -> bool:
        return self.status == OPEN_STATUS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CaseRecord":
        """Build a record from its JSON form. Only the id is required."""
        if not isinstance(data, dict):
            raise InvalidCase(f"Case must be an object, got {type(data).__name__}")
        if data.get("id") is None:
            raise InvalidCase("Case is missing an id")

        case_id = parse_case_id(data["id"])
        if case_id is None:
            raise InvalidCase(f"Case id {data['id']!r} is not numeric")

        values = {"id": case_id}
        for attr, wire in WIRE_NAMES.items():
            if attr in ("id", "contacts", "confirm_url") or wire not in data:
                continue
            value = data[wire]
            values[attr] = "" if value is None else str(value)

        if data.get("confirm_url"):
            values["confirm_url"] = str(data["confirm_url"])

        contacts = data.get("contacts") or []
        if not isinstance(contacts, list):
            raise InvalidCase("Case contacts must be a list")
        values["contacts"] = [Contact.from_dict(c) for c in contacts]

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "contacts":
                value = [c.to_dict() for c in value]
            elif f.name == "confirm_url" and not value:
                continue
            data[WIRE_NAMES[f.name]] = value
        return data

    def merge(self, patch: Dict[str, Any]) -> "CaseRecord":
        """
        Shallow-merge a partial record (JSON names) into a new record.

        Fields not named in the patch keep their values. Unknown fields are
        dropped and contacts cannot be replaced.
        """
        changes = {}
        for wire, value in patch.items():
            attr = ATTRIBUTE_NAMES.get(wire)
            if attr is None:
                logger.debug(f"Ignoring unknown field '{wire}' in patch for case {self.id}")
                continue
            if attr in IMMUTABLE_FIELDS:
                logger.warning(f"Ignoring patch of immutable field '{wire}' for case {self.id}")
                continue
            if attr == "id":
                case_id = parse_case_id(value)
                if case_id is None:
                    raise InvalidCase(f"Case id {value!r} is not numeric")
                changes[attr] = case_id
            elif attr == "confirm_url":
                changes[attr] = str(value) if value else None
            else:
                changes[attr] = "" if value is None else str(value)
        return replace(self, **changes)

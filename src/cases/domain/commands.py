"""Commands for the case service."""

from dataclasses import dataclass
from typing import Any, Dict, List


@dataclass
class Command:
    """Base class for commands dispatched through the message bus."""


@dataclass
class AddCases(Command):
    """Command to append case payloads (JSON form) to the store."""
    cases: List[Dict[str, Any]]


@dataclass
class UpdateCase(Command):
    """Command to shallow-merge a partial record onto an existing case."""
    case_id: int
    patch: Dict[str, Any]


@dataclass
class AssignConfirmLink(Command):
    """Command to set the confirmation URL of a case."""
    case_id: int
    link: str

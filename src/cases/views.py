"""
Views for read operations - separate from command/write path.
Views return plain JSON-ready dicts instead of domain objects.
"""
import logging
from typing import Any, Dict, List, Optional

from cases.service_layer.unit_of_work import CaseStoreUnitOfWork

logger = logging.getLogger(__name__)


def list_cases(uow: CaseStoreUnitOfWork) -> List[Dict[str, Any]]:
    """All cases in store order, no pagination or filtering."""
    with uow:
        return [c.to_dict() for c in uow.cases.list()]


def get_link_status(case_id: int, uow: CaseStoreUnitOfWork) -> Optional[Dict[str, Any]]:
    """
    Minimal link state of one case for dashboard polling.

    ``confirm_url`` is an empty string while no link has been assigned.
    """
    with uow:
        case = uow.cases.get(case_id)

    if case is None:
        return None
    return {"id": case.id, "confirm_url": case.confirm_url or ""}

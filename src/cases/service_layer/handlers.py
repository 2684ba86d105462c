import logging
from typing import List

from cases.domain.commands import AddCases, AssignConfirmLink, UpdateCase
from cases.domain.model import CaseNotFound, CaseRecord
from cases.service_layer.unit_of_work import CaseStoreUnitOfWork

logger = logging.getLogger(__name__)


def add_cases(command: AddCases, uow: CaseStoreUnitOfWork) -> int:
    """
    Append case payloads to the store.

    All payloads are parsed before anything is written, so an invalid
    payload leaves the store unchanged.

    Returns:
        Number of appended records
    """
    records: List[CaseRecord] = [CaseRecord.from_dict(item) for item in command.cases]

    with uow:
        uow.cases.push(*records)
        uow.commit()

    logger.info(f"Added {len(records)} cases: {[r.id for r in records]}")
    return len(records)


def update_case(command: UpdateCase, uow: CaseStoreUnitOfWork) -> CaseRecord:
    with uow:
        updated = uow.cases.update(command.case_id, command.patch)
        if updated is None:
            raise CaseNotFound(command.case_id)
        uow.commit()

    logger.info(f"Updated case {command.case_id} fields {sorted(command.patch)}")
    return updated


def assign_confirm_link(command: AssignConfirmLink, uow: CaseStoreUnitOfWork) -> CaseRecord:
    """Set the confirmation URL; an existing link is overwritten."""
    with uow:
        updated = uow.cases.update(command.case_id, {"confirm_url": command.link})
        if updated is None:
            raise CaseNotFound(command.case_id)
        uow.commit()

    logger.info(f"Successfully set link for Case {command.case_id}.")
    return updated

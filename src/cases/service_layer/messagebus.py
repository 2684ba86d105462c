"""Message bus for the case service following Cosmic Python pattern."""

from __future__ import annotations
import logging
from typing import Callable, Dict, Type, TYPE_CHECKING

from cases.domain.commands import AddCases, AssignConfirmLink, Command, UpdateCase
from cases.service_layer import handlers

if TYPE_CHECKING:
    from cases.service_layer.unit_of_work import CaseStoreUnitOfWork

logger = logging.getLogger(__name__)


def handle(command: Command, uow: CaseStoreUnitOfWork):
    """Handle command with its registered handler and return the handler's result."""
    if not isinstance(command, Command):
        raise Exception(f"{command} was not a Command")

    logger.info(f"handling command {type(command).__name__}")
    try:
        handler = COMMAND_HANDLERS[type(command)]
        return handler(command, uow=uow)
    except Exception:
        logger.debug("Exception handling command %s", command, exc_info=True)
        raise


# Command handlers - single handler per command type
COMMAND_HANDLERS = {
    AddCases: handlers.add_cases,
    UpdateCase: handlers.update_case,
    AssignConfirmLink: handlers.assign_confirm_link,
}  # type: Dict[Type[Command], Callable]

"""Unit of Work for the case store."""
from __future__ import annotations

from cases.adapters.repository import AbstractCaseRepository


class CaseStoreUnitOfWork:
    """
    Scope around one request's use of the process-wide case repository.

    Neither store backend stages writes, so commit and rollback are no-ops.
    """

    def __init__(self, cases: AbstractCaseRepository):
        self.cases = cases

    def __enter__(self) -> CaseStoreUnitOfWork:
        return self

    def __exit__(self, *args):
        self.rollback()

    def commit(self):
        pass

    def rollback(self):
        pass

"""Detail view of a single case: documents, email template and contact table."""
import logging
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Set, Tuple

import requests
from pyuca import Collator

from cases.domain.model import CaseRecord, Contact

logger = logging.getLogger(__name__)

SORT_FIELDS = ("firma", "email", "plz")
ASC = "asc"
DESC = "desc"


@lru_cache(maxsize=None)
def _collator() -> Collator:
    # loads the Unicode collation table, so build it once
    return Collator()


def collation_key(value: str):
    """Case-insensitive locale ordering: umlauts sort with their base letter."""
    return _collator().sort_key(value.casefold())


class CaseDetailView:
    """
    Local view state for one case.

    Selection is kept by the contact's position in the case's contact list,
    so it survives filtering and re-sorting.
    """

    def __init__(
        self,
        case: CaseRecord,
        contact_search: str = "",
        selected: Optional[Iterable[int]] = None,
        sort_field: str = "firma",
        sort_direction: str = ASC,
        session: Optional[requests.Session] = None,
    ):
        self.case = case
        self.contact_search = contact_search
        self.selected: Set[int] = set(selected or ())
        self.sort_field = sort_field if sort_field in SORT_FIELDS else "firma"
        self.sort_direction = sort_direction if sort_direction in (ASC, DESC) else ASC
        self.session = session or requests.Session()

    def toggle_contact(self, index: int):
        if index in self.selected:
            self.selected.discard(index)
        else:
            self.selected.add(index)

    def handle_sort(self, sort_field: str):
        """Same field flips the direction, a new field starts ascending."""
        if sort_field not in SORT_FIELDS:
            raise ValueError(f"Unknown sort field {sort_field!r}")
        if self.sort_field == sort_field:
            self.sort_direction = DESC if self.sort_direction == ASC else ASC
        else:
            self.sort_field = sort_field
            self.sort_direction = ASC

    def sort_indicator(self, sort_field: str) -> str:
        if sort_field != self.sort_field:
            return ""
        return "↑" if self.sort_direction == ASC else "↓"

    def _matches(self, contact: Contact) -> bool:
        query = self.contact_search.lower()
        return (
            query in contact.firma.lower()
            or query in contact.email.lower()
            or query in contact.plz
        )

    def visible_contacts(self) -> List[Tuple[int, Contact]]:
        """(index, contact) pairs, filtered then sorted, recomputed on every call."""
        rows = [(i, c) for i, c in enumerate(self.case.contacts) if self._matches(c)]
        return sorted(
            rows,
            key=lambda row: collation_key(getattr(row[1], self.sort_field)),
            reverse=self.sort_direction == DESC,
        )

    # ---------- links for the rendered page ----------

    def query_params(self) -> Dict[str, str]:
        params = {"sort": self.sort_field, "dir": self.sort_direction}
        if self.contact_search:
            params["search"] = self.contact_search
        if self.selected:
            params["selected"] = ",".join(str(i) for i in sorted(self.selected))
        return params

    def _copy(self) -> "CaseDetailView":
        return CaseDetailView(
            self.case, self.contact_search, self.selected, self.sort_field, self.sort_direction, self.session
        )

    def sort_params(self, sort_field: str) -> Dict[str, str]:
        view = self._copy()
        view.handle_sort(sort_field)
        return view.query_params()

    def toggle_params(self, index: int) -> Dict[str, str]:
        view = self._copy()
        view.toggle_contact(index)
        return view.query_params()

    # ---------- actions ----------

    def confirm(self) -> bool:
        """
        POST the case id to the case's confirmation URL.

        Without a URL this is a no-op. Request failures are logged only.
        """
        url = self.case.confirm_url
        if not url:
            logger.warning(f"No confirm_url set on case {self.case.id}")
            return False
        try:
            self.session.post(url, json={"caseId": self.case.id})
        except requests.RequestException as e:
            logger.error(f"Error confirming case {self.case.id}: {e}")
            return False
        logger.info(f"Case confirmed: {self.case.id}")
        return True

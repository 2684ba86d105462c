"""HTTP client for the Case API used by the dashboard."""
import logging
from typing import Any, Dict, List, Optional

import requests

from cases.domain.model import CaseRecord, InvalidCase

logger = logging.getLogger(__name__)


class CaseApiClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def list_cases(self) -> List[CaseRecord]:
        """
        Fetch the full case list.

        Accepts both ``{"cases": [...]}`` and a bare array. Entries that
        are not valid cases are skipped.
        """
        response = self.session.get(f"{self.base_url}/api/cases", timeout=self.timeout)
        response.raise_for_status()
        data = response.json()

        if isinstance(data, dict) and isinstance(data.get("cases"), list):
            items = data["cases"]
        elif isinstance(data, list):
            items = data
        else:
            items = []

        cases = []
        for item in items:
            try:
                cases.append(CaseRecord.from_dict(item))
            except InvalidCase as e:
                logger.warning(f"Skipping invalid case from API: {e}")
        return cases

    def get_case_link(self, case_id: int) -> Optional[Dict[str, Any]]:
        """Link status ``{id, confirm_url}`` of one case, None for any non-2xx answer."""
        response = self.session.get(
            f"{self.base_url}/api/caselink",
            params={"caseId": case_id},
            timeout=self.timeout,
        )
        if not response.ok:
            return None
        return response.json()

"""
Dashboard client state.

The controller owns the loading flag, the case list and the search query.
It shows cached cases first, then the server's list, and polls the Case API
for confirmation links that have not been assigned yet.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

import requests

from cases.domain.model import CaseRecord, parse_case_id
from dashboard.adapters.cache import LocalCaseCache
from dashboard.adapters.case_api_client import CaseApiClient

logger = logging.getLogger(__name__)

POLLING_INTERVAL = 10.0  # seconds


@dataclass
class DashboardState:
    loading: bool = True
    polling: bool = False
    search_query: str = ""
    cases: List[CaseRecord] = field(default_factory=list)


def filter_cases(cases: List[CaseRecord], query: str) -> List[CaseRecord]:
    """Substring match on title, applicant name, postal code and id."""
    query = query.lower()
    return [
        c for c in cases
        if query in c.title.lower()
        or query in c.applicant_name.lower()
        or query in c.postal_code
        or query in str(c.id)
    ]


class DashboardController:
    def __init__(self, api: CaseApiClient, cache: LocalCaseCache, poll_interval: float = POLLING_INTERVAL):
        self.api = api
        self.cache = cache
        self.poll_interval = poll_interval
        self.state = DashboardState()
        self.mounted = False
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._timer: Optional[threading.Thread] = None

    # ---------- lifecycle ----------

    def mount(self, start_polling: bool = True):
        """Show cached cases, fetch the server list, then start link polling."""
        self.mounted = True
        self._stop.clear()

        cached = self.cache.load()
        if cached:
            with self._lock:
                self.state.cases = cached
                self.state.loading = False
            logger.info(f"Loaded {len(cached)} cases from local cache")

        self.fetch_cases()

        if start_polling:
            self._timer = threading.Thread(target=self._run_timer, name="link-poller", daemon=True)
            self._timer.start()

    def unmount(self):
        """Stop the polling timer; results of requests still in flight are dropped."""
        self.mounted = False
        self._stop.set()
        if self._timer is not None:
            self._timer.join(timeout=1)
            self._timer = None

    def _run_timer(self):
        while not self._stop.wait(self.poll_interval):
            # a hung cycle only delays its own remaining requests
            threading.Thread(target=self._poll_cycle, name="link-poll-cycle", daemon=True).start()

    def _poll_cycle(self):
        try:
            self.poll_for_link_updates()
        except Exception:
            logger.exception("Link polling cycle failed")

    # ---------- state access ----------

    def snapshot(self) -> DashboardState:
        with self._lock:
            return replace(self.state, cases=list(self.state.cases))

    def set_search_query(self, query: str):
        with self._lock:
            self.state.search_query = query

    def filtered_cases(self) -> List[CaseRecord]:
        state = self.snapshot()
        return filter_cases(state.cases, state.search_query)

    def find_case(self, case_id: int) -> Optional[CaseRecord]:
        return next((c for c in self.snapshot().cases if c.id == case_id), None)

    def _set_polling(self, polling: bool):
        with self._lock:
            self.state.polling = polling

    # ---------- server calls ----------

    def fetch_cases(self):
        """
        Replace state and cache with the server's list.

        An empty answer never clears what is already shown.
        """
        self._set_polling(True)
        try:
            cases = self.api.list_cases()
            if cases and self.mounted:
                with self._lock:
                    self.state.cases = cases
                    # state and cache change together
                    self.cache.save(cases)
                logger.info(f"Fetched {len(cases)} cases from Case API")
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error fetching cases from API: {e}")
        finally:
            with self._lock:
                self.state.polling = False
                self.state.loading = False

    def poll_for_link_updates(self) -> int:
        """
        Ask the Case API for the link of every case that has none.

        Requests run one after another. New links are applied to state and
        cache in one batch. Returns the number of updated cases.
        """
        to_poll = [c for c in self.snapshot().cases if not c.confirm_url]
        if not to_poll:
            return 0

        self._set_polling(True)
        try:
            found: Dict[int, str] = {}
            for case in to_poll:
                try:
                    status = self.api.get_case_link(case.id)
                except (requests.RequestException, ValueError) as e:
                    logger.error(f"Error polling case {case.id}: {e}")
                    continue
                if not status:
                    continue

                confirm_url = status.get("confirm_url")
                case_id = parse_case_id(status.get("id"))
                if confirm_url and confirm_url != case.confirm_url and case_id is not None:
                    found[case_id] = confirm_url

            if not found or not self.mounted:
                return 0

            with self._lock:
                cases = list(self.state.cases)
                updated = 0
                for case_id, confirm_url in found.items():
                    idx = next((i for i, c in enumerate(cases) if c.id == case_id), None)
                    if idx is not None:
                        cases[idx] = replace(cases[idx], confirm_url=confirm_url)
                        updated += 1
                if updated:
                    self.state.cases = cases
                    self.cache.save(cases)

            if updated:
                logger.info(f"Applied {updated} new confirmation links")
            return updated
        finally:
            self._set_polling(False)

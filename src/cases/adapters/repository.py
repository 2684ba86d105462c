"""Case record store following the repository pattern.

Both backends return copies of their records. Mutations go through
``set_all``, ``push`` or ``update``.
"""

import abc
import copy
import json
import logging
from typing import Any, Dict, List, Optional

import redis

import config
from cases.domain.model import CaseRecord, InvalidCase

logger = logging.getLogger(__name__)

STORE_KEY = "casesStore:v1"


class AbstractCaseRepository(abc.ABC):
    """Abstract store over the ordered list of case records."""

    backend = "abstract"

    def list(self) -> List[CaseRecord]:
        return self._load()

    def get(self, case_id: int) -> Optional[CaseRecord]:
        """First record with the given id; duplicates are shadowed."""
        return next((c for c in self._load() if c.id == case_id), None)

    def set_all(self, cases: List[CaseRecord]):
        self._save(list(cases))

    def push(self, *cases: CaseRecord):
        # read-modify-write, last writer wins
        current = self._load()
        self._save(current + list(cases))

    def update(self, case_id: int, patch: Dict[str, Any]) -> Optional[CaseRecord]:
        current = self._load()
        idx = next((i for i, c in enumerate(current) if c.id == case_id), None)
        if idx is None:
            return None
        updated = current[idx].merge(patch)
        current[idx] = updated
        self._save(current)
        return copy.deepcopy(updated)

    @abc.abstractmethod
    def _load(self) -> List[CaseRecord]:
        """Return a private copy of all records."""
        raise NotImplementedError

    @abc.abstractmethod
    def _save(self, cases: List[CaseRecord]):
        """Replace all records in a single write."""
        raise NotImplementedError


class InMemoryCaseRepository(AbstractCaseRepository):
    """Process-local store. Resets on restart."""

    backend = "memory"

    def __init__(self, cases: Optional[List[CaseRecord]] = None):
        self._cases = copy.deepcopy(cases or [])

    def _load(self) -> List[CaseRecord]:
        return copy.deepcopy(self._cases)

    def _save(self, cases: List[CaseRecord]):
        self._cases = copy.deepcopy(cases)


class RedisCaseRepository(AbstractCaseRepository):
    """Redis store keeping the full serialized list under a single key."""

    backend = "redis"

    def __init__(self, client: redis.Redis, key: str = STORE_KEY):
        self.client = client
        self.key = key

    def _load(self) -> List[CaseRecord]:
        raw = self.client.get(self.key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise InvalidCase("stored value is not a list")
            return [CaseRecord.from_dict(item) for item in data]
        except ValueError as e:
            # InvalidCase and JSON/Unicode decode errors are ValueErrors
            logger.warning(f"Ignoring unreadable value stored under {self.key}: {e}")
            return []

    def _save(self, cases: List[CaseRecord]):
        self.client.set(self.key, json.dumps([c.to_dict() for c in cases]))


def create_case_repository() -> AbstractCaseRepository:
    """
    Resolve the store backend once at startup.

    Redis is used when REDIS_HOST is configured. If the client cannot be
    reached the service runs on the in-memory store and says so loudly.
    """
    if not config.redis_configured():
        logger.info("No Redis configured, using in-memory case store")
        return InMemoryCaseRepository()

    redis_config = config.get_redis_host_and_port()
    try:
        client = redis.Redis(**redis_config)
        client.ping()
    except redis.RedisError as e:
        logger.error(
            f"Redis at {redis_config['host']}:{redis_config['port']} unavailable ({e}); "
            "FALLING BACK to in-memory case store, data will not survive a restart"
        )
        return InMemoryCaseRepository()

    logger.info(f"Using Redis case store at {redis_config['host']}:{redis_config['port']}")
    return RedisCaseRepository(client)

"""Local cache of the last known case list, kept in a small JSON file."""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from cases.domain.model import CaseRecord, InvalidCase

logger = logging.getLogger(__name__)

CACHE_KEY = "cachedCaseData"


class LocalCaseCache:
    """Key-value JSON file; the dashboard only uses ``cachedCaseData``."""

    def __init__(self, path: Path, key: str = CACHE_KEY):
        self.path = Path(path)
        self.key = key

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (ValueError, OSError) as e:
            logger.error(f"Failed to read dashboard cache {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, Any]) -> bool:
        """Write the whole file; failures are logged and the old content stays."""
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to write dashboard cache {self.path}: {e}")
            tmp_path.unlink(missing_ok=True)
            return False
        return True

    def load(self) -> List[CaseRecord]:
        """Cached cases, or [] when nothing usable is cached."""
        raw = self._read_all().get(self.key)
        if raw is None:
            return []
        try:
            if not isinstance(raw, list):
                raise InvalidCase("cached value is not a list")
            return [CaseRecord.from_dict(item) for item in raw]
        except InvalidCase:
            logger.error("Failed to parse local storage case data.")
            self.clear()
            return []

    def save(self, cases: List[CaseRecord]):
        data = self._read_all()
        data[self.key] = [c.to_dict() for c in cases]
        return self._write_all(data)

    def clear(self):
        data = self._read_all()
        if self.key in data:
            del data[self.key]
            self._write_all(data)

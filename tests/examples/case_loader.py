"""Utility for loading case test examples from JSON files"""
import copy
import json
from pathlib import Path
from typing import Any, Dict, List


class CaseExampleLoader:
    """Loads case payload examples from JSON files"""

    def __init__(self):
        self.examples_dir = Path(__file__).parent / "cases"

    def load_example(self, filename: str) -> Dict[str, Any]:
        """Load case payload example from JSON file"""
        filepath = self.examples_dir / filename

        if not filepath.exists():
            raise FileNotFoundError(f"Case example not found: {filepath}")

        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)

    def load_sample_case(self) -> Dict[str, Any]:
        return self.load_example("sample_case.json")

    def create_case_with_id(self, case_id: int, **overrides) -> Dict[str, Any]:
        """Sample case with a specific id and optional field overrides (JSON names)"""
        case = copy.deepcopy(self.load_sample_case())
        case["id"] = case_id
        case.update(overrides)
        return case

    def create_multiple_cases(self, count: int, start_id: int = 1) -> List[Dict[str, Any]]:
        return [self.create_case_with_id(start_id + i, title=f"Case {start_id + i}") for i in range(count)]


# Global instance for easy import
case_examples = CaseExampleLoader()

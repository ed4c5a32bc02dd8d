"""Suggestion Store - append-only persistence of scoring events.

存储路径: {DATA_DIR}/suggestions.jsonl (one JSON object per line)

Records are never updated or deduplicated: running suggestion generation
twice for the same customer appends two sets of records.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock

from src.models import Suggestion
from src.services.profile_store import StoreError


class BaseSuggestionStore(ABC):
    """Abstract suggestion store."""

    @abstractmethod
    def insert(self, suggestion: Suggestion) -> str:
        """Persist one record and return its id.

        Raises:
            StoreError: If the record cannot be written
        """
        pass

    def insert_many(self, suggestions: list[Suggestion]) -> list[str]:
        """Persist a batch. Stores that can write atomically override this."""
        return [self.insert(s) for s in suggestions]

    @abstractmethod
    def list_for_customer(self, customer_id: str) -> list[Suggestion]:
        """All records for a customer, oldest first."""
        pass


class InMemorySuggestionStore(BaseSuggestionStore):
    """Suggestion store held in a list."""

    def __init__(self):
        self._records: list[Suggestion] = []
        self._lock = Lock()

    def insert(self, suggestion: Suggestion) -> str:
        with self._lock:
            self._records.append(suggestion)
        return suggestion.id

    def insert_many(self, suggestions: list[Suggestion]) -> list[str]:
        with self._lock:
            self._records.extend(suggestions)
        return [s.id for s in suggestions]

    def list_for_customer(self, customer_id: str) -> list[Suggestion]:
        with self._lock:
            return [s for s in self._records if s.customer_id == customer_id]

    def __len__(self) -> int:
        return len(self._records)


class JsonlSuggestionStore(BaseSuggestionStore):
    """Suggestion store appending JSON lines to a file (线程安全)."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = Lock()

    def insert(self, suggestion: Suggestion) -> str:
        return self.insert_many([suggestion])[0]

    def insert_many(self, suggestions: list[Suggestion]) -> list[str]:
        if not suggestions:
            return []
        # One write per batch so a run is appended whole or not at all
        payload = "".join(
            json.dumps(s.to_dict(), ensure_ascii=False) + "\n" for s in suggestions
        )
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8") as f:
                    f.write(payload)
            except OSError as e:
                raise StoreError(f"Could not append suggestions to {self.path}: {e}") from e
        return [s.id for s in suggestions]

    def list_for_customer(self, customer_id: str) -> list[Suggestion]:
        with self._lock:
            if not self.path.exists():
                return []
            try:
                lines = self.path.read_text(encoding="utf-8").splitlines()
                records = [Suggestion.from_dict(json.loads(line)) for line in lines if line.strip()]
            except (OSError, ValueError) as e:
                raise StoreError(f"Could not read suggestions from {self.path}: {e}") from e
        return [s for s in records if s.customer_id == customer_id]

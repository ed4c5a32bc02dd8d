"""Profile Store - read access to customer and candidate profiles.

Interface Contract:
- find_by_id(profile_id) -> Profile, raises CustomerNotFoundError
- find_by_filter(profile_filter, limit) -> list[Profile] in store order
- All I/O and decode failures raise StoreError

The matching engine only ever reads from this store.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from threading import Lock
from typing import Any, Iterable

from src.models import Gender, Profile

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when a backing store cannot be read or written."""
    pass


class CustomerNotFoundError(LookupError):
    """Raised when a profile id does not resolve."""

    def __init__(self, profile_id: str):
        super().__init__(f"Customer not found: {profile_id}")
        self.profile_id = profile_id


@dataclass(frozen=True)
class ProfileFilter:
    """Attribute filter understood by every profile store.

    Range bounds are strict. A profile with no date of birth never passes
    a born_after bound.
    """
    gender: Gender | None = None
    born_after: date | None = None
    income_below: int | None = None
    height_below: int | None = None
    equals: dict[str, Any] = field(default_factory=dict)
    candidate_pool_only: bool = False
    exclude_ids: frozenset[str] = frozenset()

    def matches(self, profile: Profile) -> bool:
        if profile.id in self.exclude_ids:
            return False
        if self.gender is not None and profile.gender is not self.gender:
            return False
        if self.candidate_pool_only and not profile.is_candidate_pool:
            return False
        if self.born_after is not None:
            if profile.date_of_birth is None or profile.date_of_birth <= self.born_after:
                return False
        if self.income_below is not None and not profile.income < self.income_below:
            return False
        if self.height_below is not None and not profile.height < self.height_below:
            return False
        return all(getattr(profile, name) == value for name, value in self.equals.items())


class BaseProfileStore(ABC):
    """Abstract profile store."""

    @abstractmethod
    def find_by_id(self, profile_id: str) -> Profile:
        """Look up one profile.

        Raises:
            CustomerNotFoundError: If no profile has this id
            StoreError: If the store is unavailable
        """
        pass

    @abstractmethod
    def find_by_filter(self, profile_filter: ProfileFilter, limit: int) -> list[Profile]:
        """Return up to `limit` profiles matching the filter, in store order.

        Raises:
            StoreError: If the store is unavailable
        """
        pass


class InMemoryProfileStore(BaseProfileStore):
    """Profile store backed by an ordered dict."""

    def __init__(self, profiles: Iterable[Profile] = ()):
        self._profiles: dict[str, Profile] = {p.id: p for p in profiles}

    def add(self, profile: Profile) -> None:
        self._profiles[profile.id] = profile

    def all(self) -> list[Profile]:
        return list(self._profiles.values())

    def find_by_id(self, profile_id: str) -> Profile:
        try:
            return self._profiles[profile_id]
        except KeyError:
            raise CustomerNotFoundError(profile_id) from None

    def find_by_filter(self, profile_filter: ProfileFilter, limit: int) -> list[Profile]:
        results = []
        for profile in self._profiles.values():
            if len(results) >= limit:
                break
            if profile_filter.matches(profile):
                results.append(profile)
        return results


class JsonProfileStore(BaseProfileStore):
    """Profile store backed by a JSON array on disk.

    The file is read once and cached; call reload() to pick up edits.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = Lock()
        self._cache: InMemoryProfileStore | None = None

    def _load(self) -> InMemoryProfileStore:
        with self._lock:
            if self._cache is None:
                try:
                    raw = json.loads(self.path.read_text(encoding="utf-8"))
                    profiles = [Profile.from_dict(item) for item in raw]
                except FileNotFoundError as e:
                    raise StoreError(f"Profile file not found: {self.path}") from e
                except (OSError, ValueError, TypeError) as e:
                    raise StoreError(f"Could not read profiles from {self.path}: {e}") from e
                logger.info("[profiles] loaded path=%s count=%d", self.path, len(profiles))
                self._cache = InMemoryProfileStore(profiles)
            return self._cache

    def reload(self) -> None:
        with self._lock:
            self._cache = None

    def save(self, profiles: Iterable[Profile]) -> int:
        """Write profiles to disk, replacing the file. Returns the count written."""
        data = [p.to_dict() for p in profiles]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Could not write profiles to {self.path}: {e}") from e
        self.reload()
        return len(data)

    def find_by_id(self, profile_id: str) -> Profile:
        return self._load().find_by_id(profile_id)

    def find_by_filter(self, profile_filter: ProfileFilter, limit: int) -> list[Profile]:
        return self._load().find_by_filter(profile_filter, limit)

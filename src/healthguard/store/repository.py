"""Village repositories."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from healthguard.models import Comment, FleetSummary, HealthStatus, Village
from healthguard.store.snapshot import load_villages, save_villages
from healthguard.utils.logging import get_logger


logger = get_logger(__name__)


class VillageRepository:
    """Authoritative, insertion-ordered set of villages held in memory.

    Single writer: callers serialize mutations themselves.
    """

    def __init__(self, villages: Optional[Iterable[Village]] = None) -> None:
        self._villages: dict[str, Village] = {}
        for village in villages or ():
            self._villages[village.id] = village

    def __len__(self) -> int:
        return len(self._villages)

    def get(self, village_id: str) -> Optional[Village]:
        return self._villages.get(village_id)

    def all(self) -> list[Village]:
        return list(self._villages.values())

    def upsert(self, village: Village) -> None:
        """Insert a new village or replace the stored value with the same id."""
        self._villages[village.id] = village
        self._after_mutation()

    def add_comment(self, village_id: str, comment: Comment) -> bool:
        """Prepend a comment. Returns False (and changes nothing) for an unknown id."""
        village = self._villages.get(village_id)
        if village is None:
            return False
        self._villages[village_id] = village.model_copy(
            update={"comments": [comment, *village.comments]}
        )
        self._after_mutation()
        return True

    def find_by_name(self, query: str) -> Optional[Village]:
        """First village whose name contains ``query``, case-insensitively."""
        needle = query.strip().lower()
        if not needle:
            return None
        for village in self._villages.values():
            if needle in village.name.lower():
                return village
        return None

    def find_by_exact_name(self, name: str) -> Optional[Village]:
        needle = name.strip().lower()
        for village in self._villages.values():
            if village.name.lower() == needle:
                return village
        return None

    def summary(self) -> FleetSummary:
        villages = self._villages.values()
        return FleetSummary(
            village_count=len(self._villages),
            total_active_cases=sum(v.active_cases for v in villages),
            red_zones=sum(1 for v in villages if v.status == HealthStatus.RED),
            yellow_zones=sum(1 for v in villages if v.status == HealthStatus.YELLOW),
        )

    def _after_mutation(self) -> None:
        """Hook for subclasses that persist state."""


class JsonFileVillageRepository(VillageRepository):
    """Repository that writes a snapshot file after every mutation."""

    def __init__(self, path: Path, villages: Optional[Iterable[Village]] = None) -> None:
        super().__init__(villages)
        self.path = path

    @classmethod
    def open(cls, path: Path, seed: Iterable[Village]) -> "JsonFileVillageRepository":
        """Load ``path`` if it exists, otherwise start from ``seed`` and save it."""
        villages = load_villages(path)
        if villages is None:
            logger.info("store.snapshot.seeded", extra={"path": str(path)})
            repo = cls(path, seed)
            repo.save()
            return repo

        logger.info("store.snapshot.loaded", extra={"path": str(path), "villages": len(villages)})
        return cls(path, villages)

    def save(self) -> None:
        save_villages(self.path, self.all())

    def _after_mutation(self) -> None:
        self.save()

"""Immutable batch results for generation runs.

Each candidate yields one ``ItemOutcome``; the run result is a fold over those
outcomes, so no counter is shared across iterations.
"""

from dataclasses import dataclass, field
from functools import reduce
from typing import Iterable, Tuple

CREATED = "created"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass(frozen=True)
class FailedItem:
    id: int
    reason: str


@dataclass(frozen=True)
class ItemOutcome:
    kind: str
    item_id: int
    reason: str | None = None

    @classmethod
    def created(cls, item_id: int) -> "ItemOutcome":
        return cls(CREATED, item_id)

    @classmethod
    def skipped(cls, item_id: int, reason: str | None = None) -> "ItemOutcome":
        return cls(SKIPPED, item_id, reason)

    @classmethod
    def failed(cls, item_id: int, reason: str) -> "ItemOutcome":
        return cls(FAILED, item_id, reason)


@dataclass(frozen=True)
class BatchResult:
    created: int = 0
    skipped: int = 0
    failed: Tuple[FailedItem, ...] = field(default_factory=tuple)

    def add(self, outcome: ItemOutcome) -> "BatchResult":
        if outcome.kind == CREATED:
            return BatchResult(self.created + 1, self.skipped, self.failed)
        if outcome.kind == SKIPPED:
            return BatchResult(self.created, self.skipped + 1, self.failed)
        return BatchResult(
            self.created,
            self.skipped,
            self.failed + (FailedItem(outcome.item_id, outcome.reason or "unknown error"),),
        )

    def as_dict(self) -> dict:
        return {
            "created": self.created,
            "skipped": self.skipped,
            "failed": [{"id": f.id, "reason": f.reason} for f in self.failed],
        }


def fold_outcomes(outcomes: Iterable[ItemOutcome]) -> BatchResult:
    return reduce(BatchResult.add, outcomes, BatchResult())

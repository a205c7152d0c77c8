from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Literal, Protocol

FeedbackValue = Literal["helpful", "unhelpful"]
FEEDBACK_VALUES = ("helpful", "unhelpful")


@dataclass(frozen=True)
class FeedbackCounts:
    helpful: int = 0
    unhelpful: int = 0

    @property
    def total(self) -> int:
        return self.helpful + self.unhelpful

    @property
    def helpful_percentage(self) -> int:
        return round(self.helpful / self.total * 100) if self.total else 0

    def to_stats(self) -> Dict[str, int]:
        return {
            "helpful": self.helpful,
            "unhelpful": self.unhelpful,
            "total": self.total,
            "helpfulPercentage": self.helpful_percentage,
        }


class FeedbackStore(Protocol):
    def get(self, message_id: str) -> FeedbackCounts: ...

    def increment(self, message_id: str, feedback: FeedbackValue) -> FeedbackCounts: ...


class InMemoryFeedbackStore:
    """Process-local counters. Lost on restart."""

    def __init__(self) -> None:
        self._counts: Dict[str, FeedbackCounts] = {}
        self._lock = threading.Lock()

    def get(self, message_id: str) -> FeedbackCounts:
        with self._lock:
            return self._counts.get(message_id, FeedbackCounts())

    def increment(self, message_id: str, feedback: FeedbackValue) -> FeedbackCounts:
        if feedback not in FEEDBACK_VALUES:
            raise ValueError(f"Invalid feedback type: {feedback!r}")
        with self._lock:
            cur = self._counts.get(message_id, FeedbackCounts())
            if feedback == "helpful":
                cur = FeedbackCounts(helpful=cur.helpful + 1, unhelpful=cur.unhelpful)
            else:
                cur = FeedbackCounts(helpful=cur.helpful, unhelpful=cur.unhelpful + 1)
            self._counts[message_id] = cur
            return cur


_store = InMemoryFeedbackStore()


def get_feedback_store() -> FeedbackStore:
    return _store

"""Spaced repetition value objects: scheduling state and review history."""

from dataclasses import dataclass
from datetime import datetime
from typing import Self

from chaycards.domain.constants import INITIAL_EASE_FACTOR, INITIAL_INTERVAL_DAYS
from chaycards.domain.value_objects.review_quality import ReviewPerformance


@dataclass(frozen=True)
class SpacedRepetitionState:
    """Per-card SM-2 scheduling record.

    Attributes:
        interval: Days until the next review (>= 0, starts at 0)
        ease_factor: Interval growth multiplier (>= 1.3, starts at 2.5)
        due_date: When the card is next due
        review_count: Completed reviews, never decreases
        last_review_date: Most recent review, None before the first one
        streak: Consecutive passing reviews (quality >= 3)
    """

    interval: float
    ease_factor: float
    due_date: datetime
    review_count: int = 0
    last_review_date: datetime | None = None
    streak: int = 0

    @classmethod
    def initial(cls, now: datetime) -> Self:
        """State for a card that has never been reviewed (due immediately)."""
        return cls(
            interval=INITIAL_INTERVAL_DAYS,
            ease_factor=INITIAL_EASE_FACTOR,
            due_date=now,
        )

    def is_due(self, now: datetime) -> bool:
        return self.due_date <= now

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "interval": self.interval,
            "ease_factor": self.ease_factor,
            "due_date": self.due_date.isoformat(),
            "review_count": self.review_count,
            "last_review_date": (
                self.last_review_date.isoformat() if self.last_review_date else None
            ),
            "streak": self.streak,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create from dictionary."""
        last_review = data.get("last_review_date")
        return cls(
            interval=data["interval"],
            ease_factor=data["ease_factor"],
            due_date=datetime.fromisoformat(data["due_date"]),
            review_count=data.get("review_count", 0),
            last_review_date=datetime.fromisoformat(last_review) if last_review else None,
            streak=data.get("streak", 0),
        )


@dataclass(frozen=True)
class ReviewHistoryEntry:
    """Append-only record of a single review.

    Attributes:
        id: Entry identifier (ULID)
        card_id: Reviewed card
        review_date: When the review happened
        performance: Bucket derived from the review quality
        previous_interval: Interval before the review (days)
        new_interval: Interval after the review (days)
        time_spent_ms: Review duration, 0 when not tracked
    """

    id: str
    card_id: str
    review_date: datetime
    performance: ReviewPerformance
    previous_interval: float
    new_interval: float
    time_spent_ms: int = 0

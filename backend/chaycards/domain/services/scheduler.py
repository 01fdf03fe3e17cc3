"""
SM-2 Spaced Repetition Scheduler.

Pure functions: no storage, no hidden clock. The caller passes ``now`` so
results are deterministic.

The next due date is anchored to the review time, not to the previous due
date, so a late review does not carry its lateness forward.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

import ulid

from chaycards.domain.constants import FAILED_INTERVAL_DAYS, MAX_QUALITY, MIN_EASE_FACTOR
from chaycards.domain.entities.flashcard import Flashcard
from chaycards.domain.value_objects.review_quality import ReviewQuality
from chaycards.domain.value_objects.spaced_repetition import (
    ReviewHistoryEntry,
    SpacedRepetitionState,
)


def adjust_ease_factor(ease_factor: float, quality: int) -> float:
    """Canonical SM-2 ease adjustment, floored at 1.3.

    Quality 5 adds 0.1, quality 4 leaves it unchanged, lower qualities
    reduce it increasingly.
    """
    miss = MAX_QUALITY - quality
    return max(MIN_EASE_FACTOR, ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))


def schedule(
    current: SpacedRepetitionState,
    quality: int,
    now: datetime,
) -> SpacedRepetitionState:
    """Compute the next scheduling state after a review.

    Args:
        current: State before the review
        quality: Review quality 0-5 (3+ counts as remembered)
        now: Review time

    Returns:
        New state; ``current`` is not modified

    Raises:
        ValueError: If quality is outside 0-5
    """
    q = ReviewQuality.parse(quality)

    if q.is_passing:
        interval = current.interval * current.ease_factor
        streak = current.streak + 1
    else:
        interval = FAILED_INTERVAL_DAYS
        streak = 0

    return SpacedRepetitionState(
        interval=interval,
        ease_factor=adjust_ease_factor(current.ease_factor, q),
        due_date=now + timedelta(days=interval),
        review_count=current.review_count + 1,
        last_review_date=now,
        streak=streak,
    )


def record_review(
    card_id: str,
    previous_interval: float,
    new_interval: float,
    quality: int,
    review_date: datetime,
    time_spent_ms: int = 0,
) -> ReviewHistoryEntry:
    """Build the append-only history entry for a review.

    Raises:
        ValueError: If quality is outside 0-5
    """
    return ReviewHistoryEntry(
        id=str(ulid.ULID()),
        card_id=card_id,
        review_date=review_date,
        performance=ReviewQuality.parse(quality).to_performance(),
        previous_interval=previous_interval,
        new_interval=new_interval,
        time_spent_ms=time_spent_ms,
    )


def select_due_cards(
    cards: Iterable[Flashcard],
    now: datetime,
    limit: int,
    deck_id: str | None = None,
) -> list[Flashcard]:
    """Pick active cards due at ``now``, soonest due first.

    Args:
        cards: Candidate cards
        now: Reference time (cards due exactly now are included)
        limit: Maximum number of cards to return
        deck_id: Restrict to one deck (None = all decks)
    """
    if limit <= 0:
        return []
    due = [
        card
        for card in cards
        if card.is_due(now) and (deck_id is None or card.deck_id == deck_id)
    ]
    due.sort(key=lambda card: card.spaced_repetition.due_date)
    return due[:limit]

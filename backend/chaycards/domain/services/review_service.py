"""Review service: applies SM-2 scheduling to stored flashcards."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from chaycards.domain.entities.flashcard import Flashcard
from chaycards.domain.value_objects.spaced_repetition import ReviewHistoryEntry
from chaycards.ports.flashcard_repository import CardNotFoundError, FlashcardRepository

from .scheduler import record_review, schedule

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class ReviewResult:
    """Result of processing a review."""

    card: Flashcard
    history_entry: ReviewHistoryEntry


class ReviewService:
    """Processes flashcard reviews.

    Handles:
    - Scheduling: SM-2 update of the card's spaced repetition state
    - History: one append-only entry per review
    - Due cards: soonest-due active cards for a deck
    """

    def __init__(self, repository: FlashcardRepository, clock: Clock | None = None):
        """Initialize review service.

        Args:
            repository: Port for flashcard storage
            clock: Source of the current time (UTC now by default)
        """
        self._repository = repository
        self._clock = clock or utc_now

    async def process_review(
        self, card_id: str, quality: int, time_spent_ms: int = 0
    ) -> ReviewResult:
        """Record a review and reschedule the card.

        Args:
            card_id: Reviewed card
            quality: Review quality 0-5
            time_spent_ms: Review duration if tracked

        Returns:
            ReviewResult with the updated card and its history entry

        Raises:
            CardNotFoundError: If the card does not exist
            ValueError: If quality is outside 0-5
        """
        card = await self._repository.get_card(card_id)
        if card is None:
            raise CardNotFoundError(card_id)

        now = self._clock()
        previous = card.spaced_repetition
        updated_state = schedule(previous, quality, now)

        entry = record_review(
            card_id=card.id,
            previous_interval=previous.interval,
            new_interval=updated_state.interval,
            quality=quality,
            review_date=now,
            time_spent_ms=time_spent_ms,
        )
        await self._repository.add_review_history(entry)
        saved = await self._repository.save_card(card.with_schedule(updated_state, now))

        logger.info(
            f"Reviewed card {card.id}: quality={quality} "
            f"interval {previous.interval:g} -> {updated_state.interval:g} days"
        )
        return ReviewResult(card=saved, history_entry=entry)

    async def get_due_cards(self, deck_id: str, limit: int) -> list[Flashcard]:
        """Get active cards due now, soonest first, at most ``limit``."""
        if limit <= 0:
            return []
        return await self._repository.get_due_cards(deck_id, self._clock(), limit)

    async def get_history(self, card_id: str) -> list[ReviewHistoryEntry]:
        return await self._repository.get_review_history(card_id)

"""Port interface for flashcard scheduling persistence."""

from datetime import datetime
from typing import Protocol, runtime_checkable

from chaycards.domain.entities.flashcard import Flashcard
from chaycards.domain.value_objects.spaced_repetition import ReviewHistoryEntry


@runtime_checkable
class FlashcardRepository(Protocol):
    """Port for flashcard storage used by the review workflow."""

    async def get_card(self, card_id: str) -> Flashcard | None:
        """Get a card by id.

        Returns:
            The card, or None if it does not exist
        """
        ...

    async def save_card(self, card: Flashcard) -> Flashcard:
        """Insert or update a card.

        Returns:
            The card as persisted
        """
        ...

    async def add_review_history(self, entry: ReviewHistoryEntry) -> None:
        """Append a review history entry (never updated afterwards)."""
        ...

    async def get_review_history(self, card_id: str) -> list[ReviewHistoryEntry]:
        """Get history for a card, oldest first."""
        ...

    async def get_due_cards(self, deck_id: str, now: datetime, limit: int) -> list[Flashcard]:
        """Get active cards due at ``now``, soonest due first.

        Args:
            deck_id: Deck to query
            now: Reference time
            limit: Maximum number of cards

        Returns:
            Up to ``limit`` cards ordered by due date ascending
        """
        ...


class CardNotFoundError(Exception):
    """Raised when a referenced card does not exist."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Card {card_id} not found")

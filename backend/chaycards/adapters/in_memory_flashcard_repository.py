"""In-memory flashcard repository for development and testing."""

from collections import defaultdict
from datetime import datetime

from chaycards.domain.entities.flashcard import Flashcard
from chaycards.domain.services.scheduler import select_due_cards
from chaycards.domain.value_objects.spaced_repetition import ReviewHistoryEntry


class InMemoryFlashcardRepository:
    """FlashcardRepository implementation backed by dicts.

    Reviews are accepted but not persisted between restarts.
    """

    def __init__(self, cards: list[Flashcard] | None = None) -> None:
        self._cards: dict[str, Flashcard] = {c.id: c for c in cards or []}
        self._history: dict[str, list[ReviewHistoryEntry]] = defaultdict(list)

    async def get_card(self, card_id: str) -> Flashcard | None:
        return self._cards.get(card_id)

    async def save_card(self, card: Flashcard) -> Flashcard:
        self._cards[card.id] = card
        return card

    async def add_review_history(self, entry: ReviewHistoryEntry) -> None:
        self._history[entry.card_id].append(entry)

    async def get_review_history(self, card_id: str) -> list[ReviewHistoryEntry]:
        return sorted(self._history.get(card_id, []), key=lambda e: e.review_date)

    async def get_due_cards(self, deck_id: str, now: datetime, limit: int) -> list[Flashcard]:
        return select_due_cards(self._cards.values(), now, limit, deck_id=deck_id)

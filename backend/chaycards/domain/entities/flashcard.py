"""Flashcard entity carrying spaced repetition state."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum
from typing import Self

import ulid

from chaycards.domain.value_objects.spaced_repetition import SpacedRepetitionState


class CardStatus(StrEnum):
    """Flashcard lifecycle status. Only active cards are scheduled."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"


@dataclass(frozen=True)
class Flashcard:
    """Flashcard entity.

    Card content (templates, fields, media) lives with the document layer;
    this entity only carries what scheduling needs.

    Attributes:
        id: Unique card identifier (ULID)
        deck_id: Deck containing this card
        spaced_repetition: Current SM-2 state
        status: Lifecycle status
        created_at: Creation timestamp
        modified_at: Last update timestamp
    """

    id: str
    deck_id: str
    spaced_repetition: SpacedRepetitionState
    status: CardStatus
    created_at: datetime
    modified_at: datetime

    @classmethod
    def new(cls, deck_id: str, now: datetime) -> Self:
        """Create an active card that is due immediately."""
        return cls(
            id=str(ulid.ULID()),
            deck_id=deck_id,
            spaced_repetition=SpacedRepetitionState.initial(now),
            status=CardStatus.ACTIVE,
            created_at=now,
            modified_at=now,
        )

    def is_active(self) -> bool:
        return self.status is CardStatus.ACTIVE

    def is_due(self, now: datetime) -> bool:
        """Check if card is active and due at ``now``."""
        return self.is_active() and self.spaced_repetition.is_due(now)

    def with_schedule(self, state: SpacedRepetitionState, now: datetime) -> Self:
        """Return a copy with updated scheduling state."""
        return replace(self, spaced_repetition=state, modified_at=now)

    def with_status(self, status: CardStatus, now: datetime) -> Self:
        return replace(self, status=status, modified_at=now)

"""Review quality value objects for SM-2 scheduling."""

from enum import IntEnum, StrEnum

from chaycards.domain.constants import MAX_QUALITY, MIN_QUALITY, PASSING_QUALITY


class ReviewPerformance(StrEnum):
    """Coarse performance bucket recorded in review history."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


class ReviewQuality(IntEnum):
    """SM-2 review quality (0-5).

    - BLACKOUT (0): Complete blackout
    - INCORRECT (1): Incorrect response; the correct one remembered
    - INCORRECT_EASY (2): Incorrect; the correct one seemed easy to recall
    - HARD (3): Correct response recalled with serious difficulty
    - HESITANT (4): Correct response after a hesitation
    - PERFECT (5): Perfect response
    """

    BLACKOUT = 0
    INCORRECT = 1
    INCORRECT_EASY = 2
    HARD = 3
    HESITANT = 4
    PERFECT = 5

    @classmethod
    def parse(cls, value: int) -> "ReviewQuality":
        """Convert a raw 0-5 rating.

        Raises:
            ValueError: If value is outside 0-5
        """
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"quality must be {MIN_QUALITY}-{MAX_QUALITY}, got {value}"
            ) from None

    @property
    def is_passing(self) -> bool:
        """Whether the card counts as remembered (quality >= 3)."""
        return self >= PASSING_QUALITY

    def to_performance(self) -> ReviewPerformance:
        """Map quality to its history bucket."""
        if self >= ReviewQuality.HESITANT:
            return ReviewPerformance.EASY
        elif self == ReviewQuality.HARD:
            return ReviewPerformance.GOOD
        elif self == ReviewQuality.INCORRECT_EASY:
            return ReviewPerformance.HARD
        else:
            return ReviewPerformance.AGAIN

    def __str__(self) -> str:
        return self.name.lower()

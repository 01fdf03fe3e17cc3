"""Tests for the SQLite flashcard repository."""

import sqlite3
from datetime import timedelta

import pytest

from chaycards.domain.entities.flashcard import CardStatus, Flashcard
from chaycards.domain.services.review_service import ReviewService
from chaycards.domain.services.scheduler import record_review, schedule
from chaycards.infrastructure.sqlite_flashcard_repository import SqliteFlashcardRepository
from chaycards.ports.flashcard_repository import FlashcardRepository


@pytest.fixture
def repo(tmp_path):
    return SqliteFlashcardRepository(tmp_path / "reviews.db")


def test_satisfies_port(repo):
    assert isinstance(repo, FlashcardRepository)


async def test_save_and_get_card(repo, now):
    card = Flashcard.new("deck", now)

    await repo.save_card(card)

    assert await repo.get_card(card.id) == card
    assert await repo.get_card("missing") is None


async def test_save_updates_existing_card(repo, now):
    card = Flashcard.new("deck", now)
    await repo.save_card(card)

    updated = card.with_schedule(schedule(card.spaced_repetition, 0, now), now)
    await repo.save_card(updated)

    stored = await repo.get_card(card.id)
    assert stored.spaced_repetition.interval == 1.0
    assert stored.spaced_repetition.last_review_date == now


async def test_due_cards_query(repo, now):
    cards = []
    for offset in (-1, -3, 0, 2):
        card = Flashcard.new("deck", now + timedelta(days=offset))
        cards.append(await repo.save_card(card))
    suspended = Flashcard.new("deck", now - timedelta(days=5)).with_status(
        CardStatus.SUSPENDED, now
    )
    await repo.save_card(suspended)
    await repo.save_card(Flashcard.new("other", now - timedelta(days=4)))

    due = await repo.get_due_cards("deck", now, 10)

    assert [c.id for c in due] == [cards[1].id, cards[0].id, cards[2].id]
    assert len(await repo.get_due_cards("deck", now, 1)) == 1
    assert await repo.get_due_cards("deck", now, 0) == []


async def test_review_history_is_ordered(repo, now):
    later = record_review("card", 1.0, 2.5, 4, now + timedelta(hours=1))
    earlier = record_review("card", 0.0, 1.0, 1, now)

    await repo.add_review_history(later)
    await repo.add_review_history(earlier)

    assert await repo.get_review_history("card") == [earlier, later]
    assert await repo.get_review_history("other") == []


async def test_review_service_over_sqlite(repo, now):
    card = await repo.save_card(Flashcard.new("deck", now))
    service = ReviewService(repo, clock=lambda: now)

    await service.process_review(card.id, 5)
    result = await service.process_review(card.id, 0)

    assert result.card.spaced_repetition.review_count == 2
    assert [e.performance for e in await service.get_history(card.id)] == ["easy", "again"]


async def test_connections_are_closed(tmp_path, now, monkeypatch):
    opened = []
    connect = sqlite3.connect

    def tracking_connect(*args, **kwargs):
        conn = connect(*args, **kwargs)
        opened.append(conn)
        return conn

    monkeypatch.setattr(sqlite3, "connect", tracking_connect)
    repo = SqliteFlashcardRepository(tmp_path / "reviews.db")
    card = Flashcard.new("deck", now)

    await repo.save_card(card)
    await repo.get_card(card.id)
    await repo.get_due_cards("deck", now, 10)
    await repo.add_review_history(record_review(card.id, 0.0, 1.0, 4, now))
    await repo.get_review_history(card.id)

    assert len(opened) == 6
    for conn in opened:
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")

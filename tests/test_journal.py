import pytest

from hunterevo.journal import Journal
from hunterevo.state import GameState


def test_add_inserts_newest_first(seed_state: GameState) -> None:
    journal = Journal(seed_state)
    entry = journal.add("  Small win ", "Walked to work.", "2026-03-01", "positive")
    assert entry.id == 4
    assert entry.title == "Small win"
    assert journal.entries()[0] is entry
    assert len(journal.entries()) == 4


@pytest.mark.parametrize(
    ("title", "content", "mood"),
    [("", "body", "neutral"), ("title", "  ", "neutral"), ("title", "body", "ecstatic")],
)
def test_add_rejects_bad_input(seed_state: GameState, title: str, content: str, mood: str) -> None:
    with pytest.raises(ValueError):
        Journal(seed_state).add(title, content, "2026-03-01", mood)
    assert seed_state.next_journal_id == 4


def test_update_entry(seed_state: GameState) -> None:
    journal = Journal(seed_state)
    updated = journal.update(2, title="Renamed", mood="negative")
    assert updated is not None
    assert updated.title == "Renamed"
    assert updated.mood == "negative"
    assert journal.update(99, title="x") is None
    with pytest.raises(ValueError):
        journal.update(2, id="5")
    with pytest.raises(ValueError):
        journal.update(2, mood="meh")


def test_delete_entry_keeps_ids_unique(seed_state: GameState) -> None:
    journal = Journal(seed_state)
    latest = journal.add("New", "Entry", "2026-03-01")
    assert journal.delete(latest.id) is True
    assert journal.delete(latest.id) is False
    assert journal.add("Next", "Entry", "2026-03-02").id == latest.id + 1

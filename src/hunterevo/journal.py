"""Journal entries stored on the game state, newest first."""

from __future__ import annotations

import logging

from .state import GameState, JournalEntry

logger = logging.getLogger(__name__)

MOODS = ("positive", "neutral", "negative")
_EDITABLE_FIELDS = {"title", "content", "date", "mood"}


class Journal:
    """Create, edit and delete reflection entries."""

    def __init__(self, state: GameState) -> None:
        self.state = state

    def entries(self) -> list[JournalEntry]:
        return list(self.state.journal)

    def add(self, title: str, content: str, date: str, mood: str = "neutral") -> JournalEntry:
        """Add an entry at the top of the journal."""
        if not title.strip():
            raise ValueError("Journal title is required")
        if not content.strip():
            raise ValueError("Journal content is required")
        if mood not in MOODS:
            raise ValueError(f"Unknown mood: {mood}")
        entry = JournalEntry(
            id=self.state.allocate_journal_id(),
            title=title.strip(),
            content=content.strip(),
            date=date,
            mood=mood,
        )
        self.state.journal.insert(0, entry)
        logger.debug("Added journal entry %s", entry.id)
        return entry

    def update(self, entry_id: int, **changes: str) -> JournalEntry | None:
        """Apply field changes to an entry; None when it does not exist."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot edit journal fields: {', '.join(sorted(unknown))}")
        if "mood" in changes and changes["mood"] not in MOODS:
            raise ValueError(f"Unknown mood: {changes['mood']}")
        for entry in self.state.journal:
            if entry.id == entry_id:
                for name, value in changes.items():
                    setattr(entry, name, value)
                return entry
        return None

    def delete(self, entry_id: int) -> bool:
        """Delete an entry by id."""
        for index, entry in enumerate(self.state.journal):
            if entry.id == entry_id:
                del self.state.journal[index]
                return True
        return False

"""Mutable game state: profile, domains, quests, achievements and journal."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

STATE_FORMAT_VERSION = 1


@dataclass
class Quest:
    """A completable unit of work with a fixed XP reward."""

    id: int
    title: str
    description: str
    domain: str
    type: str
    xp: int
    difficulty: str = "Easy"
    estimated_time: int = 15
    completed: bool = False
    subtasks: list[str] = field(default_factory=list)
    duration: int | None = None
    is_daily: bool = False
    created_date: str | None = None
    template_id: str | None = None


@dataclass
class PlayerProfile:
    """Profile-level progression totals."""

    name: str
    level: int
    total_xp: int
    rank: str


@dataclass
class DomainProgress:
    """Running XP and counters for one domain."""

    id: str
    name: str
    rank: str
    xp: int
    progress: int
    quests: int
    achievements: int


@dataclass
class Stats:
    """Daily and weekly completion counters."""

    streak: int
    today_completed: int
    today_total: int
    weekly_goal: int
    weekly_completed: int


@dataclass
class Achievement:
    """One-time award that grants XP when first earned."""

    id: int
    title: str
    description: str
    xp: int
    earned: bool = False
    earned_date: str | None = None


@dataclass
class JournalEntry:
    """Free-form reflection entry."""

    id: int
    title: str
    content: str
    date: str
    mood: str = "neutral"


@dataclass
class GameState:
    """Everything a profile owns, passed explicitly to the operations that mutate it."""

    profile: PlayerProfile
    stats: Stats
    domains: list[DomainProgress]
    quests: list[Quest]
    achievements: list[Achievement]
    journal: list[JournalEntry]
    next_quest_id: int = 1
    next_journal_id: int = 1

    def __post_init__(self) -> None:
        # Counters never move backwards past ids already in use.
        self.next_quest_id = max([self.next_quest_id, *(quest.id + 1 for quest in self.quests)])
        self.next_journal_id = max([self.next_journal_id, *(entry.id + 1 for entry in self.journal)])

    def domain(self, domain_id: str) -> DomainProgress | None:
        """Return domain progress by id."""
        for domain in self.domains:
            if domain.id == domain_id:
                return domain
        return None

    def allocate_quest_id(self) -> int:
        quest_id = self.next_quest_id
        self.next_quest_id += 1
        return quest_id

    def allocate_journal_id(self) -> int:
        entry_id = self.next_journal_id
        self.next_journal_id += 1
        return entry_id

    def to_dict(self) -> dict[str, Any]:
        """Serialize state to a JSON-compatible document."""
        payload = asdict(self)
        payload["format_version"] = STATE_FORMAT_VERSION
        return payload

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> GameState:
        """Build state from a parsed document.

        Raises KeyError, TypeError or ValueError when the document is malformed.
        """
        version = int(raw.get("format_version", STATE_FORMAT_VERSION))
        if version > STATE_FORMAT_VERSION:
            raise ValueError(f"State format version {version} is newer than supported {STATE_FORMAT_VERSION}.")
        return cls(
            profile=_profile_from_dict(raw["profile"]),
            stats=_stats_from_dict(raw["stats"]),
            domains=[_domain_from_dict(item) for item in raw["domains"]],
            quests=[quest_from_dict(item) for item in raw.get("quests", [])],
            achievements=[_achievement_from_dict(item) for item in raw.get("achievements", [])],
            journal=[_journal_from_dict(item) for item in raw.get("journal", [])],
            next_quest_id=int(raw.get("next_quest_id", 1)),
            next_journal_id=int(raw.get("next_journal_id", 1)),
        )


def _profile_from_dict(raw: dict[str, Any]) -> PlayerProfile:
    total_xp = int(raw.get("total_xp", 0))
    if total_xp < 0:
        raise ValueError("Profile XP cannot be negative.")
    return PlayerProfile(
        name=str(raw.get("name", "Hunter")),
        level=int(raw.get("level", 1)),
        total_xp=total_xp,
        rank=str(raw.get("rank", "E-Class")),
    )


def _stats_from_dict(raw: dict[str, Any]) -> Stats:
    return Stats(
        streak=int(raw.get("streak", 0)),
        today_completed=int(raw.get("today_completed", 0)),
        today_total=int(raw.get("today_total", 0)),
        weekly_goal=int(raw.get("weekly_goal", 0)),
        weekly_completed=int(raw.get("weekly_completed", 0)),
    )


def _domain_from_dict(raw: dict[str, Any]) -> DomainProgress:
    domain_id = str(raw["id"])
    xp = int(raw.get("xp", 0))
    if xp < 0:
        raise ValueError(f"Domain '{domain_id}' XP cannot be negative.")
    return DomainProgress(
        id=domain_id,
        name=str(raw.get("name", domain_id.title())),
        rank=str(raw.get("rank", "E-Class")),
        xp=xp,
        progress=max(0, min(100, int(raw.get("progress", 0)))),
        quests=max(0, int(raw.get("quests", 0))),
        achievements=max(0, int(raw.get("achievements", 0))),
    )


def quest_from_dict(raw: dict[str, Any]) -> Quest:
    """Build a quest record from raw JSON content."""
    duration = raw.get("duration")
    created_date = raw.get("created_date")
    template_id = raw.get("template_id")
    return Quest(
        id=int(raw["id"]),
        title=str(raw["title"]),
        description=str(raw.get("description", "")),
        domain=str(raw["domain"]),
        type=str(raw.get("type", "simple")),
        xp=int(raw["xp"]),
        difficulty=str(raw.get("difficulty", "Easy")),
        estimated_time=int(raw.get("estimated_time", 15)),
        completed=bool(raw.get("completed", False)),
        subtasks=[str(item) for item in raw.get("subtasks") or []],
        duration=int(duration) if duration is not None else None,
        is_daily=bool(raw.get("is_daily", False)),
        created_date=str(created_date) if created_date else None,
        template_id=str(template_id) if template_id else None,
    )


def _achievement_from_dict(raw: dict[str, Any]) -> Achievement:
    earned_date = raw.get("earned_date")
    return Achievement(
        id=int(raw["id"]),
        title=str(raw.get("title", "")),
        description=str(raw.get("description", "")),
        xp=int(raw.get("xp", 0)),
        earned=bool(raw.get("earned", False)),
        earned_date=str(earned_date) if earned_date else None,
    )


def _journal_from_dict(raw: dict[str, Any]) -> JournalEntry:
    return JournalEntry(
        id=int(raw["id"]),
        title=str(raw["title"]),
        content=str(raw.get("content", "")),
        date=str(raw["date"]),
        mood=str(raw.get("mood", "neutral")),
    )

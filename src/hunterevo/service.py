"""Application service for assessments, quests, journal and daily tracking."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, cast

from .checks import SystemChecks, SystemData
from .content_loader import load_domains, load_domains_from_file, load_seed, load_templates
from .journal import Journal
from .ledger import DEFAULT_MAX_XP_FOR_LEVEL, ProfileLedger
from .metrics import (
    DailyMetrics,
    Trend,
    domain_success_rate,
    snapshot_day,
    streak_data,
    success_rate_for_period,
    trend_direction,
)
from .models import DOMAIN_IDS
from .quests import QuestDraft, QuestRegistry
from .scoring import AnswerStore, AssessmentOutcome, evaluate_answers
from .state import GameState, JournalEntry, Quest
from .storage import KeyValueStore

STATE_KEY = "hunterData"
ASSESSMENT_KEY = "assessmentResults"
SYSTEM_KEY = "systemData"
METRICS_KEY = "dailyMetrics"
APP_KEYS = (STATE_KEY, ASSESSMENT_KEY, SYSTEM_KEY, METRICS_KEY)
QUEST_STATUSES = ("all", "pending", "completed", "daily")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Analytics:
    """Completion analytics over the recorded daily metrics."""

    success_rate: int
    current_streak: int
    best_streak: int
    trend: Trend
    domain_rates: dict[str, int]


def today_iso() -> str:
    """Return today's UTC calendar date as YYYY-MM-DD."""
    return datetime.now(UTC).date().isoformat()


def _state_from_payload(raw: object) -> GameState:
    if not isinstance(raw, dict):
        raise TypeError("State root must be a JSON object.")
    return GameState.from_dict(cast(dict[str, Any], raw))


def _system_from_payload(raw: object) -> SystemData:
    if not isinstance(raw, dict):
        raise TypeError("System data root must be a JSON object.")
    return SystemData.from_dict(cast(dict[str, Any], raw))


def _metrics_from_payload(raw: object) -> list[DailyMetrics]:
    if not isinstance(raw, list):
        raise TypeError("Daily metrics must be a JSON array.")
    return [DailyMetrics.from_dict(item) for item in cast(list[dict[str, Any]], raw)]


def _assessment_from_payload(raw: object) -> dict[str, Any] | None:
    if not isinstance(raw, dict):
        raise TypeError("Assessment result must be a JSON object.")
    return cast(dict[str, Any], raw)


class HunterService:
    """Coordinates stored state and the scoring/quest flows."""

    def __init__(
        self,
        db_path: Path | str,
        max_xp_for_level: int = DEFAULT_MAX_XP_FOR_LEVEL,
        questions_path: Path | None = None,
    ) -> None:
        """Initialize service with database path and an optional replacement question catalog."""
        self.domains = load_domains_from_file(questions_path) if questions_path is not None else load_domains()
        self.templates = load_templates()
        self.max_xp_for_level = max_xp_for_level
        self.store = KeyValueStore(db_path)
        self._bind(self.store.load_json(STATE_KEY, self._seed_state, _state_from_payload))
        self.system = SystemChecks(self.store.load_json(SYSTEM_KEY, SystemData, _system_from_payload))

    def _bind(self, state: GameState) -> None:
        self.state = state
        self.ledger = ProfileLedger(state, self.max_xp_for_level)
        self.quests = QuestRegistry(state, self.templates, self.ledger)
        self.journal = Journal(state)

    @staticmethod
    def _seed_state() -> GameState:
        return GameState.from_dict(load_seed())

    def save(self) -> None:
        """Persist the game state."""
        self.store.save_json(STATE_KEY, self.state.to_dict())

    def new_answer_store(self) -> AnswerStore:
        """Start a fresh questionnaire."""
        return AnswerStore(self.domains)

    def evaluate_assessment(self, payload: object) -> AssessmentOutcome:
        """Score an answers payload and remember the result."""
        outcome = evaluate_answers(payload, self.domains)
        record = outcome.result.to_dict()
        record["used_default"] = outcome.used_default
        record["evaluated_at"] = datetime.now(UTC).isoformat()
        self.store.save_json(ASSESSMENT_KEY, record)
        return outcome

    def last_assessment(self) -> dict[str, Any] | None:
        """Return the stored result of the latest assessment, if any."""
        return self.store.load_json(ASSESSMENT_KEY, lambda: None, _assessment_from_payload)

    def list_quests(self, status: str = "all", domain: str | None = None, today: str | None = None) -> list[Quest]:
        """Return quests filtered by status and optionally by domain."""
        if status not in QUEST_STATUSES:
            raise ValueError(f"Unknown quest status filter: {status}")
        if status == "pending":
            quests = self.quests.pending()
        elif status == "completed":
            quests = self.quests.completed()
        elif status == "daily":
            quests = self.quests.daily_quests(today or today_iso())
        else:
            quests = self.quests.all()
        if domain is not None:
            quests = [quest for quest in quests if quest.domain == domain]
        return quests

    def complete_quest(self, quest_id: int, *, strict: bool = False, today: str | None = None) -> Quest | None:
        """Complete a quest by id and persist the new totals."""
        day = today or today_iso()
        quest = self.quests.complete(quest_id, strict=strict)
        if quest is None:
            return None
        self.save()
        if quest.is_daily and quest.created_date == day:
            self.record_daily_metrics(day)
        return quest

    def create_quest(self, draft: QuestDraft, today: str | None = None) -> Quest:
        """Create a custom quest; raises QuestValidationError on bad input."""
        quest = self.quests.create_quest(draft, today or today_iso())
        self.save()
        return quest

    def generate_daily_quests(self, today: str | None = None) -> list[Quest]:
        """Generate today's quests once and persist them."""
        day = today or today_iso()
        before = len(self.state.quests)
        quests = self.quests.generate_daily_quests(day)
        if len(self.state.quests) != before:
            self.save()
            self.record_daily_metrics(day)
        return quests

    def add_journal_entry(self, title: str, content: str, mood: str = "neutral", today: str | None = None) -> JournalEntry:
        entry = self.journal.add(title, content, today or today_iso(), mood)
        self.save()
        return entry

    def update_journal_entry(self, entry_id: int, **changes: str) -> JournalEntry | None:
        entry = self.journal.update(entry_id, **changes)
        if entry is not None:
            self.save()
        return entry

    def delete_journal_entry(self, entry_id: int) -> bool:
        deleted = self.journal.delete(entry_id)
        if deleted:
            self.save()
        return deleted

    def toggle_system_check(self, index: int, today: str | None = None) -> list[bool]:
        """Flip one daily system check and persist the streak."""
        checks = self.system.toggle(index, today or today_iso())
        self.store.save_json(SYSTEM_KEY, self.system.data.to_dict())
        return checks

    def toggle_motivation_mode(self) -> bool:
        enabled = self.system.toggle_motivation_mode()
        self.store.save_json(SYSTEM_KEY, self.system.data.to_dict())
        return enabled

    def daily_metrics(self) -> list[DailyMetrics]:
        """Return recorded daily metrics, oldest first."""
        metrics = self.store.load_json(METRICS_KEY, list, _metrics_from_payload)
        return sorted(metrics, key=lambda item: item.date)

    def record_daily_metrics(self, today: str | None = None) -> DailyMetrics:
        """Snapshot one day's generated quests into the metrics history."""
        day = today or today_iso()
        snapshot = snapshot_day(day, self.quests.daily_quests(day))
        history = [item for item in self.daily_metrics() if item.date != day]
        history.append(snapshot)
        history.sort(key=lambda item: item.date)
        self.store.save_json(METRICS_KEY, [item.to_dict() for item in history])
        return snapshot

    def analytics(self, days: int = 7) -> Analytics:
        """Summarize completion rates, streaks and trend over recent days."""
        metrics = self.daily_metrics()
        current, best = streak_data(metrics)
        return Analytics(
            success_rate=success_rate_for_period(metrics, days),
            current_streak=current,
            best_streak=best,
            trend=trend_direction(metrics, days),
            domain_rates={domain: domain_success_rate(metrics, domain, days) for domain in DOMAIN_IDS},
        )

    def reset_progress(self) -> None:
        """Drop all stored app data and start again from the seed profile."""
        self.store.remove(APP_KEYS)
        self._bind(self._seed_state())
        self.system = SystemChecks(SystemData())
        logger.info("Progress reset to seed profile")

    def close(self) -> None:
        """Close resources."""
        self.store.close()

    def __del__(self) -> None:  # pragma: no cover
        """Best-effort cleanup for test/process teardown."""
        try:
            self.close()
        except Exception:
            pass

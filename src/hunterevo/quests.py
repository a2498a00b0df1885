"""Quest catalog: filtering, user-authored quests and daily generation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from .ledger import QUEST_CREATOR_ACHIEVEMENT_ID, ProfileLedger
from .models import DIFFICULTIES, DOMAIN_IDS, QUEST_TYPES, QuestTemplate
from .scoring import round_half_up
from .state import GameState, Quest

logger = logging.getLogger(__name__)

DIFFICULTY_BASE_XP = {"Easy": 20, "Medium": 40, "Hard": 60}
TYPE_XP_MULTIPLIER = {"simple": 1.0, "photo": 1.2, "timer": 1.3, "checklist": 1.5}
SUBTASK_BONUS_XP = 5
MINUTES_PER_TIME_STEP = 15


class QuestValidationError(ValueError):
    """Raised when a quest draft is missing required input."""


@dataclass
class QuestDraft:
    """User input for a new custom quest."""

    title: str
    description: str
    domain: str = "physical"
    type: str = "simple"
    difficulty: str = "Easy"
    estimated_time: int = 15
    subtasks: list[str] = field(default_factory=list)
    duration: int | None = None


def calculate_xp(draft: QuestDraft) -> int:
    """Return the reward for a custom quest from difficulty, time, type and subtasks."""
    base = DIFFICULTY_BASE_XP.get(draft.difficulty, DIFFICULTY_BASE_XP["Easy"])
    time_multiplier = max(1.0, draft.estimated_time / MINUTES_PER_TIME_STEP)
    type_multiplier = TYPE_XP_MULTIPLIER.get(draft.type, 1.0)
    return round_half_up(base * time_multiplier * type_multiplier) + SUBTASK_BONUS_XP * len(draft.subtasks)


def validate_draft(draft: QuestDraft) -> None:
    """Raise QuestValidationError for the first missing or invalid field."""
    if not draft.title.strip():
        raise QuestValidationError("Quest title is required")
    if not draft.description.strip():
        raise QuestValidationError("Quest description is required")
    if draft.domain not in DOMAIN_IDS:
        raise QuestValidationError(f"Unknown domain: {draft.domain}")
    if draft.type not in QUEST_TYPES:
        raise QuestValidationError(f"Unknown quest type: {draft.type}")
    if draft.difficulty not in DIFFICULTIES:
        raise QuestValidationError(f"Unknown difficulty: {draft.difficulty}")
    if draft.type == "checklist" and not [item for item in draft.subtasks if item.strip()]:
        raise QuestValidationError("Checklist quests need at least one subtask")
    if draft.type == "timer" and (draft.duration is None or draft.duration <= 0):
        raise QuestValidationError("Timer quests need a valid duration")


class QuestRegistry:
    """Quest lookups and mutations over a GameState."""

    def __init__(self, state: GameState, templates: list[QuestTemplate], ledger: ProfileLedger) -> None:
        self.state = state
        self.templates = templates
        self.ledger = ledger

    def all(self) -> list[Quest]:
        return list(self.state.quests)

    def get(self, quest_id: int) -> Quest | None:
        """Get quest by id."""
        for quest in self.state.quests:
            if quest.id == quest_id:
                return quest
        return None

    def by_domain(self, domain: str) -> list[Quest]:
        return [quest for quest in self.state.quests if quest.domain == domain]

    def completed(self) -> list[Quest]:
        return [quest for quest in self.state.quests if quest.completed]

    def pending(self) -> list[Quest]:
        return [quest for quest in self.state.quests if not quest.completed]

    def daily_quests(self, today: str) -> list[Quest]:
        """Return quests generated for the given calendar day."""
        return [quest for quest in self.state.quests if quest.is_daily and quest.created_date == today]

    def complete(self, quest_id: int, *, strict: bool = False) -> Quest | None:
        """Complete a quest by id; None when missing or already completed."""
        quest = self.get(quest_id)
        if quest is None:
            logger.warning("Quest %s not found", quest_id)
            return None
        return self.ledger.apply_quest_completion(quest, strict=strict)

    def create_quest(self, draft: QuestDraft, today: str) -> Quest:
        """Validate and append a custom quest, granting the one-time creator achievement."""
        validate_draft(draft)
        subtasks = [item.strip() for item in draft.subtasks if item.strip()]
        quest = Quest(
            id=self.state.allocate_quest_id(),
            title=draft.title.strip(),
            description=draft.description.strip(),
            domain=draft.domain,
            type=draft.type,
            xp=calculate_xp(replace(draft, subtasks=subtasks)),
            difficulty=draft.difficulty,
            estimated_time=draft.estimated_time,
            subtasks=subtasks,
            duration=draft.duration if draft.type == "timer" else None,
            created_date=today,
        )
        self.state.quests.append(quest)
        logger.info("Created quest %s %r (%d XP)", quest.id, quest.title, quest.xp)
        self.ledger.earn_achievement(QUEST_CREATOR_ACHIEVEMENT_ID, today)
        return quest

    def generate_daily_quests(self, today: str) -> list[Quest]:
        """Instantiate today's quests from templates once per calendar day."""
        existing = self.daily_quests(today)
        if existing:
            return existing

        generated = [
            Quest(
                id=self.state.allocate_quest_id(),
                title=template.title,
                description=template.description,
                domain=template.domain,
                type=template.type,
                xp=template.xp,
                difficulty=template.difficulty,
                estimated_time=template.estimated_time,
                subtasks=list(template.subtasks),
                duration=template.duration,
                is_daily=True,
                created_date=today,
                template_id=template.id,
            )
            for template in self.templates
        ]
        self.state.quests.extend(generated)
        logger.info("Generated %d daily quests for %s", len(generated), today)
        return generated

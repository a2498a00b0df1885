"""Core catalog models for assessments and quest templates."""

from __future__ import annotations

from dataclasses import dataclass

DOMAIN_IDS = ("physical", "mental", "emotional", "social", "financial", "spiritual")
QUEST_TYPES = ("simple", "photo", "timer", "checklist")
DIFFICULTIES = ("Easy", "Medium", "Hard")
MIN_RATING = 1
MAX_RATING = 5
NEUTRAL_RATING = 3


@dataclass(frozen=True)
class Question:
    """One self-assessment question."""

    id: int
    domain: str
    question: str
    description: str


@dataclass(frozen=True)
class Domain:
    """Life domain with its fixed question set."""

    id: str
    name: str
    questions: list[Question]

    @property
    def question_ids(self) -> list[int]:
        return [question.id for question in self.questions]


@dataclass(frozen=True)
class QuestTemplate:
    """Blueprint for a quest that is generated once per day."""

    id: str
    title: str
    description: str
    domain: str
    type: str
    difficulty: str
    estimated_time: int
    xp: int
    subtasks: list[str]
    duration: int | None

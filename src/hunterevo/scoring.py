"""Assessment scoring: domain percentages, rank classification and result building."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from functools import cache
from typing import Any

from .content_loader import load_domains
from .models import MAX_RATING, MIN_RATING, NEUTRAL_RATING, Domain

logger = logging.getLogger(__name__)

# Evaluated top-down, first match wins.
RANK_THRESHOLDS: tuple[tuple[int, str, str], ...] = (
    (90, "S", "Master level - exceptional performance"),
    (80, "A", "Expert level - excellent performance"),
    (70, "B", "Advanced level - strong performance"),
    (60, "C", "Intermediate level - good foundation"),
    (50, "D", "Developing level - room for growth"),
)
FLOOR_LEVEL = "E"
FLOOR_DESCRIPTION = "Beginner level - starting your journey"

DEFAULT_DOMAIN_PERCENTAGES = {
    "physical": 70,
    "mental": 75,
    "emotional": 60,
    "social": 65,
    "financial": 55,
    "spiritual": 68,
}
DEFAULT_OVERALL_PERCENTAGE = 65
HIGHLIGHT_COUNT = 2


@dataclass(frozen=True)
class RankInfo:
    """Rank label for a percentage."""

    rank: str
    level: str
    description: str


@dataclass(frozen=True)
class DomainScore:
    """Scored domain in an assessment result."""

    domain_id: str
    name: str
    percentage: int
    rank: str
    description: str


@dataclass(frozen=True)
class AssessmentResult:
    """Complete assessment outcome across all domains."""

    overall_rank: str
    overall_percentage: int
    overall_description: str
    domain_scores: tuple[DomainScore, ...]
    strengths: tuple[DomainScore, ...]
    improvements: tuple[DomainScore, ...]

    def to_dict(self) -> dict[str, Any]:
        def score_dict(score: DomainScore) -> dict[str, Any]:
            return {
                "domain_id": score.domain_id,
                "name": score.name,
                "percentage": score.percentage,
                "rank": score.rank,
                "description": score.description,
            }

        return {
            "overall_rank": self.overall_rank,
            "overall_percentage": self.overall_percentage,
            "overall_description": self.overall_description,
            "domain_scores": [score_dict(score) for score in self.domain_scores],
            "strengths": [score.domain_id for score in self.strengths],
            "improvements": [score.domain_id for score in self.improvements],
        }


@dataclass(frozen=True)
class AssessmentOutcome:
    """Assessment result plus whether the built-in default was substituted."""

    result: AssessmentResult
    used_default: bool


def round_half_up(value: float) -> int:
    """Round halves away from zero for non-negative values (65.5 -> 66)."""
    return int(math.floor(value + 0.5))


@cache
def _default_domains() -> dict[str, Domain]:
    return load_domains()


def classify(percentage: int) -> RankInfo:
    """Map a 0-100 percentage to its rank tier."""
    for threshold, level, description in RANK_THRESHOLDS:
        if percentage >= threshold:
            return RankInfo(rank=f"{level}-Class", level=level, description=description)
    return RankInfo(rank=f"{FLOOR_LEVEL}-Class", level=FLOOR_LEVEL, description=FLOOR_DESCRIPTION)


def _coerce_rating(value: object) -> int | None:
    """Return a usable 1-5 rating or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, int) and MIN_RATING <= value <= MAX_RATING:
        return value
    return None


def compute_domain_score(
    domain_id: str, answers: Mapping[int, object], domains: Mapping[str, Domain] | None = None
) -> int:
    """Return the 0-100 score for one domain, filling unanswered questions with a neutral 3."""
    catalog = domains if domains is not None else _default_domains()
    domain = catalog[domain_id]
    ratings: list[int] = []
    for question_id in domain.question_ids:
        rating = _coerce_rating(answers.get(question_id))
        ratings.append(NEUTRAL_RATING if rating is None else rating)
    return round_half_up(sum(ratings) / (len(ratings) * MAX_RATING) * 100)


def _domain_score(domain: Domain, percentage: int) -> DomainScore:
    info = classify(percentage)
    return DomainScore(
        domain_id=domain.id,
        name=domain.name,
        percentage=percentage,
        rank=info.rank,
        description=info.description,
    )


def _highlights(scores: list[DomainScore]) -> tuple[tuple[DomainScore, ...], tuple[DomainScore, ...]]:
    """Pick strengths from the top and improvements from the bottom of one stable ranking.

    Improvements are listed weakest first. The two lists never share a domain.
    """
    ranked = sorted(scores, key=lambda item: -item.percentage)
    strengths = ranked[:HIGHLIGHT_COUNT]
    improvements = ranked[HIGHLIGHT_COUNT:][-HIGHLIGHT_COUNT:]
    return tuple(strengths), tuple(reversed(improvements))


def build_result(answers: Mapping[int, object], domains: Mapping[str, Domain] | None = None) -> AssessmentResult:
    """Score every domain and derive the overall rank."""
    catalog = domains if domains is not None else _default_domains()
    scores = [
        _domain_score(domain, compute_domain_score(domain.id, answers, catalog)) for domain in catalog.values()
    ]
    overall = round_half_up(sum(score.percentage for score in scores) / len(scores))
    overall_info = classify(overall)
    strengths, improvements = _highlights(scores)
    return AssessmentResult(
        overall_rank=overall_info.rank,
        overall_percentage=overall,
        overall_description=overall_info.description,
        domain_scores=tuple(scores),
        strengths=strengths,
        improvements=improvements,
    )


def default_result(domains: Mapping[str, Domain] | None = None) -> AssessmentResult:
    """Return the fixed result shown when answers are missing or unreadable."""
    catalog = domains if domains is not None else _default_domains()
    scores = [_domain_score(domain, DEFAULT_DOMAIN_PERCENTAGES[domain.id]) for domain in catalog.values()]
    overall_info = classify(DEFAULT_OVERALL_PERCENTAGE)
    strengths, improvements = _highlights(scores)
    return AssessmentResult(
        overall_rank=overall_info.rank,
        overall_percentage=DEFAULT_OVERALL_PERCENTAGE,
        overall_description=overall_info.description,
        domain_scores=tuple(scores),
        strengths=strengths,
        improvements=improvements,
    )


def parse_answers(payload: object) -> dict[int, int] | None:
    """Parse an answers payload (mapping or JSON string) into question id -> rating.

    Returns None when the payload is absent, empty, not JSON, or not a mapping.
    Entries with non-numeric keys or unusable ratings are dropped, so a non-empty
    mapping with nothing usable parses to ``{}`` and scores as all-neutral.
    """
    if payload is None:
        return None
    raw: object = payload
    if isinstance(payload, str | bytes):
        text = payload.decode("utf-8", errors="replace") if isinstance(payload, bytes) else payload
        if not text.strip():
            return None
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Could not parse answers payload: %s", exc)
            return None
    if not isinstance(raw, Mapping):
        logger.warning("Answers payload is %s, expected a mapping", type(raw).__name__)
        return None
    if not raw:
        return None

    answers: dict[int, int] = {}
    for key, value in raw.items():
        try:
            question_id = int(key)
        except (TypeError, ValueError):
            logger.debug("Ignoring answer with non-numeric key %r", key)
            continue
        rating = _coerce_rating(value)
        if rating is None:
            logger.debug("Ignoring unusable rating %r for question %s", value, question_id)
            continue
        answers[question_id] = rating
    if not answers:
        logger.warning("Answers payload has no usable ratings; every question scores as neutral")
    return answers


def evaluate_answers(payload: object, domains: Mapping[str, Domain] | None = None) -> AssessmentOutcome:
    """Build a result from a raw payload, substituting the default when it is unusable."""
    answers = parse_answers(payload)
    if answers is None:
        logger.warning("Using default assessment result; answers missing or malformed")
        return AssessmentOutcome(result=default_result(domains), used_default=True)
    logger.debug("Scoring assessment with %d answers", len(answers))
    return AssessmentOutcome(result=build_result(answers, domains), used_default=False)


class AnswerStore:
    """In-progress questionnaire answers, one rating per question id."""

    def __init__(self, domains: Mapping[str, Domain] | None = None) -> None:
        self._domains = domains if domains is not None else _default_domains()
        self._question_ids = {qid for domain in self._domains.values() for qid in domain.question_ids}
        self._answers: dict[int, int] = {}

    def answer(self, question_id: int, rating: int) -> None:
        """Record a rating, replacing any earlier answer for the same question."""
        if question_id not in self._question_ids:
            raise ValueError(f"Unknown question id: {question_id}")
        if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating!r}.")
        self._answers[question_id] = rating

    def get(self, question_id: int) -> int | None:
        return self._answers.get(question_id)

    @property
    def answers(self) -> dict[int, int]:
        return dict(self._answers)

    def clear(self) -> None:
        """Restart the questionnaire."""
        self._answers.clear()

    def is_complete(self) -> bool:
        return self._question_ids.issubset(self._answers)

    def __len__(self) -> int:
        return len(self._answers)

    def to_json(self) -> str:
        """Serialize answers the way they travel as a route parameter."""
        return json.dumps({str(key): value for key, value in sorted(self._answers.items())})

    def result(self) -> AssessmentResult:
        return build_result(self._answers, self._domains)

"""Success-rate, streak and trend summaries over daily completion metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from .scoring import round_half_up
from .state import Quest

STREAK_SUCCESS_RATE = 80
TREND_THRESHOLD = 5

Trend = Literal["up", "down", "stable"]


@dataclass(frozen=True)
class DomainTally:
    """Task counts for one domain on one day."""

    total: int
    completed: int

    @property
    def rate(self) -> int:
        return round_half_up(self.completed / self.total * 100) if self.total else 0


@dataclass(frozen=True)
class DailyMetrics:
    """Task completion record for one day."""

    date: str
    total_tasks: int
    completed_tasks: int
    domain_breakdown: dict[str, DomainTally] = field(default_factory=dict)

    @property
    def success_rate(self) -> int:
        return round_half_up(self.completed_tasks / self.total_tasks * 100) if self.total_tasks else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "total_tasks": self.total_tasks,
            "completed_tasks": self.completed_tasks,
            "domain_breakdown": {
                domain: {"total": tally.total, "completed": tally.completed}
                for domain, tally in self.domain_breakdown.items()
            },
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> DailyMetrics:
        breakdown_raw = raw.get("domain_breakdown", {})
        if not isinstance(breakdown_raw, dict):
            raise ValueError("domain_breakdown must be an object.")
        return cls(
            date=str(raw["date"]),
            total_tasks=max(0, int(raw.get("total_tasks", 0))),
            completed_tasks=max(0, int(raw.get("completed_tasks", 0))),
            domain_breakdown={
                str(domain): DomainTally(total=int(item.get("total", 0)), completed=int(item.get("completed", 0)))
                for domain, item in breakdown_raw.items()
            },
        )


def snapshot_day(date: str, quests: list[Quest]) -> DailyMetrics:
    """Summarize one day's quests into a metrics record."""
    breakdown: dict[str, DomainTally] = {}
    for quest in quests:
        tally = breakdown.get(quest.domain, DomainTally(total=0, completed=0))
        breakdown[quest.domain] = DomainTally(
            total=tally.total + 1,
            completed=tally.completed + (1 if quest.completed else 0),
        )
    return DailyMetrics(
        date=date,
        total_tasks=len(quests),
        completed_tasks=sum(1 for quest in quests if quest.completed),
        domain_breakdown=breakdown,
    )


def success_rate_for_period(metrics: list[DailyMetrics], days: int) -> int:
    """Overall completion percentage over the most recent `days` records."""
    recent = metrics[-days:] if days > 0 else []
    total = sum(day.total_tasks for day in recent)
    completed = sum(day.completed_tasks for day in recent)
    return round_half_up(completed / total * 100) if total > 0 else 0


def domain_success_rate(metrics: list[DailyMetrics], domain: str, days: int = 7) -> int:
    """Completion percentage for one domain over the most recent `days` records."""
    recent = metrics[-days:] if days > 0 else []
    tallies = [day.domain_breakdown[domain] for day in recent if domain in day.domain_breakdown]
    total = sum(tally.total for tally in tallies)
    completed = sum(tally.completed for tally in tallies)
    return round_half_up(completed / total * 100) if total > 0 else 0


def streak_data(metrics: list[DailyMetrics]) -> tuple[int, int]:
    """Return (current, best) runs of days at or above the streak success rate.

    The current streak counts back from the most recent day and is zero when that
    day missed the threshold.
    """
    current = 0
    for day in reversed(metrics):
        if day.success_rate < STREAK_SUCCESS_RATE:
            break
        current += 1

    best = 0
    run = 0
    for day in metrics:
        if day.success_rate >= STREAK_SUCCESS_RATE:
            run += 1
            best = max(best, run)
        else:
            run = 0
    return current, best


def trend_direction(metrics: list[DailyMetrics], days: int = 7) -> Trend:
    """Compare the average success rate of the later half of the window with the earlier half."""
    rates = [day.success_rate for day in (metrics[-days:] if days > 0 else [])]
    if len(rates) < 2:
        return "stable"
    middle = len(rates) // 2
    first, second = rates[:middle], rates[middle:]
    difference = sum(second) / len(second) - sum(first) / len(first)
    if difference > TREND_THRESHOLD:
        return "up"
    if difference < -TREND_THRESHOLD:
        return "down"
    return "stable"

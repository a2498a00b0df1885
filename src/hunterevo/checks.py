"""Daily system checklist with an 80% completion streak."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .scoring import round_half_up

STREAK_THRESHOLD = 0.8
CATEGORIES = ("mindset", "planning", "execution", "review")


@dataclass(frozen=True)
class DailyCheck:
    """One item of the daily system checklist."""

    id: str
    title: str
    description: str
    category: str


DAILY_CHECKS: tuple[DailyCheck, ...] = (
    DailyCheck(
        "morning_routine",
        "Morning System Activated",
        "Completed morning routine without relying on motivation",
        "execution",
    ),
    DailyCheck("planning_review", "Daily Plan Review", "Reviewed and adjusted daily plan based on systems", "planning"),
    DailyCheck(
        "decision_framework",
        "Decision Framework Used",
        "Made decisions using logic and systems, not emotions",
        "mindset",
    ),
    DailyCheck(
        "habit_execution",
        "Core Habits Executed",
        "Completed core habits regardless of motivation level",
        "execution",
    ),
    DailyCheck("system_adjustment", "System Optimization", "Identified and implemented system improvements", "review"),
    DailyCheck(
        "motivation_independence",
        "Motivation Independence",
        "Acted without waiting for motivation to strike",
        "mindset",
    ),
)


@dataclass(frozen=True)
class CategoryStats:
    """Completion summary for one check category."""

    category: str
    completed: int
    total: int
    rate: int


@dataclass
class SystemData:
    """Persisted checklist state keyed by ISO date."""

    motivation_mode: bool = False
    daily_checks: dict[str, list[bool]] = field(default_factory=dict)
    system_streak: int = 0
    last_check_date: str = ""
    last_streak_date: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "motivation_mode": self.motivation_mode,
            "daily_checks": {day: list(values) for day, values in self.daily_checks.items()},
            "system_streak": self.system_streak,
            "last_check_date": self.last_check_date,
            "last_streak_date": self.last_streak_date,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SystemData:
        checks_raw = raw.get("daily_checks", {})
        if not isinstance(checks_raw, dict):
            raise ValueError("daily_checks must be an object.")
        return cls(
            motivation_mode=bool(raw.get("motivation_mode", False)),
            daily_checks={str(day): [bool(item) for item in values] for day, values in checks_raw.items()},
            system_streak=max(0, int(raw.get("system_streak", 0))),
            last_check_date=str(raw.get("last_check_date", "")),
            last_streak_date=str(raw.get("last_streak_date", "")),
        )


class SystemChecks:
    """Toggle checks and maintain the streak on a SystemData record."""

    def __init__(self, data: SystemData, checks: tuple[DailyCheck, ...] = DAILY_CHECKS) -> None:
        self.data = data
        self.checks = checks

    def today_checks(self, today: str) -> list[bool]:
        stored = self.data.daily_checks.get(today)
        if stored is None or len(stored) != len(self.checks):
            return [False] * len(self.checks)
        return list(stored)

    def toggle(self, index: int, today: str) -> list[bool]:
        """Flip one of today's checks and update the streak."""
        if not 0 <= index < len(self.checks):
            raise IndexError(f"Check index out of range: {index}")
        checks = self.today_checks(today)
        checks[index] = not checks[index]
        self.data.daily_checks[today] = checks

        completed = sum(checks)
        if completed / len(checks) >= STREAK_THRESHOLD:
            # Counted at most once per day, even if the threshold is crossed repeatedly.
            if self.data.last_streak_date != today:
                self.data.system_streak += 1
                self.data.last_streak_date = today
        elif completed == 0:
            self.data.system_streak = 0
            if self.data.last_streak_date == today:
                self.data.last_streak_date = ""
        self.data.last_check_date = today
        return checks

    def toggle_motivation_mode(self) -> bool:
        self.data.motivation_mode = not self.data.motivation_mode
        return self.data.motivation_mode

    def completion_rate(self, today: str) -> int:
        checks = self.today_checks(today)
        return round_half_up(sum(checks) / len(checks) * 100)

    def category_stats(self, today: str) -> list[CategoryStats]:
        checks = self.today_checks(today)
        stats: list[CategoryStats] = []
        for category in CATEGORIES:
            flags = [checks[index] for index, check in enumerate(self.checks) if check.category == category]
            completed = sum(flags)
            total = len(flags)
            rate = round_half_up(completed / total * 100) if total else 0
            stats.append(CategoryStats(category=category, completed=completed, total=total, rate=rate))
        return stats

"""Apply quest and achievement rewards to profile, domain and stats totals."""

from __future__ import annotations

import logging

from .scoring import round_half_up
from .state import Achievement, GameState, Quest

logger = logging.getLogger(__name__)

DEFAULT_MAX_XP_FOR_LEVEL = 5000
QUEST_CREATOR_ACHIEVEMENT_ID = 7


class UnknownDomainError(LookupError):
    """Raised when a quest references a domain the profile does not track."""

    def __init__(self, domain: str) -> None:
        super().__init__(f"Unknown domain: {domain}")
        self.domain = domain


def progress_for_xp(xp: int, max_xp_for_level: int = DEFAULT_MAX_XP_FOR_LEVEL) -> int:
    """Return progress bar percentage for domain XP, capped at 100."""
    return min(100, round_half_up(xp / max_xp_for_level * 100))


class ProfileLedger:
    """Owns the reward rules that mutate a GameState."""

    def __init__(self, state: GameState, max_xp_for_level: int = DEFAULT_MAX_XP_FOR_LEVEL) -> None:
        if max_xp_for_level <= 0:
            raise ValueError("max_xp_for_level must be positive.")
        self.state = state
        self.max_xp_for_level = max_xp_for_level

    def apply_quest_completion(self, quest: Quest, *, strict: bool = False) -> Quest | None:
        """Complete a quest and credit its XP.

        Returns None without changing anything when the quest is already completed.
        When the quest's domain is not tracked, the domain update is skipped and the
        profile and stats are still credited; with ``strict=True`` an
        UnknownDomainError is raised before anything is changed.
        """
        if quest.completed:
            return None

        domain = self.state.domain(quest.domain)
        if domain is None and strict:
            raise UnknownDomainError(quest.domain)

        quest.completed = True
        self.state.profile.total_xp += quest.xp
        if domain is not None:
            domain.xp += quest.xp
            domain.quests += 1
            domain.progress = progress_for_xp(domain.xp, self.max_xp_for_level)
        else:
            logger.warning("Quest %s references unknown domain %r; domain totals not updated", quest.id, quest.domain)

        self.state.stats.today_completed += 1
        self.state.stats.weekly_completed += 1
        logger.info("Completed quest %s (+%d XP, total %d)", quest.id, quest.xp, self.state.profile.total_xp)
        return quest

    def earn_achievement(self, achievement_id: int, today: str) -> Achievement | None:
        """Mark an achievement earned and grant its XP once."""
        for achievement in self.state.achievements:
            if achievement.id != achievement_id:
                continue
            if achievement.earned:
                return None
            achievement.earned = True
            achievement.earned_date = today
            self.state.profile.total_xp += achievement.xp
            logger.info("Earned achievement %r (+%d XP)", achievement.title, achievement.xp)
            return achievement
        return None

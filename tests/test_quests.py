import pytest

from hunterevo.content_loader import load_templates
from hunterevo.ledger import ProfileLedger
from hunterevo.quests import QuestDraft, QuestRegistry, QuestValidationError, calculate_xp, validate_draft
from hunterevo.state import GameState


def _registry(state: GameState) -> QuestRegistry:
    return QuestRegistry(state, load_templates(), ProfileLedger(state))


@pytest.mark.parametrize(
    ("draft", "expected"),
    [
        (QuestDraft("t", "d", difficulty="Easy", estimated_time=15), 20),
        (QuestDraft("t", "d", difficulty="Easy", estimated_time=5), 20),
        (QuestDraft("t", "d", difficulty="Medium", estimated_time=30), 80),
        (QuestDraft("t", "d", type="photo", estimated_time=10), 24),
        (QuestDraft("t", "d", type="timer", duration=600), 26),
        (QuestDraft("t", "d", type="checklist", difficulty="Hard", estimated_time=60, subtasks=["a", "b", "c"]), 375),
    ],
)
def test_calculate_xp(draft: QuestDraft, expected: int) -> None:
    assert calculate_xp(draft) == expected


@pytest.mark.parametrize(
    ("draft", "message"),
    [
        (QuestDraft(" ", "d"), "Quest title is required"),
        (QuestDraft("t", ""), "Quest description is required"),
        (QuestDraft("t", "d", domain="cosmic"), "Unknown domain: cosmic"),
        (QuestDraft("t", "d", type="video"), "Unknown quest type: video"),
        (QuestDraft("t", "d", difficulty="Epic"), "Unknown difficulty: Epic"),
        (QuestDraft("t", "d", type="checklist", subtasks=[" "]), "Checklist quests need at least one subtask"),
        (QuestDraft("t", "d", type="timer"), "Timer quests need a valid duration"),
    ],
)
def test_validate_draft_messages(draft: QuestDraft, message: str) -> None:
    with pytest.raises(QuestValidationError, match=message):
        validate_draft(draft)


def test_filters(seed_state: GameState) -> None:
    registry = _registry(seed_state)
    assert len(registry.all()) == 8
    assert [quest.id for quest in registry.by_domain("financial")] == [5, 8]
    assert registry.get(3) is not None
    assert registry.get(99) is None
    assert registry.completed() == []
    registry.complete(1)
    assert [quest.id for quest in registry.completed()] == [1]
    assert 1 not in [quest.id for quest in registry.pending()]


def test_complete_missing_quest_returns_none(seed_state: GameState) -> None:
    registry = _registry(seed_state)
    before = seed_state.profile.total_xp
    assert registry.complete(404) is None
    assert seed_state.profile.total_xp == before


def test_create_quest_appends_and_grants_creator_once(seed_state: GameState) -> None:
    registry = _registry(seed_state)
    before = seed_state.profile.total_xp

    first = registry.create_quest(
        QuestDraft(
            "Budget sprint",
            "Plan the month",
            domain="financial",
            type="checklist",
            difficulty="Medium",
            estimated_time=30,
            subtasks=[" Income ", "", "Expenses"],
        ),
        "2026-03-01",
    )
    assert first.id == 9
    assert first.subtasks == ["Income", "Expenses"]
    # 40 * 2 * 1.5 + 5 * 2
    assert first.xp == 130
    assert first.created_date == "2026-03-01"
    assert first.completed is False
    assert seed_state.quests[-1] is first
    assert seed_state.profile.total_xp == before + 75
    creator = next(item for item in seed_state.achievements if item.id == 7)
    assert creator.earned is True

    second = registry.create_quest(QuestDraft("Walk", "Around the block"), "2026-03-02")
    assert second.id == 10
    assert seed_state.profile.total_xp == before + 75


def test_create_quest_invalid_leaves_state_unchanged(seed_state: GameState) -> None:
    registry = _registry(seed_state)
    before_xp = seed_state.profile.total_xp
    with pytest.raises(QuestValidationError):
        registry.create_quest(QuestDraft("", "nothing"), "2026-03-01")
    assert len(seed_state.quests) == 8
    assert seed_state.next_quest_id == 9
    assert seed_state.profile.total_xp == before_xp


def test_create_quest_duration_only_for_timers(seed_state: GameState) -> None:
    registry = _registry(seed_state)
    timed = registry.create_quest(QuestDraft("Focus", "Deep work", type="timer", duration=1500), "2026-03-01")
    plain = registry.create_quest(QuestDraft("Plain", "Simple", duration=1500), "2026-03-01")
    assert timed.duration == 1500
    assert plain.duration is None


def test_ids_stay_unique_after_removal(seed_state: GameState) -> None:
    registry = _registry(seed_state)
    created = registry.create_quest(QuestDraft("One", "First"), "2026-03-01")
    seed_state.quests.remove(created)
    again = registry.create_quest(QuestDraft("Two", "Second"), "2026-03-01")
    assert again.id == created.id + 1


def test_generate_daily_quests_once_per_day(seed_state: GameState) -> None:
    registry = _registry(seed_state)
    generated = registry.generate_daily_quests("2026-03-01")
    assert [quest.template_id for quest in generated] == ["morning-routine", "mindful-moment", "gratitude-photo"]
    assert all(quest.is_daily and quest.created_date == "2026-03-01" for quest in generated)
    assert [quest.id for quest in generated] == [9, 10, 11]

    again = registry.generate_daily_quests("2026-03-01")
    assert [quest.id for quest in again] == [9, 10, 11]
    assert len(seed_state.quests) == 11

    tomorrow = registry.generate_daily_quests("2026-03-02")
    assert [quest.id for quest in tomorrow] == [12, 13, 14]
    assert registry.daily_quests("2026-03-01") == generated


def test_daily_quest_subtasks_are_copied(seed_state: GameState) -> None:
    templates = load_templates()
    registry = QuestRegistry(seed_state, templates, ProfileLedger(seed_state))
    generated = registry.generate_daily_quests("2026-03-01")
    generated[0].subtasks.append("Extra")
    assert "Extra" not in templates[0].subtasks

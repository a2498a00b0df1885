import json
import logging
from typing import Any

import pytest

from hunterevo.content_loader import load_domains
from hunterevo.scoring import (
    AnswerStore,
    build_result,
    classify,
    compute_domain_score,
    default_result,
    evaluate_answers,
    parse_answers,
    round_half_up,
)


def _all(rating: int) -> dict[int, int]:
    return {question_id: rating for question_id in range(1, 31)}


def test_round_half_up_rounds_halves_up() -> None:
    assert round_half_up(65.5) == 66
    assert round_half_up(2.5) == 3
    assert round_half_up(66.4999) == 66
    assert round_half_up(0) == 0


@pytest.mark.parametrize(
    ("percentage", "rank"),
    [
        (100, "S-Class"),
        (90, "S-Class"),
        (89, "A-Class"),
        (80, "A-Class"),
        (79, "B-Class"),
        (70, "B-Class"),
        (60, "C-Class"),
        (59, "D-Class"),
        (50, "D-Class"),
        (49, "E-Class"),
        (0, "E-Class"),
    ],
)
def test_classify_thresholds(percentage: int, rank: str) -> None:
    assert classify(percentage).rank == rank


def test_classify_descriptions() -> None:
    assert classify(95).description == "Master level - exceptional performance"
    assert classify(10).level == "E"
    assert classify(10).description == "Beginner level - starting your journey"


def test_compute_domain_score_fills_unanswered_with_neutral() -> None:
    assert compute_domain_score("physical", {}) == 60
    assert compute_domain_score("physical", {1: 5, 2: 5, 3: 5, 4: 5, 5: 5}) == 100
    assert compute_domain_score("physical", {1: 1, 2: 1, 3: 1, 4: 1, 5: 1}) == 20
    # 5 + 3*4 = 17 of 25
    assert compute_domain_score("physical", {1: 5}) == 68


def test_compute_domain_score_ignores_other_domains_and_bad_ratings() -> None:
    assert compute_domain_score("mental", {1: 5, 2: 5}) == 60
    assert compute_domain_score("physical", {1: 9, 2: 0, 3: "x", 4: True}) == 60


def test_compute_domain_score_unknown_domain() -> None:
    with pytest.raises(KeyError):
        compute_domain_score("cosmic", {})


def test_build_result_with_no_answers_is_all_neutral() -> None:
    result = build_result({})
    assert result.overall_percentage == 60
    assert result.overall_rank == "C-Class"
    assert [score.percentage for score in result.domain_scores] == [60] * 6
    assert all(score.rank == "C-Class" for score in result.domain_scores)


def test_build_result_single_strong_domain() -> None:
    result = build_result({1: 5, 2: 5, 3: 5, 4: 5, 5: 5})
    assert result.domain_scores[0].domain_id == "physical"
    assert result.domain_scores[0].percentage == 100
    assert result.domain_scores[0].rank == "S-Class"
    # (100 + 5 * 60) / 6 = 66.67
    assert result.overall_percentage == 67
    assert result.overall_rank == "C-Class"
    assert [score.domain_id for score in result.strengths] == ["physical", "mental"]
    assert [score.domain_id for score in result.improvements] == ["spiritual", "financial"]


def test_build_result_all_max_and_all_min() -> None:
    best = build_result(_all(5))
    assert best.overall_percentage == 100
    assert best.overall_rank == "S-Class"
    worst = build_result(_all(1))
    assert worst.overall_percentage == 20
    assert worst.overall_rank == "E-Class"


def test_build_result_is_deterministic() -> None:
    answers = {1: 4, 7: 2, 13: 5, 19: 1, 25: 3, 30: 5}
    assert build_result(answers) == build_result(dict(answers))


def test_build_result_orders_domains_like_catalog() -> None:
    result = build_result(_all(4))
    assert [score.domain_id for score in result.domain_scores] == [
        "physical",
        "mental",
        "emotional",
        "social",
        "financial",
        "spiritual",
    ]


def test_strengths_and_improvements_sort_direction() -> None:
    answers = {6: 5, 7: 5, 8: 5, 9: 5, 10: 5, 21: 1, 22: 1, 23: 1, 24: 1, 25: 1, 1: 4}
    result = build_result(answers)
    assert [score.domain_id for score in result.strengths] == ["mental", "physical"]
    assert [score.domain_id for score in result.improvements] == ["financial", "spiritual"]


def test_all_neutral_highlights_follow_catalog_order() -> None:
    result = build_result({})
    assert [score.domain_id for score in result.strengths] == ["physical", "mental"]
    assert [score.domain_id for score in result.improvements] == ["spiritual", "financial"]


@pytest.mark.parametrize(
    "answers",
    [
        {},
        {1: 5, 2: 5, 3: 5, 4: 5, 5: 5},
        {6: 1},
        {1: 4, 7: 2, 13: 5, 19: 1, 25: 3, 30: 5},
        _all(2),
    ],
)
def test_strengths_and_improvements_never_overlap(answers: dict[int, int]) -> None:
    result = build_result(answers)
    strengths = {score.domain_id for score in result.strengths}
    improvements = {score.domain_id for score in result.improvements}
    assert len(strengths) == 2
    assert len(improvements) == 2
    assert not strengths & improvements


def test_default_result_values() -> None:
    result = default_result()
    assert result.overall_percentage == 65
    assert result.overall_rank == "C-Class"
    assert {score.domain_id: score.percentage for score in result.domain_scores} == {
        "physical": 70,
        "mental": 75,
        "emotional": 60,
        "social": 65,
        "financial": 55,
        "spiritual": 68,
    }
    assert [score.domain_id for score in result.strengths] == ["mental", "physical"]
    assert [score.domain_id for score in result.improvements] == ["financial", "emotional"]


def test_parse_answers_accepts_json_and_mappings() -> None:
    assert parse_answers('{"1": 5, "2": "4"}') == {1: 5, 2: 4}
    assert parse_answers(b'{"3": 2}') == {3: 2}
    assert parse_answers({4: 1}) == {4: 1}


@pytest.mark.parametrize("payload", [None, "", "   ", "{not json", "[1, 2]", "42", {}, "{}"])
def test_parse_answers_rejects_unusable_payloads(payload: Any) -> None:
    assert parse_answers(payload) is None


@pytest.mark.parametrize("payload", ['{"1": 0}', {"a": 5}, '{"2": "x", "3": 9}'])
def test_mapping_without_usable_ratings_scores_neutral(payload: Any) -> None:
    assert parse_answers(payload) == {}
    outcome = evaluate_answers(payload)
    assert outcome.used_default is False
    assert outcome.result.overall_percentage == 60
    assert outcome.result.overall_rank == "C-Class"
    assert [score.percentage for score in outcome.result.domain_scores] == [60] * 6


def test_evaluate_answers_uses_default_for_malformed_payload(caplog: Any) -> None:
    with caplog.at_level(logging.WARNING, logger="hunterevo.scoring"):
        outcome = evaluate_answers("{broken")
    assert outcome.used_default is True
    assert outcome.result == default_result()
    assert any("default assessment" in record.message for record in caplog.records)


def test_evaluate_answers_scores_valid_payload() -> None:
    outcome = evaluate_answers(json.dumps({str(qid): 5 for qid in range(1, 31)}))
    assert outcome.used_default is False
    assert outcome.result.overall_rank == "S-Class"


def test_evaluate_answers_partial_payload_fills_neutral() -> None:
    outcome = evaluate_answers('{"1": 5, "2": 5, "3": 5, "4": 5, "5": 5}')
    assert outcome.used_default is False
    assert outcome.result.overall_percentage == 67


def test_result_to_dict() -> None:
    payload = default_result().to_dict()
    assert payload["overall_rank"] == "C-Class"
    assert payload["strengths"] == ["mental", "physical"]
    assert payload["domain_scores"][0]["domain_id"] == "physical"
    json.dumps(payload)


def test_answer_store_records_and_replaces() -> None:
    store = AnswerStore()
    store.answer(1, 4)
    store.answer(1, 2)
    assert store.get(1) == 2
    assert len(store) == 1
    assert store.answers == {1: 2}
    store.answers[5] = 5
    assert store.get(5) is None


def test_answer_store_rejects_bad_input() -> None:
    store = AnswerStore()
    with pytest.raises(ValueError):
        store.answer(99, 3)
    with pytest.raises(ValueError):
        store.answer(1, 6)
    with pytest.raises(ValueError):
        store.answer(1, True)
    assert len(store) == 0


def test_answer_store_completion_and_json() -> None:
    store = AnswerStore(load_domains())
    for question_id in range(1, 31):
        store.answer(question_id, 5)
    assert store.is_complete() is True
    assert json.loads(store.to_json())["30"] == 5
    assert evaluate_answers(store.to_json()).result == store.result()
    store.clear()
    assert store.is_complete() is False
    assert store.result().overall_percentage == 60

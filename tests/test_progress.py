import pytest

from assessment_engine.graph import build_graph
from assessment_engine.models import COMPLETED, IN_PROGRESS, NOT_STARTED, DomainProgress
from assessment_engine.progress import (TIME_CAP_LABEL, compute_domain_progress, compute_overall,
                                        estimate_time_remaining, round_half_up)


def _progress(catalog, domain, answers):
    graph = build_graph(catalog.domain(domain), catalog.base_questions(domain), answers)
    return compute_domain_progress(domain, graph, answers)


def _dp(domain, completed, total):
    return DomainProgress(domain, completed, total, IN_PROGRESS, total, 0, percentage=round_half_up(completed / total * 100))


def test_untriggered_follow_up_example(catalog):
    answers = {"1.1": 4, "1.2": 2, "1.3": 3, "1.4": 3, "1.5": 2, "1.6": 1, "1.7": 2}
    p = _progress(catalog, "strategic-alignment", answers)
    assert p.total == 8
    assert p.completed == 7
    assert p.status == IN_PROGRESS
    assert p.percentage == 88
    assert p.unanswered_required == ("1.1-followup-1",)


def test_domain_completes_once_follow_up_answered(catalog):
    answers = {"1.1": 4, "1.2": 2, "1.3": 3, "1.4": 3, "1.5": 2, "1.6": 1, "1.1-followup-1": "Unclear ownership"}
    p = _progress(catalog, "strategic-alignment", answers)
    assert p.status == COMPLETED
    assert p.total == 8 and p.completed == 7


def test_all_static_required_answered_without_follow_ups_is_completed(catalog):
    answers = {qid: 2 for qid in ("1.1", "1.2", "1.3", "1.4", "1.5", "1.6")}
    p = _progress(catalog, "strategic-alignment", answers)
    assert p.status == COMPLETED
    assert p.total == 7


def test_not_started(catalog):
    p = _progress(catalog, "strategic-alignment", {})
    assert p.status == NOT_STARTED
    assert p.percentage == 0


def test_inactive_answered_follow_up_does_not_block_completion(catalog):
    answers = {qid: 2 for qid in ("1.1", "1.2", "1.3", "1.4", "1.5", "1.6")}
    answers["1.1-followup-1"] = "Resolved since"
    p = _progress(catalog, "strategic-alignment", answers)
    assert p.total == 8
    assert p.status == COMPLETED


def test_progress_is_pure(catalog):
    answers = {"1.1": 4, "1.2": 2}
    assert _progress(catalog, "strategic-alignment", answers) == _progress(catalog, "strategic-alignment", answers)


@pytest.mark.parametrize("x, expected", [(87.5, 88), (86.4, 86), (0.5, 1), (0, 0), (100, 100)])
def test_round_half_up(x, expected):
    assert round_half_up(x) == expected


@pytest.mark.parametrize(
    "remaining, label",
    [
        (0, "<5 minutes"),
        (6, "<5 minutes"),
        (7, "5-15 minutes"),
        (20, "5-15 minutes"),
        (21, "15-30 minutes"),
        (40, "15-30 minutes"),
        (41, "30-45 minutes"),
        (60, "30-45 minutes"),
        (61, TIME_CAP_LABEL),
        (500, TIME_CAP_LABEL),
    ],
)
def test_time_buckets(remaining, label):
    assert estimate_time_remaining(remaining, 45) == label


def test_time_estimate_is_monotonic():
    order = ["<5 minutes", "5-15 minutes", "15-30 minutes", "30-45 minutes", TIME_CAP_LABEL]
    ranks = [order.index(estimate_time_remaining(n)) for n in range(0, 120)]
    assert ranks == sorted(ranks)


def test_overall_unweighted_average():
    progress = {"a": _dp("a", 1, 2), "b": _dp("b", 1, 4)}
    overall = compute_overall(progress)
    assert overall.overall == 38  # (50 + 25) / 2 = 37.5
    assert overall.completed == 2
    assert overall.total == 6


def test_overall_weighted_average():
    progress = {"a": _dp("a", 2, 2), "b": _dp("b", 0, 4)}
    overall = compute_overall(progress, weights={"a": 3.0})
    assert overall.overall == 75  # (100 * 3 + 0 * 1) / 4


def test_overall_empty():
    overall = compute_overall({})
    assert overall.overall == 0
    assert overall.estimated_time_remaining == "<5 minutes"

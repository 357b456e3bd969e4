# progress.py

import math
from typing import Any, Mapping, Optional

import numpy as np

from .models import (
    COMPLETED,
    IN_PROGRESS,
    NOT_STARTED,
    Answer,
    DomainProgress,
    OverallProgress,
    is_answered,
)
from .settings import DEFAULT_SETTINGS, EngineSettings

# Upper bound in minutes (inclusive) -> label. Anything above the last bound is capped.
TIME_BUCKETS = [
    (5, "<5 minutes"),
    (15, "5-15 minutes"),
    (30, "15-30 minutes"),
    (45, "30-45 minutes"),
]
TIME_CAP_LABEL = "45-60 minutes"


def round_half_up(x: float) -> int:
    """Round .5 away from zero, e.g. 87.5 -> 88 (`round` would give banker's rounding)."""
    return int(math.floor(x + 0.5))


def completion_pct(completed: int, total: int) -> int:
    return round_half_up(completed / total * 100) if total else 0


def compute_domain_progress(domain: str, graph, responses: Mapping[str, Any]) -> DomainProgress:
    """
    Compute progress of one domain against its dynamic question graph.

    `total` counts every question currently in the graph (base plus realized
    follow-ups), so it grows past the static count as soon as a follow-up is
    realized. The domain is `completed` only when every question the graph
    marks required, active follow-ups included, has an answer.

    :param domain: domain id
    :param graph: a QuestionGraph (or any iterable of Question) for the domain
    :param responses: question id -> Answer (or raw value)
    :return: DomainProgress
    """
    total = completed = required = 0
    unanswered_required = []
    for question in graph:
        total += 1
        entry = responses.get(question.id)
        answered = is_answered(entry.value if isinstance(entry, Answer) else entry)
        if answered:
            completed += 1
        if question.required:
            required += 1
            if not answered:
                unanswered_required.append(question.id)

    if completed == 0:
        status = NOT_STARTED
    elif not unanswered_required:
        status = COMPLETED
    else:
        status = IN_PROGRESS

    return DomainProgress(
        domain=domain,
        completed=completed,
        total=total,
        status=status,
        required_questions=required,
        optional_questions=total - required,
        percentage=completion_pct(completed, total),
        unanswered_required=tuple(unanswered_required),
    )


def estimate_time_remaining(remaining_questions: int, seconds_per_question: int = DEFAULT_SETTINGS.seconds_per_question) -> str:
    """
    Bucket the remaining answering time into a human readable range.

    :param remaining_questions: unanswered questions across all domains
    :param seconds_per_question: average answering time
    :return: one of the TIME_BUCKETS labels or TIME_CAP_LABEL
    """
    minutes = math.ceil(max(0, remaining_questions) * seconds_per_question / 60)
    for upper, label in TIME_BUCKETS:
        if minutes <= upper:
            return label
    return TIME_CAP_LABEL


def compute_overall(
    progress_by_domain: Mapping[str, DomainProgress],
    weights: Optional[Mapping[str, float]] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> OverallProgress:
    """
    Aggregate per-domain progress into the overall completion figure.

    The overall percentage is the average of domain completion percentages,
    weighted by the business-model profile's domain weights when given
    (domains missing from `weights` count as 1.0) and unweighted otherwise.

    :param progress_by_domain: domain id -> DomainProgress
    :param weights: optional domain id -> importance weight
    :param settings: engine settings (seconds per question)
    :return: OverallProgress
    """
    if not progress_by_domain:
        return OverallProgress(
            overall=0,
            completed=0,
            total=0,
            estimated_time_remaining=estimate_time_remaining(0, settings.seconds_per_question),
            domains={},
        )

    pcts = np.array(
        [p.completed / p.total * 100 if p.total else 0.0 for p in progress_by_domain.values()],
        dtype=float,
    )
    w = np.array(
        [float((weights or {}).get(d, 1.0)) for d in progress_by_domain],
        dtype=float,
    )
    if weights and w.sum() > 0:
        overall = float(np.average(pcts, weights=w))
    else:
        overall = float(pcts.mean())

    completed = sum(p.completed for p in progress_by_domain.values())
    total = sum(p.total for p in progress_by_domain.values())
    return OverallProgress(
        overall=round_half_up(overall),
        completed=completed,
        total=total,
        estimated_time_remaining=estimate_time_remaining(total - completed, settings.seconds_per_question),
        domains=dict(progress_by_domain),
    )

# gaps.py

import dataclasses
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from . import config
from .errors import GapNotFoundError
from .models import (
    CRITICAL,
    GAP_CATEGORIES,
    IMPORTANT,
    NICE_TO_HAVE,
    DomainProgress,
    Gap,
    NotificationDecision,
    ValidationIssue,
    ValidationResult,
)
from .settings import DEFAULT_SETTINGS, EngineSettings

logger = logging.getLogger(__name__)

LOW_COMPLETENESS = "low-completeness"

# minutes
RESOLUTION_TIMES = {
    "required": 30,
    "consistency": 20,
    "quality": 15,
    "completeness": 10,
    LOW_COMPLETENESS: 10,
    "optional": 5,
}

CATEGORY_BASE = {CRITICAL: 8, IMPORTANT: 5, NICE_TO_HAVE: 2}

CLIENT_INPUT = "client-input"
AUTO_RESOLVED = "auto-resolved"
FOUNDER_OVERRIDE = "founder-override"

URGENCY_HIGH = "high"
URGENCY_CRITICAL = "critical"

# Namespace for deterministic gap ids
GAP_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "assessment-gap-engine/gaps")


@dataclass(frozen=True)
class BulkResolution:
    gaps: Tuple[Gap, ...]
    processed: int
    resolved: int
    failed: Tuple[str, ...] = ()


def gap_id_for(assessment_id: str, domain: Optional[str], rule: str) -> str:
    return str(uuid.uuid5(GAP_NAMESPACE, f"{assessment_id}/{domain or ''}/{rule}"))


def categorize(issue: ValidationIssue) -> str:
    if issue.type == "required":
        return CRITICAL
    if issue.type == "consistency":
        return CRITICAL if issue.impact_on_timeline else IMPORTANT
    if issue.type == "quality":
        return IMPORTANT
    return NICE_TO_HAVE


def weight_bonus(weight: float) -> int:
    if weight >= 1.3:
        return 2
    if weight > 1.0:
        return 1
    return 0


def _prompts(rule_type: str, title: str) -> Tuple[str, ...]:
    return tuple(p.format(title=title) for p in config.GAP_PROMPTS.get(rule_type, ()))


def _title(catalog, domain: Optional[str]) -> str:
    if catalog is not None:
        return catalog.title(domain)
    return (domain or "assessment").replace("-", " ")


def _draft(
    assessment_id: str,
    domain: Optional[str],
    rule: str,
    rule_type: str,
    category: str,
    description: str,
    weight: float,
    catalog,
    suggested: Sequence[str] = (),
    impact: bool = False,
) -> Gap:
    return Gap(
        gap_id=gap_id_for(assessment_id, domain, rule),
        assessment_id=assessment_id,
        domain=domain,
        category=category,
        rule=rule,
        description=description,
        suggested_questions=tuple(suggested),
        follow_up_prompts=_prompts(rule_type, _title(catalog, domain)),
        impact_on_timeline=impact,
        priority=CATEGORY_BASE[category] + weight_bonus(weight),
        estimated_resolution_time=RESOLUTION_TIMES.get(rule_type, 10),
    )


def classify_gaps(
    assessment_id: str,
    validation_result: ValidationResult,
    progress_by_domain: Mapping[str, DomainProgress],
    *,
    profile=None,
    catalog=None,
    previous: Iterable[Gap] = (),
    settings: EngineSettings = DEFAULT_SETTINGS,
    now: Optional[datetime] = None,
) -> List[Gap]:
    """
    Turn a validation result and domain progress into the assessment's gap list.

    Every error and warning becomes one gap; started domains whose dynamic
    completion is under `settings.low_completeness_threshold` add a
    nice-to-have gap. A gap is identified by (domain, rule): when `previous`
    holds a gap with the same identity its resolution fields are kept and only
    the detection fields are refreshed. A previous gap whose condition is gone
    is returned resolved as `auto-resolved`; if the condition comes back the
    gap is open again.

    :param assessment_id: id of the assessment the gaps belong to
    :param validation_result: output of rules.evaluate
    :param progress_by_domain: domain id -> DomainProgress
    :param profile: BusinessModelProfile for weight tiebreaks, optional
    :param catalog: QuestionCatalog for domain titles, optional
    :param previous: gaps from the last classification
    :param settings: engine settings
    :param now: detection timestamp (defaults to utcnow)
    :return: list of Gap, one per (domain, rule)
    """
    now = now or datetime.now(timezone.utc)

    def weight(domain):
        return profile.weight(domain) if profile is not None else 1.0

    drafts: Dict[Tuple[str, str], Gap] = {}

    for issue in (*validation_result.errors, *validation_result.warnings):
        domain = issue.domain
        if domain is None and issue.field not in ("cross-domain", "business-model"):
            domain = issue.field
        rule = issue.rule or issue.type
        suggested = issue.question_ids
        if issue.type == "required" and domain in progress_by_domain:
            suggested = progress_by_domain[domain].unanswered_required
        gap = _draft(
            assessment_id,
            domain,
            rule,
            issue.type,
            categorize(issue),
            issue.message,
            weight(domain),
            catalog,
            suggested=suggested,
            impact=issue.impact_on_timeline,
        )
        drafts.setdefault(gap.key, gap)

    for domain, progress in progress_by_domain.items():
        if progress.completed == 0 or progress.percentage >= settings.low_completeness_threshold:
            continue
        gap = _draft(
            assessment_id,
            domain,
            LOW_COMPLETENESS,
            LOW_COMPLETENESS,
            NICE_TO_HAVE,
            f"{_title(catalog, domain)} is only {progress.percentage}% complete",
            weight(domain),
            catalog,
            suggested=progress.unanswered_required,
        )
        drafts.setdefault(gap.key, gap)

    known = {g.key: g for g in previous}
    gaps = []
    for key, gap in drafts.items():
        before = known.get(key)
        if before is not None and before.resolution_method != AUTO_RESOLVED:
            gap = dataclasses.replace(
                gap,
                resolved=before.resolved,
                resolved_at=before.resolved_at,
                resolution_method=before.resolution_method,
                client_response=before.client_response,
            )
        gaps.append(dataclasses.replace(gap, detected_at=now))

    vanished = 0
    for key, before in known.items():
        if key in drafts:
            continue
        if before.resolution_method != AUTO_RESOLVED:
            before = dataclasses.replace(before, resolved=True, resolved_at=now, resolution_method=AUTO_RESOLVED)
            vanished += 1
        gaps.append(before)
    if vanished:
        logger.debug("%d gaps auto-resolved for assessment %s", vanished, assessment_id)
    return gaps


def prioritize_gaps(gaps: Iterable[Gap], weights: Optional[Mapping[str, float]] = None) -> List[Gap]:
    """Sort gaps: priority desc, category severity, domain weight desc, then gap id."""
    weights = weights or {}
    return sorted(
        gaps,
        key=lambda g: (
            -g.priority,
            GAP_CATEGORIES.index(g.category),
            -weights.get(g.domain, 1.0),
            g.gap_id,
        ),
    )


def resolve_gap(
    gaps: Sequence[Gap],
    gap_id: str,
    client_response: Optional[str] = None,
    skip: bool = False,
    now: Optional[datetime] = None,
) -> Tuple[Gap, ...]:
    """
    Mark one gap resolved and return the new gap tuple.

    A skipped gap is resolved as a founder override, otherwise as client input.

    :raises GapNotFoundError: when no gap has `gap_id`
    """
    if not any(g.gap_id == gap_id for g in gaps):
        raise GapNotFoundError(gap_id)
    now = now or datetime.now(timezone.utc)
    method = FOUNDER_OVERRIDE if skip else CLIENT_INPUT
    return tuple(
        dataclasses.replace(
            g,
            resolved=True,
            resolved_at=now,
            resolution_method=method,
            client_response=client_response,
        )
        if g.gap_id == gap_id
        else g
        for g in gaps
    )


def bulk_resolve_gaps(
    gaps: Sequence[Gap],
    resolutions: Mapping[str, Optional[str]],
    skip: bool = False,
    now: Optional[datetime] = None,
) -> BulkResolution:
    """
    Resolve several gaps at once. Unknown ids are reported in `failed`, not raised.

    :param resolutions: gap id -> client response (None when skipped)
    """
    current = tuple(gaps)
    failed = []
    for gap_id, response in resolutions.items():
        try:
            current = resolve_gap(current, gap_id, client_response=response, skip=skip, now=now)
        except GapNotFoundError:
            failed.append(gap_id)
    return BulkResolution(
        gaps=current,
        processed=len(resolutions),
        resolved=len(resolutions) - len(failed),
        failed=tuple(failed),
    )


def critical_gap_notification(gaps: Iterable[Gap], settings: EngineSettings = DEFAULT_SETTINGS) -> NotificationDecision:
    """
    Decide whether the founder should hear about critical gaps.

    Counts unresolved critical gaps. Reaching `critical_gap_threshold` asks for
    a notification with urgency `high`; reaching `critical_escalation_threshold`
    raises urgency to `critical`. The verdict depends only on `gaps`, so
    repeated calls agree; suppressing repeat notifications is the caller's job.
    """
    critical = [g for g in gaps if g.category == CRITICAL and not g.resolved]
    count = len(critical)
    if count >= settings.critical_escalation_threshold:
        urgency = URGENCY_CRITICAL
    elif count >= settings.critical_gap_threshold:
        urgency = URGENCY_HIGH
    else:
        urgency = None

    domains = []
    for g in critical:
        if g.domain and g.domain not in domains:
            domains.append(g.domain)

    decision = NotificationDecision(
        should_notify=urgency is not None,
        urgency_level=urgency,
        critical_gap_count=count,
        gap_ids=tuple(g.gap_id for g in critical),
        domains=tuple(domains),
    )
    if decision.should_notify:
        logger.info("Founder notification due: %d critical gaps (urgency %s)", count, urgency)
    return decision

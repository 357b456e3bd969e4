# rules.py

import logging
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence

from .models import Answer, DomainResponse, ValidationIssue, ValidationResult, as_number, is_answered
from .progress import round_half_up
from .settings import DEFAULT_SETTINGS, EngineSettings

logger = logging.getLogger(__name__)

# On the 1-5 scales a higher score is worse.
POOR_SCORE = 4
STRONG_SCORE = 2


# ----------- Cross-domain predicates -------------
# Each receives the numeric answers named by the rule's `questions`, in order.
def _both_poor(first: float, second: float) -> bool:
    return first >= POOR_SCORE and second >= POOR_SCORE


def _strong_first_poor_second(first: float, second: float) -> bool:
    return first <= STRONG_SCORE and second >= POOR_SCORE


CROSS_DOMAIN_PREDICATES: Dict[str, Callable[..., bool]] = {
    "cac-ltv-consistency": _both_poor,
    "churn-product-fit": _both_poor,
    "scaling-technology": _strong_first_poor_second,
    "network-effects": _strong_first_poor_second,
    "platform-scalability": _both_poor,
    "supply-operations-alignment": _both_poor,
    "quality-supply-chain": _both_poor,
    "people-service-delivery": _both_poor,
    "utilization-profitability": _both_poor,
    "revenue-stream-balance": _both_poor,
    "operational-complexity": _both_poor,
}


# ----------- Business-logic predicates -------------
# Each receives the answer values named by the rule's `question_ids`, in order,
# and returns True (violation), False (fine) or None (not enough information).
def _none_tracked(values: Sequence[Any]) -> Optional[bool]:
    return not any(v is True or (as_number(v) or 0) > 0 for v in values)


def _first_poor(values: Sequence[Any]) -> Optional[bool]:
    number = as_number(values[0])
    if number is None:
        return None
    return number >= POOR_SCORE


def _any_poor(values: Sequence[Any]) -> Optional[bool]:
    numbers = [as_number(v) for v in values]
    if any(n is None for n in numbers):
        return None
    return any(n >= POOR_SCORE for n in numbers)


BUSINESS_LOGIC_PREDICATES: Dict[str, Callable[[Sequence[Any]], Optional[bool]]] = {
    "subscription-metrics": _none_tracked,
    "product-architecture": _first_poor,
    "manufacturing-processes": _first_poor,
    "service-standardization": _first_poor,
    "marketplace-metrics": _any_poor,
}


def registered_rule_names() -> FrozenSet[str]:
    return frozenset(CROSS_DOMAIN_PREDICATES) | frozenset(BUSINESS_LOGIC_PREDICATES)


def _answers(responses_by_domain: Mapping[str, Any], domain: str) -> Mapping[str, Any]:
    response = responses_by_domain.get(domain)
    if response is None:
        return {}
    if isinstance(response, DomainResponse):
        return response.questions
    return response


def _value(answers: Mapping[str, Any], question_id: str) -> Any:
    entry = answers.get(question_id)
    return entry.value if isinstance(entry, Answer) else entry


def _answered_count(answers: Mapping[str, Any]) -> int:
    return sum(1 for qid in answers if is_answered(_value(answers, qid)))


def check_cross_domain_rule(rule, responses_by_domain: Mapping[str, Any]) -> Optional[ValidationIssue]:
    """
    Apply one cross-domain rule.

    Returns None when the rule has no registered predicate, when any question
    it reads is unanswered or non-numeric, or when the predicate passes.
    """
    predicate = CROSS_DOMAIN_PREDICATES.get(rule.name)
    if predicate is None or not rule.questions:
        return None

    scores = []
    for domain, qid in rule.questions:
        number = as_number(_value(_answers(responses_by_domain, domain), qid))
        if number is None:
            logger.debug("Skipping %s: %s/%s has no numeric answer", rule.name, domain, qid)
            return None
        scores.append(number)

    if not predicate(*scores):
        return None
    return ValidationIssue(
        field="cross-domain",
        message=rule.message,
        type="consistency",
        rule=rule.name,
        domain=rule.domains[0],
        question_ids=tuple(qid for _, qid in rule.questions),
        impact_on_timeline=rule.impact_on_timeline,
    )


def check_business_logic_rule(rule, responses_by_domain: Mapping[str, Any]) -> Optional[ValidationIssue]:
    """
    Apply one single-domain business-logic rule.

    Skipped (None) when the predicate is unknown or any inspected question is
    unanswered.
    """
    predicate = BUSINESS_LOGIC_PREDICATES.get(rule.name)
    if predicate is None or not rule.question_ids:
        return None

    answers = _answers(responses_by_domain, rule.domain)
    values = [_value(answers, qid) for qid in rule.question_ids]
    if not all(is_answered(v) for v in values):
        logger.debug("Skipping %s: not every inspected question is answered", rule.name)
        return None

    if not predicate(values):
        return None
    return ValidationIssue(
        field=rule.domain,
        message=rule.message,
        type="quality",
        rule=rule.name,
        domain=rule.domain,
        question_ids=rule.question_ids,
    )


def coarse_completeness(responses_by_domain: Mapping[str, Any], settings: EngineSettings = DEFAULT_SETTINGS) -> int:
    """
    Coarse completeness over domains that have any answer.

    Each started domain scores min(100, answered / assumed_questions_per_domain);
    the result is their rounded average. This needs no question graph and is
    a fallback figure, distinct from the dynamic-graph progress in
    `progress.compute_overall`; the two are not interchangeable.
    """
    per_domain = []
    for domain in responses_by_domain:
        answers = _answers(responses_by_domain, domain)
        if _answered_count(answers):
            per_domain.append(_coarse_domain_pct(answers, settings))
    if not per_domain:
        return 0
    return round_half_up(sum(per_domain) / len(per_domain))


def _coarse_domain_pct(answers: Mapping[str, Any], settings: EngineSettings) -> float:
    return min(100.0, _answered_count(answers) / settings.assumed_questions_per_domain * 100)


def domain_completeness(response: Any, settings: EngineSettings = DEFAULT_SETTINGS) -> int:
    """
    Completeness of one domain's responses.

    Uses the figure a progress pass stored on a DomainResponse; plain answer
    maps and responses changed since the last pass get the coarse per-domain
    count instead.
    """
    if isinstance(response, DomainResponse) and response.completeness is not None:
        return response.completeness
    answers = response.questions if isinstance(response, DomainResponse) else response
    return round_half_up(_coarse_domain_pct(answers, settings))


def _unknown_rule(rule_name: str, domain: str, tag: str) -> ValidationIssue:
    return ValidationIssue(
        field=domain,
        message=f"Rule '{rule_name}' of the {tag} business model is not recognized and was not applied",
        type="optional",
        rule=rule_name,
        domain=domain,
    )


def evaluate(
    profile,
    responses_by_domain: Mapping[str, Any],
    settings: EngineSettings = DEFAULT_SETTINGS,
    business_model: Optional[str] = None,
) -> ValidationResult:
    """
    Evaluate a business-model profile against the current responses.

    Pure: every call is a fresh computation and results are never
    deduplicated against earlier calls. Without a profile (unknown or missing
    business model) no domain or rule constraints apply and a single advisory
    warning is returned. A profile rule with no registered predicate adds no
    constraint; it yields one `optional` warning per rule name.

    :param profile: BusinessModelProfile, or None
    :param responses_by_domain: domain id -> DomainResponse (or question id -> Answer mapping)
    :param settings: engine settings
    :param business_model: the tag the caller asked for, used in messages
    :return: ValidationResult
    """
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    completeness = coarse_completeness(responses_by_domain, settings)

    if profile is None:
        if business_model:
            logger.warning("Business model %r not recognized; using generic validation", business_model)
            message = f"Business model '{business_model}' not recognized. Using generic validation."
        else:
            message = "No business model selected. Domain-specific validation is disabled."
        warnings.append(
            ValidationIssue(field="business-model", message=message, type="optional", rule="unknown-business-model")
        )
        return ValidationResult(errors=(), warnings=tuple(warnings), completeness=completeness)

    tag = profile.business_model
    for domain in sorted(profile.required_domains):
        if _answered_count(_answers(responses_by_domain, domain)) == 0:
            errors.append(
                ValidationIssue(
                    field=domain,
                    message=f"Domain '{domain}' is required for {tag} business model",
                    type="required",
                    rule="required-domain",
                    domain=domain,
                    impact_on_timeline=True,
                )
            )

    unknown = {}
    for rule in profile.cross_domain_rules:
        if rule.name not in CROSS_DOMAIN_PREDICATES:
            unknown.setdefault(rule.name, rule.domains[0])
            continue
        issue = check_cross_domain_rule(rule, responses_by_domain)
        if issue:
            errors.append(issue)

    for rule in profile.business_logic_rules:
        if rule.name not in BUSINESS_LOGIC_PREDICATES:
            unknown.setdefault(rule.name, rule.domain)
            continue
        issue = check_business_logic_rule(rule, responses_by_domain)
        if issue:
            warnings.append(issue)

    warnings.extend(_unknown_rule(name, domain, tag) for name, domain in unknown.items())

    for domain, weight in profile.domain_weighting.items():
        response = responses_by_domain.get(domain)
        if response is None or weight <= settings.weighted_domain_threshold:
            continue
        pct = domain_completeness(response, settings)
        if pct < settings.weighted_completeness_floor:
            warnings.append(
                ValidationIssue(
                    field=domain,
                    message=f"Domain '{domain}' is critical for {tag} business model but only {pct}% complete",
                    type="completeness",
                    rule="weighted-completeness",
                    domain=domain,
                )
            )

    return ValidationResult(errors=tuple(errors), warnings=tuple(warnings), completeness=completeness)

# catalog.py

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from . import config
from .errors import CatalogError, UnknownDomainError
from .models import (
    BOOLEAN,
    MULTI_CHOICE,
    SCALE,
    SINGLE_CHOICE,
    Conditional,
    Domain,
    Question,
    ValidationIssue,
    as_number,
    is_answered,
)
from .settings import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


class QuestionCatalog:
    """
    The static question bank: twelve domains, their base questions and follow-ups.

    Built once by `load_catalog` and passed to every engine entry point.
    """

    def __init__(self, domains: Iterable[Domain]):
        self._domains: Dict[str, Domain] = {d.id: d for d in domains}
        self._index: Dict[Tuple[str, str], Question] = {}
        for d in self._domains.values():
            for q in d.questions:
                self._index[(d.id, q.id)] = q
            for follow_ups in d.follow_ups.values():
                for q in follow_ups:
                    self._index[(d.id, q.id)] = q

    @property
    def domain_ids(self) -> Tuple[str, ...]:
        return tuple(self._domains)

    def __contains__(self, domain_id) -> bool:
        return domain_id in self._domains

    def domain(self, domain_id: str) -> Domain:
        try:
            return self._domains[domain_id]
        except KeyError:
            raise UnknownDomainError(domain_id) from None

    def base_questions(self, domain_id: str) -> Tuple[Question, ...]:
        return self.domain(domain_id).questions

    def follow_ups_for(self, domain_id: str, question_id: str) -> Tuple[Question, ...]:
        return self.domain(domain_id).follow_ups_for(question_id)

    def question(self, domain_id: str, question_id: str) -> Optional[Question]:
        return self._index.get((domain_id, question_id))

    def has_question(self, domain_id: str, question_id: str) -> bool:
        return (domain_id, question_id) in self._index

    def title(self, domain_id: Optional[str]) -> str:
        if domain_id in self._domains:
            return self._domains[domain_id].title
        return (domain_id or "").replace("-", " ")

    def question_text(self, domain_id: str, question_id: str) -> str:
        q = self.question(domain_id, question_id)
        return q.text if q else question_id


def _build_question(raw: Mapping[str, Any], default_scale: Mapping[str, int]) -> Question:
    qtype = raw.get("type")
    if qtype not in config.QUESTION_TYPES:
        raise CatalogError(f"Question {raw.get('id')!r} has unknown type {qtype!r}")

    scale_min = scale_max = None
    labels: Tuple[str, ...] = ()
    if qtype == SCALE:
        scale = {**default_scale, **(raw.get("scale") or {})}
        scale_min, scale_max = int(scale["min"]), int(scale["max"])
        if scale_min >= scale_max:
            raise CatalogError(f"Question {raw['id']!r} has an empty scale {scale_min}..{scale_max}")
        labels = tuple(scale.get("labels") or ())

    options = tuple(raw.get("options") or ())
    if qtype in (SINGLE_CHOICE, MULTI_CHOICE) and not options:
        raise CatalogError(f"Choice question {raw['id']!r} has no options")

    conditional = None
    if raw.get("depends_on"):
        conditional = Conditional(
            depends_on=raw["depends_on"],
            show_if=frozenset(str(v) for v in raw.get("show_if") or ()),
        )

    return Question(
        id=raw["id"],
        domain=raw["domain"],
        type=qtype,
        text=raw.get("text", ""),
        # Follow-ups start optional; the graph marks them required while their trigger is active.
        required=bool(raw.get("required", True)) and conditional is None,
        scale_min=scale_min,
        scale_max=scale_max,
        scale_labels=labels,
        options=options,
        conditional=conditional,
        industry_specific=raw.get("industry_specific"),
    )


def _check_cycles(domain_id: str, follow_ups: Dict[str, List[Question]]):
    """Reject follow-up chains that loop back on themselves."""
    parents = {q.id: trigger for trigger, qs in follow_ups.items() for q in qs}
    for start in parents:
        seen = {start}
        node = parents[start]
        while node in parents:
            if node in seen:
                raise CatalogError(f"Follow-up cycle in {domain_id} through {node!r}")
            seen.add(node)
            node = parents[node]


def load_catalog(
    domains: Iterable[Mapping[str, Any]] = config.DOMAINS,
    questions: Iterable[Mapping[str, Any]] = config.QUESTIONS,
    follow_ups: Iterable[Mapping[str, Any]] = config.FOLLOW_UPS,
    default_scale: Mapping[str, int] = config.DEFAULT_SCALE,
    trigger_threshold: float = DEFAULT_SETTINGS.default_trigger_threshold,
) -> QuestionCatalog:
    """
    Build and validate the question catalog from authored data.

    Checks that every question names a known domain, ids are unique within a
    domain, follow-ups depend on a question of the same domain, and follow-up
    chains are acyclic. Domains without their own ``trigger_threshold`` use
    ``trigger_threshold``.

    :raises CatalogError: on any inconsistency
    """
    domain_rows = list(domains)
    domain_ids = [d["id"] for d in domain_rows]
    if len(set(domain_ids)) != len(domain_ids):
        raise CatalogError("Duplicate domain ids in catalog")

    base: Dict[str, List[Question]] = {d: [] for d in domain_ids}
    seen_ids: Dict[str, set] = {d: set() for d in domain_ids}
    for raw in questions:
        q = _build_question(raw, default_scale)
        if q.domain not in base:
            raise CatalogError(f"Question {q.id!r} has unknown domain {q.domain!r}")
        if q.id in seen_ids[q.domain]:
            raise CatalogError(f"Duplicate question id {q.id!r} in {q.domain}")
        if q.is_follow_up:
            raise CatalogError(f"Base question {q.id!r} must not be conditional")
        seen_ids[q.domain].add(q.id)
        base[q.domain].append(q)

    pending = [_build_question(raw, default_scale) for raw in follow_ups]
    grouped: Dict[str, Dict[str, List[Question]]] = {d: {} for d in domain_ids}
    for q in pending:
        if q.domain not in base:
            raise CatalogError(f"Follow-up {q.id!r} has unknown domain {q.domain!r}")
        if q.conditional is None:
            raise CatalogError(f"Follow-up {q.id!r} has no trigger question")
        if q.id in seen_ids[q.domain]:
            raise CatalogError(f"Duplicate question id {q.id!r} in {q.domain}")
        seen_ids[q.domain].add(q.id)
    for q in pending:
        if q.conditional.depends_on not in seen_ids[q.domain]:
            raise CatalogError(
                f"Follow-up {q.id!r} depends on unknown question {q.conditional.depends_on!r}"
            )
        grouped[q.domain].setdefault(q.conditional.depends_on, []).append(q)

    built = []
    for raw in domain_rows:
        did = raw["id"]
        _check_cycles(did, grouped[did])
        built.append(
            Domain(
                id=did,
                title=raw.get("title", did),
                description=raw.get("description", ""),
                trigger_threshold=raw.get("trigger_threshold", trigger_threshold),
                questions=tuple(base[did]),
                follow_ups={k: tuple(v) for k, v in grouped[did].items()},
            )
        )

    catalog = QuestionCatalog(built)
    logger.info(
        "Loaded question catalog: %d domains, %d base questions, %d follow-ups",
        len(built),
        sum(len(d.questions) for d in built),
        len(pending),
    )
    return catalog


def applicable_questions(catalog: QuestionCatalog, domain_id: str, classification=None) -> Tuple[Question, ...]:
    """
    Return the base questions of a domain that apply to a company.

    Questions carrying an `industry_specific` filter are dropped when the
    classification does not match it. Without a classification nothing is
    filtered.

    :param catalog: the question catalog
    :param domain_id: domain to list
    :param classification: optional IndustryClassification
    :return: base questions in authored order
    """
    questions = catalog.base_questions(domain_id)
    if classification is None:
        return questions

    regulated = classification.regulatory_classification != "non-regulated"
    kept = []
    for q in questions:
        spec = q.industry_specific or {}
        if spec.get("regulated") is not None and spec["regulated"] != regulated:
            continue
        if spec.get("business_models") and classification.business_model not in spec["business_models"]:
            continue
        if spec.get("company_stages") and classification.company_stage not in spec["company_stages"]:
            continue
        kept.append(q)
    return tuple(kept)


def validate_answer(question: Question, value: Any) -> Optional[ValidationIssue]:
    """
    Check a single answer against its question definition.

    :return: a ValidationIssue describing the problem, or None when the answer is acceptable
    """

    def issue(message, kind="format"):
        return ValidationIssue(
            field=question.id,
            message=message,
            type=kind,
            domain=question.domain,
            question_ids=(question.id,),
        )

    if not is_answered(value):
        if question.required:
            return issue("This question is required", "required")
        return None

    if question.type == SCALE:
        number = as_number(value)
        if number is None or not (question.scale_min <= number <= question.scale_max):
            return issue(f"Value must be between {question.scale_min} and {question.scale_max}")
    elif question.type == BOOLEAN:
        if not isinstance(value, bool):
            return issue("Value must be yes or no")
    elif question.type == SINGLE_CHOICE:
        if str(value) not in question.options:
            return issue("Invalid option selected")
    elif question.type == MULTI_CHOICE:
        if not isinstance(value, (list, tuple, set, frozenset)):
            return issue("Select one or more options")
        if any(str(v) not in question.options for v in value):
            return issue("Invalid options selected")
    return None

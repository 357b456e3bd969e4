# models.py
# Light domain types shared by the engine components. Values are immutable unless noted.

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Optional, Tuple

# Question types
SCALE = "scale"
BOOLEAN = "boolean"
TEXT = "text"
SINGLE_CHOICE = "single-choice"
MULTI_CHOICE = "multi-choice"

# Domain status
NOT_STARTED = "not-started"
IN_PROGRESS = "in-progress"
COMPLETED = "completed"

# Validation issue types. Errors block submission, warnings never do.
ERROR_TYPES = ("required", "consistency")
WARNING_TYPES = ("quality", "completeness", "optional")

# Gap categories, most severe first
CRITICAL = "critical"
IMPORTANT = "important"
NICE_TO_HAVE = "nice-to-have"
GAP_CATEGORIES = (CRITICAL, IMPORTANT, NICE_TO_HAVE)


@dataclass(frozen=True)
class Conditional:
    depends_on: str
    # Normalised answer strings that reveal the question; empty means "numeric trigger".
    show_if: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class Question:
    id: str
    domain: str
    type: str
    text: str
    required: bool = True
    scale_min: Optional[int] = None
    scale_max: Optional[int] = None
    scale_labels: Tuple[str, ...] = ()
    options: Tuple[str, ...] = ()
    conditional: Optional[Conditional] = None
    industry_specific: Optional[Dict[str, Any]] = field(default=None, hash=False, compare=False)

    @property
    def is_follow_up(self) -> bool:
        return self.conditional is not None


@dataclass(frozen=True)
class Domain:
    """
    One of the twelve business domains with its authored questions.

    `follow_ups` maps a trigger question id to the follow-ups it can reveal,
    in authored order. Follow-ups are never part of the static counts.
    """

    id: str
    title: str
    description: str
    trigger_threshold: float
    questions: Tuple[Question, ...]
    follow_ups: Dict[str, Tuple[Question, ...]] = field(default_factory=dict, hash=False, compare=False)

    @property
    def required_question_count(self) -> int:
        return sum(1 for q in self.questions if q.required)

    @property
    def optional_question_count(self) -> int:
        return sum(1 for q in self.questions if not q.required)

    def follow_ups_for(self, question_id: str) -> Tuple[Question, ...]:
        return self.follow_ups.get(question_id, ())


@dataclass(frozen=True)
class Answer:
    question_id: str
    value: Any
    answered_at: Optional[datetime] = None


@dataclass
class DomainResponse:
    """Mutable per-domain answer map, owned by the assessment's ResponseLedger."""

    domain: str
    questions: Dict[str, Answer] = field(default_factory=dict)
    # None until a progress pass stores it; cleared by every new answer
    completeness: Optional[int] = None
    last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class DomainProgress:
    domain: str
    completed: int
    total: int
    status: str
    required_questions: int
    optional_questions: int
    percentage: int = 0
    unanswered_required: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OverallProgress:
    overall: int
    completed: int
    total: int
    estimated_time_remaining: str
    domains: Dict[str, DomainProgress] = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str
    type: str
    rule: Optional[str] = None
    domain: Optional[str] = None
    question_ids: Tuple[str, ...] = ()
    impact_on_timeline: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "message": self.message, "type": self.type}


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of one rule-evaluation pass. A view, never authoritative state.

    `completeness` is the coarse response-count metric (see rules.coarse_completeness),
    not the dynamic-graph progress figure.
    """

    errors: Tuple[ValidationIssue, ...] = ()
    warnings: Tuple[ValidationIssue, ...] = ()
    completeness: int = 0

    @property
    def is_blocking(self) -> bool:
        return bool(self.errors)


@dataclass(frozen=True)
class Gap:
    gap_id: str
    assessment_id: str
    domain: Optional[str]
    category: str
    rule: str
    description: str
    suggested_questions: Tuple[str, ...] = ()
    follow_up_prompts: Tuple[str, ...] = ()
    resolved: bool = False
    impact_on_timeline: bool = False
    priority: int = 1
    estimated_resolution_time: int = 0
    detected_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    resolution_method: Optional[str] = None
    client_response: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.domain or "", self.rule)


@dataclass(frozen=True)
class NotificationDecision:
    should_notify: bool
    urgency_level: Optional[str]
    critical_gap_count: int
    gap_ids: Tuple[str, ...] = ()
    domains: Tuple[str, ...] = ()


def is_answered(value: Any) -> bool:
    """
    Return True when an answer value counts as a real answer.

    None, blank strings and empty collections are unanswered; False and 0 are answers.
    """
    if isinstance(value, Answer):
        value = value.value
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) > 0
    return True


def as_number(value: Any) -> Optional[float]:
    """
    Return the numeric form of an answer value, or None when it is not numeric.

    Booleans and NaN are not numeric answers.
    """
    if isinstance(value, Answer):
        value = value.value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return float(value)


def value_key(value: Any) -> str:
    """Normalise an answer value for comparison against `Conditional.show_if`."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

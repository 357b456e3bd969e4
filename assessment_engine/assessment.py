# assessment.py

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .catalog import QuestionCatalog, applicable_questions, validate_answer
from .gaps import classify_gaps, critical_gap_notification, prioritize_gaps, resolve_gap
from .graph import QuestionGraph, build_graph
from .ledger import ResponseLedger
from .models import DomainProgress, Gap, NotificationDecision, OverallProgress, ValidationIssue, ValidationResult
from .profiles import ProfileRegistry
from .progress import compute_domain_progress, compute_overall
from .rules import evaluate
from .settings import DEFAULT_SETTINGS, EngineSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndustryClassification:
    sector: str = ""
    sub_sector: str = ""
    regulatory_classification: str = "non-regulated"
    business_model: Optional[str] = None
    company_stage: Optional[str] = None
    employee_count: Optional[int] = None


@dataclass
class Assessment:
    """
    One company's assessment: the response ledger plus derived gap state.

    The ledger is the only authoritative data; gaps are the last classification
    result, kept so that resolution flags survive re-evaluation.
    """

    assessment_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    company_id: Optional[str] = None
    classification: Optional[IndustryClassification] = None
    ledger: ResponseLedger = field(default_factory=ResponseLedger)
    gaps: Tuple[Gap, ...] = ()
    scoring_started: bool = False
    needs_reevaluation: bool = False

    @property
    def business_model(self) -> Optional[str]:
        return self.classification.business_model if self.classification else None

    def answer(self, domain: str, question_id: str, value: Any, answered_at: Optional[datetime] = None):
        """Record without validation; the domain's stored completeness is cleared until the next progress pass."""
        return self.ledger.record(domain, question_id, value, answered_at)

    def classify(self, classification: IndustryClassification):
        """
        Set the industry classification.

        Changing it once scoring has begun marks the assessment for
        re-evaluation. The current gaps stay as the baseline of the next
        analysis, which drops those whose condition no longer holds.
        """
        if classification == self.classification:
            return
        if self.scoring_started:
            logger.info("Classification of assessment %s changed; re-evaluation required", self.assessment_id)
            self.needs_reevaluation = True
        self.classification = classification


@dataclass(frozen=True)
class GapAnalysis:
    assessment_id: str
    progress: OverallProgress
    validation: ValidationResult
    gaps: Tuple[Gap, ...]
    notification: NotificationDecision

    @property
    def completeness(self) -> int:
        """Canonical completeness: the dynamic-graph overall percentage."""
        return self.progress.overall

    @property
    def coarse_completeness(self) -> int:
        return self.validation.completeness

    @property
    def is_blocking(self) -> bool:
        return self.validation.is_blocking


class AssessmentEngine:
    """
    Entry point tying the catalog, the profile registry and the settings together.

    The engine holds no per-assessment state; every method takes the
    Assessment it works on.
    """

    def __init__(self, catalog: QuestionCatalog, profiles: ProfileRegistry, settings: EngineSettings = DEFAULT_SETTINGS):
        self.catalog = catalog
        self.profiles = profiles
        self.settings = settings

    def new_assessment(self, company_id: Optional[str] = None, classification=None, assessment_id=None) -> Assessment:
        return Assessment(
            assessment_id=assessment_id or str(uuid.uuid4()),
            company_id=company_id,
            classification=classification,
            ledger=ResponseLedger(self.catalog.domain_ids),
        )

    def answer(
        self,
        assessment: Assessment,
        domain: str,
        question_id: str,
        value: Any,
        answered_at: Optional[datetime] = None,
    ) -> Optional[ValidationIssue]:
        """
        Validate and record one answer, then refresh the domain's stored completeness.

        Malformed values are not recorded. An empty value clears the answer; for a
        required question the `required` issue is still returned.

        :raises UnknownDomainError: when `domain` is not in the catalog
        :return: the problem with the answer, or None
        """
        self.catalog.domain(domain)
        question = self.catalog.question(domain, question_id)
        if question is None:
            return ValidationIssue(
                field=question_id,
                message=f"Unknown question {question_id!r} in {domain}",
                type="format",
                domain=domain,
                question_ids=(question_id,),
            )
        issue = validate_answer(question, value)
        if issue is not None and issue.type == "format":
            return issue

        assessment.answer(domain, question_id, value, answered_at)
        progress = self.domain_progress(assessment, domain)
        assessment.ledger.set_completeness(domain, progress.percentage)
        return issue

    def graph(self, assessment: Assessment, domain: str) -> QuestionGraph:
        base = applicable_questions(self.catalog, domain, assessment.classification)
        return build_graph(self.catalog.domain(domain), base, assessment.ledger.answers(domain))

    def domain_progress(self, assessment: Assessment, domain: str) -> DomainProgress:
        return compute_domain_progress(domain, self.graph(assessment, domain), assessment.ledger.answers(domain))

    def progress(self, assessment: Assessment) -> OverallProgress:
        by_domain: Dict[str, DomainProgress] = {d: self.domain_progress(assessment, d) for d in self.catalog.domain_ids}
        return compute_overall(by_domain, self.profiles.weights(assessment.business_model), self.settings)

    def _refresh_completeness(self, assessment: Assessment, progress: OverallProgress):
        for domain, p in progress.domains.items():
            assessment.ledger.set_completeness(domain, p.percentage)

    def validate(self, assessment: Assessment) -> ValidationResult:
        self._refresh_completeness(assessment, self.progress(assessment))
        tag = assessment.business_model
        return evaluate(self.profiles.get(tag), assessment.ledger.snapshot(), self.settings, business_model=tag)

    def analyze(self, assessment: Assessment, now: Optional[datetime] = None) -> GapAnalysis:
        """
        Run a full evaluation pass and store the resulting gaps on the assessment.

        :param assessment: the assessment to score
        :param now: detection timestamp for new and refreshed gaps
        :return: GapAnalysis with progress, validation, prioritized gaps and the notification verdict
        """
        progress = self.progress(assessment)
        self._refresh_completeness(assessment, progress)
        tag = assessment.business_model
        profile = self.profiles.get(tag)
        validation = evaluate(profile, assessment.ledger.snapshot(), self.settings, business_model=tag)

        gaps = classify_gaps(
            assessment.assessment_id,
            validation,
            progress.domains,
            profile=profile,
            catalog=self.catalog,
            previous=assessment.gaps,
            settings=self.settings,
            now=now,
        )
        assessment.gaps = tuple(prioritize_gaps(gaps, self.profiles.weights(tag)))
        assessment.scoring_started = True
        assessment.needs_reevaluation = False

        return GapAnalysis(
            assessment_id=assessment.assessment_id,
            progress=progress,
            validation=validation,
            gaps=assessment.gaps,
            notification=critical_gap_notification(assessment.gaps, self.settings),
        )

    def resolve_gap(
        self,
        assessment: Assessment,
        gap_id: str,
        client_response: Optional[str] = None,
        skip: bool = False,
        now: Optional[datetime] = None,
    ) -> Gap:
        """
        Resolve one of the assessment's gaps.

        :raises GapNotFoundError: when the assessment has no gap with `gap_id`
        """
        assessment.gaps = resolve_gap(assessment.gaps, gap_id, client_response=client_response, skip=skip, now=now)
        return next(g for g in assessment.gaps if g.gap_id == gap_id)

"""Assessment evaluation engine: dynamic question graphs, progress, rule evaluation and gap classification."""

from .assessment import Assessment, AssessmentEngine, GapAnalysis, IndustryClassification
from .catalog import QuestionCatalog, applicable_questions, load_catalog, validate_answer
from .errors import AssessmentEngineError, CatalogError, ConfigError, GapNotFoundError, UnknownDomainError
from .gaps import bulk_resolve_gaps, classify_gaps, critical_gap_notification, prioritize_gaps, resolve_gap
from .graph import build_graph
from .ledger import ResponseLedger
from .profiles import ProfileRegistry, load_profiles
from .progress import compute_domain_progress, compute_overall
from .rules import evaluate
from .settings import EngineSettings, load_settings

__version__ = "0.1.0"

__all__ = [
    "Assessment",
    "AssessmentEngine",
    "AssessmentEngineError",
    "CatalogError",
    "ConfigError",
    "EngineSettings",
    "GapAnalysis",
    "GapNotFoundError",
    "IndustryClassification",
    "ProfileRegistry",
    "QuestionCatalog",
    "ResponseLedger",
    "UnknownDomainError",
    "applicable_questions",
    "build_graph",
    "bulk_resolve_gaps",
    "classify_gaps",
    "compute_domain_progress",
    "compute_overall",
    "critical_gap_notification",
    "evaluate",
    "load_catalog",
    "load_profiles",
    "load_settings",
    "prioritize_gaps",
    "resolve_gap",
    "validate_answer",
]

# errors.py


class AssessmentEngineError(Exception):
    """Base class for errors raised by the assessment engine."""


class CatalogError(AssessmentEngineError):
    """
    A statically authored catalog or profile is inconsistent.

    Raised while loading, never during evaluation.
    """


class ConfigError(AssessmentEngineError):
    """The settings file could not be parsed or holds a value of the wrong type."""


class UnknownDomainError(AssessmentEngineError, KeyError):
    """A caller referenced a domain id that is not part of the catalog."""


class GapNotFoundError(AssessmentEngineError, KeyError):
    """A resolution targeted a gap id that is not in the current gap list."""

from datetime import datetime, timezone

import pytest

from assessment_engine import AssessmentEngine, IndustryClassification, load_catalog, load_profiles
from assessment_engine.ledger import ResponseLedger
from assessment_engine.settings import DEFAULT_SETTINGS

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def catalog():
    return load_catalog()


@pytest.fixture(scope="session")
def profiles(catalog):
    return load_profiles(catalog)


@pytest.fixture
def settings():
    return DEFAULT_SETTINGS


@pytest.fixture
def engine(catalog, profiles, settings):
    return AssessmentEngine(catalog, profiles, settings)


@pytest.fixture
def saas():
    return IndustryClassification(sector="software", business_model="b2b-saas")


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def answered_ledger(catalog):
    """Build a ResponseLedger from {domain: {question id: value}}."""

    def build(answers):
        ledger = ResponseLedger(catalog.domain_ids)
        for domain, values in answers.items():
            for qid, value in values.items():
                ledger.record(domain, qid, value, answered_at=NOW)
        return ledger

    return build


@pytest.fixture
def fill_domain(catalog):
    """Answer every required base question of a domain with `value`, plus overrides."""

    def fill(domain, value=2, overrides=None):
        answers = {q.id: value for q in catalog.base_questions(domain) if q.required}
        answers.update(overrides or {})
        return answers

    return fill

import pytest

from assessment_engine.errors import UnknownDomainError
from assessment_engine.ledger import ResponseLedger
from assessment_engine.models import is_answered


def test_domain_response_created_lazily(catalog, now):
    ledger = ResponseLedger(catalog.domain_ids)
    assert "revenue-engine" not in ledger
    ledger.record("revenue-engine", "3.1", 3, answered_at=now)
    assert "revenue-engine" in ledger
    assert ledger.get("revenue-engine").last_updated == now
    assert len(ledger) == 1


def test_record_overwrites_earlier_answer(catalog):
    ledger = ResponseLedger(catalog.domain_ids)
    ledger.record("revenue-engine", "3.1", 3)
    ledger.record("revenue-engine", "3.1", 5)
    assert ledger.value("revenue-engine", "3.1") == 5
    assert ledger.answered_count("revenue-engine") == 1


def test_new_answer_clears_stored_completeness(catalog):
    ledger = ResponseLedger(catalog.domain_ids)
    ledger.record("revenue-engine", "3.1", 3)
    ledger.set_completeness("revenue-engine", 11)
    ledger.record("revenue-engine", "3.2", 4)
    assert ledger.get("revenue-engine").completeness is None


def test_unknown_domain_rejected(catalog):
    ledger = ResponseLedger(catalog.domain_ids)
    with pytest.raises(UnknownDomainError):
        ledger.record("marketing", "1.1", 3)


def test_empty_values_do_not_count(catalog):
    ledger = ResponseLedger(catalog.domain_ids)
    ledger.record("revenue-engine", "3.1", "")
    ledger.record("revenue-engine", "3.8", [])
    ledger.record("revenue-engine", "3.9", None)
    assert ledger.answered_count("revenue-engine") == 0


@pytest.mark.parametrize("value, expected", [(None, False), ("  ", False), ([], False), (0, True), (False, True), ("x", True)])
def test_is_answered(value, expected):
    assert is_answered(value) is expected


def test_snapshot_is_independent(catalog):
    ledger = ResponseLedger(catalog.domain_ids)
    ledger.record("revenue-engine", "3.1", 3)
    snap = ledger.snapshot()
    ledger.record("revenue-engine", "3.2", 4)
    ledger.set_completeness("revenue-engine", 50)
    assert set(snap["revenue-engine"].questions) == {"3.1"}
    assert snap["revenue-engine"].completeness is None


def test_answers_returns_a_copy(catalog):
    ledger = ResponseLedger(catalog.domain_ids)
    ledger.record("revenue-engine", "3.1", 3)
    ledger.answers("revenue-engine").clear()
    assert ledger.value("revenue-engine", "3.1") == 3


def test_reset(catalog):
    ledger = ResponseLedger(catalog.domain_ids)
    ledger.record("revenue-engine", "3.1", 3)
    ledger.reset()
    assert ledger.domains() == ()

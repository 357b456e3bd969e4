import copy
import logging

import pytest

from assessment_engine import config
from assessment_engine.models import Answer
from assessment_engine.profiles import load_profiles
from assessment_engine.rules import coarse_completeness, domain_completeness, evaluate

SAAS_REQUIRED = (
    "strategic-alignment",
    "financial-management",
    "revenue-engine",
    "technology-data",
    "customer-success",
    "people-organization",
)


@pytest.fixture
def saas_profile(profiles):
    return profiles.get("b2b-saas")


@pytest.fixture
def saas_answers(fill_domain):
    """Every b2b-saas required domain fully answered with healthy (low) scores."""
    return {d: fill_domain(d, 2) for d in SAAS_REQUIRED}


def _errors(result, rule=None, type_=None):
    return [e for e in result.errors if (rule is None or e.rule == rule) and (type_ is None or e.type == type_)]


def _warnings(result, rule):
    return [w for w in result.warnings if w.rule == rule]


def test_missing_required_domain(saas_profile, saas_answers, answered_ledger):
    del saas_answers["customer-success"]
    result = evaluate(saas_profile, answered_ledger(saas_answers).snapshot())
    required = _errors(result, type_="required")
    assert [(e.field, e.type) for e in required] == [("customer-success", "required")]
    assert result.is_blocking


def test_domain_with_only_empty_answers_counts_as_missing(saas_profile, saas_answers, answered_ledger):
    saas_answers["customer-success"] = {"11.1": None, "11.2": ""}
    result = evaluate(saas_profile, answered_ledger(saas_answers).snapshot())
    assert [e.field for e in _errors(result, type_="required")] == ["customer-success"]


def test_unit_economics_consistency_error(saas_profile, saas_answers, answered_ledger):
    saas_answers["revenue-engine"]["3.3"] = 5
    saas_answers["customer-success"]["11.2"] = 4
    result = evaluate(saas_profile, answered_ledger(saas_answers).snapshot())
    errors = _errors(result, rule="cac-ltv-consistency")
    assert len(errors) == 1
    error = errors[0]
    assert error.type == "consistency"
    assert error.field == "cross-domain"
    assert "unsustainable unit economics" in error.message
    assert error.impact_on_timeline


def test_healthy_answers_raise_no_errors(saas_profile, saas_answers, answered_ledger):
    result = evaluate(saas_profile, answered_ledger(saas_answers).snapshot())
    assert result.errors == ()


@pytest.mark.parametrize("value", [None, "5", True])
def test_cross_domain_rule_skipped_on_partial_or_non_numeric_data(saas_profile, saas_answers, answered_ledger, value):
    saas_answers["revenue-engine"]["3.3"] = 5
    saas_answers["customer-success"]["11.2"] = value
    result = evaluate(saas_profile, answered_ledger(saas_answers).snapshot())
    assert _errors(result, rule="cac-ltv-consistency") == []


def test_strong_growth_with_weak_technology(saas_profile, saas_answers, answered_ledger):
    saas_answers["revenue-engine"]["3.1"] = 1
    saas_answers["technology-data"]["6.1"] = 5
    errors = _errors(evaluate(saas_profile, answered_ledger(saas_answers).snapshot()), rule="scaling-technology")
    assert len(errors) == 1
    assert not errors[0].impact_on_timeline
    assert errors[0].domain == "revenue-engine"


def test_subscription_metrics_warning(saas_profile, saas_answers, answered_ledger):
    saas_answers["customer-success"].update({"11.7": False, "11.8": False})
    result = evaluate(saas_profile, answered_ledger(saas_answers).snapshot())
    warnings = _warnings(result, "subscription-metrics")
    assert len(warnings) == 1
    assert warnings[0].type == "quality"
    assert warnings[0].field == "customer-success"


def test_subscription_metrics_tracked(saas_profile, saas_answers, answered_ledger):
    saas_answers["customer-success"].update({"11.7": True, "11.8": False})
    result = evaluate(saas_profile, answered_ledger(saas_answers).snapshot())
    assert _warnings(result, "subscription-metrics") == []


def test_business_logic_rule_skipped_when_unanswered(saas_profile, saas_answers, answered_ledger):
    saas_answers["customer-success"]["11.7"] = False
    result = evaluate(saas_profile, answered_ledger(saas_answers).snapshot())
    assert _warnings(result, "subscription-metrics") == []
    assert _warnings(result, "product-architecture") == []


def test_product_architecture_warning(saas_profile, saas_answers, answered_ledger):
    saas_answers["technology-data"]["6.8"] = 4
    result = evaluate(saas_profile, answered_ledger(saas_answers).snapshot())
    assert len(_warnings(result, "product-architecture")) == 1


def test_weighted_domain_completeness_advisory(saas_profile, answered_ledger):
    ledger = answered_ledger({"customer-success": {"11.1": 2}, "revenue-engine": {"3.1": 2}})
    ledger.set_completeness("customer-success", 79)
    ledger.set_completeness("revenue-engine", 80)
    result = evaluate(saas_profile, ledger.snapshot())
    advisories = [w.field for w in result.warnings if w.type == "completeness"]
    assert advisories == ["customer-success"]


def test_unweighted_domain_gets_no_completeness_advisory(saas_profile, answered_ledger):
    ledger = answered_ledger({"strategic-alignment": {"1.1": 2}})
    result = evaluate(saas_profile, ledger.snapshot())
    assert [w for w in result.warnings if w.type == "completeness"] == []


def test_unknown_business_model(answered_ledger, caplog):
    ledger = answered_ledger({"revenue-engine": {"3.3": 5}, "customer-success": {"11.2": 5}})
    with caplog.at_level(logging.WARNING, logger="assessment_engine.rules"):
        result = evaluate(None, ledger.snapshot(), business_model="quantum-widgets")
    assert result.errors == ()
    assert len(result.warnings) == 1
    warning = result.warnings[0]
    assert warning.type == "optional"
    assert "quantum-widgets" in warning.message
    assert "quantum-widgets" in caplog.text


def test_missing_business_model_is_advisory_only(answered_ledger):
    result = evaluate(None, answered_ledger({}).snapshot())
    assert result.errors == ()
    assert [w.field for w in result.warnings] == ["business-model"]


def test_evaluate_is_pure(saas_profile, saas_answers, answered_ledger):
    saas_answers["revenue-engine"]["3.3"] = 5
    saas_answers["customer-success"]["11.2"] = 4
    snapshot = answered_ledger(saas_answers).snapshot()
    first = evaluate(saas_profile, snapshot)
    second = evaluate(saas_profile, snapshot)
    assert first == second
    assert len(_errors(second, rule="cac-ltv-consistency")) == 1


def test_coarse_completeness(answered_ledger, settings):
    revenue = {f"3.{i}": 2 for i in range(1, 10)}
    ledger = answered_ledger({"revenue-engine": revenue, "customer-success": {"11.1": 2, "11.2": 2, "11.3": 2, "11.4": 2}})
    # revenue-engine is capped at 100, customer-success 4/8 = 50
    assert coarse_completeness(ledger.snapshot(), settings) == 75
    assert coarse_completeness({}, settings) == 0


def test_plain_answer_maps_use_counted_completeness(saas_profile, catalog):
    complete = {q.id: Answer(q.id, 2) for q in catalog.base_questions("customer-success")}
    started = {"3.1": Answer("3.1", 2), "3.2": Answer("3.2", 3)}
    result = evaluate(saas_profile, {"customer-success": complete, "revenue-engine": started})
    advisories = [w for w in result.warnings if w.type == "completeness"]
    assert [w.field for w in advisories] == ["revenue-engine"]
    assert "25% complete" in advisories[0].message


def test_completeness_not_yet_stored_is_counted(saas_profile, answered_ledger, fill_domain):
    ledger = answered_ledger({"customer-success": {q: 2 for q in fill_domain("customer-success")}})
    ledger.set_completeness("customer-success", 10)
    ledger.record("customer-success", "11.7", True)
    assert ledger.get("customer-success").completeness is None
    result = evaluate(saas_profile, ledger.snapshot())
    assert [w for w in result.warnings if w.type == "completeness"] == []


def test_domain_completeness_prefers_stored_figure(answered_ledger, settings):
    ledger = answered_ledger({"revenue-engine": {"3.1": 2}})
    assert domain_completeness(ledger.get("revenue-engine"), settings) == 13
    ledger.set_completeness("revenue-engine", 11)
    assert domain_completeness(ledger.get("revenue-engine"), settings) == 11
    assert domain_completeness({}, settings) == 0


def test_unrecognized_rule_is_reported_once_and_not_applied(catalog, saas_answers, answered_ledger):
    models = copy.deepcopy(config.BUSINESS_MODELS)
    models["b2b-saas"]["cross_domain"][0]["name"] = "cac-ltv-typo"
    models["b2b-saas"]["business_logic"].append(dict(models["b2b-saas"]["business_logic"][0], name="cac-ltv-typo"))
    profile = load_profiles(catalog, models).get("b2b-saas")
    saas_answers["revenue-engine"]["3.3"] = 5
    saas_answers["customer-success"]["11.2"] = 4

    result = evaluate(profile, answered_ledger(saas_answers).snapshot())
    assert result.errors == ()
    (warning,) = _warnings(result, "cac-ltv-typo")
    assert warning.type == "optional"
    assert warning.domain == "revenue-engine"
    assert "not recognized" in warning.message

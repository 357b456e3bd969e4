import copy
import logging

import pytest

from assessment_engine import config
from assessment_engine.errors import CatalogError
from assessment_engine.profiles import load_profiles
from assessment_engine.rules import registered_rule_names


def test_known_business_models(profiles):
    assert set(profiles.tags) >= {"b2b-saas", "b2c-marketplace", "manufacturing", "services", "hybrid"}


def test_unknown_tag_returns_none(profiles):
    assert profiles.get("quantum-widgets") is None
    assert profiles.get(None) is None
    assert profiles.weights("quantum-widgets") == {}
    assert profiles.key_metrics("quantum-widgets") == ()


def test_b2b_saas_profile(profiles):
    profile = profiles.get("b2b-saas")
    assert "customer-success" in profile.required_domains
    assert profile.weight("customer-success") > 1.1
    assert profile.weight("not-weighted") == 1.0
    assert "CAC" in profile.key_metrics
    assert "cac-ltv-consistency" in {r.name for r in profile.cross_domain_rules}


def test_every_configured_rule_has_a_predicate(profiles):
    known = registered_rule_names()
    for tag in profiles.tags:
        profile = profiles.get(tag)
        for rule in (*profile.cross_domain_rules, *profile.business_logic_rules):
            assert rule.name in known


def test_rule_referencing_unknown_question_fails_at_load(catalog):
    models = copy.deepcopy(config.BUSINESS_MODELS)
    models["b2b-saas"]["cross_domain"][0]["questions"][0] = ["revenue-engine", "3.99"]
    with pytest.raises(CatalogError, match="unknown question"):
        load_profiles(catalog, models)


def test_unknown_required_domain_fails_at_load(catalog):
    models = copy.deepcopy(config.BUSINESS_MODELS)
    models["services"]["required_domains"].append("marketing")
    with pytest.raises(CatalogError, match="unknown domain"):
        load_profiles(catalog, models)


def test_weight_out_of_range_fails_at_load(catalog):
    models = copy.deepcopy(config.BUSINESS_MODELS)
    models["hybrid"]["domain_weighting"]["revenue-engine"] = 5
    with pytest.raises(CatalogError, match="out of range"):
        load_profiles(catalog, models)


def test_unregistered_rule_name_is_logged_not_raised(catalog, caplog):
    models = copy.deepcopy(config.BUSINESS_MODELS)
    models["b2b-saas"]["cross_domain"][0]["name"] = "cac-ltv-typo"
    with caplog.at_level(logging.WARNING, logger="assessment_engine.profiles"):
        registry = load_profiles(catalog, models)
    assert "cac-ltv-typo" in caplog.text
    assert "cac-ltv-typo" in {r.name for r in registry.get("b2b-saas").cross_domain_rules}

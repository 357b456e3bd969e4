import pytest

from assessment_engine import config
from assessment_engine.assessment import IndustryClassification
from assessment_engine.catalog import applicable_questions, load_catalog, validate_answer
from assessment_engine.errors import CatalogError, UnknownDomainError


def test_catalog_has_twelve_domains_in_authored_order(catalog):
    assert catalog.domain_ids == tuple(d["id"] for d in config.DOMAINS)
    assert len(catalog.domain_ids) == 12


def test_strategic_alignment_static_counts(catalog):
    domain = catalog.domain("strategic-alignment")
    assert len(domain.questions) == 7
    assert domain.required_question_count == 6
    assert domain.optional_question_count == 1


def test_follow_ups_are_not_part_of_static_counts(catalog):
    domain = catalog.domain("strategic-alignment")
    assert all(not q.is_follow_up for q in domain.questions)
    follow_ups = catalog.follow_ups_for("strategic-alignment", "1.1")
    assert [q.id for q in follow_ups] == ["1.1-followup-1"]
    assert not follow_ups[0].required


def test_unknown_domain_raises(catalog):
    with pytest.raises(UnknownDomainError):
        catalog.domain("marketing")


def test_question_lookup(catalog):
    q = catalog.question("supply-chain", "8.3")
    assert q.type == "single-choice"
    assert "Single-source" in q.options
    assert catalog.question("supply-chain", "99.9") is None
    assert catalog.question_text("supply-chain", "99.9") == "99.9"


def test_duplicate_question_id_rejected():
    questions = config.QUESTIONS + [dict(config.QUESTIONS[0])]
    with pytest.raises(CatalogError, match="Duplicate"):
        load_catalog(questions=questions)


def test_follow_up_with_missing_trigger_rejected():
    follow_ups = [{"id": "x", "domain": "strategic-alignment", "type": "text", "depends_on": "1.99"}]
    with pytest.raises(CatalogError, match="unknown question"):
        load_catalog(follow_ups=follow_ups)


def test_follow_up_cycle_rejected():
    follow_ups = [
        {"id": "a", "domain": "strategic-alignment", "type": "text", "depends_on": "b"},
        {"id": "b", "domain": "strategic-alignment", "type": "text", "depends_on": "a"},
    ]
    with pytest.raises(CatalogError, match="cycle"):
        load_catalog(follow_ups=follow_ups)


def test_unknown_question_type_rejected():
    questions = [{"id": "1.1", "domain": "strategic-alignment", "type": "slider", "text": "?"}]
    with pytest.raises(CatalogError, match="unknown type"):
        load_catalog(questions=questions)


def test_domain_trigger_threshold_default(catalog):
    assert catalog.domain("strategic-alignment").trigger_threshold == 4
    assert catalog.domain("risk-compliance").trigger_threshold == 3


def test_applicable_questions_without_classification_keeps_everything(catalog):
    assert applicable_questions(catalog, "strategic-alignment") == catalog.base_questions("strategic-alignment")


def test_applicable_questions_drops_regulated_only_questions(catalog):
    plain = IndustryClassification(regulatory_classification="non-regulated")
    ids = [q.id for q in applicable_questions(catalog, "strategic-alignment", plain)]
    assert "1.7" not in ids
    assert len(ids) == 6

    regulated = IndustryClassification(regulatory_classification="regulated")
    ids = [q.id for q in applicable_questions(catalog, "strategic-alignment", regulated)]
    assert "1.7" in ids


@pytest.mark.parametrize(
    "domain, qid, value, kind",
    [
        ("strategic-alignment", "1.1", None, "required"),
        ("strategic-alignment", "1.1", 6, "format"),
        ("strategic-alignment", "1.1", "high", "format"),
        ("financial-management", "2.8", "yes", "format"),
        ("supply-chain", "8.3", "Triple-source", "format"),
        ("risk-compliance", "9.8", "GDPR", "format"),
    ],
)
def test_validate_answer_rejects(catalog, domain, qid, value, kind):
    issue = validate_answer(catalog.question(domain, qid), value)
    assert issue is not None
    assert issue.type == kind
    assert issue.field == qid


@pytest.mark.parametrize(
    "domain, qid, value",
    [
        ("strategic-alignment", "1.1", 5),
        ("strategic-alignment", "1.7", None),
        ("financial-management", "2.8", False),
        ("supply-chain", "8.3", "Single-source"),
    ],
)
def test_validate_answer_accepts(catalog, domain, qid, value):
    assert validate_answer(catalog.question(domain, qid), value) is None

import dash
import pytest

pytest.importorskip("dash_daq")

import app  # noqa: E402


def _ids(domain, qids):
    return [{"type": "q-input", "domain": domain, "qid": q} for q in qids]


def test_on_answer_merges_visible_inputs():
    stored = {"revenue-engine": {"3.1": 2}}
    out = app.on_answer([5, None], _ids("revenue-engine", ["3.3", "3.1"]), stored)
    assert out == {"revenue-engine": {"3.3": 5}}


def test_on_answer_without_change_does_not_update():
    stored = {"revenue-engine": {"3.1": 2}}
    assert app.on_answer([2], _ids("revenue-engine", ["3.1"]), stored) is dash.no_update


def test_cards_show_follow_up_under_trigger():
    assessment = app._assessment_from({"strategic-alignment": {"1.1": 5}}, app._classification(None, None, None))
    cards = app.build_question_cards(assessment)
    assert len(cards) == len(app.CATALOG.domain_ids)
    rows = [c for c in cards[0].children if getattr(c, "className", "") in ("qrow", "qrow followup")]
    assert rows[1].className == "qrow followup"


def test_stored_resolutions_are_applied():
    classification = app._classification("b2b-saas", "non-regulated", None)
    first = app.ENGINE.analyze(app._assessment_from({}, classification))
    target = first.gaps[0]
    resolutions = {
        target.gap_id: {
            "gap_id": target.gap_id,
            "domain": target.domain,
            "rule": target.rule,
            "category": target.category,
            "resolved_at": None,
            "resolution_method": "client-input",
            "client_response": None,
        }
    }
    again = app.ENGINE.analyze(app._assessment_from({}, classification, resolutions))
    assert next(g for g in again.gaps if g.gap_id == target.gap_id).resolved

import io

import pytest

from assessment_engine.models import CRITICAL, NICE_TO_HAVE
from assessment_engine.reporting import (DOMAIN_IDS, analysis_to_dict, gap_heatmap_figure, gap_matrix, gaps_frame,
                                         progress_bar_figure, progress_frame, progress_radar_figure, responses_frame,
                                         write_pdf, write_pptx)


@pytest.fixture
def analyzed(engine, saas, now):
    assessment = engine.new_assessment(classification=saas)
    for qid, value in {"3.1": 2, "3.3": 5, "3.8": ["Partners", "Self-serve"]}.items():
        engine.answer(assessment, "revenue-engine", qid, value)
    analysis = engine.analyze(assessment, now=now)
    return assessment, analysis


@pytest.fixture
def data(analyzed, profiles):
    _, analysis = analyzed
    return analysis_to_dict(analysis, profiles.weights("b2b-saas"), "b2b-saas")


def test_responses_frame_follows_graph_order(catalog, engine, analyzed):
    assessment, _ = analyzed
    df = responses_frame(catalog, assessment, engine)
    revenue = df[df["domain"] == "revenue-engine"]
    ids = list(revenue["id"])
    assert ids.index("3.3-followup-1") == ids.index("3.3") + 1
    assert revenue.set_index("id").loc["3.3", "value"] == 5
    assert revenue.set_index("id").loc["3.8", "value"] == "Partners; Self-serve"
    assert bool(revenue.set_index("id").loc["3.3-followup-1", "follow_up"])


def test_progress_frame(analyzed):
    _, analysis = analyzed
    df = progress_frame(analysis.progress)
    assert list(df["domain"]) == DOMAIN_IDS
    assert df.set_index("domain").loc["revenue-engine", "completed"] == 3


def test_gap_matrix_counts_open_gaps(analyzed):
    _, analysis = analyzed
    matrix = gap_matrix(gaps_frame(analysis.gaps))
    assert list(matrix.columns) == DOMAIN_IDS
    assert matrix.loc[CRITICAL, "customer-success"] == 1
    assert matrix.loc[NICE_TO_HAVE, "revenue-engine"] >= 1
    assert matrix.loc[CRITICAL, "supply-chain"] == 0


def test_gap_matrix_empty():
    matrix = gap_matrix(gaps_frame([]))
    assert int(matrix.to_numpy().sum()) == 0


def test_analysis_dict_is_plain_data(data):
    assert data["business_model"] == "b2b-saas"
    assert data["notification"]["should_notify"]
    assert isinstance(data["gaps"][0]["suggested_questions"], list)
    assert {"overall", "coarse_completeness", "estimated_time_remaining"} <= set(data)


def test_figures_build(data):
    pcts = {row["domain"]: row["percentage"] for row in data["domains"]}
    for theme in ("light", "dark"):
        assert len(progress_bar_figure(pcts, theme).data[0].y) == len(DOMAIN_IDS)
        assert len(progress_radar_figure(pcts, theme).data[0].r) == len(DOMAIN_IDS) + 1
        heat = gap_heatmap_figure(gap_matrix(gaps_frame(data["gaps"])), theme)
        assert heat.layout.height > 0


def test_pptx_export(data):
    buf = io.BytesIO()
    write_pptx(buf, data)
    assert buf.getvalue()[:2] == b"PK"


def test_pdf_export_without_charts(data):
    buf = io.BytesIO()
    write_pdf(buf, data, charts=False)
    assert buf.getvalue().startswith(b"%PDF")


def test_pdf_export_with_charts(data):
    pytest.importorskip("kaleido")
    buf = io.BytesIO()
    try:
        write_pdf(buf, data)
    except (RuntimeError, ValueError) as e:
        pytest.skip(f"static image export unavailable: {e}")
    assert buf.getvalue().startswith(b"%PDF")

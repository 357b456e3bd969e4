# app.py

import logging
from datetime import datetime

import dash
import dash_daq as daq
from dash import ALL, Input, Output, State, ctx, dcc, html

from assessment_engine import (Assessment, AssessmentEngine, IndustryClassification, load_catalog,
                               load_profiles, load_settings)
from assessment_engine.config import SCALE_LABELS
from assessment_engine.logs import setup_logging
from assessment_engine.models import BOOLEAN, MULTI_CHOICE, SCALE, SINGLE_CHOICE, Gap, is_answered
from assessment_engine.reporting import (BAR_H, HEAT_H, RADAR_H, analysis_to_dict, gap_heatmap_figure,
                                         gap_matrix, gaps_frame, progress_bar_figure, progress_radar_figure,
                                         responses_frame, write_pdf, write_pptx)

setup_logging()
logger = logging.getLogger(__name__)

SETTINGS = load_settings()
CATALOG = load_catalog(trigger_threshold=SETTINGS.default_trigger_threshold)
PROFILES = load_profiles(CATALOG)
ENGINE = AssessmentEngine(CATALOG, PROFILES, SETTINGS)

REGULATORY_OPTIONS = [
    {"label": "Non-regulated", "value": "non-regulated"},
    {"label": "Regulated", "value": "regulated"},
    {"label": "Highly regulated", "value": "highly-regulated"},
]
STAGE_OPTIONS = [{"label": s.title(), "value": s} for s in ("idea", "startup", "growth", "mature")]
GRAPH_CONFIG = {"responsive": False, "displaylogo": False, "scrollZoom": False}

app = dash.Dash(__name__, suppress_callback_exceptions=True)
app.title = "Business Assessment"
server = app.server


# ----------- Helpers -------------
def _classification(business_model, regulatory, stage):
    return IndustryClassification(
        business_model=business_model or None,
        regulatory_classification=regulatory or "non-regulated",
        company_stage=stage or None,
    )


def _gap_from_record(assessment_id, rec):
    resolved_at = rec.get("resolved_at")
    return Gap(
        gap_id=rec["gap_id"],
        assessment_id=assessment_id,
        domain=rec.get("domain"),
        category=rec.get("category", ""),
        rule=rec["rule"],
        description=rec.get("description") or "",
        resolved=rec.get("resolution_method") is not None,
        resolved_at=datetime.fromisoformat(resolved_at) if resolved_at else None,
        resolution_method=rec.get("resolution_method"),
        client_response=rec.get("client_response"),
    )


def _assessment_from(responses, classification, resolutions=None, assessment_id="dashboard"):
    """
    Rebuild an Assessment from the browser stores.

    :param responses: domain id -> {question id -> value}
    :param classification: IndustryClassification
    :param resolutions: gap id -> resolution record of gaps resolved in the UI
    """
    assessment = ENGINE.new_assessment(classification=classification, assessment_id=assessment_id)
    for domain, answers in (responses or {}).items():
        for qid, value in answers.items():
            issue = ENGINE.answer(assessment, domain, qid, value)
            if issue is not None and issue.type == "format":
                logger.warning("Dropping stored answer %s/%s: %s", domain, qid, issue.message)
    assessment.gaps = tuple(_gap_from_record(assessment_id, r) for r in (resolutions or {}).values())
    return assessment


def _input_for(question, value):
    rid = {"type": "q-input", "domain": question.domain, "qid": question.id}
    if question.type == SCALE:
        return dcc.RadioItems(id=rid, options=SCALE_LABELS, value=value, className="likert")
    if question.type == BOOLEAN:
        return dcc.RadioItems(
            id=rid,
            options=[{"label": "Yes", "value": True}, {"label": "No", "value": False}],
            value=value,
            className="yesno",
        )
    if question.type == SINGLE_CHOICE:
        return dcc.Dropdown(id=rid, options=list(question.options), value=value, className="choice")
    if question.type == MULTI_CHOICE:
        return dcc.Checklist(id=rid, options=list(question.options), value=value or [], className="choices")
    return dcc.Input(id=rid, value=value or "", debounce=True, className="textin")


# -------------- Layout --------------------
def build_question_cards(assessment):
    """
    Build one HTML card per domain listing its dynamic question graph.

    Follow-ups are rendered right under the question that revealed them.

    :param assessment: the Assessment rebuilt from the stores
    :return: a list of HTML Div elements, one per domain
    """
    cards = []
    for domain_id in CATALOG.domain_ids:
        domain = CATALOG.domain(domain_id)
        progress = ENGINE.domain_progress(assessment, domain_id)
        children = [
            html.H3(domain.title, className="domain-title"),
            html.Div(
                f"{progress.completed}/{progress.total} answered · {progress.status}",
                className="domain-progress",
            ),
        ]
        for q in ENGINE.graph(assessment, domain_id):
            text = q.text + ("" if q.required else " (optional)")
            children.append(
                html.Div(
                    [
                        html.Div(text, className="qtext"),
                        _input_for(q, assessment.ledger.value(domain_id, q.id)),
                    ],
                    className="qrow followup" if q.is_follow_up else "qrow",
                )
            )
        cards.append(html.Div(children, className=f"domain-card d-{domain_id}"))
    return cards


def _field(label, control):
    return html.Div([html.Label(label), control], className="field")


app.layout = html.Div(
    id="page-root",
    className="page theme-light",
    children=[
        dcc.Store(id="responses-store", data={}),
        dcc.Store(id="resolutions-store", data={}),
        dcc.Store(id="analysis-store"),
        dcc.Store(id="theme-store", data="light"),
        # Header
        html.Div(
            [
                html.H1("Business Assessment"),
                html.Div(
                    [
                        _field("Company", dcc.Input(id="company", placeholder="e.g., Acme Ltd", className="textin")),
                        _field(
                            "Business model",
                            dcc.Dropdown(
                                id="business-model",
                                options=[{"label": t, "value": t} for t in PROFILES.tags],
                                placeholder="Select a business model",
                            ),
                        ),
                        _field(
                            "Regulation",
                            dcc.Dropdown(id="regulatory", options=REGULATORY_OPTIONS, value="non-regulated"),
                        ),
                        _field("Stage", dcc.Dropdown(id="stage", options=STAGE_OPTIONS)),
                        _field(
                            "Dark mode",
                            daq.BooleanSwitch(id="theme-switch", on=False, color="#4f46e5", className="theme-switch"),
                        ),
                    ],
                    className="meta",
                ),
            ],
            className="header",
        ),
        dcc.Tabs(
            id="tabs",
            value="tab-assess",
            children=[
                dcc.Tab(
                    label="Assessment",
                    value="tab-assess",
                    children=[html.Div(id="domain-cards", className="grid")],
                ),
                dcc.Tab(
                    label="Progress & Gaps",
                    value="tab-results",
                    children=[
                        html.Div(id="notification-banner"),
                        html.Div(id="kpis", className="kpis"),
                        html.Div(
                            [
                                html.Button("Download CSV", id="dl-csv", n_clicks=0, className="secondary"),
                                dcc.Download(id="dl-csv-out"),
                                html.Button("Download PPTX", id="dl-ppt", n_clicks=0, className="secondary"),
                                dcc.Download(id="dl-ppt-out"),
                                html.Button("Download PDF", id="dl-pdf", n_clicks=0, className="secondary"),
                                dcc.Download(id="dl-pdf-out"),
                            ],
                            className="export-row",
                        ),
                        html.Div(
                            [
                                dcc.Graph(id="bar", style={"height": f"{BAR_H}px"}, config=GRAPH_CONFIG),
                                dcc.Graph(id="radar", style={"height": f"{RADAR_H}px"}, config=GRAPH_CONFIG),
                            ],
                            className="charts",
                        ),
                        html.Div(
                            className="row-heat-actions",
                            children=[
                                html.Div(
                                    [
                                        html.H3("Open Gaps"),
                                        dcc.Graph(id="heatmap", style={"height": f"{HEAT_H}px"}, config=GRAPH_CONFIG),
                                        html.H3("Validation"),
                                        html.Ul(id="issues-list", className="issues"),
                                    ],
                                    className="col heatmap-col",
                                ),
                                html.Div(
                                    [
                                        html.H3("Prioritized Gaps"),
                                        html.Div(id="gaps-list", className="gaps"),
                                    ],
                                    className="col recs-col",
                                ),
                            ],
                        ),
                    ],
                ),
            ],
        ),
    ],
)


# -------- Callbacks ------------------
@app.callback(
    Output("domain-cards", "children"),
    Input("responses-store", "data"),
    Input("business-model", "value"),
    Input("regulatory", "value"),
    Input("stage", "value"),
)
def render_cards(responses, business_model, regulatory, stage):
    """Re-render the domain cards so newly realized follow-ups appear under their trigger."""
    assessment = _assessment_from(responses, _classification(business_model, regulatory, stage))
    return build_question_cards(assessment)


@app.callback(
    Output("responses-store", "data"),
    Input({"type": "q-input", "domain": ALL, "qid": ALL}, "value"),
    State({"type": "q-input", "domain": ALL, "qid": ALL}, "id"),
    State("responses-store", "data"),
    prevent_initial_call=True,
)
def on_answer(values, ids, responses):
    """
    Merge the visible inputs into the responses store.

    Arguments:
        values (list): current values of every rendered question input
        ids (list): the matching pattern ids
        responses (dict): domain id -> {question id -> value}

    Returns:
        dict: the updated store, or no_update when nothing changed (re-rendering
            the cards fires this callback again with identical values)
    """
    current = {d: dict(a) for d, a in (responses or {}).items()}
    for rid, value in zip(ids or [], values or []):
        answers = current.setdefault(rid["domain"], {})
        if is_answered(value):
            answers[rid["qid"]] = value
        else:
            answers.pop(rid["qid"], None)
    current = {d: a for d, a in current.items() if a}
    if current == (responses or {}):
        return dash.no_update
    return current


@app.callback(
    Output("kpis", "children"),
    Output("notification-banner", "children"),
    Output("bar", "figure"),
    Output("radar", "figure"),
    Output("heatmap", "figure"),
    Output("issues-list", "children"),
    Output("gaps-list", "children"),
    Output("analysis-store", "data"),
    Input("responses-store", "data"),
    Input("resolutions-store", "data"),
    Input("business-model", "value"),
    Input("regulatory", "value"),
    Input("stage", "value"),
    Input("theme-store", "data"),
    State("company", "value"),
)
def update_results(responses, resolutions, business_model, regulatory, stage, theme, company):
    """
    Run a full analysis and refresh KPIs, charts, issues and gaps.

    Returns:
        tuple: KPIs, notification banner, bar, radar, heatmap, issue items, gap rows, analysis dict
    """
    assessment = _assessment_from(responses, _classification(business_model, regulatory, stage), resolutions)
    analysis = ENGINE.analyze(assessment)
    data = analysis_to_dict(analysis, PROFILES.weights(business_model), business_model)
    data["company"] = company or ""

    kpi_children = [
        html.Div(
            [html.Div("Overall Completion", className="kpi-title"), html.Div(f"{data['overall']}%", className="kpi-value")],
            className="kpi",
        ),
        html.Div(
            [
                html.Div("Answered", className="kpi-title"),
                html.Div(f"{data['completed']}/{data['total']}", className="kpi-value"),
            ],
            className="kpi",
        ),
        html.Div(
            [
                html.Div("Time Remaining", className="kpi-title"),
                html.Div(data["estimated_time_remaining"], className="kpi-value"),
            ],
            className="kpi",
        ),
    ]
    key_metrics = PROFILES.key_metrics(business_model)
    if key_metrics:
        kpi_children.append(
            html.Div(
                [html.Div("Key Metrics", className="kpi-title"), html.Div(", ".join(key_metrics), className="kpi-note")],
                className="kpi",
            )
        )

    banner = None
    note = data["notification"]
    if note["should_notify"]:
        banner = html.Div(
            f"{note['critical_gap_count']} critical gaps need founder attention "
            f"({note['urgency_level']} urgency): {', '.join(note['domains'])}",
            className=f"banner urgency-{note['urgency_level']}",
        )

    issues = [
        html.Li(f"{i['message']}", className=f"issue {'error' if i in data['errors'] else 'warning'}")
        for i in data["errors"] + data["warnings"]
    ]

    gap_rows = []
    for g in data["gaps"]:
        actions = []
        if not g["resolved"]:
            actions = [
                html.Button("Resolve", id={"type": "gap-resolve", "gap": g["gap_id"]}, n_clicks=0, className="secondary"),
                html.Button("Skip", id={"type": "gap-skip", "gap": g["gap_id"]}, n_clicks=0, className="secondary"),
            ]
        gap_rows.append(
            html.Div(
                [
                    html.Span(f"[{g['category']}] ", className="gap-category"),
                    html.Span(g["description"]),
                    html.Span(
                        f" {g['resolution_method']}" if g["resolved"] else f" ~{g['estimated_resolution_time']} min",
                        className="gap-meta",
                    ),
                    *actions,
                ],
                className="gap-row resolved" if g["resolved"] else "gap-row",
            )
        )

    pcts = {row["domain"]: row["percentage"] for row in data["domains"]}
    return (
        kpi_children,
        banner,
        progress_bar_figure(pcts, theme),
        progress_radar_figure(pcts, theme),
        gap_heatmap_figure(gap_matrix(gaps_frame(data["gaps"])), theme),
        issues,
        gap_rows,
        data,
    )


@app.callback(
    Output("resolutions-store", "data"),
    Input({"type": "gap-resolve", "gap": ALL}, "n_clicks"),
    Input({"type": "gap-skip", "gap": ALL}, "n_clicks"),
    State("analysis-store", "data"),
    State("resolutions-store", "data"),
    prevent_initial_call=True,
)
def on_resolve(resolve_clicks, skip_clicks, data, resolutions):
    """
    Record a gap resolution; skipping counts as a founder override.

    Raises:
        dash.exceptions.PreventUpdate: when the trigger is a freshly rendered button
    """
    trigger = ctx.triggered_id
    if not trigger or not data or not any(c for c in (resolve_clicks or []) + (skip_clicks or []) if c):
        raise dash.exceptions.PreventUpdate
    gap_id = trigger["gap"]
    record = next((g for g in data["gaps"] if g["gap_id"] == gap_id), None)
    if record is None:
        raise dash.exceptions.PreventUpdate

    previous = _gap_from_record(data["assessment_id"], record)
    resolved = ENGINE.resolve_gap(
        Assessment(assessment_id=data["assessment_id"], gaps=(previous,)),
        gap_id,
        skip=trigger["type"] == "gap-skip",
    )
    out = dict(resolutions or {})
    out[gap_id] = {
        "gap_id": gap_id,
        "domain": resolved.domain,
        "rule": resolved.rule,
        "category": resolved.category,
        "resolved_at": resolved.resolved_at.isoformat(),
        "resolution_method": resolved.resolution_method,
        "client_response": resolved.client_response,
    }
    return out


# Exports
@app.callback(
    Output("dl-csv-out", "data"),
    Input("dl-csv", "n_clicks"),
    State("responses-store", "data"),
    State("business-model", "value"),
    State("regulatory", "value"),
    State("stage", "value"),
    prevent_initial_call=True,
)
def download_csv(_, responses, business_model, regulatory, stage):
    """Download every question currently in the graph, with its answer, as CSV."""
    assessment = _assessment_from(responses, _classification(business_model, regulatory, stage))
    df = responses_frame(CATALOG, assessment, ENGINE)
    return dcc.send_data_frame(df.to_csv, "assessment_responses.csv", index=False)


@app.callback(
    Output("dl-ppt-out", "data"),
    Input("dl-ppt", "n_clicks"),
    State("analysis-store", "data"),
    prevent_initial_call=True,
)
def download_ppt(_, data):
    if not data:
        raise dash.exceptions.PreventUpdate
    return dcc.send_bytes(lambda b: write_pptx(b, data), "Business_Assessment.pptx")


@app.callback(
    Output("dl-pdf-out", "data"),
    Input("dl-pdf", "n_clicks"),
    State("analysis-store", "data"),
    State("theme-store", "data"),
    prevent_initial_call=True,
)
def download_pdf(_, data, theme):
    if not data:
        raise dash.exceptions.PreventUpdate
    return dcc.send_bytes(lambda b: write_pdf(b, data, theme or "light"), "Business_Assessment.pdf")


# Theme toggle -> update page class and store
@app.callback(
    Output("page-root", "className"),
    Output("theme-store", "data"),
    Input("theme-switch", "on"),
)
def apply_theme(is_on):
    theme = "dark" if is_on else "light"
    return f"page theme-{theme}", theme


# ---------- Main -------------------
if __name__ == "__main__":
    app.run(debug=False)

# reporting.py

import dataclasses
import io
from xml.sax.saxutils import escape

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import plotly.io as pio
from pptx import Presentation
from pptx.util import Inches
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Image as RLImage
from reportlab.platypus import (ListFlowable, ListItem, Paragraph,
                                SimpleDocTemplate, Spacer, Table, TableStyle)

from . import config
from .models import GAP_CATEGORIES, Gap

DOMAIN_IDS = [d["id"] for d in config.DOMAINS]
DOMAIN_TITLES = {d["id"]: d["title"] for d in config.DOMAINS}

GAP_COLUMNS = [
    "gap_id",
    "domain",
    "category",
    "rule",
    "description",
    "priority",
    "estimated_resolution_time",
    "resolved",
    "resolution_method",
    "suggested_questions",
]

# for chart sizes
RADAR_H = 380
BAR_H = 360
HEAT_H = 300

TABLE_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#e9ebf3")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor("#0b1020")),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
    ("TOPPADDING", (0, 0), (-1, 0), 6),
]


def _title(domain):
    return DOMAIN_TITLES.get(domain, domain or "Assessment-wide")


def _issue_record(issue):
    return {
        "field": issue.field,
        "message": issue.message,
        "type": issue.type,
        "rule": issue.rule,
        "domain": issue.domain,
    }


def _gap_record(gap):
    if isinstance(gap, Gap):
        gap = dataclasses.asdict(gap)
    return {
        **{c: gap.get(c) for c in GAP_COLUMNS},
        "suggested_questions": list(gap.get("suggested_questions") or ()),
    }


# ----------- Serialisation -------------
def analysis_to_dict(analysis, weights=None, business_model=None):
    """
    Flatten a GapAnalysis into plain data, safe for a dcc.Store and the exporters.

    :param analysis: GapAnalysis
    :param weights: optional domain id -> weight, copied onto each domain row
    :param business_model: tag shown in exports
    :return: dict
    """
    weights = weights or {}
    progress = analysis.progress
    return {
        "assessment_id": analysis.assessment_id,
        "business_model": business_model or "",
        "overall": progress.overall,
        "coarse_completeness": analysis.coarse_completeness,
        "completed": progress.completed,
        "total": progress.total,
        "estimated_time_remaining": progress.estimated_time_remaining,
        "domains": [
            {
                "domain": d,
                "title": _title(d),
                "completed": p.completed,
                "total": p.total,
                "percentage": p.percentage,
                "status": p.status,
                "weight": float(weights.get(d, 1.0)),
            }
            for d, p in progress.domains.items()
        ],
        "errors": [_issue_record(i) for i in analysis.validation.errors],
        "warnings": [_issue_record(i) for i in analysis.validation.warnings],
        "gaps": [_gap_record(g) for g in analysis.gaps],
        "notification": {
            "should_notify": analysis.notification.should_notify,
            "urgency_level": analysis.notification.urgency_level,
            "critical_gap_count": analysis.notification.critical_gap_count,
            "domains": list(analysis.notification.domains),
        },
    }


# ----------- Frames -------------
def responses_frame(catalog, assessment, engine):
    """
    One row per question currently in each domain's dynamic graph.

    Follow-ups sit right below their trigger, as in the graph.
    """
    rows = []
    for domain in catalog.domain_ids:
        answers = assessment.ledger.answers(domain)
        for position, q in enumerate(engine.graph(assessment, domain)):
            answer = answers.get(q.id)
            value = answer.value if answer else None
            if isinstance(value, (list, tuple)):
                value = "; ".join(str(v) for v in value)
            rows.append(
                {
                    "domain": domain,
                    "position": position,
                    "id": q.id,
                    "text": q.text,
                    "type": q.type,
                    "required": q.required,
                    "follow_up": q.is_follow_up,
                    "value": value,
                }
            )
    return pd.DataFrame(
        rows, columns=["domain", "position", "id", "text", "type", "required", "follow_up", "value"]
    )


def progress_frame(overall_progress):
    rows = [
        {
            "domain": d,
            "title": _title(d),
            "completed": p.completed,
            "total": p.total,
            "percentage": p.percentage,
            "status": p.status,
        }
        for d, p in overall_progress.domains.items()
    ]
    return pd.DataFrame(rows, columns=["domain", "title", "completed", "total", "percentage", "status"])


def gaps_frame(gaps):
    """Gaps (Gap objects or their dict records) as a DataFrame, in the given order."""
    return pd.DataFrame([_gap_record(g) for g in gaps], columns=GAP_COLUMNS)


def gap_matrix(gaps_df):
    """
    Count unresolved gaps per (category, domain).

    Args:
        gaps_df (pd.DataFrame): output of gaps_frame

    Returns:
        pd.DataFrame: categories as rows, domain ids as columns, integer counts
    """
    empty = pd.DataFrame(0, index=list(GAP_CATEGORIES), columns=DOMAIN_IDS, dtype=int)
    if gaps_df is None or gaps_df.empty:
        return empty
    open_gaps = gaps_df[~gaps_df["resolved"].astype(bool) & gaps_df["domain"].notna()]
    if open_gaps.empty:
        return empty
    counts = open_gaps.groupby(["category", "domain"]).size().unstack(fill_value=0)
    return counts.reindex(index=list(GAP_CATEGORIES), columns=DOMAIN_IDS, fill_value=0).astype(int)


# ---------- Figures (fixed sizes, consistent) ------------------
def _base_fig_layout(fig, theme="light", height=360):
    """
    Apply a consistent layout to a figure.

    Font, grid and axis colours contrast with the light/dark page theme.

    :param fig: a figure to update
    :param theme: "light" or "dark"
    :param height: the height of the figure in pixels
    :return: the updated figure
    """
    font_color = "#f6f7fb" if theme == "dark" else "#0b1020"
    grid_color = "#334155" if theme == "dark" else "#CBD5E1"
    axis = dict(
        showgrid=True,
        gridcolor=grid_color,
        zeroline=False,
        linecolor=font_color,
        ticks="outside",
        fixedrange=True,
    )
    fig.update_layout(
        autosize=False,
        height=height,
        margin=dict(l=30, r=30, t=30, b=30),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=font_color),
        xaxis=axis,
        yaxis=axis,
        uirevision="keep",
    )
    return fig


def progress_bar_figure(domain_pcts, theme="light"):
    """
    Completion percentage per domain as bars, in catalog order.

    Args:
        domain_pcts (dict): mapping of domain id to completion percentage
        theme (str, optional): light or dark. Defaults to "light".
    """
    labels = [_title(d) for d in DOMAIN_IDS]
    vals = [float(domain_pcts.get(d, 0.0)) for d in DOMAIN_IDS]
    fig = go.Figure(go.Bar(x=labels, y=vals, name="Completion"))
    fig.update_layout(
        xaxis=dict(categoryorder="array", categoryarray=labels, tickangle=-35),
        yaxis=dict(range=[0, 100], tick0=0, dtick=20),
    )
    fig = _base_fig_layout(fig, theme, height=BAR_H)
    fig.update_layout(margin=dict(l=30, r=30, t=30, b=110))
    return fig


def progress_radar_figure(domain_pcts, theme="light"):
    labels = [_title(d) for d in DOMAIN_IDS]
    vals = [float(domain_pcts.get(d, 0.0)) for d in DOMAIN_IDS]
    grid_color = "#334155" if theme == "dark" else "#CBD5E1"

    fig = go.Figure(
        go.Scatterpolar(
            r=vals + vals[:1],
            theta=labels + labels[:1],
            fill="toself",
            name="Completion",
            line=dict(width=2),
            marker=dict(size=4),
        )
    )
    fig.update_layout(
        polar=dict(
            radialaxis=dict(range=[0, 100], autorange=False, tick0=0, dtick=20, gridcolor=grid_color),
            angularaxis=dict(gridcolor=grid_color),
        ),
    )
    return _base_fig_layout(fig, theme, height=RADAR_H)


def gap_heatmap_figure(matrix, theme="light"):
    """
    Heatmap of open gap counts, category x domain.

    Args:
        matrix (pd.DataFrame): output of gap_matrix
        theme (str, optional): light or dark. Defaults to "light".
    """
    if matrix is None or matrix.empty:
        matrix = gap_matrix(None)
    z = matrix.to_numpy(dtype=float)
    labels = [_title(d) for d in matrix.columns]

    font_color = "#f6f7fb" if theme == "dark" else "#0b1020"
    muted = "#a9b0c4" if theme == "dark" else "#60646e"

    if not np.any(z):
        colorscale = [[0, "#d8dde9"], [1, "#d8dde9"]] if theme == "light" else [[0, "#2a334f"], [1, "#2a334f"]]
        annotations = [
            dict(
                text="No open gaps",
                xref="paper",
                yref="paper",
                x=0.5,
                y=0.5,
                showarrow=False,
                font=dict(size=14, color=muted),
            )
        ]
        showscale = False
    else:
        colorscale = "OrRd"
        annotations = [
            dict(x=labels[j], y=cat, text=str(int(z[i, j])), showarrow=False, font=dict(size=11, color=font_color))
            for i, cat in enumerate(matrix.index)
            for j in range(len(labels))
            if z[i, j]
        ]
        showscale = True

    fig = go.Figure(
        data=go.Heatmap(
            z=z,
            x=labels,
            y=list(matrix.index),
            zmin=0,
            colorscale=colorscale,
            showscale=showscale,
            hovertemplate="Domain: %{x}<br>Category: %{y}<br>Open gaps: %{z:.0f}<extra></extra>",
            xgap=1,
            ygap=1,
        )
    )
    fig.update_layout(annotations=annotations, xaxis=dict(tickangle=-35))
    fig = _base_fig_layout(fig, theme, height=HEAT_H)
    fig.update_layout(margin=dict(l=90, r=30, t=30, b=110))
    return fig


def _domain_pcts(data):
    return {row["domain"]: row["percentage"] for row in data.get("domains", [])}


def _issue_lines(data):
    return [f"[{i['type']}] {i['message']}" for i in data.get("errors", []) + data.get("warnings", [])]


def _gap_line(g):
    state = "resolved" if g.get("resolved") else f"priority {g.get('priority')}"
    return f"[{g.get('category')}] {_title(g.get('domain'))}: {g.get('description')} ({state})"


# ---------- Exports ------------------
def write_pptx(buf, data):
    """
    Write a PowerPoint summary of an analysis dict to a bytes buffer.

    Slides: title, summary, domain progress table, validation issues, gaps.

    Args:
        buf (BytesIO): buffer to write the presentation to
        data (dict): output of analysis_to_dict
    """
    prs = Presentation()
    slide = prs.slides.add_slide(prs.slide_layouts[0])
    slide.shapes.title.text = "Business Assessment Progress"
    slide.placeholders[1].text = (
        f"Company: {data.get('company') or data.get('assessment_id', '')}\n"
        f"Business model: {data.get('business_model') or 'not selected'}"
    )

    slide = prs.slides.add_slide(prs.slide_layouts[1])
    slide.shapes.title.text = "Summary"
    body = slide.shapes.placeholders[1].text_frame
    body.clear()
    body.paragraphs[0].text = f"Overall completion: {data.get('overall', 0)}%"
    body.add_paragraph().text = f"Questions answered: {data.get('completed', 0)} of {data.get('total', 0)}"
    body.add_paragraph().text = f"Estimated time remaining: {data.get('estimated_time_remaining', '')}"
    body.add_paragraph().text = f"Coarse completeness (answer count): {data.get('coarse_completeness', 0)}%"
    notification = data.get("notification") or {}
    if notification.get("should_notify"):
        body.add_paragraph().text = (
            f"Founder follow-up needed: {notification.get('critical_gap_count')} critical gaps "
            f"({notification.get('urgency_level')} urgency)"
        )

    domains = data.get("domains", [])
    slide = prs.slides.add_slide(prs.slide_layouts[5])
    slide.shapes.title.text = "Domain Progress"
    rows = len(domains) + 1
    table = slide.shapes.add_table(
        rows, 3, Inches(0.8), Inches(1.5), Inches(8.0), Inches(0.4 + 0.3 * rows)
    ).table
    table.cell(0, 0).text, table.cell(0, 1).text, table.cell(0, 2).text = "Domain", "Answered", "Completion (%)"
    for i, row in enumerate(domains, start=1):
        table.cell(i, 0).text = row["title"]
        table.cell(i, 1).text = f"{row['completed']}/{row['total']}"
        table.cell(i, 2).text = str(row["percentage"])

    slide = prs.slides.add_slide(prs.slide_layouts[1])
    slide.shapes.title.text = "Validation Issues"
    tf = slide.placeholders[1].text_frame
    tf.clear()
    for line in _issue_lines(data) or ["No validation issues"]:
        tf.add_paragraph().text = line

    slide = prs.slides.add_slide(prs.slide_layouts[1])
    slide.shapes.title.text = "Top Gaps"
    tf = slide.placeholders[1].text_frame
    tf.clear()
    gaps = data.get("gaps", [])
    for g in gaps[:10]:
        tf.add_paragraph().text = _gap_line(g)
    if not gaps:
        tf.add_paragraph().text = "No gaps detected"
    prs.save(buf)


def _img_from_fig(fig, width=720, height=420, scale=2):
    """
    Render a plotly figure to PNG bytes (requires kaleido).

    Returns:
        io.BytesIO: buffer with the PNG image
    """
    png_bytes = pio.to_image(fig, format="png", width=width, height=height, scale=scale)
    return io.BytesIO(png_bytes)


def write_pdf(buf, data, theme="light", charts=True):
    """
    Write a PDF report of an analysis dict to a bytes buffer.

    Args:
        buf (BytesIO): buffer to write the document to
        data (dict): output of analysis_to_dict
        theme (str): chart theme
        charts (bool): embed chart images (needs kaleido)
    """
    doc = SimpleDocTemplate(buf, pagesize=A4, leftMargin=16, rightMargin=16, topMargin=16, bottomMargin=16)
    styles = getSampleStyleSheet()
    avail = A4[0] - 72

    story = [
        Paragraph("<b>Business Assessment Progress</b>", styles["Title"]),
        Spacer(1, 8),
        Paragraph(
            f"Company: {escape(data.get('company') or data.get('assessment_id', ''))}&nbsp;&nbsp;&nbsp; "
            f"Business model: {data.get('business_model') or 'not selected'}",
            styles["Normal"],
        ),
        Spacer(1, 10),
        Paragraph(
            f"<b>Overall completion:</b> {data.get('overall', 0)}% "
            f"({data.get('completed', 0)} of {data.get('total', 0)} questions, "
            f"{data.get('estimated_time_remaining', '')} remaining)",
            styles["Heading3"],
        ),
        Spacer(1, 8),
    ]

    tbl_data = [["Domain", "Answered", "Completion (%)", "Status"]] + [
        [row["title"], f"{row['completed']}/{row['total']}", str(row["percentage"]), row["status"]]
        for row in data.get("domains", [])
    ]
    tbl = Table(tbl_data, colWidths=[200, 80, 100, avail - 380], hAlign="LEFT")
    tbl.setStyle(TableStyle(TABLE_STYLE + [("ALIGN", (1, 1), (2, -1), "RIGHT")]))
    story += [Paragraph("<b>Domain Progress</b>", styles["Heading3"]), Spacer(1, 6), tbl, Spacer(1, 12)]

    if charts:
        pcts = _domain_pcts(data)
        figs = [
            ("Completion by Domain", progress_bar_figure(pcts, theme)),
            ("Open Gaps", gap_heatmap_figure(gap_matrix(gaps_frame(data.get("gaps", []))), theme)),
        ]
        for title, fig in figs:
            story += [Paragraph(f"<b>{title}</b>", styles["Heading3"]), Spacer(1, 6)]
            img_buf = _img_from_fig(fig, width=520, height=320, scale=2)
            story += [RLImage(img_buf, width=520, height=320), Spacer(1, 12)]

    for heading, lines in (
        ("Validation Issues", _issue_lines(data)),
        ("Gaps", [_gap_line(g) for g in data.get("gaps", [])]),
    ):
        if not lines:
            continue
        bullets = ListFlowable(
            [ListItem(Paragraph(escape(line), styles["Normal"])) for line in lines],
            bulletType="bullet",
        )
        story += [Paragraph(f"<b>{heading}</b>", styles["Heading3"]), Spacer(1, 6), bullets, Spacer(1, 12)]

    doc.build(story)

# charts.py – figures Plotly + heatmap table
import html

import plotly.graph_objects as go

from colors import color_for, text_color_for
from theme import PIE_COLORS, get_theme


def base_layout(fig, theme, height=320):
    fig.update_layout(
        height=height,
        autosize=True,
        paper_bgcolor=theme["cardBackground"],
        plot_bgcolor=theme["cardBackground"],
        font=dict(color=theme["textColor"], size=13, family="Inter, 'Segoe UI', sans-serif"),
        margin=dict(l=12, r=24, t=16, b=34),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0),
        transition=dict(duration=600, easing="cubic-in-out"),
    )
    fig.update_xaxes(gridcolor=theme["tableBorder"])
    fig.update_yaxes(gridcolor=theme["tableBorder"], rangemode="tozero")
    return fig


def status_fig(rows, theme_name=None):
    theme = get_theme(theme_name)
    labels = [r["status"] for r in rows]
    fig = go.Figure()
    fig.add_bar(
        x=labels,
        y=[r["planned"] for r in rows],
        name="Planned",
        marker_color=theme["chartPrimary"],
        hovertemplate="%{x}<br>Planned: %{y}<extra></extra>",
    )
    fig.add_bar(
        x=labels,
        y=[r["real"] for r in rows],
        name="Real",
        marker_color=theme["chartSecondary"],
        hovertemplate="%{x}<br>Real: %{y}<extra></extra>",
    )
    fig.update_layout(barmode="group", bargap=0.25)
    return base_layout(fig, theme)


def cost_fig(rows, theme_name=None):
    theme = get_theme(theme_name)
    disciplines = [r["discipline"] or "—" for r in rows]
    fig = go.Figure()
    fig.add_bar(x=disciplines, y=[r["planned"] for r in rows], name="Planned", marker_color=theme["chartPrimary"])
    fig.add_bar(x=disciplines, y=[r["real"] for r in rows], name="Real", marker_color=theme["chartAccent"])
    fig.update_layout(barmode="group", bargap=0.25)
    return base_layout(fig, theme)


def completion_fig(rows, theme_name=None):
    theme = get_theme(theme_name)
    fig = go.Figure(
        go.Pie(
            labels=[r["discipline"] or "—" for r in rows],
            values=[r["percent"] for r in rows],
            hole=0.5,
            marker=dict(colors=PIE_COLORS, line=dict(color=theme["cardBackground"], width=2)),
            textinfo="label",
            hovertemplate="%{label}: %{value:.1f}% completed<extra></extra>",
            sort=False,
        )
    )
    return base_layout(fig, theme)


def counts_fig(counts, color, theme_name=None):
    theme = get_theme(theme_name)
    fig = go.Figure()
    fig.add_bar(
        x=list(counts.keys()),
        y=list(counts.values()),
        marker_color=color,
        hovertemplate="%{x}: %{y}<extra></extra>",
    )
    fig.update_layout(showlegend=False)
    return base_layout(fig, theme, height=280)


def deviation_fig(rows, theme_name=None):
    theme = get_theme(theme_name)
    values = [r["deviation_days"] for r in rows]
    colors = [theme["dangerColor"] if v > 0 else theme["secondaryColor"] for v in values]
    fig = go.Figure()
    fig.add_bar(
        x=values,
        y=[r["activity"] for r in rows],
        orientation="h",
        marker_color=colors,
        hovertemplate="%{y}<br>%{x:.1f} days<extra></extra>",
    )
    fig.update_layout(showlegend=False, yaxis=dict(autorange="reversed"))
    return base_layout(fig, theme, height=max(240, 28 * len(rows) + 60))


def heatmap_html(heatmap, theme_name=None) -> str:
    theme = get_theme(theme_name)
    base = theme["tableHeaderBg"]
    accent = theme["primaryColor"]
    max_count = heatmap.get("max_count", 0)
    responsibles = heatmap.get("responsibles", [])
    head = "".join(f"<th>{html.escape(r or '—')}</th>" for r in responsibles)
    body = []
    for discipline in heatmap.get("disciplines", []):
        cells = []
        for responsible in responsibles:
            count = heatmap["matrix"][discipline][responsible]
            bg = color_for(count, max_count, base, accent)
            fg = text_color_for(bg)
            cells.append(f'<td style="background:{bg};color:{fg}">{count}</td>')
        body.append(f'<tr><th class="row">{html.escape(discipline or "—")}</th>{"".join(cells)}</tr>')
    return f'<table class="heatmap"><thead><tr><th></th>{head}</tr></thead><tbody>{"".join(body)}</tbody></table>'

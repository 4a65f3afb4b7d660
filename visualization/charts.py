"""Plotly chart builders for the ParkSettle query page."""

from __future__ import annotations

from typing import Mapping

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from core.models import FeeTotal

from .theme import theme_tokens

TOKENS = theme_tokens()

__all__ = [
    "build_location_chart",
    "build_payer_chart",
]


def _empty_plotly_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        annotations=[
            dict(
                text=message,
                x=0.5,
                y=0.5,
                xref="paper",
                yref="paper",
                showarrow=False,
                font=dict(color=TOKENS.neutral_grey, size=14, family=TOKENS.label_font),
            )
        ],
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        margin=dict(l=0, r=0, t=20, b=0),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def build_location_chart(records: pd.DataFrame) -> go.Figure:
    """Bar chart of record counts per parking location, busiest first."""

    if records.empty:
        return _empty_plotly_figure("검색된 주차 기록이 없습니다.")

    counts = (
        records.groupby("location", sort=False)
        .size()
        .sort_values(ascending=False, kind="mergesort")
        .rename("count")
        .reset_index()
    )
    palette = list(TOKENS.location_palette)
    repeats = len(counts) // len(palette) + 1

    fig = px.bar(
        counts,
        x="location",
        y="count",
        text="count",
        color="location",
        color_discrete_sequence=(palette * repeats)[: len(counts)],
    )
    fig.update_traces(
        texttemplate="%{text}건",
        textposition="outside",
        cliponaxis=False,
        hovertemplate="%{x}<br>%{y}건<extra></extra>",
    )
    fig.update_layout(
        showlegend=False,
        margin=dict(l=0, r=0, t=20, b=0),
        xaxis=dict(title="", showgrid=False),
        yaxis=dict(title="건수", showgrid=True, gridcolor=TOKENS.neutral_background, zeroline=False),
        font=dict(color=TOKENS.label_color, family=TOKENS.label_font, size=TOKENS.label_size),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        bargap=0.35,
    )
    return fig


def build_payer_chart(totals: Mapping[str, FeeTotal], count: int = 10) -> go.Figure:
    """Horizontal bar chart of the largest per-person fee totals."""

    if not totals:
        return _empty_plotly_figure("정산 대상자가 없습니다.")

    data = pd.DataFrame(list(totals.values()))
    data = data.sort_values("total_fee", ascending=False, kind="mergesort").head(count)
    data["label"] = data["name"] + " · " + data["bank_account"]
    data["formatted_fee"] = data["total_fee"].map(lambda value: f"{value:,.0f}원")
    # plotly draws the first category at the bottom of a horizontal bar chart
    data = data.iloc[::-1]

    fig = px.bar(
        data,
        x="total_fee",
        y="label",
        orientation="h",
        text="formatted_fee",
        color_discrete_sequence=[TOKENS.brand_blue],
    )
    fig.update_traces(
        hovertemplate="%{y}<br>%{text}<extra></extra>",
        textposition="outside",
        cliponaxis=False,
    )
    fig.update_layout(
        margin=dict(l=0, r=10, t=20, b=0),
        xaxis=dict(title="주차비 합계 (원)", showgrid=False, zeroline=False),
        yaxis=dict(title="", automargin=True),
        font=dict(color=TOKENS.label_color, family=TOKENS.label_font, size=TOKENS.label_size),
        bargap=0.35,
        height=max(240, 36 * len(data)),
    )
    return fig

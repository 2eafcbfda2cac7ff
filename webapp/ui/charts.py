from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

SENTIMENT_COLORS = {
    "Positive": "#22c55e",
    "Neutral": "#6b7280",
    "Negative": "#ef4444",
}


def _apply_layout(fig: go.Figure, **overrides) -> go.Figure:
    fig.update_layout(
        template="plotly_white",
        title_font_size=18,
        title_font_color="#1f2937",
        title_font_weight=600,
        font=dict(family="Inter, sans-serif"),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        margin=dict(t=60, l=50, r=50, b=50),
        **overrides,
    )
    return fig


def create_sentiment_chart(sentiment_df: pd.DataFrame) -> go.Figure:
    """Donut chart of the positive/neutral/negative split."""
    if sentiment_df.empty or sentiment_df["value"].sum() <= 0:
        return go.Figure()

    fig = px.pie(
        sentiment_df,
        values="value",
        names="sentiment",
        title="Sentiment Breakdown",
        hole=0.45,
        color="sentiment",
        color_discrete_map=SENTIMENT_COLORS,
    )
    fig.update_traces(textinfo="label+percent", hovertemplate="%{label}: %{value}%<extra></extra>")
    return _apply_layout(fig, showlegend=False)


def create_topics_chart(topics_df: pd.DataFrame, limit: int = 10) -> go.Figure:
    """Horizontal bar chart of the most mentioned topics."""
    if topics_df.empty:
        return go.Figure()

    top_topics = topics_df.nlargest(limit, "count").sort_values("count")
    fig = px.bar(
        top_topics,
        x="count",
        y="topic",
        orientation="h",
        title="Top Topics",
        hover_data={"keywords": True},
    )
    fig.update_traces(marker_color="#2563eb")
    return _apply_layout(fig, xaxis_title="Mentions", yaxis_title="", height=max(300, 40 * len(top_topics) + 120))

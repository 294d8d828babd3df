"""Plotly figures for the dashboard and mindset pages."""
import pandas as pd
import plotly.graph_objects as go

from src.journal.models import CalendarDay, EmotionBucket, EquityCurve, HourlyBucket, TradingStats

WIN_COLOR = "#22c55e"
LOSS_COLOR = "#ef4444"
NEUTRAL_COLOR = "#3b82f6"


def _pnl_colors(values) -> list[str]:
    return [WIN_COLOR if v >= 0 else LOSS_COLOR for v in values]


def equity_figure(curve: EquityCurve, template: str = "plotly_dark") -> go.Figure:
    df = pd.DataFrame(
        {"Trade": [p.label for p in curve.points], "Equity": curve.values}
    )
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=df["Trade"],
            y=df["Equity"],
            mode="lines+markers",
            name="Equity",
            line=dict(color=NEUTRAL_COLOR),
        )
    )
    fig.update_layout(title="Equity Curve", template=template, xaxis_type="category")
    return fig


def hourly_figure(buckets: list[HourlyBucket], template: str = "plotly_dark") -> go.Figure:
    df = pd.DataFrame(
        {
            "Hour": [b.label for b in buckets],
            "Win Rate": [b.win_rate for b in buckets],
            "Trades": [b.count for b in buckets],
        }
    )
    fig = go.Figure(
        data=[
            go.Bar(
                x=df["Hour"],
                y=df["Win Rate"],
                customdata=df["Trades"],
                hovertemplate="%{x}<br>Win rate %{y:.1f}%<br>%{customdata} trades<extra></extra>",
                marker_color=NEUTRAL_COLOR,
            )
        ]
    )
    fig.update_layout(title="Win Rate by Hour", template=template, yaxis_range=[0, 100])
    return fig


def emotion_figure(buckets: list[EmotionBucket], template: str = "plotly_dark") -> go.Figure:
    df = pd.DataFrame(
        {
            "Emotion": [b.tag for b in buckets],
            "Avg P&L": [b.avg_pnl for b in buckets],
            "Trades": [b.count for b in buckets],
        }
    )
    fig = go.Figure(
        data=[
            go.Bar(
                x=df["Avg P&L"],
                y=df["Emotion"],
                orientation="h",
                customdata=df["Trades"],
                hovertemplate="%{y}<br>Avg P&L %{x:.2f}<br>%{customdata} trades<extra></extra>",
                marker_color=_pnl_colors(df["Avg P&L"]),
            )
        ]
    )
    fig.update_layout(title="Average P&L by Emotion", template=template)
    return fig


def direction_figure(stats: TradingStats, template: str = "plotly_dark") -> go.Figure:
    fig = go.Figure(
        data=[
            go.Pie(
                labels=["Long", "Short"],
                values=[stats.long_count, stats.short_count],
                hole=0.5,
                marker_colors=[WIN_COLOR, LOSS_COLOR],
            )
        ]
    )
    fig.update_layout(title="Long / Short", template=template)
    return fig


def calendar_frame(days: list[CalendarDay]) -> pd.DataFrame:
    """Month grid as a DataFrame: one row per week, Monday first."""
    weekdays = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    cells = [
        "" if day.empty else (f"{day.day}  {day.pnl:+.0f}" if day.count else str(day.day))
        for day in days
    ]
    cells += [""] * (-len(cells) % 7)
    rows = [cells[i:i + 7] for i in range(0, len(cells), 7)]
    return pd.DataFrame(rows, columns=weekdays)

"""Plotly interactive altitude chart renderer.

The x axis is the sample index so that a repeated wall-clock hour (DST
fall-back) still gets its own slot; tick labels carry the local hour.
"""

import plotly.graph_objects as go

from nightskychart.i18n import t
from nightskychart.models import VisibilityData, VisibilitySample

_OBJECT_COLOR = "#8884d8"
_MOON_COLOR = "#ffd700"
_AIRMASS_COLOR = "#82ca9d"
_NIGHT_FILL = "#001529"
_TWILIGHT_FILL = "#7eb6ff"
_SHADE_OPACITY = 0.3
_AIRMASS_RANGE = [3.0, 1.0]  # Inverted: better airmass plots higher


def shading_bands(
    samples: tuple[VisibilitySample, ...], flag: str
) -> list[tuple[int, int]]:
    """Merge consecutive flagged samples into (start, end) index bands.

    A band spans from its first flagged sample to the sample after its last
    one, clipped to the final index.

    Args:
        samples: Hourly samples in time order.
        flag: Boolean attribute name ("is_night" or "is_twilight").
    """
    last = len(samples) - 1
    bands: list[tuple[int, int]] = []
    start: int | None = None
    for i, sample in enumerate(samples):
        if getattr(sample, flag):
            if start is None:
                start = i
        elif start is not None:
            bands.append((start, i))
            start = None
    if start is not None:
        bands.append((start, last))
    return [(a, min(b, last)) for a, b in bands]


def _hover_text(sample: VisibilitySample, lang: str) -> str:
    airmass = f"{sample.airmass:.2f}" if sample.airmass is not None else "n/a"
    return (
        f"{sample.time}<br>"
        f"{t('legend_object', lang)}: {sample.altitude:.1f}°<br>"
        f"{t('legend_moon', lang)}: {sample.moon_altitude:.1f}°<br>"
        f"{t('legend_airmass', lang)}: {airmass}<br>"
        f"{t('hover_illumination', lang)}: {sample.moon_illumination:.0%}"
    )


def render_plotly_chart(data: VisibilityData, lang: str = "en") -> go.Figure:
    """Render VisibilityData as a Plotly altitude-over-time chart.

    Night and twilight are shaded; the horizon is a dashed line at 0°.
    Airmass sits on a secondary inverted axis, hidden until toggled in the legend.

    Args:
        data: Fully computed visibility data.
        lang: UI language for labels.

    Returns:
        Plotly Figure object.
    """
    samples = data.samples
    xs = list(range(len(samples)))
    hover = [_hover_text(s, lang) for s in samples]

    object_trace = go.Scatter(
        x=xs,
        y=[s.altitude for s in samples],
        mode="lines",
        line=dict(color=_OBJECT_COLOR, width=2, shape="spline"),
        name=data.target.name or t("legend_object", lang),
        hovertext=hover,
        hoverinfo="text",
    )
    moon_trace = go.Scatter(
        x=xs,
        y=[s.moon_altitude for s in samples],
        mode="lines",
        line=dict(color=_MOON_COLOR, width=2, shape="spline"),
        name=t("legend_moon", lang),
        hoverinfo="skip",
    )
    # None breaks the line where the target is below the horizon
    airmass_trace = go.Scatter(
        x=xs,
        y=[s.airmass for s in samples],
        mode="lines+markers",
        line=dict(color=_AIRMASS_COLOR, width=1, dash="dot"),
        marker=dict(size=4),
        name=t("legend_airmass", lang),
        yaxis="y2",
        visible="legendonly",
        connectgaps=False,
        hoverinfo="skip",
    )

    fig = go.Figure(data=[object_trace, moon_trace, airmass_trace])

    for flag, fill in (("is_night", _NIGHT_FILL), ("is_twilight", _TWILIGHT_FILL)):
        for x0, x1 in shading_bands(samples, flag):
            fig.add_vrect(
                x0=x0,
                x1=x1,
                fillcolor=fill,
                opacity=_SHADE_OPACITY,
                line_width=0,
                layer="below",
            )

    fig.add_hline(y=0, line_dash="dash", line_color="#666666", line_width=1)

    fig.update_layout(
        margin=dict(t=5, r=30, l=20, b=5),
        height=420,
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, x=0),
        xaxis=dict(
            title=t("axis_time", lang),
            tickmode="array",
            tickvals=xs,
            ticktext=[s.time.split(":")[0] for s in samples],
            range=[0, max(len(samples) - 1, 1)],
        ),
        yaxis=dict(
            title=t("axis_altitude", lang),
            range=[-90, 90],
            tickvals=[-90, -60, -30, 0, 30, 60, 90],
        ),
        yaxis2=dict(
            title=t("legend_airmass", lang),
            overlaying="y",
            side="right",
            range=_AIRMASS_RANGE,
            showgrid=False,
        ),
    )
    return fig

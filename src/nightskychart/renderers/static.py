"""Matplotlib static PNG renderer."""

import re
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from nightskychart.i18n import t
from nightskychart.models import VisibilityData
from nightskychart.renderers.plotly_chart import shading_bands

_ROOT = Path(__file__).parent.parent.parent.parent


def render_static_chart(
    data: VisibilityData, figsize: tuple[float, float] = (10, 5), lang: str = "en"
) -> Figure:
    """Render VisibilityData as a static matplotlib altitude chart.

    Args:
        data: Fully computed visibility data.
        figsize: Output image size in inches.
        lang: UI language for labels.

    Returns:
        matplotlib Figure object.
    """
    samples = data.samples
    xs = np.arange(len(samples))

    fig, ax = plt.subplots(figsize=figsize)

    for flag, fill in (("is_night", "#001529"), ("is_twilight", "#7eb6ff")):
        for x0, x1 in shading_bands(samples, flag):
            ax.axvspan(x0, x1, color=fill, alpha=0.3, linewidth=0, zorder=0)

    ax.axhline(0, color="#666666", linestyle="--", linewidth=1, zorder=1)
    ax.plot(
        xs,
        [s.altitude for s in samples],
        color="#8884d8",
        linewidth=2,
        label=data.target.name or t("legend_object", lang),
        zorder=3,
    )
    ax.plot(
        xs,
        [s.moon_altitude for s in samples],
        color="#ffd700",
        linewidth=2,
        label=t("legend_moon", lang),
        zorder=2,
    )

    # NaN breaks the line where the target is below the horizon
    ax2 = ax.twinx()
    ax2.plot(
        xs,
        [np.nan if s.airmass is None else s.airmass for s in samples],
        color="#82ca9d",
        linewidth=1,
        linestyle=":",
        marker="o",
        markersize=3,
        label=t("legend_airmass", lang),
    )
    ax2.set_ylim(3.0, 1.0)
    ax2.set_ylabel(t("legend_airmass", lang))

    ax.set_xlim(0, max(len(samples) - 1, 1))
    ax.set_ylim(-90, 90)
    ax.set_xticks(xs)
    ax.set_xticklabels([s.time.split(":")[0] for s in samples])
    ax.set_xlabel(t("axis_time", lang))
    ax.set_ylabel(t("axis_altitude", lang))
    ax.set_title(f"{data.context.address_display} · {data.date.isoformat()}")
    handles, labels = ax.get_legend_handles_labels()
    handles2, labels2 = ax2.get_legend_handles_labels()
    ax2.legend(handles + handles2, labels + labels2, loc="upper right")
    fig.tight_layout()

    return fig


def default_filename(data: VisibilityData) -> str:
    """File name of the form ``<date>__<place>__<object>.png``."""
    parts = [data.date.isoformat(), data.context.address_display, data.target.name]
    stem = "__".join(p for p in parts if p)
    return re.sub(r"[^\w.-]+", "_", stem).strip("_") + ".png"


def save_static_chart(data: VisibilityData, output_path: Path | None = None) -> Path:
    """Save VisibilityData as a PNG file.

    Args:
        data: Fully computed visibility data.
        output_path: Destination path. Auto-generated under results/ if None.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        output_path = _ROOT / "results" / default_filename(data)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_chart(data)
    fig.savefig(output_path)
    plt.close(fig)
    return output_path

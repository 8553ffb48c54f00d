"""Draw the composition plots.

Both renderers take the tables built in `formatting` and write a PNG. Any
failure while drawing or saving is raised as CollaboratorFailure.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence

import matplotlib

matplotlib.use("Agg")

import logomaker  # noqa: E402
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from .composition import BASES  # noqa: E402
from .errors import CollaboratorFailure  # noqa: E402

log = logging.getLogger(__name__)

BASE_COLORS: Dict[str, str] = {
    "A": "forestgreen",
    "C": "dodgerblue",
    "G": "gold",
    "T": "firebrick",
}


def _landmarks(num_out: int, total_length: int) -> Dict[float, str]:
    """Tick positions for the line plot: window edges and feature edges."""
    marks = {
        1.0: f"-{num_out}bp",
        num_out + 0.5: "start",
        total_length - num_out + 0.5: "end",
        float(total_length): f"+{num_out}bp",
    }
    return {x: lab for x, lab in sorted(marks.items()) if 1 <= x <= total_length}


def plot_line(
    table: pd.DataFrame,
    out_png: str | Path,
    *,
    num_out: int,
    left_length: int,
    title: str = "",
    yupper: float = 1.0,
) -> Path:
    """Line plot of per-position base fractions.

    Parameters
    ----------
    table:
        Line-plot table (position, fraction, base).
    out_png:
        Output image path.
    num_out:
        Bases outside the feature on each side; used to place the start/end guides.
    left_length:
        Number of LEFT positions; a guide separates the two sides there.
    title, yupper:
        Plot title and y-axis upper limit.
    """
    out_png = Path(out_png)
    total_length = int(table["position"].max()) if not table.empty else 0

    try:
        fig, ax = plt.subplots(figsize=(10, 4))
        for base in BASES:
            grp = table[table["base"] == base]
            ax.plot(grp["position"], grp["fraction"], color=BASE_COLORS[base], label=base, linewidth=1)

        for x in (num_out + 0.5, left_length + 0.5, total_length - num_out + 0.5):
            if 1 < x < total_length:
                ax.axvline(x, color="grey", linestyle="--", linewidth=0.8)

        marks = _landmarks(num_out, total_length)
        ax.set_xticks(list(marks))
        ax.set_xticklabels(list(marks.values()))
        ax.set_xlim(1, max(total_length, 2))
        ax.set_ylim(0, yupper)
        ax.set_ylabel("% of bases")
        ax.set_title(title)
        ax.legend(loc="upper right", frameon=False, ncol=len(BASES))
        fig.tight_layout()
        fig.savefig(out_png, dpi=150)
    except Exception as e:
        raise CollaboratorFailure(f"line plot rendering failed: {e}") from e
    finally:
        plt.close("all")

    log.info("wrote %s", out_png)
    return out_png


def plot_logo(
    pwm: pd.DataFrame,
    out_png: str | Path,
    *,
    annotations: Sequence[str] = (),
    title: str = "",
) -> Path:
    """Sequence logo of a PWM (probability units, classic colours).

    `annotations` are matched to PWM rows by index and labels beyond the
    number of rows are ignored. When the midpoint clamp has shortened a side,
    the LEFT block has fewer rows than the labels assume, so every later
    label lands on the wrong column (weblogo annotations behave the same).
    """
    out_png = Path(out_png)
    mat = pwm.set_index("position")[list(BASES)]

    try:
        fig, ax = plt.subplots(figsize=(max(4, len(mat) / 2.5), 3))
        logomaker.Logo(mat, ax=ax, color_scheme="classic")
        ticks: List[int] = list(mat.index)[: len(annotations)]
        ax.set_xticks(ticks)
        ax.set_xticklabels(list(annotations)[: len(ticks)], rotation=90)
        ax.set_ylim(0, 1)
        ax.set_ylabel("probability")
        ax.set_title(title)
        fig.tight_layout()
        fig.savefig(out_png, dpi=200)
    except Exception as e:
        raise CollaboratorFailure(f"logo rendering failed: {e}") from e
    finally:
        plt.close("all")

    log.info("wrote %s", out_png)
    return out_png

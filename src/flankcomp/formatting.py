from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Tuple

import pandas as pd

from .composition import BASES, Composition
from .errors import ConstraintViolation


LOGO_MAX_WINDOW = 20

# Fractions are written with six significant digits.
FLOAT_FORMAT = "%.6g"


def line_plot_table(comp: Composition) -> pd.DataFrame:
    """Per-position fractions for the line plot.

    Columns: position, fraction, base. Rows are grouped by base and ordered by
    ascending logical position within each base.
    """
    long = comp.long()
    out = long.sort_values(["base", "position"], kind="mergesort").reset_index(drop=True)
    return out[["position", "fraction", "base"]]


def write_perpos(table: pd.DataFrame, out_path: str | Path) -> Path:
    """Write the line-plot table as headerless TSV."""
    out_path = Path(out_path)
    table.to_csv(out_path, sep="\t", header=False, index=False, float_format=FLOAT_FORMAT)
    return out_path


def pwm_table(comp: Composition) -> pd.DataFrame:
    """Position weight matrix for the logo.

    Columns: position, A, C, G, T (fractions). LEFT rows keep positions
    1..L, an all-zero row sits at L+1 to mark the feature boundary, and RIGHT
    rows move up by one to make room for it.
    """
    t = comp.table
    fractions = t[list(BASES)].div(t["total"], axis=0)
    fractions.insert(0, "position", t["position"] + (t["side"] == "RIGHT").astype(int))

    sentinel = pd.DataFrame([[comp.left_length + 1] + [0.0] * len(BASES)], columns=["position", *BASES])
    pwm = pd.concat([fractions, sentinel], ignore_index=True)
    pwm["position"] = pwm["position"].astype(int)
    return pwm.sort_values("position", kind="mergesort").reset_index(drop=True)


def write_pwm(pwm: pd.DataFrame, out_path: str | Path) -> Path:
    """Write the PWM in TRANSFAC layout (`ID`/`PO` header lines, then rows)."""
    out_path = Path(out_path)
    with out_path.open("w") as f:
        f.write("ID Matrix\n")
        f.write("PO\t" + "\t".join(BASES) + "\n")
        pwm.loc[:, ["position", *BASES]].to_csv(f, sep="\t", header=False, index=False, float_format=FLOAT_FORMAT)
    return out_path


def check_logo_size(num_out: int, num_in: int) -> None:
    total = num_in + num_out
    if total > LOGO_MAX_WINDOW:
        raise ConstraintViolation(
            f"Creating a logo is only allowed when the sum of -I and -O is <= {LOGO_MAX_WINDOW}; "
            f"current sum is {total}"
        )


# (column, label) rules in priority order; the first matching rule wins.
_LABEL_RULES: List[Tuple[Callable[[int, int, int], int], Callable[[int, int], str]]] = [
    (lambda o, i, n: o - 1, lambda o, i: "-1bp"),
    (lambda o, i, n: o + i - 1, lambda o, i: f"+{i}bp"),
    (lambda o, i, n: o + i + 1, lambda o, i: f"-{i}bp"),
    (lambda o, i, n: o + 2 * i + 1, lambda o, i: "+1bp"),
    (lambda o, i, n: n - 1, lambda o, i: f"+{o}bp"),
]


def logo_annotations(num_out: int, num_in: int) -> List[str]:
    """x-axis labels for the logo, one per column of a full-size PWM.

    There are 2*(num_out+num_in)+1 columns (both sides plus the boundary row).
    Column 0 is always the window start; the remaining landmarks mark the last
    base before the feature, the inner edges of both windows, the first base
    after the feature and the window end. All other columns are blank.
    """
    n = 2 * (num_out + num_in) + 1
    labels = [""] * n
    # Apply in reverse so higher-priority rules overwrite lower ones.
    for col_fn, label_fn in reversed(_LABEL_RULES):
        col = col_fn(num_out, num_in, n)
        if 0 < col < n:
            labels[col] = label_fn(num_out, num_in)
    labels[0] = f"-{num_out}bp"
    return labels

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np
import pandas as pd


# Column order of the count matrix. Only these uppercase letters are counted;
# anything else (N, IUPAC codes, soft-masked lowercase) only adds to the total.
BASES = ("A", "C", "G", "T")


class PositionCounts:
    """Per-column base counts for the sequences of one window side.

    Column i (1-based) counts every sequence long enough to have a character
    there, so ragged sequence lengths give correct per-column fractions.

    Attributes
    ----------
    counts:
        int64 array of shape (length, 4), one column per base in BASES order.
    totals:
        int64 array of shape (length,), sequences covering each column.
    """

    def __init__(self) -> None:
        self.counts = np.zeros((0, len(BASES)), dtype=np.int64)
        self.totals = np.zeros(0, dtype=np.int64)

    def __len__(self) -> int:
        return int(self.totals.shape[0])

    def _grow(self, n: int) -> None:
        extra = n - len(self)
        self.counts = np.vstack([self.counts, np.zeros((extra, len(BASES)), dtype=np.int64)])
        self.totals = np.concatenate([self.totals, np.zeros(extra, dtype=np.int64)])

    def add(self, seq: str) -> None:
        n = len(seq)
        if n == 0:
            return
        if n > len(self):
            self._grow(n)
        chars = np.array(list(seq))
        self.totals[:n] += 1
        for j, base in enumerate(BASES):
            self.counts[:n, j] += chars == base

    def add_all(self, seqs: Iterable[str]) -> "PositionCounts":
        for s in seqs:
            self.add(s)
        return self

    def to_frame(self, offset: int = 0) -> pd.DataFrame:
        """Wide table: position, A, C, G, T, total.

        Positions are 1-based and shifted by `offset`.
        """
        df = pd.DataFrame(self.counts, columns=list(BASES))
        df.insert(0, "position", np.arange(1, len(self) + 1, dtype=np.int64) + offset)
        df["total"] = self.totals
        return df


@dataclass
class Composition:
    """Base counts for both sides on the unified logical axis.

    `table` has one row per logical position (LEFT rows 1..left_length, then
    RIGHT rows shifted by left_length) with columns
    position, side, A, C, G, T, total.
    """

    table: pd.DataFrame
    left_length: int
    right_length: int

    @property
    def empty(self) -> bool:
        return self.table.empty

    def side(self, name: str) -> pd.DataFrame:
        return self.table[self.table["side"] == name]

    def long(self) -> pd.DataFrame:
        """One row per (position, base): position, base, count, total, fraction."""
        long = self.table.melt(
            id_vars=["position", "side", "total"],
            value_vars=list(BASES),
            var_name="base",
            value_name="count",
        )
        long["fraction"] = long["count"] / long["total"]
        return long[["position", "side", "base", "count", "total", "fraction"]]


def aggregate(left_seqs: Iterable[str], right_seqs: Iterable[str]) -> Composition:
    """Count bases per column for each side and join them on one axis.

    RIGHT positions are shifted by L, the number of LEFT columns (0 when there
    are no LEFT sequences).
    """
    left = PositionCounts().add_all(left_seqs)
    right = PositionCounts().add_all(right_seqs)

    left_df = left.to_frame()
    left_df.insert(1, "side", "LEFT")
    right_df = right.to_frame(offset=len(left))
    right_df.insert(1, "side", "RIGHT")

    frames = [df for df in (left_df, right_df) if not df.empty] or [left_df]
    table = pd.concat(frames, ignore_index=True)
    return Composition(table=table, left_length=len(left), right_length=len(right))

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from .io import BED6_COLUMNS, Interval

log = logging.getLogger(__name__)


class Side(str, enum.Enum):
    """Which end of the feature a window samples, in feature orientation."""

    LEFT = "LEFT"
    RIGHT = "RIGHT"


@dataclass(frozen=True)
class FlankWindow:
    """A window around one end of an interval, in genomic coordinates.

    `source` is the index of the interval the window was built from, so the
    two sides of one feature can be paired again later.
    """

    chrom: str
    start: int
    end: int
    name: str
    score: str
    strand: str
    side: Side
    source: int = 0


def _midpoint(start: int, end: int) -> int:
    return start + (end - start) // 2


def genomic_left_bounds(interval: Interval, num_out: int, num_in: int) -> Optional[Tuple[int, int]]:
    """Bounds of the window around the interval's lower coordinate.

    The window runs from `num_out` bases before `start` to `num_in` bases into
    the interval, never past the midpoint. Returns None when the outer bound
    would not be strictly positive or the window is empty.
    """
    outer = interval.start - num_out
    if outer <= 0:
        return None
    inner = min(interval.start + num_in, _midpoint(interval.start, interval.end))
    if inner <= outer:
        return None
    return outer, inner


def genomic_right_bounds(interval: Interval, num_out: int, num_in: int) -> Optional[Tuple[int, int]]:
    """Bounds of the window around the interval's upper coordinate.

    On odd-length intervals the midpoint is moved up by one so the two windows
    do not share the middle base. The outer bound is not range-checked.
    """
    mid = _midpoint(interval.start, interval.end)
    if (interval.end - interval.start) % 2 == 1:
        mid += 1
    inner = max(interval.end - num_in, mid)
    outer = interval.end + num_out
    if outer <= inner:
        return None
    return inner, outer


def build_windows(interval: Interval, num_out: int, num_in: int, source: int = 0) -> List[FlankWindow]:
    """Build the LEFT and RIGHT flank windows of one interval.

    On the + strand the genomic-left window is the feature's LEFT end; on the
    - strand the sides swap. Intervals with any other strand yield nothing.
    """
    if interval.strand == "+":
        sides = (Side.LEFT, Side.RIGHT)
    elif interval.strand == "-":
        sides = (Side.RIGHT, Side.LEFT)
    else:
        return []

    out: List[FlankWindow] = []
    for side, bounds in zip(
        sides,
        (genomic_left_bounds(interval, num_out, num_in), genomic_right_bounds(interval, num_out, num_in)),
    ):
        if bounds is None:
            continue
        out.append(
            FlankWindow(
                chrom=interval.chrom,
                start=bounds[0],
                end=bounds[1],
                name=interval.name,
                score=interval.score,
                strand=interval.strand,
                side=side,
                source=source,
            )
        )
    return out


@dataclass
class WindowSet:
    left: List[FlankWindow]
    right: List[FlankWindow]
    skipped_strand: int = 0
    dropped: int = 0


def build_window_set(intervals: Iterable[Interval], num_out: int, num_in: int) -> WindowSet:
    """Build windows for every interval and split them by side."""
    ws = WindowSet(left=[], right=[])
    for i, iv in enumerate(intervals):
        if iv.strand not in ("+", "-"):
            ws.skipped_strand += 1
            continue
        windows = build_windows(iv, num_out, num_in, source=i)
        ws.dropped += 2 - len(windows)
        for w in windows:
            (ws.left if w.side is Side.LEFT else ws.right).append(w)

    if ws.skipped_strand:
        log.warning("skipped %d interval(s) without a +/- strand", ws.skipped_strand)
    log.debug("dropped %d out-of-range window(s)", ws.dropped)
    return ws


def windows_to_frame(windows: Iterable[FlankWindow]) -> pd.DataFrame:
    """BED6 DataFrame of windows, in input order."""
    rows = [
        {"chrom": w.chrom, "start": w.start, "end": w.end, "name": w.name, "score": w.score, "strand": w.strand}
        for w in windows
    ]
    return pd.DataFrame(rows, columns=BED6_COLUMNS)

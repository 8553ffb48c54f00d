import pytest

from flankcomp.io import Interval
from flankcomp.windows import (
    Side,
    build_window_set,
    build_windows,
    genomic_left_bounds,
    genomic_right_bounds,
    windows_to_frame,
)


def iv(start, end, strand="+", chrom="chr1", name="f"):
    return Interval(chrom=chrom, start=start, end=end, name=name, score="0", strand=strand)


def by_side(windows):
    return {w.side: (w.start, w.end) for w in windows}


def test_plus_strand_worked_example():
    ws = by_side(build_windows(iv(1000, 1010), num_out=5, num_in=3))
    assert ws[Side.LEFT] == (995, 1003)
    assert ws[Side.RIGHT] == (1007, 1015)


def test_minus_strand_swaps_sides():
    ws = by_side(build_windows(iv(1000, 1010, "-"), num_out=5, num_in=3))
    assert ws[Side.LEFT] == (1007, 1015)
    assert ws[Side.RIGHT] == (995, 1003)


@pytest.mark.parametrize(
    "start,end,num_out,num_in",
    [(1000, 1010, 5, 3), (100, 111, 5, 20), (50, 51, 10, 10), (2000, 5000, 1000, 1000), (30, 40, 0, 2)],
)
def test_strand_flip_symmetry(start, end, num_out, num_in):
    plus = by_side(build_windows(iv(start, end, "+"), num_out, num_in))
    minus = by_side(build_windows(iv(start, end, "-"), num_out, num_in))
    assert plus.get(Side.LEFT) == minus.get(Side.RIGHT)
    assert plus.get(Side.RIGHT) == minus.get(Side.LEFT)


def test_inner_bounds_clamped_to_midpoint():
    ws = by_side(build_windows(iv(100, 110), num_out=5, num_in=20))
    assert ws[Side.LEFT] == (95, 105)
    assert ws[Side.RIGHT] == (105, 115)


def test_odd_length_windows_do_not_share_middle_base():
    left = genomic_left_bounds(iv(100, 111), num_out=5, num_in=20)
    right = genomic_right_bounds(iv(100, 111), num_out=5, num_in=20)
    assert left == (95, 105)
    assert right == (106, 116)
    assert left[1] <= right[0]


def test_left_window_dropped_when_outer_bound_not_positive():
    ws = by_side(build_windows(iv(5, 50), num_out=5, num_in=3))
    assert Side.LEFT not in ws
    assert ws[Side.RIGHT] == (47, 55)

    # the right window has no outer guard
    ws = by_side(build_windows(iv(5, 50, "-"), num_out=5, num_in=3))
    assert ws == {Side.LEFT: (47, 55)}


def test_empty_windows_dropped():
    assert build_windows(iv(100, 110), num_out=0, num_in=0) == []


def test_unstranded_interval_yields_nothing():
    assert build_windows(iv(100, 110, "."), num_out=5, num_in=3) == []


def test_window_keeps_interval_metadata():
    (w, _) = build_windows(iv(1000, 1010, name="gene1"), 5, 3, source=7)
    assert (w.chrom, w.name, w.score, w.strand, w.source) == ("chr1", "gene1", "0", "+", 7)


def test_build_window_set_splits_sides_and_counts():
    intervals = [iv(1000, 1010), iv(1000, 1010, "-"), iv(3, 20), iv(100, 110, ".")]
    ws = build_window_set(intervals, num_out=5, num_in=3)
    assert [(w.start, w.end) for w in ws.left] == [(995, 1003), (1007, 1015)]
    assert [(w.start, w.end) for w in ws.right] == [(1007, 1015), (995, 1003), (17, 25)]
    assert [w.source for w in ws.right] == [0, 1, 2]
    assert ws.dropped == 1
    assert ws.skipped_strand == 1


def test_windows_to_frame_is_bed6():
    df = windows_to_frame(build_windows(iv(1000, 1010), 5, 3))
    assert list(df.columns) == ["chrom", "start", "end", "name", "score", "strand"]
    assert df[["start", "end"]].values.tolist() == [[995, 1003], [1007, 1015]]

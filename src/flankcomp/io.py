from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Sequence

import pandas as pd
from Bio import SeqIO

from .errors import InputError


BED6_COLUMNS = ["chrom", "start", "end", "name", "score", "strand"]


@dataclass(frozen=True)
class Interval:
    """One BED6 feature.

    start is 0-based, end is exclusive (standard BED).
    """

    chrom: str
    start: int
    end: int
    name: str
    score: str
    strand: str


@dataclass(frozen=True)
class SequenceRecord:
    """A simple sequence record.

    Attributes
    ----------
    name:
        Sequence identifier.
    sequence:
        Sequence string, case preserved.
    """

    name: str
    sequence: str


def read_bed(path: str | Path) -> pd.DataFrame:
    """Read a BED6 file.

    Expected:
        chrom  start  end  name  score  strand

    Extra columns are ignored. `track`/`browser` header lines and `#` comments
    are skipped.
    """
    path = Path(path)
    with path.open() as f:
        lines = [ln for ln in f if ln.strip() and not ln.startswith(("#", "track", "browser"))]
    if not lines:
        raise InputError(f"regions file {path} is empty")

    try:
        df = pd.read_csv(
            io.StringIO("".join(lines)),
            sep="\t",
            header=None,
            dtype=str,
            keep_default_na=False,
        )
    except pd.errors.ParserError as e:
        raise InputError(f"could not parse regions file {path}: {e}") from None

    if df.shape[1] < 6:
        raise InputError(
            f"regions file {path} must have 6 columns (chrom, start, end, name, score, strand); "
            f"found {df.shape[1]}"
        )
    df = df.iloc[:, :6].copy()
    df.columns = BED6_COLUMNS
    try:
        df["start"] = df["start"].astype(int)
        df["end"] = df["end"].astype(int)
    except ValueError as e:
        raise InputError(f"regions file {path} has non-integer coordinates: {e}") from None

    bad = df[df["start"] >= df["end"]]
    if not bad.empty:
        row = bad.iloc[0]
        raise InputError(
            f"regions file {path} has an interval with start >= end: "
            f"{row['chrom']}:{row['start']}-{row['end']}"
        )
    return df.reset_index(drop=True)


def iter_intervals(bed_df: pd.DataFrame) -> Iterator[Interval]:
    for row in bed_df.itertuples(index=False):
        yield Interval(
            chrom=str(row.chrom),
            start=int(row.start),
            end=int(row.end),
            name=str(row.name),
            score=str(row.score),
            strand=str(row.strand),
        )


def write_bed(rows: pd.DataFrame, out_bed: str | Path) -> Path:
    """Write a BED6 DataFrame (BED6_COLUMNS order, no header)."""
    out_bed = Path(out_bed)
    rows.loc[:, BED6_COLUMNS].to_csv(out_bed, sep="\t", header=False, index=False)
    return out_bed


def read_fasta(path: str | Path) -> List[SequenceRecord]:
    """Read a FASTA file into a list of SequenceRecord, preserving order and case.

    Uses BioPython, so it supports multi-line sequences. An empty file yields
    an empty list.
    """
    path = Path(path)
    return [SequenceRecord(name=str(rec.id), sequence=str(rec.seq)) for rec in SeqIO.parse(str(path), "fasta")]


def write_fasta(records: Sequence[SequenceRecord], out_fasta: str | Path) -> Path:
    out_fasta = Path(out_fasta)
    with out_fasta.open("w") as f:
        for r in records:
            f.write(f">{r.name}\n{r.sequence}\n")
    return out_fasta

"""Sequence fetchers: turn flank windows into strand-corrected sequences.

Both backends expose `check()` and `fetch(windows, label)`, and return one
SequenceRecord per window, in window order:

- `PyfaidxFetcher` reads the genome in-process through a pyfaidx index.
- `BedtoolsFetcher` writes the windows to BED and runs `bedtools getfasta -s`.
"""

from __future__ import annotations

import importlib.util
import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from Bio.Seq import reverse_complement
from tqdm import tqdm

from .errors import CollaboratorFailure, DependencyError
from .io import SequenceRecord, read_fasta, write_bed
from .utils import IntermediateFiles, prefixed_path, run_cmd, which
from .windows import FlankWindow, windows_to_frame

try:
    from pyfaidx import Fasta, FastaIndexingError  # type: ignore
except Exception:  # pragma: no cover
    Fasta = None  # type: ignore
    FastaIndexingError = OSError  # type: ignore

log = logging.getLogger(__name__)

FETCHERS = ("pyfaidx", "bedtools")


class PyfaidxFetcher:
    """Fetch window sequences with pyfaidx.

    Genome case is preserved. Windows on an unknown chromosome or running past
    the chromosome end raise CollaboratorFailure.
    """

    name = "pyfaidx"

    def __init__(self, genome_fasta: str | Path):
        self.genome_fasta = Path(genome_fasta)

    def check(self) -> None:
        if importlib.util.find_spec("pyfaidx") is None:
            raise DependencyError("pyfaidx is required for genome access. Install: pip install pyfaidx")

    def fetch(self, windows: Sequence[FlankWindow], label: str = "windows") -> List[SequenceRecord]:
        if Fasta is None:
            raise DependencyError("pyfaidx is required for genome access. Install: pip install pyfaidx")

        try:
            fa = Fasta(str(self.genome_fasta), as_raw=True, sequence_always_upper=False)
        except (OSError, ValueError, FastaIndexingError) as e:
            raise CollaboratorFailure(f"could not index genome {self.genome_fasta}: {e}") from e

        out: List[SequenceRecord] = []
        with fa:
            chroms = set(fa.keys())
            for w in tqdm(windows, desc=f"fetching {label}", unit="window", disable=None, leave=False):
                if w.chrom not in chroms:
                    raise CollaboratorFailure(
                        f"chromosome '{w.chrom}' (window {w.name}) not found in genome {self.genome_fasta}"
                    )
                chrom_len = len(fa[w.chrom])
                if w.start < 0 or w.end > chrom_len:
                    raise CollaboratorFailure(
                        f"window {w.chrom}:{w.start}-{w.end} ({w.name}) is outside chromosome "
                        f"bounds 0-{chrom_len}"
                    )
                seq = str(fa[w.chrom][w.start : w.end])
                if w.strand == "-":
                    seq = reverse_complement(seq)
                out.append(SequenceRecord(name=w.name, sequence=seq))
        return out


class BedtoolsFetcher:
    """Fetch window sequences by running `bedtools getfasta`.

    Requirements
    ------------
    - `bedtools` must be on PATH or in `tool_dir`.

    Scratch files
    -------------
    For each call, writes `<outprefix>_<label>.bed` and `<outprefix>_<label>.fa`
    and registers both with `scratch` so the run removes them afterwards.
    """

    name = "bedtools"

    def __init__(
        self,
        genome_fasta: str | Path,
        outprefix: str | Path,
        scratch: IntermediateFiles,
        tool_dir: Optional[str | Path] = None,
    ):
        self.genome_fasta = Path(genome_fasta)
        self.outprefix = outprefix
        self.scratch = scratch
        self.tool_dir = tool_dir

    def executable(self) -> str:
        exe = which("bedtools", self.tool_dir)
        if exe is None:
            raise DependencyError("bedtools is required on PATH but was not found")
        return exe

    def check(self) -> None:
        self.executable()

    def fetch(self, windows: Sequence[FlankWindow], label: str = "windows") -> List[SequenceRecord]:
        exe = self.executable()
        if not windows:
            return []
        bed_path = self.scratch.add(prefixed_path(self.outprefix, f"_{label}.bed"))
        fasta_path = self.scratch.add(prefixed_path(self.outprefix, f"_{label}.fa"))
        write_bed(windows_to_frame(windows), bed_path)

        cmd = [
            exe,
            "getfasta",
            "-s",
            "-name",
            "-fi",
            str(self.genome_fasta),
            "-bed",
            str(bed_path),
            "-fo",
            str(fasta_path),
        ]
        try:
            run_cmd(cmd, check=True, capture=True)
        except subprocess.CalledProcessError as e:
            raise CollaboratorFailure(f"bedtools getfasta failed (exit {e.returncode}).\nSTDERR:\n{e.stderr}") from e

        records = read_fasta(fasta_path)
        if len(records) != len(windows):
            raise CollaboratorFailure(
                f"bedtools getfasta returned {len(records)} sequences for {len(windows)} {label} windows"
            )
        # Newer bedtools append "::chrom:start-end(strand)" to -name headers.
        return [SequenceRecord(name=w.name, sequence=r.sequence) for w, r in zip(windows, records)]


def make_fetcher(
    kind: str,
    genome_fasta: str | Path,
    outprefix: str | Path = "",
    scratch: Optional[IntermediateFiles] = None,
    tool_dir: Optional[str | Path] = None,
):
    if kind == "pyfaidx":
        return PyfaidxFetcher(genome_fasta)
    if kind == "bedtools":
        return BedtoolsFetcher(genome_fasta, outprefix, scratch or IntermediateFiles(), tool_dir=tool_dir)
    raise ValueError(f"unknown fetcher '{kind}'; choose from {FETCHERS}")

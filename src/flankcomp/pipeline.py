"""End-to-end run: regions -> windows -> sequences -> counts -> table -> plot."""

from __future__ import annotations

import importlib.util
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence

import pandas as pd

from .composition import Composition, aggregate
from .config import FETCH_LABELS, RunConfig
from .errors import DependencyError, InputError
from .fetch import make_fetcher
from .formatting import line_plot_table, logo_annotations, pwm_table, write_perpos, write_pwm
from .io import SequenceRecord, iter_intervals, read_bed, write_fasta
from .utils import IntermediateFiles, ensure_dir, timed
from .windows import FlankWindow, WindowSet, build_window_set

log = logging.getLogger(__name__)

# Imported lazily by the render step so a dependency check can report them.
RENDER_MODULES = ("matplotlib", "logomaker")


@dataclass
class RunResult:
    windows: WindowSet
    composition: Composition
    table: pd.DataFrame
    outputs: List[Path]


def check_dependencies(config: RunConfig) -> None:
    """Raise DependencyError if a plotting library or the fetch backend is missing."""
    for mod in RENDER_MODULES:
        if importlib.util.find_spec(mod) is None:
            raise DependencyError(f"{mod} is required for plotting but is not installed. Install: pip install {mod}")
    make_fetcher(config.fetcher, config.genome or "", tool_dir=config.tool_dir).check()


def merge_sides(
    left: Sequence[FlankWindow],
    left_records: Sequence[SequenceRecord],
    right: Sequence[FlankWindow],
    right_records: Sequence[SequenceRecord],
) -> List[SequenceRecord]:
    """One record per feature: LEFT sequence followed by RIGHT sequence.

    Features keep input order. A feature whose LEFT window was dropped
    contributes its RIGHT sequence only.
    """
    merged: Dict[int, List[str]] = {}
    names: Dict[int, str] = {}
    for windows, records in ((left, left_records), (right, right_records)):
        for w, rec in zip(windows, records):
            merged.setdefault(w.source, []).append(rec.sequence)
            names[w.source] = w.name
    return [SequenceRecord(name=names[i], sequence="".join(merged[i])) for i in sorted(merged)]


def _log_parameters(config: RunConfig) -> None:
    log.info("Regions file: %s", config.regions)
    log.info("Genome file: %s", config.genome)
    log.info("Output file prefix: %s", config.outprefix)
    log.info("Number of bases outside feature: %d", config.num_out)
    log.info("Number of bases inside feature: %d", config.num_in)
    log.info("Plot type: %s", "logo" if config.logo else "line")


def run(config: RunConfig) -> RunResult:
    """Run the whole analysis for a validated config.

    Scratch files are removed whether or not the run succeeds. The plot, and
    optionally the merged sequences and the table, are kept only when the
    plot was written; a failure at any step removes them too.
    """
    _log_parameters(config)
    ensure_dir(Path(config.outprefix).parent)

    with IntermediateFiles() as scratch:
        with timed("Getting intervals for analysis"):
            bed_df = read_bed(config.regions)
            ws = build_window_set(iter_intervals(bed_df), config.num_out, config.num_in)
            log.info("%d LEFT and %d RIGHT windows from %d features", len(ws.left), len(ws.right), len(bed_df))
        if not ws.left and not ws.right:
            raise InputError(f"no flank windows could be built from {config.regions}")

        with timed("Extracting corresponding sequences from genome"):
            fetcher = make_fetcher(
                config.fetcher,
                config.genome,
                outprefix=config.outprefix,
                scratch=scratch,
                tool_dir=config.tool_dir,
            )
            left_records = fetcher.fetch(ws.left, FETCH_LABELS[0])
            right_records = fetcher.fetch(ws.right, FETCH_LABELS[1])

        with timed("Getting per-position base information"):
            comp = aggregate((r.sequence for r in left_records), (r.sequence for r in right_records))

        # Every file written from here on is removed if a later step fails;
        # the kept outputs are released once the plot exists.
        table_path = scratch.add(config.table_path)
        if config.logo:
            table = pwm_table(comp)
            write_pwm(table, table_path)
        else:
            table = line_plot_table(comp)
            write_perpos(table, table_path)

        if config.keep_fasta:
            log.info("Keeping fasta file...")
            write_fasta(
                merge_sides(ws.left, left_records, ws.right, right_records),
                scratch.add(config.sequences_path),
            )

        with timed("Plotting results"):
            from . import render

            scratch.add(config.plot_path)

            if config.logo:
                render.plot_logo(
                    table,
                    config.plot_path,
                    annotations=logo_annotations(config.num_out, config.num_in),
                    title=config.title,
                )
            else:
                render.plot_line(
                    table,
                    config.plot_path,
                    num_out=config.num_out,
                    left_length=comp.left_length,
                    title=config.title,
                    yupper=config.yupper,
                )

        for p in config.outputs():
            scratch.release(p)

    return RunResult(windows=ws, composition=comp, table=table, outputs=config.outputs())

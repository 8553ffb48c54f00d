"""Command line entry point.

Plot the average A/C/G/T composition at positions within and around a set
of strand-oriented regions.

Usage:
  flankcomp [options] -r regions.bed -g genome.fa -o outprefix

  # Logo of 10bp outside / 5bp inside each end
  flankcomp -r tss.bed -g genome.fa -o out/tss -O 10 -I 5 -W

  # Check that everything needed is installed, then exit
  flankcomp -0
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from . import __version__
from .config import DEFAULT_NUM_IN, DEFAULT_NUM_OUT, DEFAULT_YUPPER, RunConfig
from .errors import FlankcompError
from .fetch import FETCHERS
from .pipeline import check_dependencies, run

log = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(
        prog="flankcomp",
        description=(
            "Plot the average A, C, G, T composition at positions within and around a set of "
            "regions of interest. Strand-aware: each region contributes a window at its left "
            "and right end, numOut bases outside and numIn bases inside the region."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    g_req = ap.add_argument_group("Required")
    g_req.add_argument("-r", dest="regions", type=Path, help="a set of BED6 intervals (features)")
    g_req.add_argument("-g", dest="genome", type=Path, help="genome in FASTA format")
    g_req.add_argument("-o", dest="outprefix", type=str, help="prefix for output files")

    g_opt = ap.add_argument_group("Options")
    g_opt.add_argument(
        "-s",
        dest="tool_dir",
        type=Path,
        default=None,
        help="extra directory searched for external programs (bedtools)",
    )
    g_opt.add_argument("-O", dest="num_out", type=int, default=DEFAULT_NUM_OUT, help="bases outside the feature at each end")
    g_opt.add_argument("-I", dest="num_in", type=int, default=DEFAULT_NUM_IN, help="bases inside the feature at each end")
    g_opt.add_argument("-u", dest="yupper", type=float, default=DEFAULT_YUPPER, help="upper limit of the y axis")
    g_opt.add_argument("-t", dest="title", type=str, default="", help="plot title")
    g_opt.add_argument("--fetcher", choices=FETCHERS, default="pyfaidx", help="sequence fetch backend")
    g_opt.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="logging level",
    )

    g_flag = ap.add_argument_group("Flags")
    g_flag.add_argument("-W", dest="logo", action="store_true", help="draw a sequence logo instead of a line plot (needs -I + -O <= 20)")
    g_flag.add_argument("-S", dest="keep_fasta", action="store_true", help="keep sequences, left and right ends joined, as <outprefix>_sequences.fa")
    g_flag.add_argument("--keep-table", action="store_true", help="keep the per-position table (<outprefix>_perpos.txt or _pwm.txt)")
    g_flag.add_argument("-R", dest="overwrite", action="store_true", help="allow overwriting existing output files")
    g_flag.add_argument("-0", dest="check_only", action="store_true", help="check that all dependencies are available, then exit")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def config_from_args(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        regions=args.regions,
        genome=args.genome,
        outprefix=args.outprefix,
        num_out=args.num_out,
        num_in=args.num_in,
        yupper=args.yupper,
        title=args.title,
        tool_dir=args.tool_dir,
        logo=args.logo,
        keep_fasta=args.keep_fasta,
        keep_table=args.keep_table,
        overwrite=args.overwrite,
        check_only=args.check_only,
        fetcher=args.fetcher,
    )


def setup_logging(level: str = "INFO") -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        ap.print_help()
        return 0

    args = ap.parse_args(argv)
    setup_logging(args.log_level)
    config = config_from_args(args)

    try:
        check_dependencies(config)
        if config.check_only:
            log.info("All dependencies found")
            return 0
        config.validate()
        result = run(config)
    except FlankcompError as e:
        log.error("%s", e)
        return 1

    for p in result.outputs:
        log.info("Output: %s", p)
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .errors import ConfigurationError, InputError
from .fetch import FETCHERS
from .formatting import check_logo_size
from .utils import prefixed_path


DEFAULT_NUM_OUT = 1000
DEFAULT_NUM_IN = 1000
DEFAULT_YUPPER = 1.0

# Labels of the LEFT and RIGHT fetch steps; the bedtools backend names its
# scratch files after them.
FETCH_LABELS = ("ltreg", "rtreg")


@dataclass(frozen=True)
class RunConfig:
    """Everything one run needs, as parsed from the command line.

    Attributes
    ----------
    regions, genome, outprefix:
        BED6 features, genome FASTA and output prefix. Optional only so a
        dependency-check-only run can be configured without them.
    num_out, num_in:
        Bases outside / inside the feature sampled at each end.
    yupper, title:
        Line-plot y-axis cap and plot title.
    tool_dir:
        Extra directory searched for external programs.
    logo:
        Draw a sequence logo instead of a line plot.
    keep_fasta:
        Keep the merged per-feature sequences as `<outprefix>_sequences.fa`.
    keep_table:
        Keep the per-position (or PWM) table next to the plot.
    overwrite:
        Allow replacing existing output files.
    check_only:
        Only check dependencies, then stop.
    fetcher:
        Sequence fetch backend, one of FETCHERS.
    """

    regions: Optional[Path] = None
    genome: Optional[Path] = None
    outprefix: Optional[str] = None
    num_out: int = DEFAULT_NUM_OUT
    num_in: int = DEFAULT_NUM_IN
    yupper: float = DEFAULT_YUPPER
    title: str = ""
    tool_dir: Optional[Path] = None
    logo: bool = False
    keep_fasta: bool = False
    keep_table: bool = False
    overwrite: bool = False
    check_only: bool = False
    fetcher: str = "pyfaidx"

    # ---- output paths ----
    @property
    def plot_path(self) -> Path:
        return prefixed_path(self.outprefix, "_plot.png")

    @property
    def table_path(self) -> Path:
        return prefixed_path(self.outprefix, "_pwm.txt" if self.logo else "_perpos.txt")

    @property
    def sequences_path(self) -> Path:
        return prefixed_path(self.outprefix, "_sequences.fa")

    def outputs(self) -> List[Path]:
        """Files this run leaves behind on success."""
        out = [self.plot_path]
        if self.keep_table:
            out.append(self.table_path)
        if self.keep_fasta:
            out.append(self.sequences_path)
        return out

    def scratch_paths(self) -> List[Path]:
        """Files this run writes and deletes again before it finishes."""
        out = [] if self.keep_table else [self.table_path]
        if self.fetcher == "bedtools":
            for label in FETCH_LABELS:
                out.append(prefixed_path(self.outprefix, f"_{label}.bed"))
                out.append(prefixed_path(self.outprefix, f"_{label}.fa"))
        return out

    # ---- validation ----
    def validate_arguments(self) -> None:
        """Required arguments present and numeric options in range."""
        if self.fetcher not in FETCHERS:
            raise ConfigurationError(f"unknown fetcher '{self.fetcher}'; choose from {', '.join(FETCHERS)}")
        if self.regions is None:
            raise ConfigurationError("-r regions is a required argument (a set of BED intervals (features))")
        if self.genome is None:
            raise ConfigurationError("-g genome is a required argument (genome in FASTA format)")
        if not self.outprefix:
            raise ConfigurationError("-o outprefix is a required argument (prefix for output files)")
        if self.num_out < 0:
            raise ConfigurationError(f"-O numOut must be >= 0; got {self.num_out}")
        if self.num_in < 0:
            raise ConfigurationError(f"-I numIn must be >= 0; got {self.num_in}")
        if self.yupper <= 0:
            raise ConfigurationError(f"-u yupper must be > 0; got {self.yupper}")

    def validate_inputs(self) -> None:
        """Input files exist and are non-empty."""
        for label, path in (("regions", self.regions), ("genome", self.genome)):
            if path is None or not Path(path).is_file():
                raise InputError(f"could not open {label} file {path}")
            if Path(path).stat().st_size == 0:
                raise InputError(f"{label} file {path} is empty")

    def validate_constraints(self) -> None:
        if self.logo:
            check_logo_size(self.num_out, self.num_in)

    def validate_outputs(self) -> None:
        """Refuse to replace or delete existing files unless overwrite is set."""
        if self.overwrite:
            return
        existing = [str(p) for p in self.outputs() + self.scratch_paths() if p.exists()]
        if existing:
            raise ConfigurationError(
                f"output file(s) already exist: {', '.join(existing)} (use -R to allow overwriting)"
            )

    def validate(self) -> None:
        self.validate_arguments()
        self.validate_inputs()
        self.validate_constraints()
        self.validate_outputs()

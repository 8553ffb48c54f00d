"""flankcomp

Per-position nucleotide composition around the ends of genomic features.

Each strand-oriented BED interval is cut into a window at its left end and one
at its right end (a fixed number of bases outside and inside the feature).
Sequences for all windows of one side are counted column by column, both sides
are joined on one logical axis, and the A/C/G/T fractions are drawn either as
a line plot or as a sequence logo.

This package focuses on:
- exact, strand-aware window coordinates
- order-independent counting with ragged sequence lengths
- a small, explicit pipeline (see `flankcomp.pipeline.run`)
"""

from importlib.metadata import version as _version

__all__ = ["__version__"]

try:
    __version__ = _version("flankcomp")
except Exception:  # pragma: no cover
    __version__ = "0.0.0"

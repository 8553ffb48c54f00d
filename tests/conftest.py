from __future__ import annotations

from pathlib import Path

import pytest


CHR1 = "ACGT" * 500
# soft-masked stretch and an N block
CHR2 = "ACGTACGTAC" * 20 + "acgtacgtac" * 5 + "N" * 50 + "GGGGCCCCAT" * 20


def _write_fasta(path: Path, seqs: dict, width: int = 60) -> Path:
    with path.open("w") as f:
        for name, seq in seqs.items():
            f.write(f">{name}\n")
            for i in range(0, len(seq), width):
                f.write(seq[i : i + width] + "\n")
    return path


@pytest.fixture
def genome_seqs() -> dict:
    return {"chr1": CHR1, "chr2": CHR2}


@pytest.fixture
def genome(tmp_path: Path, genome_seqs: dict) -> Path:
    return _write_fasta(tmp_path / "genome.fa", genome_seqs)


@pytest.fixture
def regions(tmp_path: Path) -> Path:
    path = tmp_path / "regions.bed"
    path.write_text(
        "chr1\t1000\t1010\tf1\t0\t+\n"
        "chr1\t1200\t1261\tf2\t0\t-\n"
        "chr2\t300\t360\tf3\t.\t+\n"
    )
    return path


@pytest.fixture
def outprefix(tmp_path: Path) -> str:
    return str(tmp_path / "out" / "run")

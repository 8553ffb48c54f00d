import pytest
from Bio.Seq import reverse_complement

from flankcomp.errors import CollaboratorFailure, DependencyError
from flankcomp.fetch import BedtoolsFetcher, PyfaidxFetcher, make_fetcher
from flankcomp.io import SequenceRecord
from flankcomp.pipeline import merge_sides
from flankcomp.utils import IntermediateFiles
from flankcomp.windows import FlankWindow, Side


def win(start, end, strand="+", chrom="chr1", side=Side.LEFT, name="w", source=0):
    return FlankWindow(chrom=chrom, start=start, end=end, name=name, score="0", strand=strand, side=side, source=source)


def test_pyfaidx_fetch_plus_and_minus(genome, genome_seqs):
    fetcher = PyfaidxFetcher(genome)
    recs = fetcher.fetch([win(995, 1003), win(995, 1003, "-", name="m")])
    chr1 = genome_seqs["chr1"]
    assert recs[0] == SequenceRecord("w", chr1[995:1003])
    assert recs[1] == SequenceRecord("m", reverse_complement(chr1[995:1003]))


def test_pyfaidx_fetch_preserves_case(genome, genome_seqs):
    recs = PyfaidxFetcher(genome).fetch([win(195, 205, chrom="chr2")])
    assert recs[0].sequence == genome_seqs["chr2"][195:205]
    assert recs[0].sequence == "CGTACacgta"


def test_pyfaidx_missing_chromosome(genome):
    with pytest.raises(CollaboratorFailure, match="chrX"):
        PyfaidxFetcher(genome).fetch([win(1, 10, chrom="chrX")])


def test_pyfaidx_window_past_chromosome_end(genome):
    with pytest.raises(CollaboratorFailure, match="outside chromosome"):
        PyfaidxFetcher(genome).fetch([win(1990, 2010)])


def test_bedtools_missing_is_dependency_error(tmp_path, genome, monkeypatch):
    monkeypatch.setattr("flankcomp.fetch.which", lambda cmd, extra_dir=None: None)
    fetcher = make_fetcher("bedtools", genome, outprefix=str(tmp_path / "p"), tool_dir=tmp_path)
    assert isinstance(fetcher, BedtoolsFetcher)
    with pytest.raises(DependencyError, match="bedtools"):
        fetcher.check()


def test_bedtools_fetch_reads_back_in_window_order(tmp_path, genome, monkeypatch):
    calls = []

    def fake_run(cmd, **kw):
        calls.append(cmd)
        fo = cmd[cmd.index("-fo") + 1]
        with open(fo, "w") as f:
            f.write(">a::chr1:1-5(+)\nACGT\n>b::chr1:2-6(-)\nTTTT\n")

    monkeypatch.setattr("flankcomp.fetch.which", lambda cmd, extra_dir=None: "/usr/bin/bedtools")
    monkeypatch.setattr("flankcomp.fetch.run_cmd", fake_run)
    with IntermediateFiles() as scratch:
        fetcher = BedtoolsFetcher(genome, str(tmp_path / "p"), scratch)
        recs = fetcher.fetch([win(1, 5, name="a"), win(2, 6, "-", name="b")], "ltreg")
        assert (tmp_path / "p_ltreg.bed").read_text().splitlines()[1] == "chr1\t2\t6\tb\t0\t-"
    assert recs == [SequenceRecord("a", "ACGT"), SequenceRecord("b", "TTTT")]
    assert calls[0][1:4] == ["getfasta", "-s", "-name"]
    assert not (tmp_path / "p_ltreg.bed").exists()
    assert not (tmp_path / "p_ltreg.fa").exists()


def test_bedtools_record_count_mismatch(tmp_path, genome, monkeypatch):
    def fake_run(cmd, **kw):
        with open(cmd[cmd.index("-fo") + 1], "w") as f:
            f.write(">a\nACGT\n")

    monkeypatch.setattr("flankcomp.fetch.which", lambda cmd, extra_dir=None: "/usr/bin/bedtools")
    monkeypatch.setattr("flankcomp.fetch.run_cmd", fake_run)
    fetcher = BedtoolsFetcher(genome, str(tmp_path / "p"), IntermediateFiles())
    with pytest.raises(CollaboratorFailure, match="returned 1 sequences for 2"):
        fetcher.fetch([win(1, 5), win(2, 6)])


def test_merge_sides_pairs_by_feature():
    left = [win(0, 2, side=Side.LEFT, name="f0", source=0), win(0, 2, side=Side.LEFT, name="f2", source=2)]
    right = [win(0, 2, side=Side.RIGHT, name="f0", source=0), win(0, 2, side=Side.RIGHT, name="f1", source=1)]
    merged = merge_sides(
        left,
        [SequenceRecord("f0", "AA"), SequenceRecord("f2", "GG")],
        right,
        [SequenceRecord("f0", "CC"), SequenceRecord("f1", "TT")],
    )
    assert merged == [SequenceRecord("f0", "AACC"), SequenceRecord("f1", "TT"), SequenceRecord("f2", "GG")]

"""Tests for VCFParser and MetricsReader."""

import logging
import math

import pytest

from dartgeno.core.dataset import Ploidy
from dartgeno.core.errors import DomainError
from dartgeno.core.vcf_parser import VCFParser
from dartgeno.io.metrics_reader import MetricsReader
from dartgeno.utils.memory_monitor import MemoryMonitor

from .helpers import write_vcf, write_tsv


@pytest.fixture
def parser():
    logger = logging.getLogger("dartgeno-tests")
    return VCFParser(MemoryMonitor(logger), logger)


SAMPLES = ["S1", "S2", "S3", "S4"]


def _diploid_vcf(tmp_path):
    variants = [
        {
            "id": "A",
            "genotypes": ["0/0", "0/1", "1/1", "./."],
            "dp": [10, 20, 30, "."],
            "info": {"DP": 60, "CallRate": 0.75, "DB": True},
        },
        {
            "id": ".",
            "pos": 250,
            "genotypes": ["1|1", "0|1", "0/0", "0/0"],
            "dp": [4, 4, 4, 4],
        },
        {"id": "C", "genotypes": ["0/0", "0/0", "0/0", "0/0"]},
    ]
    return write_vcf(tmp_path / "in.vcf", SAMPLES, variants)


class TestVCFParser:
    def test_dosages_and_loci(self, parser, tmp_path):
        ds = parser.parse_and_validate(_diploid_vcf(tmp_path))
        assert ds.ploidy is Ploidy.DIPLOID
        assert ds.ind_names == SAMPLES
        assert ds.loc_names == ["A", "1_250", "C"]
        assert ds.matrix.shape == (4, 3)
        assert ds.matrix[:3, 0].tolist() == [0.0, 1.0, 2.0]
        assert math.isnan(ds.matrix[3, 0])
        assert ds.matrix[:, 1].tolist() == [2.0, 1.0, 0.0, 0.0]

    def test_locus_metrics(self, parser, tmp_path):
        ds = parser.parse_and_validate(_diploid_vcf(tmp_path))
        first = ds.loci[0].metrics
        assert first["rdepth"] == pytest.approx(20.0)
        assert first["DP"] == 60.0
        assert first["CallRate"] == pytest.approx(0.75)
        assert "DB" not in first
        assert ds.loci[1].metrics["rdepth"] == pytest.approx(4.0)
        assert "rdepth" not in ds.loci[2].metrics

    def test_default_population(self, parser, tmp_path):
        ds = parser.parse_and_validate(_diploid_vcf(tmp_path))
        assert ds.populations() == ["pop1"]
        assert len(ds.history) == 0

    def test_haploid(self, parser, tmp_path):
        vcf = write_vcf(
            tmp_path / "pa.vcf",
            ["S1", "S2"],
            [{"id": "A", "genotypes": ["0", "1"]}, {"id": "B", "genotypes": ["1", "."]}],
        )
        ds = parser.parse_and_validate(vcf)
        assert ds.ploidy is Ploidy.HAPLOID
        assert ds.matrix[:, 0].tolist() == [0.0, 1.0]

    def test_mixed_ploidy(self, parser, tmp_path):
        vcf = write_vcf(
            tmp_path / "mixed.vcf", ["S1", "S2"], [{"id": "A", "genotypes": ["0/1", "1"]}]
        )
        with pytest.raises(DomainError):
            parser.parse_and_validate(vcf)

    def test_duplicate_ids(self, parser, tmp_path):
        vcf = write_vcf(
            tmp_path / "dup.vcf",
            ["S1", "S2"],
            [
                {"id": "A", "genotypes": ["0/0", "0/1"]},
                {"id": "A", "genotypes": ["0/0", "1/1"]},
            ],
        )
        with pytest.raises(SystemExit):
            parser.parse_and_validate(vcf)

    def test_multiallelic_site(self, parser, tmp_path):
        vcf = write_vcf(
            tmp_path / "multi.vcf",
            ["S1", "S2"],
            [{"id": "A", "alt": "T,G", "genotypes": ["0/1", "0/2"]}],
        )
        with pytest.raises(SystemExit):
            parser.parse_and_validate(vcf)

    def test_ind_metrics(self, parser, tmp_path):
        ind = write_tsv(
            tmp_path / "ind.tsv",
            ["id", "pop", "sex"],
            [["S1", "north", "Female"], ["S2", "north", "Male"],
             ["S3", "south", "Female"], ["S4", "south", "Male"]],
        )
        ds = parser.parse_and_validate(_diploid_vcf(tmp_path), ind_metrics_path=ind)
        assert ds.pop == ["north", "north", "south", "south"]
        assert ds.ind_metric("sex") == ["Female", "Male", "Female", "Male"]

    def test_ind_metrics_missing_sample(self, parser, tmp_path):
        ind = write_tsv(tmp_path / "ind.tsv", ["id", "pop"], [["S1", "north"]])
        with pytest.raises(SystemExit):
            parser.parse_and_validate(_diploid_vcf(tmp_path), ind_metrics_path=ind)

    def test_loc_metrics_merge(self, parser, tmp_path):
        loc = write_tsv(
            tmp_path / "loc.tsv",
            ["id", "rdepth", "AvgPIC"],
            [["A", 12.5, 0.3], ["C", 8, "NA"], ["Z", 1, 1]],
        )
        ds = parser.parse_and_validate(_diploid_vcf(tmp_path), loc_metrics_path=loc)
        assert ds.loci[0].metrics["rdepth"] == 12.5
        assert ds.loci[0].metrics["AvgPIC"] == pytest.approx(0.3)
        assert ds.loci[2].metrics == {"rdepth": 8.0}
        assert ds.loci[1].metrics["rdepth"] == pytest.approx(4.0)


class TestMetricsReader:
    def test_non_numeric_locus_metric(self, tmp_path):
        loc = write_tsv(tmp_path / "loc.tsv", ["id", "rdepth"], [["A", "deep"]])
        with pytest.raises(SystemExit):
            MetricsReader().read_loc_metrics(loc)

    def test_ragged_row(self, tmp_path):
        path = tmp_path / "ind.tsv"
        path.write_text("id\tpop\nS1\tnorth\textra\n")
        with pytest.raises(SystemExit):
            MetricsReader().read_ind_metrics(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.tsv"
        path.write_text("")
        with pytest.raises(SystemExit):
            MetricsReader().read_ind_metrics(path)

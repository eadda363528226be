"""Tests for MonomorphismDetector."""

from dartgeno.core.monomorphism import MonomorphismDetector

from .helpers import make_dataset, assert_synchronized


class TestMonomorphismDetector:
    def test_classify(self):
        ds = make_dataset(
            [
                [None, 1, 0, 2, 0, 1],
                [None, 1, 2, 2, None, 1],
                [None, 1, 0, None, None, 0],
            ],
            pops=["A", "A", "B"],
        )
        mask = MonomorphismDetector().classify(ds)
        assert mask.tolist() == [True, True, False, True, True, False]
        assert len(mask) == ds.n_loc

    def test_haploid(self):
        ds = make_dataset([[0, 1], [0, 0]], pops=["A", "B"], ploidy=1)
        assert MonomorphismDetector().classify(ds).tolist() == [True, False]

    def test_no_individuals_flags_everything(self):
        ds = make_dataset([[0, 1]], pops=["A"]).subset_individuals([False])
        assert MonomorphismDetector().classify(ds).tolist() == [True, True]

    def test_remove_monomorphs(self):
        ds = make_dataset([[0, 0, 1], [0, 2, 1]], pops=["A", "B"], rdepth=[1, 2, 3])
        result = MonomorphismDetector().remove_monomorphs(ds)
        assert result.loc_names == ["L2"]
        assert result.loci[0].metrics["rdepth"] == 2.0
        assert result.history.operations() == ("filter_monomorphs",)
        assert_synchronized(result)
        assert ds.n_loc == 3

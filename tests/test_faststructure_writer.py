"""Tests for FastStructureEncoder."""

import numpy as np
import pytest

from dartgeno.core.dataset import GenotypeDataset, Individual, LocusRecord
from dartgeno.core.errors import DomainError, ValidationError
from dartgeno.io.faststructure_writer import (
    MISSING_CODE,
    N_LEADING_COLUMNS,
    FastStructureEncoder,
)

from .helpers import make_dataset


@pytest.fixture
def dataset():
    return make_dataset(
        [
            [0, 1, 2, None],
            [2, 2, None, 0],
            [1, 0, 0, 1],
        ],
        pops=["A", "B", "A"],
    )


def _fields(line):
    return line.split("\t")


class TestEncoding:
    def test_concrete_example(self):
        ds = make_dataset([[0, 1, 2, None]], pops=["A"])
        lines = FastStructureEncoder().encode(ds)
        assert len(lines) == 2
        assert _fields(lines[0])[N_LEADING_COLUMNS:] == ["1", "1", "2", "-9"]
        assert _fields(lines[1])[N_LEADING_COLUMNS:] == ["1", "2", "2", "-9"]

    def test_output_shape(self, dataset):
        lines = FastStructureEncoder().encode(dataset)
        assert len(lines) == 2 * dataset.n_ind
        for line in lines:
            assert len(_fields(line)) == N_LEADING_COLUMNS + dataset.n_loc

    def test_leading_columns_hold_row_index(self, dataset):
        lines = FastStructureEncoder().encode(dataset)
        for i in range(dataset.n_ind):
            for line in lines[2 * i : 2 * i + 2]:
                assert _fields(line)[:N_LEADING_COLUMNS] == [str(i + 1)] * 6

    def test_rows_follow_individual_order(self, dataset):
        arr = FastStructureEncoder().encode_array(dataset)
        assert arr.shape == (6, N_LEADING_COLUMNS + 4)
        assert arr[2, N_LEADING_COLUMNS:].tolist() == [2, 2, MISSING_CODE, 1]
        assert arr[3, N_LEADING_COLUMNS:].tolist() == [2, 2, MISSING_CODE, 1]
        assert arr[4, N_LEADING_COLUMNS:].tolist() == [1, 1, 1, 1]
        assert arr[5, N_LEADING_COLUMNS:].tolist() == [2, 1, 1, 2]

    def test_no_zero_codes(self, dataset):
        arr = FastStructureEncoder().encode_array(dataset)
        assert set(np.unique(arr[:, N_LEADING_COLUMNS:])) <= {1, 2, MISSING_CODE}

    def test_encode_individual(self):
        block = FastStructureEncoder.encode_individual(np.array([0, 1, 2, np.nan]))
        assert block.tolist() == [[1, 1, 2, -9], [1, 2, 2, -9]]

    def test_zero_loci(self):
        ds = make_dataset([[0], [1]], pops=["A", "B"]).subset_loci([False])
        lines = FastStructureEncoder().encode(ds)
        assert lines == ["1\t1\t1\t1\t1\t1"] * 2 + ["2\t2\t2\t2\t2\t2"] * 2

    def test_progress_does_not_change_output(self, dataset):
        seen = []
        with_progress = FastStructureEncoder(show_progress=True).encode(
            dataset, progress=seen.append
        )
        assert seen == [0, 1, 2]
        assert with_progress == FastStructureEncoder().encode(dataset)


class TestGuards:
    def test_haploid_rejected(self):
        ds = make_dataset([[0, 1]], pops=["A"], ploidy=1)
        with pytest.raises(DomainError):
            FastStructureEncoder().encode(ds)

    def test_haploid_write_creates_no_file(self, tmp_path):
        ds = make_dataset([[0, 1]], pops=["A"], ploidy=1)
        with pytest.raises(DomainError):
            FastStructureEncoder().write(ds, "gl.str", tmp_path)
        assert not (tmp_path / "gl.str").exists()

    def test_desynchronized_dataset_rejected(self):
        # bypass build() to simulate a broken pairing
        broken = GenotypeDataset(
            matrix=np.zeros((1, 2)),
            ploidy=make_dataset([[0]], pops=["A"]).ploidy,
            individuals=(Individual("a", "A"),),
            loci=(LocusRecord("L1"),),
        )
        with pytest.raises(ValidationError):
            FastStructureEncoder().encode(broken)


class TestWrite:
    def test_write_file(self, dataset, tmp_path):
        path = FastStructureEncoder().write(dataset, "out.str", tmp_path / "sub")
        assert path == tmp_path / "sub" / "out.str"
        content = path.read_text()
        assert content.endswith("\n")
        assert content.splitlines() == FastStructureEncoder().encode(dataset)

    def test_write_replaces_existing_file(self, dataset, tmp_path):
        target = tmp_path / "gl.str"
        target.write_text("stale\n" * 100)
        FastStructureEncoder().write(dataset, "gl.str", tmp_path)
        lines = target.read_text().splitlines()
        assert len(lines) == 2 * dataset.n_ind
        assert "stale" not in lines

from pathlib import Path
from typing import Dict, List, Optional, Sequence

from dartgeno.core.dataset import GenotypeDataset, Individual, LocusRecord


def write_vcf(path: Path, samples: List[str], variants: List[Dict]):
    """
    Write a minimal VCF with provided variants.

    Each variant dict must contain keys:
      - id (str)
      - genotypes (List[str]) aligned to samples order
    and may contain:
      - chrom (str), pos (int), ref (str), alt (str)
      - dp (List[int]) per-sample read depth aligned to samples order
      - info (Dict[str, number]) INFO fields declared in the header below
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with_dp = any("dp" in v for v in variants)
    with open(path, "w") as f:
        f.write("##fileformat=VCFv4.2\n")
        f.write("##source=dartgeno-tests\n")
        f.write("##contig=<ID=1>\n")
        f.write('##INFO=<ID=DP,Number=1,Type=Integer,Description="Total depth">\n')
        f.write('##INFO=<ID=CallRate,Number=1,Type=Float,Description="Call rate">\n')
        f.write('##INFO=<ID=DB,Number=0,Type=Flag,Description="dbSNP member">\n')
        f.write('##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">\n')
        f.write('##FORMAT=<ID=DP,Number=1,Type=Integer,Description="Read depth">\n')
        f.write(
            "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\t"
            + "\t".join(samples)
            + "\n"
        )
        for i, v in enumerate(variants):
            info = v.get("info") or {}
            info_field = ";".join(
                k if val is True else f"{k}={val}" for k, val in info.items()
            ) or "."
            line = [
                v.get("chrom", "1"),
                str(v.get("pos", 100 * (i + 1))),
                v["id"],
                v.get("ref", "A"),
                v.get("alt", "T"),
                ".",
                "PASS",
                info_field,
                "GT:DP" if with_dp else "GT",
            ]
            if with_dp:
                dps = v.get("dp") or ["."] * len(samples)
                line += [f"{g}:{d}" for g, d in zip(v["genotypes"], dps)]
            else:
                line += v["genotypes"]
            f.write("\t".join(line) + "\n")
    return path


def write_tsv(path: Path, header: Sequence[str], rows: Sequence[Sequence]):
    path = Path(path)
    with open(path, "w") as f:
        f.write("\t".join(header) + "\n")
        for row in rows:
            f.write("\t".join(str(x) for x in row) + "\n")
    return path


def make_dataset(
    matrix,
    pops: Optional[Sequence[str]] = None,
    ploidy: int = 2,
    rdepth: Optional[Sequence[float]] = None,
    ind_metrics: Optional[Sequence[Dict[str, str]]] = None,
) -> GenotypeDataset:
    """Build a dataset with individuals i1..iN and loci L1..LM."""
    n_ind = len(matrix)
    n_loc = len(matrix[0]) if n_ind else 0
    pops = pops or [None] * n_ind
    ind_metrics = ind_metrics or [{} for _ in range(n_ind)]
    individuals = [
        Individual(f"i{i + 1}", pop=p, metrics=m)
        for i, (p, m) in enumerate(zip(pops, ind_metrics))
    ]
    rdepth = rdepth if rdepth is not None else [10.0] * n_loc
    loci = [LocusRecord(f"L{j + 1}", {"rdepth": float(d)}) for j, d in enumerate(rdepth)]
    return GenotypeDataset.build(matrix, ploidy, individuals, loci)


def assert_synchronized(dataset: GenotypeDataset):
    rows, cols = dataset.matrix.shape
    assert rows == len(dataset.individuals)
    assert cols == len(dataset.loci)

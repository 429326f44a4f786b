import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from germline_burden import AnalysisConfig, Paths

N_CASES = 200
N_CONTROLS = 400


def _patients(age_group, lineage, n, carriers, source="SJ", double=0):
    """``n`` patients, the first ``carriers`` with one variant (``double`` of them with two)."""
    counts = [2] * double + [1] * (carriers - double) + [0] * (n - carriers)
    return pd.DataFrame(
        {"Source": source, "Lineage": lineage, "AgeGroup": age_group, "PLP_Count": counts}
    )


@pytest.fixture(scope="session")
def cohort_frame() -> pd.DataFrame:
    """Raw cohort table as it appears on disk."""
    return pd.concat(
        [
            _patients("Pediatric", "B-ALL", 100, 5),
            _patients("Pediatric", "T-ALL", 60, 4, source="TARGET"),
            _patients("Pediatric", "AML", 50, 10, double=1),
            _patients("Pediatric", "MDS", 40, 12, double=2),
            _patients("Adult", "B-ALL", 8, 1),
            _patients("Adult", "AML", 40, 3, source="TARGET"),
        ],
        ignore_index=True,
    )


@pytest.fixture
def cohort_csv(tmp_path, cohort_frame) -> str:
    path = tmp_path / "cohort.csv"
    cohort_frame.to_csv(path, index=False)
    return str(path)


def _case(i):
    return f"C{i:04d}"


def _control(i):
    return f"K{i:04d}"


def _rows(ids, gene, consequence="stop_gained", af=0.0):
    return [{"Sample": s, "Gene": gene, "Consequence": consequence, "gnomAD_AF": af} for s in ids]


@pytest.fixture(scope="session")
def status_frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Sample": [_case(i) for i in range(N_CASES)] + [_control(i) for i in range(N_CONTROLS)],
            "Status": ["AML"] * N_CASES + ["control"] * N_CONTROLS,
        }
    )


@pytest.fixture(scope="session")
def case_variant_frame() -> pd.DataFrame:
    rows = (
        # established: 30 carriers, C0000 carries two variants
        _rows([_case(i) for i in range(30)], "RUNX1")
        + _rows([_case(0)], "ETV6", "frameshift_variant")
        # candidate: 15 carriers
        + _rows([_case(i) for i in range(30, 45)], "KMT2D", "splice_donor_variant&intron_variant")
        # DNA repair: 6 carriers
        + _rows([_case(i) for i in range(45, 51)], "BRCA2")
        # not qualifying
        + _rows([_case(100)], "RUNX1", "missense_variant")
        + _rows([_case(101)], "GATA2", "stop_gained", af=0.02)
    )
    return pd.DataFrame(rows)


@pytest.fixture(scope="session")
def control_variant_frame() -> pd.DataFrame:
    rows = (
        _rows([_control(i) for i in range(8)], "GATA2")
        + _rows([_control(i) for i in range(8, 18)], "KMT2D", "frameshift_variant")
        + _rows([_control(i) for i in range(18, 23)], "FANCA")
        + _rows([_control(100)], "RUNX1", "stop_gained", af=0.05)
    )
    return pd.DataFrame(rows)


@pytest.fixture(scope="session")
def random_variant_frame() -> pd.DataFrame:
    rows = _rows([_case(i) for i in range(60, 70)], "OR4F5", "frameshift_variant") + _rows(
        [_control(i) for i in range(30, 50)], "TTN"
    )
    return pd.DataFrame(rows)


@pytest.fixture(scope="session")
def gene_frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Gene": ["RUNX1", "ETV6", "GATA2", "KMT2D", "SAMD9"],
            "Inheritance": ["AD", "AD", "AD", "AD", "AR"],
            "Status": ["established", "established", "established", "candidate", "Candidate"],
        }
    )


@pytest.fixture
def burden_paths(
    tmp_path,
    status_frame,
    case_variant_frame,
    control_variant_frame,
    random_variant_frame,
    gene_frame,
) -> Paths:
    status_frame.to_csv(tmp_path / "status.tsv", sep="\t", index=False)
    case_variant_frame.to_csv(tmp_path / "aml_variants.tsv", sep="\t", index=False)
    control_variant_frame.to_csv(tmp_path / "control_variants.tsv", sep="\t", index=False)
    random_variant_frame.to_csv(tmp_path / "random_variants.tsv", sep="\t", index=False)
    gene_frame.to_csv(tmp_path / "genes.csv", index=False)
    return Paths(
        results_path=tmp_path / "results",
        case_variants=tmp_path / "aml_variants.tsv",
        control_variants=tmp_path / "control_variants.tsv",
        random_variants=tmp_path / "random_variants.tsv",
        gene_classification=tmp_path / "genes.csv",
        sample_status=tmp_path / "status.tsv",
    )


@pytest.fixture
def small_config() -> AnalysisConfig:
    return AnalysisConfig(
        seed=7,
        resample_size=20,
        resample_replicates=50,
        burden_resample_size=50,
        slop=10,
        n_boot=2000,
    )


@pytest.fixture
def loaded_burden(burden_paths):
    """Qualifying case+control variants and the normalised status table."""
    from germline_burden import load_sample_status, load_variants, qualifying_variants

    variants = pd.concat(
        [load_variants(burden_paths.case_variants), load_variants(burden_paths.control_variants)],
        ignore_index=True,
    )
    return qualifying_variants(variants), load_sample_status(burden_paths.sample_status)


@pytest.fixture
def established_indicators(loaded_burden):
    from germline_burden import presence_indicators, restrict_to_genes

    variants, status = loaded_burden
    established = restrict_to_genes(variants, ["RUNX1", "ETV6", "GATA2"])
    return presence_indicators(established, status, "established")

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import pandas as pd

from .constants import CANDIDATE, ESTABLISHED, STATUS_ALIASES
from .errors import DataIntegrityError


@dataclass(frozen=True)
class CohortSchema:
    source_col: str = "Source"
    lineage_col: str = "Lineage"
    age_group_col: str = "AgeGroup"
    count_col: str = "PLP_Count"


@dataclass(frozen=True)
class VariantSchema:
    sample_col: str = "Sample"
    gene_col: str = "Gene"
    consequence_col: str = "Consequence"
    af_col: str = "gnomAD_AF"


@dataclass(frozen=True)
class GeneSchema:
    gene_col: str = "Gene"
    inheritance_col: str = "Inheritance"
    status_col: str = "Status"


@dataclass(frozen=True)
class StatusSchema:
    sample_col: str = "Sample"
    status_col: str = "Status"


@dataclass(frozen=True)
class PatientRecord:
    source: str
    lineage: str
    age_group: str
    variant_count: int


@dataclass(frozen=True)
class VariantRecord:
    sample_id: str
    gene: str
    consequence: str
    af: float


@dataclass(frozen=True)
class GeneRecord:
    gene: str
    inheritance: str
    status: str


@dataclass(frozen=True)
class SampleStatusRecord:
    sample_id: str
    status: str


# Alternate headers seen in exported tables
_COHORT_RENAME = {
    "Age Group": "AgeGroup",
    "Age_Group": "AgeGroup",
    "n_PLP": "PLP_Count",
    "PLP": "PLP_Count",
    "GermlineCount": "PLP_Count",
}
_VARIANT_RENAME = {
    "sample_id": "Sample",
    "SampleID": "Sample",
    "SYMBOL": "Gene",
    "gene": "Gene",
    "consequence": "Consequence",
    "AF": "gnomAD_AF",
    "gnomad_AF": "gnomAD_AF",
}
_GENE_RENAME = {
    "SYMBOL": "Gene",
    "gene": "Gene",
    "Mode": "Inheritance",
    "inheritance": "Inheritance",
    "Predisposition": "Status",
}
_STATUS_RENAME = {
    "sample_id": "Sample",
    "SampleID": "Sample",
    "Disease": "Status",
    "status": "Status",
}


def _norm_col(c: object) -> str:
    # strip whitespace; preserve internal chars
    return str(c).strip()


def _norm_cols(df: pd.DataFrame, rename: dict[str, str]) -> pd.DataFrame:
    df = df.copy()
    df.columns = [_norm_col(c) for c in df.columns]
    return df.rename(columns={k: v for k, v in rename.items() if k in df.columns})


def _read_table(path: str | Path) -> pd.DataFrame:
    path = Path(path)
    sep = "\t" if path.suffix.lower() in {".tsv", ".txt"} else ","
    return pd.read_csv(path, sep=sep)


def _require(df: pd.DataFrame, required: list[str], path: Path) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{path} missing required columns: {missing}")


def load_cohort(path: str | Path, schema: CohortSchema = CohortSchema()) -> pd.DataFrame:
    """
    Reads the combined cohort table (one row per patient).

    Expected columns:
      Source, Lineage, AgeGroup, PLP_Count
    Counts must be non-negative integers; missing counts are an error.
    """
    path = Path(path)
    df = _norm_cols(_read_table(path), _COHORT_RENAME)
    _require(
        df,
        [schema.source_col, schema.lineage_col, schema.age_group_col, schema.count_col],
        path,
    )

    for col in (schema.source_col, schema.lineage_col, schema.age_group_col):
        df[col] = df[col].astype(str).str.strip()

    counts = pd.to_numeric(df[schema.count_col], errors="coerce")
    bad = counts.isna() | (counts < 0) | (counts % 1 != 0)
    if bad.any():
        rows = df.index[bad].tolist()
        raise DataIntegrityError(
            f"{path}: invalid {schema.count_col} values in rows {rows[:10]}"
        )
    df[schema.count_col] = counts.astype(int)

    return df.rename(
        columns={
            schema.source_col: "source",
            schema.lineage_col: "lineage",
            schema.age_group_col: "age_group",
            schema.count_col: "variant_count",
        }
    )


def load_variants(path: str | Path, schema: VariantSchema = VariantSchema()) -> pd.DataFrame:
    """
    Reads a variant table (case, control or random-gene control).

    Expected columns:
      Sample, Gene, Consequence, gnomAD_AF
    Missing allele frequencies are read as 0 (absent from the population).
    """
    path = Path(path)
    df = _norm_cols(_read_table(path), _VARIANT_RENAME)
    _require(
        df,
        [schema.sample_col, schema.gene_col, schema.consequence_col, schema.af_col],
        path,
    )

    out = pd.DataFrame(
        {
            "sample_id": df[schema.sample_col].astype(str).str.strip(),
            "gene": df[schema.gene_col].astype(str).str.strip().str.upper(),
            "consequence": df[schema.consequence_col].fillna("").astype(str),
            "af": pd.to_numeric(df[schema.af_col], errors="coerce").fillna(0.0),
        }
    )
    return out


def load_gene_classification(
    path: str | Path, schema: GeneSchema = GeneSchema()
) -> pd.DataFrame:
    """
    Reads the gene classification table.

    Expected columns:
      Gene, Inheritance, Status (established / candidate)
    """
    path = Path(path)
    df = _norm_cols(_read_table(path), _GENE_RENAME)
    _require(df, [schema.gene_col, schema.inheritance_col, schema.status_col], path)

    status = df[schema.status_col].astype(str).str.strip().str.lower()
    unknown = sorted(set(status) - {ESTABLISHED, CANDIDATE})
    if unknown:
        raise ValueError(f"{path}: unknown gene status labels {unknown}")

    out = pd.DataFrame(
        {
            "gene": df[schema.gene_col].astype(str).str.strip().str.upper(),
            "inheritance": df[schema.inheritance_col].fillna("").astype(str).str.strip(),
            "status": status,
        }
    )
    return out.drop_duplicates("gene").reset_index(drop=True)


def load_sample_status(
    path: str | Path, schema: StatusSchema = StatusSchema()
) -> pd.DataFrame:
    """
    Reads the sample -> disease status table.

    Labels are normalised to ``case`` / ``control``. Missing or unrecognised
    labels and duplicated sample ids are data-integrity errors.
    """
    path = Path(path)
    df = _norm_cols(_read_table(path), _STATUS_RENAME)
    _require(df, [schema.sample_col, schema.status_col], path)

    sample_ids = df[schema.sample_col].astype(str).str.strip()
    raw = df[schema.status_col].fillna("").astype(str).str.strip().str.lower()
    status = raw.map(STATUS_ALIASES)

    unlabeled = sample_ids[status.isna()].tolist()
    if unlabeled:
        raise DataIntegrityError(
            f"{path}: {len(unlabeled)} samples without a case/control label: {unlabeled[:10]}"
        )

    dup = sample_ids[sample_ids.duplicated()].unique().tolist()
    if dup:
        raise DataIntegrityError(f"{path}: duplicated sample ids {dup[:10]}")

    return pd.DataFrame({"sample_id": sample_ids, "status": status.astype(str)})


def patient_records(cohort: pd.DataFrame) -> Iterator[PatientRecord]:
    for r in cohort.itertuples(index=False):
        yield PatientRecord(
            source=r.source,
            lineage=r.lineage,
            age_group=r.age_group,
            variant_count=int(r.variant_count),
        )


def variant_records(variants: pd.DataFrame) -> Iterator[VariantRecord]:
    for r in variants.itertuples(index=False):
        yield VariantRecord(
            sample_id=r.sample_id, gene=r.gene, consequence=r.consequence, af=float(r.af)
        )


def gene_records(genes: pd.DataFrame) -> Iterator[GeneRecord]:
    for r in genes.itertuples(index=False):
        yield GeneRecord(gene=r.gene, inheritance=r.inheritance, status=r.status)


def status_records(status: pd.DataFrame) -> Iterator[SampleStatusRecord]:
    for r in status.itertuples(index=False):
        yield SampleStatusRecord(sample_id=r.sample_id, status=r.status)


def write_table(df: pd.DataFrame, out_csv: str | Path) -> Path:
    out_csv = Path(out_csv)
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_csv, index=False)
    return out_csv

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterator

import numpy as np
import pandas as pd

from psmqc.modules.common.file_utils import file_prefix
from psmqc.modules.common.id.idreader import IDReader
from psmqc.modules.psm.constants import UNKNOWN_EVALUE, UNKNOWN_FDR, UNKNOWN_PRIMARY_SCORE
from psmqc.modules.psm.models import PSMRow

# Accepted column names for each PSMRow field, in order of preference
COLUMN_ALIASES = {
    "result_id": ["ResultID", "Result_ID", "PSM_ID"],
    "scan_number": ["Scan", "ScanNum", "scan_number"],
    "charge": ["Charge", "charge"],
    "peptide": ["Peptide", "Sequence", "sequence"],
    "clean_sequence": ["CleanSequence", "Clean_Sequence"],
    "proteins": ["Proteins", "Protein", "accession"],
    "primary_score": ["MSGF_SpecProb", "SpecEValue", "MSGFDB_SpecEValue", "PEP", "PrimaryScore"],
    "e_value": ["EValue", "Evalue", "Expectation"],
    "fdr": ["QValue", "FDR", "EFDR"],
    "cleavage_state": ["CleavageState", "Cleavage_State", "NTT"],
    "missed_cleavages": ["MissedCleavages", "NumMissedCleavages", "Missed_Cleavages"],
    "dataset_id_or_name": ["DatasetID", "Dataset_ID", "Dataset"],
    "rank": ["Rank", "Rank_Score", "Rank_MSGFDB_SpecEValue"],
}

REQUIRED_FIELDS = ["result_id", "scan_number", "peptide"]

# Number of tryptic termini to cleavage state
NTT_CLEAVAGE_STATES = {"2": "full", "1": "partial", "0": "nonspecific"}


def find_column(columns, field: str) -> str | None:
    for alias in COLUMN_ALIASES[field]:
        if alias in columns:
            return alias
    return None


def normalize_cleavage_state(value) -> str:
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return ""
    text = str(value).strip()
    if text.endswith(".0"):
        text = text[:-2]
    return NTT_CLEAVAGE_STATES.get(text, text.lower())


def split_proteins(value) -> list[str]:
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return []
    return [protein.strip() for protein in str(value).split(";") if protein.strip()]


class TsvPSMReader(IDReader):
    """
    Read PSMs from tab-delimited result files (plain or gzipped).

    Score columns are optional; missing scores are set to the "unknown" sentinels.
    A primary score column with non-numeric values yields NaN, and such rows are skipped
    by the aggregator.
    """

    def __init__(self, file_paths, dataset_name: str = ""):
        if isinstance(file_paths, (str, Path)):
            file_paths = [file_paths]
        super().__init__(file_paths)
        self.dataset_name = dataset_name
        self.total_rows = 0
        self.rows_above_rank_one = 0

    def read_dataframe(self, file_path) -> pd.DataFrame:
        self.logger.info(
            "{}: Parsing PSM file {}...".format(datetime.now().strftime("%H:%M:%S"), file_path)
        )
        df = pd.read_csv(file_path, sep="\t", low_memory=False)

        missing = [field for field in REQUIRED_FIELDS if find_column(df.columns, field) is None]
        if missing:
            raise ValueError(
                f"PSM file {file_path} is missing required columns for: {', '.join(missing)}"
            )

        return self.standardize(df)

    def standardize(self, df: pd.DataFrame) -> pd.DataFrame:
        """Rename the recognized columns to PSMRow field names and fill in defaults."""
        renamed = {}
        for field in COLUMN_ALIASES:
            column = find_column(df.columns, field)
            if column is not None:
                renamed[field] = df[column]

        result = pd.DataFrame(renamed)

        defaults = {
            "charge": -1,
            "clean_sequence": "",
            "proteins": "",
            "primary_score": UNKNOWN_PRIMARY_SCORE,
            "e_value": UNKNOWN_EVALUE,
            "fdr": UNKNOWN_FDR,
            "cleavage_state": "",
            "missed_cleavages": 0,
            "dataset_id_or_name": self.dataset_name,
            "rank": 1,
        }
        for field, default in defaults.items():
            if field not in result.columns:
                result[field] = default

        result["primary_score"] = pd.to_numeric(result["primary_score"], errors="coerce")
        result["e_value"] = pd.to_numeric(result["e_value"], errors="coerce").fillna(UNKNOWN_EVALUE)
        result["fdr"] = pd.to_numeric(result["fdr"], errors="coerce").fillna(UNKNOWN_FDR)
        result["missed_cleavages"] = pd.to_numeric(result["missed_cleavages"], errors="coerce").fillna(0).astype(int)
        result["rank"] = pd.to_numeric(result["rank"], errors="coerce").fillna(1).astype(int)
        result["charge"] = pd.to_numeric(result["charge"], errors="coerce").fillna(-1).astype(int)
        result["clean_sequence"] = result["clean_sequence"].fillna("").astype(str)
        result["dataset_id_or_name"] = result["dataset_id_or_name"].fillna(self.dataset_name).astype(str)

        return result

    def read(self, **_kwargs) -> Iterator[PSMRow]:
        self._validate_paths(self.file_paths)

        for file_path in self.file_paths:
            df = self.read_dataframe(file_path)
            self.total_rows += len(df)

            above_rank_one = df["rank"] > 1
            self.rows_above_rank_one += int(above_rank_one.sum())
            df = df[~above_rank_one]

            for record in df.to_dict("records"):
                yield PSMRow(
                    result_id=int(record["result_id"]),
                    peptide=str(record["peptide"]),
                    scan_number=int(record["scan_number"]),
                    clean_sequence=record["clean_sequence"],
                    charge=int(record["charge"]),
                    dataset_id_or_name=record["dataset_id_or_name"],
                    primary_score=float(record["primary_score"]),
                    e_value=float(record["e_value"]),
                    fdr=float(record["fdr"]),
                    proteins=split_proteins(record["proteins"]),
                    cleavage_state=normalize_cleavage_state(record["cleavage_state"]),
                    missed_cleavages=int(record["missed_cleavages"]),
                    rank=int(record["rank"]),
                )

            self.logger.info(
                "{}: Done parsing PSM file {}.".format(datetime.now().strftime("%H:%M:%S"), file_prefix(file_path))
            )

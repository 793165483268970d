"""
Readers for the sequence information files that accompany a PSM file:
result to sequence map, sequence info (mod descriptions) and sequence to protein map
"""

from __future__ import annotations

import pandas as pd

from psmqc.logging import get_logger

log = get_logger("psmqc.modules.common.id.seqinfo")


def _check_columns(df: pd.DataFrame, columns: list[str], file_path) -> None:
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ValueError(f"File {file_path} is missing required columns: {', '.join(missing)}")


def read_result_to_seq_map(file_path) -> dict[int, int]:
    """Keys are result IDs, values are sequence IDs."""
    df = pd.read_csv(file_path, sep="\t")
    _check_columns(df, ["Result_ID", "Unique_Seq_ID"], file_path)

    result_to_seq_map = dict(zip(df["Result_ID"].astype(int), df["Unique_Seq_ID"].astype(int)))
    log.info(f"Loaded {len(result_to_seq_map)} result to sequence mappings from {file_path}")
    return result_to_seq_map


def read_seq_info(file_path) -> dict[int, str]:
    """Keys are sequence IDs, values are mod descriptions (empty for unmodified peptides)."""
    df = pd.read_csv(file_path, sep="\t", dtype={"Mod_Description": str}, keep_default_na=False)
    _check_columns(df, ["Unique_Seq_ID", "Mod_Description"], file_path)

    seq_info = dict(zip(df["Unique_Seq_ID"].astype(int), df["Mod_Description"]))
    log.info(f"Loaded {len(seq_info)} sequences from {file_path}")
    return seq_info


def read_seq_to_protein_map(file_path) -> dict[int, list[str]]:
    """Keys are sequence IDs, values are protein names in file order."""
    df = pd.read_csv(file_path, sep="\t", dtype={"Protein_Name": str})
    _check_columns(df, ["Unique_Seq_ID", "Protein_Name"], file_path)

    df = df.dropna(subset=["Protein_Name"])
    seq_to_protein_map = {
        int(seq_id): group["Protein_Name"].tolist()
        for seq_id, group in df.groupby("Unique_Seq_ID", sort=False)
    }
    log.info(f"Loaded proteins for {len(seq_to_protein_map)} sequences from {file_path}")
    return seq_to_protein_map

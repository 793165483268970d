"""
Detection of dynamic reporter ion mods (TMT / iTRAQ) and per-PSM labeling checks
"""

from __future__ import annotations

from enum import Enum

import pandas as pd

from psmqc.logging import get_logger
from psmqc.modules.psm.models import NormalizedPeptide

log = get_logger("psmqc.modules.psm.reporter_ions")


class ReporterIonType(Enum):
    NONE = 0
    ITRAQ4PLEX = 1
    ITRAQ8PLEX = 2
    # Mod mass shared by 6-plex, 10-plex and 11-plex TMT
    TMT6PLEX = 3
    # Mod mass shared by 16-plex and 18-plex TMT
    TMT16PLEX = 4


# Keys are lowercase; both mass correction tag names and UniMod names are recognized
REPORTER_ION_NAMES = {
    "tmt6tag": ReporterIonType.TMT6PLEX,
    "tmt6plex": ReporterIonType.TMT6PLEX,
    "tmt16tag": ReporterIonType.TMT16PLEX,
    "tmt16plex": ReporterIonType.TMT16PLEX,
    "tmtpro": ReporterIonType.TMT16PLEX,
    "itrac": ReporterIonType.ITRAQ4PLEX,
    "itraq4plex": ReporterIonType.ITRAQ4PLEX,
    "itraq": ReporterIonType.ITRAQ4PLEX,
    "itraq8": ReporterIonType.ITRAQ8PLEX,
    "itraq8plex": ReporterIonType.ITRAQ8PLEX,
}

MOD_SUMMARY_COLUMNS = [
    "Modification_Symbol",
    "Modification_Mass",
    "Target_Residues",
    "Modification_Type",
    "Mass_Correction_Tag",
]


def get_reporter_ion_type(mod_name: str) -> ReporterIonType:
    if not mod_name:
        return ReporterIonType.NONE
    return REPORTER_ION_NAMES.get(mod_name.strip().lower(), ReporterIonType.NONE)


def read_mod_summary(file_path) -> pd.DataFrame:
    """
    Read a tab-delimited mod summary file.

    If the first line does not start with ``Modification_``, the columns are assumed to be in the
    standard order.
    """
    with open(file_path, "r") as f:
        first_line = f.readline()

    if first_line.startswith("Modification_"):
        return pd.read_csv(file_path, sep="\t", dtype=str, keep_default_na=False)

    return pd.read_csv(
        file_path,
        sep="\t",
        header=None,
        names=MOD_SUMMARY_COLUMNS,
        usecols=range(len(MOD_SUMMARY_COLUMNS)),
        dtype=str,
        keep_default_na=False,
    )


def detect_dynamic_reporter_ion(mod_summary: pd.DataFrame) -> tuple[str, ReporterIonType] | None:
    """
    Find the first dynamic mod in a mod summary table that is a reporter ion tag.

    Returns:
        (mod name, reporter ion type), or None if the search did not use a dynamic reporter ion mod
    """
    if mod_summary is None or mod_summary.empty:
        return None

    missing = [col for col in ["Modification_Type", "Mass_Correction_Tag"] if col not in mod_summary.columns]
    if missing:
        raise ValueError(f"Mod summary is missing required columns: {', '.join(missing)}")

    dynamic_mods = mod_summary[mod_summary["Modification_Type"].astype(str).str.strip() == "D"]

    detected = None
    for mass_correction_tag in dynamic_mods["Mass_Correction_Tag"].astype(str).str.strip():
        reporter_ion_type = get_reporter_ion_type(mass_correction_tag)
        if reporter_ion_type == ReporterIonType.NONE:
            continue

        if detected is None:
            detected = (mass_correction_tag, reporter_ion_type)
            continue

        if detected[1] != reporter_ion_type:
            log.warning(
                f"Mod summary has a mix of reporter ion types: {detected[1].name} and {reporter_ion_type.name}"
            )

        if detected[0] != mass_correction_tag:
            log.warning(
                f"Mod summary has a mix of reporter ion mod names: {detected[0]} and {mass_correction_tag}"
            )

    return detected


def validate_reporter_ion_ptms(
    peptide: NormalizedPeptide, reporter_ion_name: str, reporter_ion_type: ReporterIonType
) -> tuple[bool, bool]:
    """
    Check whether a peptide is missing the reporter ion at the N terminus or on a lysine.

    Mod positions are 1-based residue numbers, as in mod descriptions.

    Returns:
        (missing N-terminal reporter ion, missing any reporter ion)
    """
    if reporter_ion_type == ReporterIonType.NONE:
        raise ValueError("Invalid reporter ion type encountered in validate_reporter_ion_ptms")

    sequence = peptide.clean_sequence
    labeled_n_terminus = False
    labeled_lysine_count = 0

    for mod_name, residue_number in peptide.modifications:
        if mod_name.lower() != reporter_ion_name.lower():
            continue

        if residue_number == 1:
            labeled_n_terminus = True

        if 1 <= residue_number <= len(sequence) and sequence[residue_number - 1] == "K":
            labeled_lysine_count += 1

    lysine_count = sequence.count("K")
    if sequence.startswith("K"):
        # An N-terminal lysine needs two tags, listed as two mods on residue 1
        lysine_count += 1

    missing_n_term = not labeled_n_terminus
    missing_any = missing_n_term or labeled_lysine_count < lysine_count

    return missing_n_term, missing_any

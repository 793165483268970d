"""
Reduce a filtered view to a StatsRecord
"""

from __future__ import annotations

from psmqc.logging import get_logger
from psmqc.modules.common.statistics_utils import percent, safe_ratio
from psmqc.modules.psm.models import FilteredView, StatsRecord, UniqueSeqSnapshot

log = get_logger("psmqc.modules.psm.stats")


def add_update_unique_sequence(
    unique_sequences: dict[int, UniqueSeqSnapshot], seq_id: int, snapshot: UniqueSeqSnapshot
) -> None:
    existing = unique_sequences.get(seq_id)
    unique_sequences[seq_id] = snapshot if existing is None else existing.merge(snapshot)


def compute_missed_cleavage_ratio(unique_sequences: dict[int, UniqueSeqSnapshot]) -> float:
    missed_cleavages = sum(1 for item in unique_sequences.values() if item.missed_cleavage)
    return safe_ratio(missed_cleavages, len(unique_sequences))


def compute_missing_reporter_ion_percent(view: FilteredView) -> tuple[float, float]:
    """
    Percent of filter-passing PSMs missing the N-terminal reporter ion, and missing any reporter ion.
    """
    passing = 0
    missing_n_term = 0
    missing_any = 0

    for identity in view.values():
        for observation in identity.observations:
            if not observation.passes_filter:
                continue
            passing += 1
            if observation.missing_n_term_reporter_ion:
                missing_n_term += 1
            if observation.missing_reporter_ion:
                missing_any += 1

    return percent(missing_n_term, passing), percent(missing_any, passing)


def tabulate_stats(
    view: FilteredView,
    seq_to_protein_map: dict[int, list[str]] | None = None,
    compute_reporter_ions: bool = False,
) -> StatsRecord:
    """
    Count PSMs, unique peptides and proteins, and peptide categories in a filtered view.

    Args:
        view: filtered identities (keys are sequence IDs)
        seq_to_protein_map: sequence ID to protein names; identities not in the map are
            attributed to their first protein
        compute_reporter_ions: whether to compute the missing reporter ion percentages
    """
    seq_to_protein_map = seq_to_protein_map or {}

    unique_sequences: dict[int, UniqueSeqSnapshot] = {}
    unique_phosphopeptides: dict[int, UniqueSeqSnapshot] = {}
    unique_acetyl_peptides: dict[int, UniqueSeqSnapshot] = {}
    unique_ubiquitin_peptides: dict[int, UniqueSeqSnapshot] = {}

    # Keys are protein names, values are observation counts
    unique_proteins: dict[str, int] = {}

    for seq_id, identity in view.items():
        obs_count = identity.passing_count
        if obs_count == 0:
            continue

        snapshot = identity.snapshot(obs_count)

        add_update_unique_sequence(unique_sequences, seq_id, snapshot)

        if identity.phosphopeptide:
            add_update_unique_sequence(unique_phosphopeptides, seq_id, snapshot)

        if identity.acetylated:
            add_update_unique_sequence(unique_acetyl_peptides, seq_id, snapshot)

        if identity.ubiquitinated:
            add_update_unique_sequence(unique_ubiquitin_peptides, seq_id, snapshot)

        proteins = seq_to_protein_map.get(seq_id) or [identity.protein]
        for protein in proteins:
            unique_proteins[protein] = unique_proteins.get(protein, 0) + obs_count

    if compute_reporter_ions:
        percent_missing_n_term, percent_missing_any = compute_missing_reporter_ion_percent(view)
    else:
        percent_missing_n_term, percent_missing_any = 0.0, 0.0

    record = StatsRecord(
        total_psms=sum(item.observation_count for item in unique_sequences.values()),
        unique_peptide_count=len(unique_sequences),
        unique_protein_count=len(unique_proteins),
        unique_phosphopeptide_count=len(unique_phosphopeptides),
        unique_phosphopeptides_c_term_k=sum(1 for item in unique_phosphopeptides.values() if item.c_term_k),
        unique_phosphopeptides_c_term_r=sum(1 for item in unique_phosphopeptides.values() if item.c_term_r),
        keratin_peptides=sum(1 for item in unique_sequences.values() if item.keratin),
        trypsin_peptides=sum(1 for item in unique_sequences.values() if item.trypsin),
        tryptic_peptides=sum(1 for item in unique_sequences.values() if item.tryptic),
        missed_cleavage_ratio=compute_missed_cleavage_ratio(unique_sequences),
        missed_cleavage_ratio_phospho=compute_missed_cleavage_ratio(unique_phosphopeptides),
        acetyl_peptides=len(unique_acetyl_peptides),
        ubiquitin_peptides=len(unique_ubiquitin_peptides),
        percent_psms_missing_n_term_reporter_ion=percent_missing_n_term,
        percent_psms_missing_reporter_ion=percent_missing_any,
    )

    log.debug(
        f"Tabulated {record.total_psms} PSMs, {record.unique_peptide_count} peptides, "
        f"{record.unique_protein_count} proteins"
    )
    return record

"""
Collapse the PSM stream into one AggregatedIdentity per normalized peptide
"""

from __future__ import annotations

import math
from typing import Iterable

from psmqc.logging import get_logger
from psmqc.modules.psm.constants import (
    ACETYL_MOD_NAMES,
    KERATIN_REGEX,
    MISSED_CLEAVAGE_REGEX,
    PHOSPHO_MOD_NAMES,
    TRYPSIN_REGEX,
    TRYPTIC_CLEAVAGE_STATES,
    UBIQUITIN_MOD_NAMES,
    UNKNOWN_FDR,
    UNKNOWN_SEQUENCE_ID,
)
from psmqc.modules.psm.identity import IdentityResolver
from psmqc.modules.psm.models import AggregatedIdentity, NormalizedPeptide, PSMObservation, PSMRow
from psmqc.modules.psm.peptide import normalize_sequence, normalize_sequence_from_descriptor
from psmqc.modules.psm.reporter_ions import ReporterIonType, validate_reporter_ion_ptms

log = get_logger("psmqc.modules.psm.aggregator")


def classify_modifications(peptide: NormalizedPeptide) -> tuple[bool, bool, bool]:
    """
    Return (phosphopeptide, acetylated, ubiquitinated) for a normalized peptide.

    Only the first mod that belongs to one of the three categories is used, so a peptide
    with both a phospho and an acetyl mod is flagged for whichever comes first.
    """
    for mod_name, _ in peptide.modifications:
        name = mod_name.lower()
        if name in PHOSPHO_MOD_NAMES:
            return True, False, False
        if name in ACETYL_MOD_NAMES:
            return False, True, False
        if name in UBIQUITIN_MOD_NAMES:
            return False, False, True
    return False, False, False


def any_protein_matches(proteins: Iterable[str], pattern) -> bool:
    for protein in proteins:
        if pattern.search(protein):
            return True
    return False


def has_missed_cleavage(clean_sequence: str, missed_cleavages: int) -> bool:
    regex_match = MISSED_CLEAVAGE_REGEX.search(clean_sequence) is not None

    if missed_cleavages > 0:
        if not regex_match:
            log.debug(
                f"NumMissedCleavages is {missed_cleavages} but {clean_sequence} does not match the "
                f"missed cleavage pattern"
            )
        return True

    if regex_match:
        log.debug(
            f"NumMissedCleavages is zero but {clean_sequence} matches the missed cleavage pattern"
        )
        return True

    return False


class PSMAggregator:
    """
    Normalize each PSM, resolve it to a sequence ID and accumulate its observations.

    Args:
        result_to_seq_map: result ID to sequence ID (may be empty)
        seq_mod_descriptions: sequence ID to mod description (may be empty); when available,
            peptides are normalized from the mod description instead of the mod symbols
        dynamic_reporter_ion: (mod name, ReporterIonType) if the search used a dynamic reporter ion mod
    """

    def __init__(
        self,
        result_to_seq_map: dict[int, int] | None = None,
        seq_mod_descriptions: dict[int, str] | None = None,
        dynamic_reporter_ion: tuple[str, ReporterIonType] | None = None,
    ):
        self.result_to_seq_map = result_to_seq_map or {}
        self.seq_mod_descriptions = seq_mod_descriptions or {}
        self.dynamic_reporter_ion = dynamic_reporter_ion

        self.resolver = IdentityResolver()

        # Keys are sequence IDs
        self.identities: dict[int, AggregatedIdentity] = {}

        self.rows_read = 0
        self.rows_skipped = 0

    @property
    def sequence_info_available(self) -> bool:
        return bool(self.seq_mod_descriptions) and bool(self.result_to_seq_map)

    def add_all(self, rows: Iterable[PSMRow]) -> dict[int, AggregatedIdentity]:
        for row in rows:
            self.add(row)

        log.info(
            f"Aggregated {self.rows_read} PSMs into {len(self.identities)} normalized peptides "
            f"({self.rows_skipped} skipped)"
        )
        return self.identities

    def normalize(self, row: PSMRow) -> tuple[NormalizedPeptide, int]:
        """Return the normalized peptide for a row and the sequence ID supplied for it, if any."""
        seq_id = UNKNOWN_SEQUENCE_ID

        if self.sequence_info_available:
            seq_id = self.result_to_seq_map.get(row.result_id, UNKNOWN_SEQUENCE_ID)
            clean_sequence = row.clean_sequence or normalize_sequence(row.peptide).clean_sequence

            if seq_id == UNKNOWN_SEQUENCE_ID:
                # Results already processed for this scan are not listed in the result to sequence map
                seq_id = self.resolver.first_known_id(clean_sequence)

            if seq_id != UNKNOWN_SEQUENCE_ID and seq_id in self.seq_mod_descriptions:
                peptide = normalize_sequence_from_descriptor(
                    clean_sequence, self.seq_mod_descriptions[seq_id], seq_id
                )
                return peptide, seq_id

        return normalize_sequence(row.peptide, seq_id), seq_id

    def add(self, row: PSMRow) -> None:
        self.rows_read += 1

        if row.primary_score is None or math.isnan(row.primary_score):
            self.rows_skipped += 1
            log.debug(f"Skipping ResultID {row.result_id}: score is not numeric")
            return

        peptide, seq_id = self.normalize(row)

        if not peptide.clean_sequence:
            self.rows_skipped += 1
            log.warning(f"Skipping ResultID {row.result_id}: empty peptide sequence '{row.peptide}'")
            return

        normalized_seq_id = self.resolver.find(peptide)

        if normalized_seq_id != UNKNOWN_SEQUENCE_ID:
            self._merge_observation(self.identities[normalized_seq_id], row, peptide)
            return

        # New normalized peptide; without a sequence ID from the result to sequence map, use the result ID
        if seq_id == UNKNOWN_SEQUENCE_ID:
            seq_id = row.result_id

        self.resolver.register(peptide, seq_id)

        identity = self._new_identity(row, peptide, seq_id)

        if seq_id in self.identities:
            self.rows_skipped += 1
            log.warning(f"Duplicate key, seqID={seq_id}; skipping PSM with ResultID={row.result_id}")
            return

        self.identities[seq_id] = identity

    def _new_observation(self, row: PSMRow, peptide: NormalizedPeptide) -> PSMObservation:
        observation = PSMObservation(
            dataset_id_or_name=row.dataset_id_or_name,
            scan_number=row.scan_number,
            fdr=row.fdr,
            primary_score=row.primary_score,
            e_value=row.e_value,
        )

        if self.dynamic_reporter_ion is not None:
            name, reporter_ion_type = self.dynamic_reporter_ion
            (
                observation.missing_n_term_reporter_ion,
                observation.missing_reporter_ion,
            ) = validate_reporter_ion_ptms(peptide, name, reporter_ion_type)

        return observation

    def _merge_observation(self, identity: AggregatedIdentity, row: PSMRow, peptide: NormalizedPeptide) -> None:
        observation = identity.find_observation(row.dataset_id_or_name, row.scan_number)

        if observation is None:
            identity.add_observation(self._new_observation(row, peptide))
            return

        # Scan already stored; keep the best scores
        if row.fdr > UNKNOWN_FDR and row.fdr < observation.fdr:
            observation.fdr = row.fdr

        if row.primary_score < observation.primary_score:
            observation.primary_score = row.primary_score

        if row.e_value < observation.e_value:
            observation.e_value = row.e_value

    def _new_identity(self, row: PSMRow, peptide: NormalizedPeptide, seq_id: int) -> AggregatedIdentity:
        last_residue = peptide.clean_sequence[-1]
        phosphopeptide, acetylated, ubiquitinated = classify_modifications(peptide)

        identity = AggregatedIdentity(
            protein=row.protein_first,
            seq_id_first=seq_id,
            c_term_k=last_residue == "K",
            c_term_r=last_residue == "R",
            missed_cleavage=has_missed_cleavage(peptide.clean_sequence, row.missed_cleavages),
            keratin=any_protein_matches(row.proteins, KERATIN_REGEX),
            trypsin=any_protein_matches(row.proteins, TRYPSIN_REGEX),
            tryptic=(row.cleavage_state or "").lower() in TRYPTIC_CLEAVAGE_STATES,
            phosphopeptide=phosphopeptide,
            acetylated=acetylated,
            ubiquitinated=ubiquitinated,
        )
        identity.add_observation(self._new_observation(row, peptide))
        return identity

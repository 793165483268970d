"""
Match normalized peptides against the peptides seen so far in a run
"""

from __future__ import annotations

from psmqc.modules.psm.constants import UNKNOWN_SEQUENCE_ID
from psmqc.modules.psm.models import NormalizedPeptide


class IdentityResolver:
    """
    Track normalized peptides by clean sequence and resolve new peptides to existing sequence IDs.

    Two peptides are considered the same identity when they have the same clean sequence, the same
    mod names in the same order, and each mod is on the same residue or one residue apart.
    For example, LS*SPATLNSR and LSS*PATLNSR are equivalent, while P#EPT*IDES, PEP#T*IDES and
    P#EPTIDES* are all different.
    """

    def __init__(self):
        # Keys are clean sequences; stored variants keep only their mods and sequence ID
        self._variants: dict[str, list[NormalizedPeptide]] = {}

    def __len__(self):
        return sum(len(variants) for variants in self._variants.values())

    def __contains__(self, clean_sequence):
        return clean_sequence in self._variants

    def find(self, peptide: NormalizedPeptide) -> int:
        """
        Return the sequence ID of the first stored variant that matches ``peptide``,
        or UNKNOWN_SEQUENCE_ID if none does.
        """
        candidates = self._variants.get(peptide.clean_sequence)
        if candidates is None:
            return UNKNOWN_SEQUENCE_ID

        for candidate in candidates:
            if peptide.mod_count == 0 and candidate.mod_count == 0:
                return candidate.sequence_id

            if peptide.mod_count != candidate.mod_count:
                continue

            residue_match_count = 0
            for (new_name, new_position), (name, position) in zip(
                peptide.modifications, candidate.modifications
            ):
                if new_name != name:
                    break

                if abs(new_position - position) <= 1:
                    residue_match_count += 1

            if residue_match_count == candidate.mod_count:
                return candidate.sequence_id

        return UNKNOWN_SEQUENCE_ID

    def register(self, peptide: NormalizedPeptide, seq_id: int) -> None:
        """Store a new variant for the peptide's clean sequence under ``seq_id``."""
        variant = NormalizedPeptide("", peptide.modifications, seq_id)
        self._variants.setdefault(peptide.clean_sequence, []).append(variant)

    def first_known_id(self, clean_sequence: str) -> int:
        """Return the first registered sequence ID for ``clean_sequence``, if any."""
        for variant in self._variants.get(clean_sequence, []):
            if variant.sequence_id != UNKNOWN_SEQUENCE_ID:
                return variant.sequence_id
        return UNKNOWN_SEQUENCE_ID

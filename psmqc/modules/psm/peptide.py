"""
Convert modified peptide representations into NormalizedPeptide instances
"""

from __future__ import annotations

from psmqc.modules.common.exceptions import EmptyModificationNameError
from psmqc.modules.psm.constants import UNKNOWN_SEQUENCE_ID
from psmqc.modules.psm.models import NormalizedPeptide


def split_prefix_and_suffix(sequence: str) -> tuple[str, str, str]:
    """
    Split a sequence like ``K.PEPT*IDE.R`` into its primary sequence and flanking residues.

    Returns:
        tuple: (primary sequence, prefix residue, suffix residue); the residues are empty
        strings when the sequence has no flanking residues
    """
    sequence = sequence.strip()
    if len(sequence) >= 4 and sequence[1] == "." and sequence[-2] == ".":
        return sequence[2:-2], sequence[0], sequence[-1]
    return sequence, "", ""


def is_letter_a_to_z(char: str) -> bool:
    return "A" <= char <= "Z" or "a" <= char <= "z"


def normalize_sequence(sequence_with_mods: str, seq_id: int = UNKNOWN_SEQUENCE_ID) -> NormalizedPeptide:
    """
    Parse a sequence with mod symbols, e.g. ``LS*SPATLNSR``.

    Each non-letter character becomes a modification whose position is the number of residues
    seen before it (0-based index of the residue that follows the symbol).
    """
    primary_sequence, _, _ = split_prefix_and_suffix(sequence_with_mods)

    residues = []
    modifications = []
    for char in primary_sequence:
        if is_letter_a_to_z(char):
            residues.append(char)
        else:
            modifications.append((char, len(residues)))

    return NormalizedPeptide("".join(residues), tuple(modifications), seq_id)


def parse_mod_description(mod_description: str, seq_id: int = UNKNOWN_SEQUENCE_ID) -> list[tuple[str, int]]:
    """
    Parse a mod description like ``Phosph:3,Oxidation:7,Acetyl``.

    Positions are 1-based residue numbers; a missing or unparseable position becomes 0.

    Raises:
        EmptyModificationNameError: if a descriptor has no mod name
    """
    modifications = []
    if mod_description is None or not mod_description.strip():
        return modifications

    for descriptor in mod_description.split(","):
        colon_index = descriptor.find(":")
        residue_number = 0

        if colon_index > 0:
            mod_name = descriptor[:colon_index]
            try:
                residue_number = int(descriptor[colon_index + 1:].strip())
            except ValueError:
                residue_number = 0
        else:
            mod_name = descriptor

        if not mod_name.strip():
            raise EmptyModificationNameError(seq_id, mod_description)

        modifications.append((mod_name, residue_number))

    return modifications


def normalize_sequence_from_descriptor(
    clean_sequence: str, mod_description: str, seq_id: int = UNKNOWN_SEQUENCE_ID
) -> NormalizedPeptide:
    """Build a NormalizedPeptide from a clean sequence and its mod description."""
    modifications = parse_mod_description(mod_description, seq_id)
    residues = "".join(char for char in clean_sequence if is_letter_a_to_z(char))
    return NormalizedPeptide(residues, tuple(modifications), seq_id)

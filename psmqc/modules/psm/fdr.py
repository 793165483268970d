"""
FDR for aggregated identities, either taken from the search engine or estimated from decoy proteins
"""

from __future__ import annotations

import pandas as pd

from psmqc.logging import get_logger
from psmqc.modules.common.exceptions import MissingScoreDataError, NoDecoyProteinsError
from psmqc.modules.psm.constants import (
    DECOY_PREFIXES,
    DECOY_SUFFIXES,
    MIN_KNOWN_FDR_FRACTION,
    UNKNOWN_EVALUE,
    UNKNOWN_FDR,
    UNKNOWN_PRIMARY_SCORE,
)
from psmqc.modules.psm.models import AggregatedIdentity

log = get_logger("psmqc.modules.psm.fdr")


def is_decoy_protein(protein: str) -> bool:
    """
    Decoy naming conventions:
        reversed_%, scrambled_%  (reversed / scrambled proteins)
        %:reversed               (X!Tandem)
        xxx.%                    (Inspect)
        rev_%                    (MSGFDB)
        xxx_%                    (MS-GF+)
    """
    name = (protein or "").lower()
    return name.startswith(DECOY_PREFIXES) or name.endswith(DECOY_SUFFIXES)


def build_score_list(identities: dict[int, AggregatedIdentity]) -> tuple[list[tuple[int, float]], bool]:
    """
    Return (sequence ID, score) pairs, using the best SpecEValue / PEP when known and the best
    E-value otherwise, plus whether any score is plausible.
    """
    scores = []
    valid_score = False

    for seq_id, identity in identities.items():
        best_primary_score = identity.best_primary_score
        if best_primary_score < UNKNOWN_PRIMARY_SCORE:
            scores.append((seq_id, best_primary_score))
            if best_primary_score < 1:
                valid_score = True
        else:
            best_e_value = identity.best_e_value
            scores.append((seq_id, best_e_value))
            if best_e_value < UNKNOWN_EVALUE:
                valid_score = True

    return scores, valid_score


def compute_decoy_fdr(scores: list[tuple[int, float]], proteins: dict[int, str]) -> tuple[dict[int, float], int]:
    """
    Step through the scores in ascending order, computing FDR = #decoy / #forward for each entry.

    Entries seen before the first forward protein get the FDR of the first forward entry.
    Entries are left out of the result if no forward protein is ever seen.

    Returns:
        tuple: (FDR by sequence ID, number of decoy entries)
    """
    if not scores:
        return {}, 0

    df = pd.DataFrame(scores, columns=["seq_id", "score"])
    df = df.sort_values("score", kind="stable")
    df["decoy"] = df["seq_id"].map(lambda seq_id: is_decoy_protein(proteins[seq_id]))

    decoy_count = df["decoy"].cumsum()
    forward_count = (~df["decoy"]).cumsum()

    df["fdr"] = (decoy_count / forward_count).where(forward_count > 0)
    df["fdr"] = df["fdr"].bfill()
    df = df.dropna(subset=["fdr"])

    fdr_by_seq_id = dict(zip(df["seq_id"].astype(int), df["fdr"].astype(float)))

    return fdr_by_seq_id, int(decoy_count.iloc[-1])


def known_fdr_fallback(
    identities: dict[int, AggregatedIdentity],
    known_fdrs: dict[int, float],
    error: type[MissingScoreDataError] | type[NoDecoyProteinsError],
) -> dict[int, float]:
    """
    Use the search engine FDRs when enough identities have one.

    Identities without a known FDR are assigned an FDR of 1, so any threshold below 1 removes them.
    """
    if len(known_fdrs) / len(identities) >= MIN_KNOWN_FDR_FRACTION:
        log.info(
            f"{len(known_fdrs)} of {len(identities)} normalized peptides have an FDR; using those values for filtering"
        )
        return {seq_id: known_fdrs.get(seq_id, 1.0) for seq_id in identities}

    raise error(f"Only {len(known_fdrs)} of {len(identities)} normalized peptides have a known FDR.")


def estimate_fdr(identities: dict[int, AggregatedIdentity]) -> dict[int, float]:
    """
    Determine the FDR of each identity.

    If every identity has a known FDR, those values are used. Otherwise the FDR is computed
    as #decoy / #forward after sorting by score.

    Returns:
        dict: FDR by sequence ID; decoy identities are left out when
        no forward protein is found

    Raises:
        MissingScoreDataError: no scores or E-values and too few identities with a known FDR
        NoDecoyProteinsError: no decoy proteins and too few identities with a known FDR
    """
    known_fdrs = {}
    for seq_id, identity in identities.items():
        best_fdr = identity.best_fdr
        if best_fdr > UNKNOWN_FDR:
            known_fdrs[seq_id] = best_fdr

    if len(known_fdrs) == len(identities):
        return known_fdrs

    scores, valid_score = build_score_list(identities)

    if not valid_score:
        return known_fdr_fallback(identities, known_fdrs, MissingScoreDataError)

    proteins = {seq_id: identity.protein for seq_id, identity in identities.items()}
    fdr_by_seq_id, decoy_count = compute_decoy_fdr(scores, proteins)

    if decoy_count == 0:
        return known_fdr_fallback(identities, known_fdrs, NoDecoyProteinsError)

    log.debug(f"Computed decoy-based FDR for {len(fdr_by_seq_id)} normalized peptides ({decoy_count} decoys)")

    return fdr_by_seq_id


def filter_identities_by_fdr(
    identities: dict[int, AggregatedIdentity], fdr_threshold: float
) -> dict[int, AggregatedIdentity]:
    """Return a new mapping without the identities whose FDR is larger than ``fdr_threshold``."""
    fdr_by_seq_id = estimate_fdr(identities)

    return {
        seq_id: identity
        for seq_id, identity in identities.items()
        if fdr_by_seq_id.get(seq_id, UNKNOWN_FDR) <= fdr_threshold
    }

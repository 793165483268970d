"""
Value types used while summarizing PSM results
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from psmqc.modules.psm.constants import (
    UNKNOWN_EVALUE,
    UNKNOWN_FDR,
    UNKNOWN_PRIMARY_SCORE,
    UNKNOWN_SEQUENCE_ID,
)


@dataclass(frozen=True)
class NormalizedPeptide:
    """A peptide reduced to its clean sequence and an ordered list of (mod name, position) pairs."""

    clean_sequence: str
    modifications: tuple[tuple[str, int], ...] = ()
    sequence_id: int = UNKNOWN_SEQUENCE_ID

    @property
    def mod_count(self) -> int:
        return len(self.modifications)


@dataclass
class PSMRow:
    """
    One PSM as delivered by a result reader.

    ``peptide`` is the sequence with mod symbols (for example ``K.LS*SPATLNSR.A``);
    ``clean_sequence`` is used together with a mod description when sequence info is available.
    """

    result_id: int
    peptide: str
    scan_number: int
    clean_sequence: str = ""
    charge: int = -1
    dataset_id_or_name: str = ""
    primary_score: float = UNKNOWN_PRIMARY_SCORE
    e_value: float = UNKNOWN_EVALUE
    fdr: float = UNKNOWN_FDR
    proteins: list[str] = field(default_factory=list)
    cleavage_state: str = ""
    missed_cleavages: int = 0
    rank: int = 1

    @property
    def protein_first(self) -> str:
        return self.proteins[0] if self.proteins else ""


@dataclass
class PSMObservation:
    dataset_id_or_name: str
    scan_number: int
    fdr: float = UNKNOWN_FDR
    primary_score: float = UNKNOWN_PRIMARY_SCORE
    e_value: float = UNKNOWN_EVALUE
    missing_n_term_reporter_ion: bool = False
    missing_reporter_ion: bool = False
    passes_filter: bool = False

    @property
    def fdr_known(self) -> bool:
        return self.fdr > UNKNOWN_FDR

    def __str__(self):
        return f"Scan {self.scan_number}, FDR {self.fdr:.4f}, MSGF {self.primary_score:.3E}"


@dataclass(frozen=True)
class UniqueSeqSnapshot:
    """Detached copy of an identity's attributes, used for group-by counting."""

    observation_count: int
    c_term_k: bool = False
    c_term_r: bool = False
    missed_cleavage: bool = False
    keratin: bool = False
    trypsin: bool = False
    tryptic: bool = False
    phosphopeptide: bool = False
    acetylated: bool = False
    ubiquitinated: bool = False

    def merge(self, other: UniqueSeqSnapshot) -> UniqueSeqSnapshot:
        return replace(self, observation_count=self.observation_count + other.observation_count)


@dataclass
class AggregatedIdentity:
    """
    All observations of one canonical (normalized) peptide.

    The boolean attributes are set from the first PSM of the peptide and never change afterwards.
    The observation count is always the length of ``observations``.
    """

    protein: str = ""
    seq_id_first: int = UNKNOWN_SEQUENCE_ID
    c_term_k: bool = False
    c_term_r: bool = False
    missed_cleavage: bool = False
    keratin: bool = False
    trypsin: bool = False
    tryptic: bool = False
    phosphopeptide: bool = False
    acetylated: bool = False
    ubiquitinated: bool = False
    observations: list[PSMObservation] = field(default_factory=list)

    @property
    def observation_count(self) -> int:
        return len(self.observations)

    @property
    def passing_count(self) -> int:
        return sum(1 for observation in self.observations if observation.passes_filter)

    @property
    def best_primary_score(self) -> float:
        if not self.observations:
            return UNKNOWN_PRIMARY_SCORE
        return min(observation.primary_score for observation in self.observations)

    @property
    def best_e_value(self) -> float:
        if not self.observations:
            return UNKNOWN_EVALUE
        return min(observation.e_value for observation in self.observations)

    @property
    def best_fdr(self) -> float:
        if not self.observations:
            return UNKNOWN_FDR
        return min(observation.fdr for observation in self.observations)

    def add_observation(self, observation: PSMObservation) -> None:
        self.observations.append(observation)

    def find_observation(self, dataset_id_or_name: str, scan_number: int) -> PSMObservation | None:
        for observation in self.observations:
            if observation.dataset_id_or_name == dataset_id_or_name and observation.scan_number == scan_number:
                return observation
        return None

    def snapshot(self, observation_count: int | None = None) -> UniqueSeqSnapshot:
        return UniqueSeqSnapshot(
            observation_count=self.observation_count if observation_count is None else observation_count,
            c_term_k=self.c_term_k,
            c_term_r=self.c_term_r,
            missed_cleavage=self.missed_cleavage,
            keratin=self.keratin,
            trypsin=self.trypsin,
            tryptic=self.tryptic,
            phosphopeptide=self.phosphopeptide,
            acetylated=self.acetylated,
            ubiquitinated=self.ubiquitinated,
        )

    def __str__(self):
        count = len(self.observations)
        if count == 0:
            return f"SeqID {self.seq_id_first}, {self.protein} (0 observations)"
        if count == 1:
            return f"SeqID {self.seq_id_first}, {self.protein}, Scan {self.observations[0].scan_number} (1 observation)"
        return (
            f"SeqID {self.seq_id_first}, {self.protein}, "
            f"Scans {self.observations[0].scan_number}-{self.observations[-1].scan_number} ({count} observations)"
        )


@dataclass(frozen=True)
class StatsRecord:
    total_psms: int = 0
    unique_peptide_count: int = 0
    unique_protein_count: int = 0
    unique_phosphopeptide_count: int = 0
    unique_phosphopeptides_c_term_k: int = 0
    unique_phosphopeptides_c_term_r: int = 0
    keratin_peptides: int = 0
    trypsin_peptides: int = 0
    tryptic_peptides: int = 0
    missed_cleavage_ratio: float = 0.0
    missed_cleavage_ratio_phospho: float = 0.0
    acetyl_peptides: int = 0
    ubiquitin_peptides: int = 0
    percent_psms_missing_n_term_reporter_ion: float = 0.0
    percent_psms_missing_reporter_ion: float = 0.0


# Keys are sequence IDs
FilteredView = dict[int, AggregatedIdentity]

"""
Summarizer configuration
"""

from __future__ import annotations

from dataclasses import dataclass

from psmqc.modules.psm.constants import (
    DEFAULT_EVALUE_THRESHOLD,
    DEFAULT_FDR_THRESHOLD,
    DEFAULT_PEP_THRESHOLD,
    DEFAULT_PRIMARY_THRESHOLD,
    EVALUE_RESULT_TYPES,
)
from psmqc.modules.psm.reporter_ions import ReporterIonType, get_reporter_ion_type

# Result types whose primary score is a posterior error probability
PEP_RESULT_TYPES = frozenset(["maxquant", "diann"])

RESULT_TYPES = [
    "msgfplus",
    "msalign",
    "mspathfinder",
    "msfragger",
    "maxquant",
    "diann",
    "moda",
    "modplus",
    "xtandem",
    "sequest",
    "inspect",
    "toppic",
    "unknown",
]


@dataclass
class SummarizerConfig:
    """
    Options recognized by the summarizer.

    A ``primary_threshold`` or ``fdr_threshold`` of 1 or more disables the corresponding filter.
    """

    primary_threshold: float = DEFAULT_PRIMARY_THRESHOLD
    fdr_threshold: float = DEFAULT_FDR_THRESHOLD
    e_value_threshold: float = DEFAULT_EVALUE_THRESHOLD
    result_type_family: str = "msgfplus"
    dynamic_reporter_ion: tuple[str, ReporterIonType] | None = None
    dataset_name: str = ""
    job: int = 0
    output_directory: str = ""
    save_results_to_file: bool = False

    def __post_init__(self):
        self.result_type_family = self.result_type_family.lower()
        if self.result_type_family not in RESULT_TYPES:
            raise ValueError(
                f"Unknown result type '{self.result_type_family}'; expected one of {', '.join(RESULT_TYPES)}"
            )

        if self.dynamic_reporter_ion is not None:
            name, reporter_ion_type = self.dynamic_reporter_ion
            if isinstance(reporter_ion_type, str):
                reporter_ion_type = get_reporter_ion_type(reporter_ion_type)
            if reporter_ion_type == ReporterIonType.NONE:
                raise ValueError(f"Unrecognized reporter ion type for dynamic mod '{name}'")
            self.dynamic_reporter_ion = (name, reporter_ion_type)

    @property
    def uses_e_value_filter(self) -> bool:
        return self.result_type_family in EVALUE_RESULT_TYPES

    @property
    def primary_filter_enabled(self) -> bool:
        return self.primary_threshold < 1

    @property
    def fdr_filter_enabled(self) -> bool:
        return self.fdr_threshold < 1

    @classmethod
    def for_result_type(cls, result_type_family: str, **kwargs) -> SummarizerConfig:
        """Create a config with the default primary threshold of the given result type."""
        if "primary_threshold" not in kwargs and result_type_family.lower() in PEP_RESULT_TYPES:
            kwargs["primary_threshold"] = DEFAULT_PEP_THRESHOLD
        return cls(result_type_family=result_type_family, **kwargs)

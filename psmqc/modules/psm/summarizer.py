"""
Summarize PSM results: count PSMs, unique peptides and unique proteins passing either a
SpecEValue / PEP threshold or an FDR threshold, while also tracking phosphopeptides, keratin
peptides, missed cleavages, reporter ion labeling and scan coverage.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from typing import Iterable, Iterator

import pandas as pd

from psmqc.config import SummarizerConfig
from psmqc.logging import Timer, get_logger
from psmqc.modules.common.exceptions import MissingScoreDataError, NoDecoyProteinsError
from psmqc.modules.psm.aggregator import PSMAggregator
from psmqc.modules.psm.filters import filter_by_fdr, filter_by_score
from psmqc.modules.psm.models import AggregatedIdentity, PSMRow, StatsRecord
from psmqc.modules.psm.scan_coverage import ScanCoverageAnalyzer, ScanStatsLookup
from psmqc.modules.psm.stats import tabulate_stats

log = get_logger("psmqc.modules.psm.summarizer")


@dataclass
class PSMResults:
    score_stats: StatsRecord = field(default_factory=StatsRecord)
    fdr_stats: StatsRecord = field(default_factory=StatsRecord)
    primary_threshold: float = 0.0
    fdr_threshold: float = 0.0
    threshold_is_e_value: bool = False
    spectra_searched: int = 0
    max_scan_gap: int = 0
    percent_no_psm: float = 100.0
    lookup_error: bool = False
    dynamic_reporter_ion: bool = False
    fdr_filter_succeeded: bool = True
    error_message: str = ""

    def to_dict(self) -> dict:
        summary = {
            key: value for key, value in asdict(self).items() if key not in ("score_stats", "fdr_stats")
        }
        for key, value in asdict(self.score_stats).items():
            summary[f"score_{key}"] = value
        for key, value in asdict(self.fdr_stats).items():
            summary[f"fdr_{key}"] = value
        return summary


class ResultsSummarizer:
    """
    Run the two independent filter passes over one dataset's PSMs and tabulate the stats of each.

    Args:
        config: thresholds, result type and reporter ion settings
        scan_stats_lookup: returns (total scans, total MS/MS scans) for a dataset; when None,
            the scan gap and PSM coverage metrics keep their defaults
    """

    def __init__(self, config: SummarizerConfig, scan_stats_lookup: ScanStatsLookup | None = None):
        self.config = config
        self.scan_stats_lookup = scan_stats_lookup

        # Keys are dataset ID or name, values are the unique scan_charge keys with their scan numbers
        self.unique_spectra: dict[str, dict[str, int]] = {}
        self.identities: dict[int, AggregatedIdentity] = {}

    def _track_scans(self, rows: Iterable[PSMRow]) -> Iterator[PSMRow]:
        for row in rows:
            scan_key = f"{row.scan_number}_{row.charge}" if row.charge >= 0 else str(row.scan_number)
            self.unique_spectra.setdefault(row.dataset_id_or_name, {}).setdefault(scan_key, row.scan_number)
            yield row

    @property
    def spectra_searched(self) -> int:
        return sum(len(spectra) for spectra in self.unique_spectra.values())

    def summarize(
        self,
        rows: Iterable[PSMRow],
        result_to_seq_map: dict[int, int] | None = None,
        seq_to_protein_map: dict[int, list[str]] | None = None,
        seq_mod_descriptions: dict[int, str] | None = None,
    ) -> PSMResults:
        """
        Summarize a stream of rank 1 PSMs.

        Raises:
            EmptyModificationNameError: if a mod description is malformed
        """
        config = self.config
        self.unique_spectra = {}

        results = PSMResults(
            primary_threshold=config.e_value_threshold if config.uses_e_value_filter else config.primary_threshold,
            fdr_threshold=config.fdr_threshold,
            threshold_is_e_value=config.uses_e_value_filter,
            dynamic_reporter_ion=config.dynamic_reporter_ion is not None,
        )

        with Timer(log, "loading PSMs"):
            aggregator = PSMAggregator(
                result_to_seq_map=result_to_seq_map,
                seq_mod_descriptions=seq_mod_descriptions,
                dynamic_reporter_ion=config.dynamic_reporter_ion,
            )
            self.identities = aggregator.add_all(self._track_scans(rows))

        results.spectra_searched = self.spectra_searched

        if self.scan_stats_lookup is not None:
            coverage = ScanCoverageAnalyzer(self.scan_stats_lookup).analyze(
                {dataset: spectra.values() for dataset, spectra in self.unique_spectra.items()}
            )
            results.max_scan_gap = coverage.max_scan_gap
            results.percent_no_psm = coverage.percent_no_psm
            results.lookup_error = coverage.lookup_error

            if coverage.lookup_error:
                log.warning("Unable to look up scan stats for one or more datasets")

        score_view = filter_by_score(self.identities, config)
        results.score_stats = tabulate_stats(score_view, seq_to_protein_map)

        try:
            fdr_view = filter_by_fdr(self.identities, config)
        except (MissingScoreDataError, NoDecoyProteinsError) as e:
            log.error(str(e))
            results.error_message = str(e)
            results.fdr_filter_succeeded = False
        else:
            results.fdr_stats = tabulate_stats(
                fdr_view,
                seq_to_protein_map,
                compute_reporter_ions=config.dynamic_reporter_ion is not None,
            )

        log.info(
            f"Score filter: {results.score_stats.total_psms} PSMs, "
            f"{results.score_stats.unique_peptide_count} peptides, "
            f"{results.score_stats.unique_protein_count} proteins"
        )
        log.info(
            f"FDR filter: {results.fdr_stats.total_psms} PSMs, "
            f"{results.fdr_stats.unique_peptide_count} peptides, "
            f"{results.fdr_stats.unique_protein_count} proteins"
        )

        if config.save_results_to_file:
            save_results_to_file(results, config)

        return results


def save_results_to_file(results: PSMResults, config: SummarizerConfig) -> str:
    """Write the ``<dataset>_PSM_Stats.txt`` summary; returns the file path."""
    output_directory = config.output_directory or os.getcwd()
    output_file_path = os.path.join(output_directory, f"{config.dataset_name or 'Dataset'}_PSM_Stats.txt")

    stats = pd.DataFrame(
        [
            {
                "Dataset": config.dataset_name,
                "Job": config.job,
                "MSGF_Threshold": f"{results.primary_threshold:.2E}",
                "FDR_Threshold": f"{results.fdr_threshold:.3f}",
                "Spectra_Searched": results.spectra_searched,
                "Total_PSMs_MSGF_Filtered": results.score_stats.total_psms,
                "Unique_Peptides_MSGF_Filtered": results.score_stats.unique_peptide_count,
                "Unique_Proteins_MSGF_Filtered": results.score_stats.unique_protein_count,
                "Total_PSMs_FDR_Filtered": results.fdr_stats.total_psms,
                "Unique_Peptides_FDR_Filtered": results.fdr_stats.unique_peptide_count,
                "Unique_Proteins_FDR_Filtered": results.fdr_stats.unique_protein_count,
            }
        ]
    )
    stats.to_csv(output_file_path, sep="\t", index=False)

    log.info(f"Saved PSM stats to {output_file_path}")
    return output_file_path

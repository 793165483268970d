"""
Scan gap and PSM coverage metrics
"""

from __future__ import annotations

import os
from typing import Callable, Iterable

import pandas as pd

from psmqc.logging import get_logger
from psmqc.modules.common.exceptions import ScanLookupFailure
from psmqc.modules.common.file_utils import file_prefix
from psmqc.modules.common.statistics_utils import max_adjacent_gap

log = get_logger("psmqc.modules.psm.scan_coverage")

# Returns (total scans, total MS/MS scans) for a dataset ID or name
ScanStatsLookup = Callable[[str], tuple[int, int]]


class ScanStatsTable:
    """
    Scan counts per dataset, usable as a ScanStatsLookup.

    Args:
        scan_stats: keys are dataset names (or IDs), values are (total scans, total MS/MS scans)
        default_dataset: dataset used when a PSM has no dataset ID or name
    """

    def __init__(self, scan_stats: dict[str, tuple[int, int]], default_dataset: str = ""):
        self.scan_stats = scan_stats
        self.default_dataset = default_dataset

    def __call__(self, dataset_id_or_name: str) -> tuple[int, int]:
        dataset = dataset_id_or_name or self.default_dataset
        if dataset not in self.scan_stats:
            raise ScanLookupFailure(f"Dataset not found; cannot retrieve scan counts: '{dataset}'")
        return self.scan_stats[dataset]

    @classmethod
    def from_tsv(cls, file_path, default_dataset: str = "") -> ScanStatsTable:
        """Read a table with Dataset, ScanCountTotal and ScanCountMSn columns."""
        df = pd.read_csv(file_path, sep="\t", dtype={"Dataset": str})

        missing = [col for col in ["Dataset", "ScanCountTotal", "ScanCountMSn"] if col not in df.columns]
        if missing:
            raise ValueError(f"Scan stats file {file_path} is missing columns: {', '.join(missing)}")

        scan_stats = {
            row.Dataset: (int(row.ScanCountTotal), int(row.ScanCountMSn))
            for row in df.itertuples(index=False)
        }
        return cls(scan_stats, default_dataset)

    @classmethod
    def from_ms_info(cls, file_paths: list, default_dataset: str = "") -> ScanStatsTable:
        """Count scans in ``*_ms_info.tsv`` files (one row per spectrum, with an ms_level column)."""
        scan_stats = {}
        for file_path in file_paths:
            ms_info = pd.read_csv(file_path, sep="\t", usecols=["ms_level"])
            dataset = file_prefix(file_path).replace("_ms_info", "")

            ms_level_group = ms_info.groupby("ms_level").size()
            total_msn = int(ms_level_group[ms_level_group.index > 1].sum())
            scan_stats[dataset] = (len(ms_info), total_msn)

            log.info(f"{os.path.basename(file_path)}: {len(ms_info)} scans, {total_msn} MS/MS scans")

        return cls(scan_stats, default_dataset)


class ScanCoverageAnalyzer:
    """
    Compute the largest gap between identified MS/MS scans and the percent of MS/MS scans without a PSM.

    Large gaps may indicate that a search thread crashed and results are incomplete, though they
    also occur with sparse MS/MS spectra.
    """

    def __init__(self, scan_stats_lookup: ScanStatsLookup | None = None):
        self.scan_stats_lookup = scan_stats_lookup

        self.max_scan_gap = 0
        self.msn_scans_no_psm = 0
        self.total_msn_scans = 0
        self.lookup_error = False

    @property
    def percent_no_psm(self) -> float:
        if self.total_msn_scans <= 0:
            return 100.0
        return self.msn_scans_no_psm / self.total_msn_scans * 100

    def lookup(self, dataset_id_or_name: str) -> tuple[int, int] | None:
        if self.scan_stats_lookup is None:
            return None

        try:
            result = self.scan_stats_lookup(dataset_id_or_name)
        except (ScanLookupFailure, LookupError, ValueError, OSError) as e:
            log.warning(f"Scan stats lookup failed for '{dataset_id_or_name}': {e}")
            return None

        if result is None:
            return None

        total_scans, total_msn_scans = result
        if total_scans is None or total_scans <= 0:
            log.warning(f"Scan stats lookup returned no scans for '{dataset_id_or_name}'")
            return None

        return int(total_scans), int(total_msn_scans or 0)

    def analyze(self, scans_by_dataset: dict[str, Iterable[int]]) -> ScanCoverageAnalyzer:
        """
        Args:
            scans_by_dataset: keys are dataset IDs or names (empty string for single-dataset results),
                values are the scan numbers with a PSM
        """
        self.max_scan_gap = 0
        self.msn_scans_no_psm = 0
        self.total_msn_scans = 0

        for dataset, scans in scans_by_dataset.items():
            scan_list = sorted(set(scans))

            scan_counts = self.lookup(dataset)
            if scan_counts is None:
                self.lookup_error = True
                continue

            total_scans, total_msn_scans = scan_counts

            maximum_scan_gap = max_adjacent_gap(scan_list, upper_bound=total_scans - 1)

            if total_msn_scans > 0:
                msn_scans_no_psm = total_msn_scans - len(scan_list)
                if msn_scans_no_psm < 0:
                    log.warning(
                        f"Found more MS/MS spectra with PSMs than expected for dataset '{dataset}': "
                        f"{len(scan_list)} vs. {total_msn_scans}"
                    )
                else:
                    self.msn_scans_no_psm += msn_scans_no_psm

                self.total_msn_scans += total_msn_scans

            self.max_scan_gap = max(self.max_scan_gap, maximum_scan_gap)

        return self

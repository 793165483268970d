"""
Score and FDR filters; each returns a new filtered view and leaves its source untouched
"""

from __future__ import annotations

import copy

from psmqc.config import SummarizerConfig
from psmqc.logging import get_logger
from psmqc.modules.psm.fdr import filter_identities_by_fdr
from psmqc.modules.psm.models import AggregatedIdentity, FilteredView

log = get_logger("psmqc.modules.psm.filters")


def _copy_with_flags(identities: dict[int, AggregatedIdentity], passes_filter: bool) -> FilteredView:
    view = copy.deepcopy(identities)
    for identity in view.values():
        for observation in identity.observations:
            observation.passes_filter = passes_filter
    return view


def filter_by_e_value(source: dict[int, AggregatedIdentity], e_value_threshold: float) -> FilteredView:
    view = _copy_with_flags(source, False)
    filtered = {}

    for seq_id, identity in view.items():
        if identity.best_e_value > e_value_threshold:
            continue
        for observation in identity.observations:
            observation.passes_filter = observation.e_value <= e_value_threshold
        filtered[seq_id] = identity

    return filtered


def filter_by_primary_score(source: dict[int, AggregatedIdentity], primary_threshold: float) -> FilteredView:
    view = _copy_with_flags(source, False)
    filtered = {}

    for seq_id, identity in view.items():
        if identity.best_primary_score > primary_threshold:
            continue
        for observation in identity.observations:
            observation.passes_filter = observation.primary_score <= primary_threshold
        filtered[seq_id] = identity

    return filtered


def filter_by_score(source: dict[int, AggregatedIdentity], config: SummarizerConfig) -> FilteredView:
    """
    Filter on SpecEValue / PEP (or on E-value for E-value based result types).

    A primary threshold of 1 or more disables filtering and every observation passes.
    """
    if not config.primary_filter_enabled:
        return _copy_with_flags(source, True)

    if config.uses_e_value_filter:
        view = filter_by_e_value(source, config.e_value_threshold)
    else:
        view = filter_by_primary_score(source, config.primary_threshold)

    log.info(f"{len(view)} of {len(source)} normalized peptides pass the score filter")
    return view


def filter_by_fdr(source: dict[int, AggregatedIdentity], config: SummarizerConfig) -> FilteredView:
    """
    Filter on FDR, estimating it from decoy proteins when the search engine did not report one.

    An FDR threshold of 1 or more disables filtering and every observation passes.

    Raises:
        MissingScoreDataError, NoDecoyProteinsError: if the FDR cannot be determined
    """
    view = _copy_with_flags(source, True)

    if not config.fdr_filter_enabled:
        return view

    view = filter_identities_by_fdr(view, config.fdr_threshold)

    for identity in view.values():
        for observation in identity.observations:
            if observation.fdr > config.fdr_threshold:
                observation.passes_filter = False

    log.info(f"{len(view)} of {len(source)} normalized peptides pass the FDR filter")
    return view

"""
Configuration file for pytest.

This file contains fixtures and configuration for the pytest test suite.
"""

import pytest
import pandas as pd

from psmqc.modules.psm.models import AggregatedIdentity, PSMObservation, PSMRow


def _make_row(result_id, peptide, scan_number=None, **kwargs):
    if scan_number is None:
        scan_number = result_id
    return PSMRow(result_id=result_id, peptide=peptide, scan_number=scan_number, **kwargs)


def _make_identity(protein="ProtA", observations=None, **kwargs):
    identity = AggregatedIdentity(protein=protein, **kwargs)
    for observation in observations or []:
        identity.add_observation(observation)
    return identity


def _make_observation(scan_number, **kwargs):
    return PSMObservation(dataset_id_or_name="", scan_number=scan_number, **kwargs)


@pytest.fixture
def make_row():
    """Factory for PSMRow records; the scan number defaults to the result ID."""
    return _make_row


@pytest.fixture
def make_identity():
    """Factory for AggregatedIdentity instances with a list of observations."""
    return _make_identity


@pytest.fixture
def make_observation():
    """Factory for PSMObservation instances of an unnamed dataset."""
    return _make_observation


@pytest.fixture
def decoy_rows():
    """
    Five PSMs: two fuzzy-equivalent phosphopeptide PSMs, one decoy PSM and
    one PSM that fails the default SpecEValue threshold.
    """
    return [
        _make_row(1, "K.PEPTIDEK.A", proteins=["ProtA"], primary_score=1e-15),
        _make_row(2, "R.LS*SPATLNSR.A", proteins=["ProtB"], primary_score=1e-14),
        _make_row(3, "R.LSS*PATLNSR.A", proteins=["ProtB"], primary_score=1e-13),
        _make_row(4, "K.AAAAK.A", proteins=["XXX_ProtC"], primary_score=1e-12),
        _make_row(5, "K.GGGGR.A", proteins=["ProtD"], primary_score=1e-9),
    ]


@pytest.fixture
def known_fdr_rows():
    """Three distinct peptides whose search engine FDRs are 0, 0 and 0.02."""
    return [
        _make_row(1, "PEPTIDEK", proteins=["ProtA"], primary_score=1e-12, fdr=0.0),
        _make_row(2, "ELVISLIVESK", proteins=["ProtB"], primary_score=1e-12, fdr=0.0),
        _make_row(3, "SAMPLER", proteins=["ProtC"], primary_score=1e-12, fdr=0.02),
    ]


@pytest.fixture
def psm_file(tmp_path):
    """Write a small synopsis file and return its path."""
    df = pd.DataFrame(
        {
            "ResultID": [1, 2, 3, 4, 5],
            "Scan": [10, 20, 30, 40, 40],
            "Charge": [2, 2, 3, 2, 2],
            "Peptide": ["K.PEPTIDEK.A", "R.LS*SPATLNSR.A", "R.LSS*PATLNSR.A", "K.AAAAK.A", "K.GGGGR.A"],
            "Protein": ["ProtA", "ProtB;ProtE", "ProtB", "XXX_ProtC", "ProtD"],
            "MSGF_SpecProb": [1e-15, 1e-14, 1e-13, 1e-12, 1e-11],
            "NTT": [2, 2, 1, 2, 0],
            "Rank": [1, 1, 1, 1, 2],
        }
    )
    file_path = tmp_path / "Dataset_syn.txt"
    df.to_csv(file_path, sep="\t", index=False)
    return file_path

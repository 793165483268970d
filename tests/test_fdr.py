import pytest

from psmqc.modules.common.exceptions import MissingScoreDataError, NoDecoyProteinsError
from psmqc.modules.psm.fdr import (
    build_score_list,
    compute_decoy_fdr,
    estimate_fdr,
    filter_identities_by_fdr,
    is_decoy_protein,
)


@pytest.fixture
def identity_with(make_identity, make_observation):
    """Factory for an identity with a single observation."""

    def build(protein, primary_score=10.0, e_value=None, fdr=-1.0, scan_number=1):
        kwargs = {"primary_score": primary_score, "fdr": fdr}
        if e_value is not None:
            kwargs["e_value"] = e_value
        return make_identity(protein, [make_observation(scan_number, **kwargs)])

    return build


class TestDecoyProteins:
    """Decoy protein naming conventions."""

    def test_decoy_names(self):
        for name in [
            "Reversed_ProtA",
            "scrambled_ProtA",
            "XXX_ProtA",
            "xxx.ProtA",
            "REV_ProtA",
            "ProtA:reversed",
        ]:
            assert is_decoy_protein(name), name

    def test_forward_names(self):
        for name in ["ProtA", "sp|P12345|ALBU_HUMAN", "", "prev_ProtA"]:
            assert not is_decoy_protein(name), name


class TestDecoyFDR:
    """FDR = #decoy / #forward in ascending score order."""

    def test_backfill_leading_decoys(self):
        scores = [(1, 1e-12), (2, 1e-11), (3, 1e-10), (4, 1e-9)]
        proteins = {1: "XXX_P1", 2: "ProtA", 3: "ProtB", 4: "REV_P2"}

        fdr_by_seq_id, decoy_count = compute_decoy_fdr(scores, proteins)

        assert decoy_count == 2
        assert fdr_by_seq_id[2] == pytest.approx(1.0)
        assert fdr_by_seq_id[3] == pytest.approx(0.5)
        assert fdr_by_seq_id[4] == pytest.approx(1.0)
        # Entries before the first forward protein take the first forward FDR
        assert fdr_by_seq_id[1] == pytest.approx(1.0)

    def test_unsorted_input(self):
        scores = [(3, 1e-9), (1, 1e-12), (2, 1e-10)]
        proteins = {1: "ProtA", 2: "ProtB", 3: "XXX_ProtC"}

        fdr_by_seq_id, decoy_count = compute_decoy_fdr(scores, proteins)

        assert decoy_count == 1
        assert fdr_by_seq_id == pytest.approx({1: 0.0, 2: 0.0, 3: 0.5})

    def test_only_decoys(self):
        fdr_by_seq_id, decoy_count = compute_decoy_fdr([(1, 1e-12), (2, 1e-11)], {1: "XXX_A", 2: "XXX_B"})

        assert fdr_by_seq_id == {}
        assert decoy_count == 2

    def test_empty(self):
        assert compute_decoy_fdr([], {}) == ({}, 0)

    def test_score_list_falls_back_to_e_value(self, identity_with):
        identities = {
            1: identity_with("ProtA", primary_score=1e-12),
            2: identity_with("ProtB", e_value=1e-5),
        }

        scores, valid_score = build_score_list(identities)

        assert scores == [(1, 1e-12), (2, 1e-5)]
        assert valid_score


class TestEstimateFDR:
    """Choosing between search engine FDRs and decoy-based FDRs."""

    def test_all_known(self, identity_with):
        identities = {
            1: identity_with("ProtA", fdr=0.0),
            2: identity_with("XXX_ProtB", fdr=0.02),
        }

        assert estimate_fdr(identities) == {1: 0.0, 2: 0.02}

    def test_decoy_based(self, identity_with):
        identities = {
            1: identity_with("ProtA", primary_score=1e-15),
            2: identity_with("ProtB", primary_score=1e-14),
            3: identity_with("XXX_ProtC", primary_score=1e-12),
            4: identity_with("ProtD", primary_score=1e-9),
        }

        fdr_by_seq_id = estimate_fdr(identities)

        assert fdr_by_seq_id == pytest.approx({1: 0.0, 2: 0.0, 3: 0.5, 4: 1 / 3})

    def test_no_scores_raises(self, identity_with):
        identities = {seq_id: identity_with("ProtA") for seq_id in range(1, 6)}

        with pytest.raises(MissingScoreDataError):
            estimate_fdr(identities)

    def test_no_decoys_raises(self, identity_with):
        identities = {seq_id: identity_with("ProtA", primary_score=1e-12) for seq_id in range(1, 6)}

        with pytest.raises(NoDecoyProteinsError) as exc_info:
            estimate_fdr(identities)

        assert "NO_DECOY_PROTEINS" in str(exc_info.value)

    def test_known_fdr_fallback_at_twenty_percent(self, identity_with):
        identities = {seq_id: identity_with("ProtA", primary_score=1e-12) for seq_id in range(1, 5)}
        identities[5] = identity_with("ProtB", primary_score=1e-12, fdr=0.001)

        assert estimate_fdr(identities) == {1: 1.0, 2: 1.0, 3: 1.0, 4: 1.0, 5: 0.001}

    def test_known_fdr_fallback_removes_unknown(self, identity_with):
        identities = {seq_id: identity_with("ProtA", primary_score=1e-12) for seq_id in range(1, 5)}
        identities[5] = identity_with("ProtB", primary_score=1e-12, fdr=0.001)

        assert sorted(filter_identities_by_fdr(identities, 0.01)) == [5]

    def test_known_fdr_fallback_below_twenty_percent(self, identity_with):
        identities = {seq_id: identity_with("ProtA", primary_score=1e-12) for seq_id in range(1, 7)}
        identities[7] = identity_with("ProtB", primary_score=1e-12, fdr=0.001)

        with pytest.raises(NoDecoyProteinsError):
            estimate_fdr(identities)

    def test_filter_is_monotonic(self, identity_with):
        identities = {
            1: identity_with("ProtA", primary_score=1e-15),
            2: identity_with("ProtB", primary_score=1e-14),
            3: identity_with("XXX_ProtC", primary_score=1e-12),
            4: identity_with("ProtD", primary_score=1e-9),
            5: identity_with("ProtE", primary_score=1e-8),
        }

        previous = set()
        for threshold in [0.0, 0.01, 0.3, 0.5, 1.0]:
            passing = set(filter_identities_by_fdr(identities, threshold))
            assert previous <= passing
            previous = passing

        assert set(filter_identities_by_fdr(identities, 0.01)) == {1, 2}

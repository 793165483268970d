import pytest

from psmqc.config import SummarizerConfig
from psmqc.modules.psm.filters import filter_by_fdr, filter_by_score
from psmqc.modules.psm.reporter_ions import ReporterIonType


@pytest.fixture
def identities(make_identity, make_observation):
    return {
        1: make_identity(
            "ProtA",
            [
                make_observation(1, primary_score=1e-12, e_value=1e-6, fdr=0.0),
                make_observation(2, primary_score=1e-8, e_value=1e-2, fdr=0.02),
            ],
        ),
        2: make_identity("ProtB", [make_observation(3, primary_score=1e-9, e_value=1e-5, fdr=0.005)]),
        3: make_identity("ProtC", [make_observation(4, primary_score=1e-11, e_value=1e-3, fdr=0.03)]),
    }


class TestSummarizerConfig:
    """Configuration defaults and validation."""

    def test_defaults(self):
        config = SummarizerConfig()

        assert config.primary_threshold == 1e-10
        assert config.fdr_threshold == 0.01
        assert config.primary_filter_enabled
        assert config.fdr_filter_enabled
        assert not config.uses_e_value_filter

    def test_pep_default(self):
        assert SummarizerConfig.for_result_type("MaxQuant").primary_threshold == 0.01
        assert SummarizerConfig.for_result_type("maxquant", primary_threshold=0.05).primary_threshold == 0.05
        assert SummarizerConfig.for_result_type("msgfplus").primary_threshold == 1e-10

    def test_disabled_filters(self):
        config = SummarizerConfig(primary_threshold=1, fdr_threshold=1.5)

        assert not config.primary_filter_enabled
        assert not config.fdr_filter_enabled

    def test_unknown_result_type(self):
        with pytest.raises(ValueError):
            SummarizerConfig(result_type_family="mascot")

    def test_reporter_ion_name(self):
        config = SummarizerConfig(dynamic_reporter_ion=("TMT16Tag", "TMT16Tag"))

        assert config.dynamic_reporter_ion == ("TMT16Tag", ReporterIonType.TMT16PLEX)

        with pytest.raises(ValueError):
            SummarizerConfig(dynamic_reporter_ion=("Phosph", "Phosph"))


class TestScoreFilter:
    """Filtering on SpecEValue / PEP or E-value."""

    def test_primary_score(self, identities):
        view = filter_by_score(identities, SummarizerConfig(primary_threshold=1e-10))

        assert sorted(view) == [1, 3]
        assert [observation.passes_filter for observation in view[1].observations] == [True, False]
        assert view[1].passing_count == 1

    def test_source_is_untouched(self, identities):
        view = filter_by_score(identities, SummarizerConfig(primary_threshold=1e-10))

        assert view[1] is not identities[1]
        assert not any(observation.passes_filter for observation in identities[1].observations)

    def test_disabled(self, identities):
        view = filter_by_score(identities, SummarizerConfig(primary_threshold=1))

        assert sorted(view) == [1, 2, 3]
        assert all(observation.passes_filter for identity in view.values() for observation in identity.observations)

    def test_e_value(self, identities):
        config = SummarizerConfig(result_type_family="msalign", e_value_threshold=1e-4)
        view = filter_by_score(identities, config)

        assert sorted(view) == [1, 2]
        assert [observation.passes_filter for observation in view[1].observations] == [True, False]


class TestFDRFilter:
    """Filtering on FDR."""

    def test_known_fdr(self, identities):
        view = filter_by_fdr(identities, SummarizerConfig(fdr_threshold=0.01))

        # Identity 1 passes on its best FDR, but its second PSM does not
        assert sorted(view) == [1, 2]
        assert [observation.passes_filter for observation in view[1].observations] == [True, False]
        assert view[2].passing_count == 1

    def test_disabled(self, identities):
        view = filter_by_fdr(identities, SummarizerConfig(fdr_threshold=1))

        assert sorted(view) == [1, 2, 3]
        assert sum(identity.passing_count for identity in view.values()) == 4

    def test_independent_of_score_filter(self, identities):
        config = SummarizerConfig(primary_threshold=1e-10, fdr_threshold=0.01)

        score_view = filter_by_score(identities, config)
        fdr_view = filter_by_fdr(identities, config)

        assert sorted(score_view) == [1, 3]
        assert sorted(fdr_view) == [1, 2]
        assert score_view[1].observations[1].passes_filter is False
        assert fdr_view[1].observations[0].passes_filter is True

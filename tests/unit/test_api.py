"""Unit tests for the get_stat entry point."""

import pytest
from polars.testing import assert_frame_equal
from pydantic import ValidationError

from rvcstats import abundance, density, get_stat, length_frequency, occurrence
from rvcstats.estimation.api import ESTIMATORS


class TestGetStat:
    def test_registered_statistics(self):
        assert set(ESTIMATORS) == {
            "density",
            "occurrence",
            "abundance",
            "biomass",
            "length_frequency",
        }

    @pytest.mark.parametrize(
        "stat, fn", [("density", density), ("occurrence", occurrence), ("abundance", abundance)]
    )
    def test_dispatch_matches_function(self, two_strata_dataset, stat, fn):
        assert_frame_equal(
            get_stat(two_strata_dataset, stat, level="stratum"),
            fn(two_strata_dataset, level="stratum"),
        )

    def test_biomass_dispatch(self, dataset_factory):
        stations = [{"STRAT": "A", "PRIMARY_SAMPLE_UNIT": "1", "NUM": 1, "LEN": [20.0]}]
        dataset = dataset_factory(stations, [{"STRAT": "A", "NTOT": 1}])
        result = get_stat(dataset, "biomass", growth_parameters={"EPI MORI": (1e-5, 3.0)})
        assert result["biomass"][0] == pytest.approx(0.08)

    def test_length_frequency_dispatch(self, dataset_factory):
        stations = [{"STRAT": "A", "PRIMARY_SAMPLE_UNIT": "1", "NUM": 2, "LEN": [12.0, 12.0]}]
        dataset = dataset_factory(stations, [{"STRAT": "A", "NTOT": 1}])
        assert_frame_equal(
            get_stat(dataset, "length_frequency", length_bins=[11, 12, 13]),
            length_frequency(dataset, length_bins=[11, 12, 13]),
        )

    def test_unknown_stat(self, two_strata_dataset):
        with pytest.raises(ValueError, match="stat must be one of"):
            get_stat(two_strata_dataset, "richness")

    def test_occurrence_when_present_rejected(self, two_strata_dataset):
        with pytest.raises(ValidationError, match="when_present"):
            get_stat(two_strata_dataset, "occurrence", when_present=True)

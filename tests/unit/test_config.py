"""Unit tests for EstimatorConfig validation."""

import pytest
from pydantic import ValidationError

from rvcstats import EstimatorConfig, GrowthParameters
from rvcstats.estimation.length_class import LengthBreakpoint, LifeHistoryReference


class TestDefaults:
    def test_defaults(self):
        config = EstimatorConfig()
        assert config.stat == "density"
        assert config.level == "domain"
        assert config.when_present is False
        assert config.merge_protected is True
        assert config.growth_parameters == {}
        assert config.length_class is None

    def test_from_dict_drops_none(self):
        config = EstimatorConfig.from_dict({"level": "stratum", "length_class": None})
        assert config.level == "stratum"
        assert config.length_class is None

    def test_frozen(self):
        config = EstimatorConfig()
        with pytest.raises(ValidationError):
            config.level = "stratum"


class TestValidation:
    def test_unknown_stat(self):
        with pytest.raises(ValidationError):
            EstimatorConfig(stat="richness")

    def test_when_present_occurrence(self):
        with pytest.raises(ValidationError, match="occurrence"):
            EstimatorConfig(stat="occurrence", when_present=True)

    def test_growth_parameters_parsed(self):
        config = EstimatorConfig(growth_parameters={"EPI MORI": (1e-5, 3.0)})
        assert config.growth_parameters["EPI MORI"] == GrowthParameters(a=1e-5, b=3.0)

    def test_length_class_parsed(self):
        assert EstimatorConfig(length_class=20).length_class == LengthBreakpoint(20.0)
        assert EstimatorConfig(length_class="lc").length_class == LifeHistoryReference("LC")

    def test_length_class_mapping(self):
        config = EstimatorConfig(length_class={"EPI MORI": "lm", "LUT GRIS": 25})
        assert config.length_class == {
            "EPI MORI": LifeHistoryReference("LM"),
            "LUT GRIS": LengthBreakpoint(25.0),
        }

    def test_bad_length_class_keyword(self):
        with pytest.raises(ValidationError):
            EstimatorConfig(length_class="max")

    @pytest.mark.parametrize("bins", [[10.0], [10.0, 12.0, 11.0]])
    def test_bad_length_bins(self, bins):
        with pytest.raises(ValidationError):
            EstimatorConfig(length_bins=bins)

    def test_length_class_instances_kept(self):
        spec = LifeHistoryReference("LC")
        config = EstimatorConfig(length_class={"EPI MORI": spec, "LUT GRIS": LengthBreakpoint(20.0)})
        assert config.length_class["EPI MORI"] is spec
        assert isinstance(config.length_class["LUT GRIS"], LengthBreakpoint)

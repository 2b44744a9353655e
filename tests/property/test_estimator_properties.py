"""
Property-based tests for the RVC estimators.

Surveys are generated as a handful of strata, each with a frame size and a
list of station counts, and the estimators are checked against invariants
that hold for any such survey.
"""

import polars as pl
import pytest
from hypothesis import given
from hypothesis import strategies as st
from polars.testing import assert_frame_equal

from rvcstats import SurveyDataset, abundance, density, occurrence

counts = st.lists(
    st.integers(min_value=0, max_value=40).map(float), min_size=2, max_size=8
)


@st.composite
def surveys(draw, min_strata=1, max_strata=4):
    """Strata as (name, NTOT, station counts) with NTOT >= n."""
    n_strata = draw(st.integers(min_value=min_strata, max_value=max_strata))
    strata = []
    for i in range(n_strata):
        values = draw(counts)
        ntot = draw(st.integers(min_value=len(values), max_value=500))
        strata.append((f"S{i}", ntot, values))
    return strata


def _dataset(factory, stations_factory, strata, prot=0):
    stations = []
    for name, _, values in strata:
        stations += stations_factory(name, values, prot=prot)
    meta = [{"STRAT": name, "PROT": prot, "NTOT": ntot} for name, ntot, _ in strata]
    return factory(stations, meta)


class TestPermutationInvariance:
    @given(strata=surveys(), seed=st.integers(min_value=0, max_value=2**16))
    def test_row_order_does_not_matter(self, dataset_factory, stations_factory, strata, seed):
        dataset = _dataset(dataset_factory, stations_factory, strata)
        shuffled = SurveyDataset(
            dataset.sample_data.sample(fraction=1.0, shuffle=True, seed=seed),
            dataset.stratum_data.sample(fraction=1.0, shuffle=True, seed=seed),
        )
        assert_frame_equal(
            density(dataset, level="stratum"),
            density(shuffled, level="stratum"),
            check_exact=False,
        )


class TestSplitAndMerge:
    @given(strata=surveys(min_strata=2), data=st.data())
    def test_stratum_rows_match_split_surveys(
        self, dataset_factory, stations_factory, strata, data
    ):
        """Estimating two disjoint sets of strata apart gives the same rows."""
        cut = data.draw(st.integers(min_value=1, max_value=len(strata) - 1))
        whole = density(_dataset(dataset_factory, stations_factory, strata), level="stratum")
        parts = pl.concat(
            [
                density(_dataset(dataset_factory, stations_factory, strata[:cut]), level="stratum"),
                density(_dataset(dataset_factory, stations_factory, strata[cut:]), level="stratum"),
            ]
        ).sort("SPECIES_CD", "YEAR", "STRAT")
        assert_frame_equal(whole, parts, check_exact=False)

    @given(strata=surveys(min_strata=2), data=st.data())
    def test_domain_total_is_sum_of_parts(self, dataset_factory, stations_factory, strata, data):
        cut = data.draw(st.integers(min_value=1, max_value=len(strata) - 1))
        whole = abundance(_dataset(dataset_factory, stations_factory, strata))
        left = abundance(_dataset(dataset_factory, stations_factory, strata[:cut]))
        right = abundance(_dataset(dataset_factory, stations_factory, strata[cut:]))

        assert whole["abundance"][0] == pytest.approx(left["abundance"][0] + right["abundance"][0])
        assert whole["var"][0] == pytest.approx(left["var"][0] + right["var"][0])
        assert whole["NTOT"][0] == left["NTOT"][0] + right["NTOT"][0]

    @given(strata=surveys(max_strata=1), data=st.data())
    def test_split_stratum_rows_remerge(self, dataset_factory, stations_factory, strata, data):
        """
        Station rows of one stratum split across protection statuses and
        merged back give the pooled weighted total of the two halves.
        """
        name, ntot, values = strata[0]
        cut = data.draw(st.integers(min_value=1, max_value=len(values) - 1))
        halves = [(values[:cut], 0), (values[cut:], 1)]
        stations, meta = [], []
        for part, prot in halves:
            stations += stations_factory(name, part, prot=prot)
            meta.append({"STRAT": name, "PROT": prot, "NTOT": ntot})
        dataset = dataset_factory(stations, meta)

        merged = abundance(dataset, merge_protected=True)
        unmerged = abundance(dataset, merge_protected=False)
        assert merged["abundance"][0] == pytest.approx(unmerged["abundance"].sum())
        assert merged["var"][0] == pytest.approx(unmerged["var"].sum())


class TestMergeProtected:
    @given(strata=surveys())
    def test_single_protection_status_is_unchanged(
        self, dataset_factory, stations_factory, strata
    ):
        dataset = _dataset(dataset_factory, stations_factory, strata)
        merged = density(dataset, merge_protected=True)
        unmerged = density(dataset, merge_protected=False).drop("PROT")
        assert_frame_equal(merged, unmerged, check_exact=False)


class TestAbundanceAdditivity:
    @given(strata=surveys())
    def test_domain_equals_sum_of_strata(self, dataset_factory, stations_factory, strata):
        dataset = _dataset(dataset_factory, stations_factory, strata)
        by_stratum = abundance(dataset, level="stratum")
        domain = abundance(dataset, level="domain")
        assert domain["abundance"][0] == pytest.approx(by_stratum["abundance"].sum())
        assert domain["var"][0] == pytest.approx(by_stratum["var"].sum())


class TestOccurrence:
    @given(values=counts)
    def test_census_is_raw_proportion(self, dataset_factory, stations_factory, values):
        strata = [("A", len(values), values)]
        dataset = _dataset(dataset_factory, stations_factory, strata)
        row = occurrence(dataset).row(0, named=True)
        expected = sum(v > 0 for v in values) / len(values)
        assert row["occurrence"] == pytest.approx(expected)
        assert row["var"] == pytest.approx(0.0, abs=1e-12)

    @given(strata=surveys())
    def test_bounded(self, dataset_factory, stations_factory, strata):
        result = occurrence(_dataset(dataset_factory, stations_factory, strata), level="stratum")
        assert result.filter((pl.col("occurrence") < 0) | (pl.col("occurrence") > 1)).is_empty()


class TestHomogeneousDensity:
    @given(
        value=st.integers(min_value=0, max_value=50).map(float),
        sizes=st.lists(st.integers(min_value=2, max_value=6), min_size=1, max_size=4),
    )
    def test_constant_stations_return_constant(
        self, dataset_factory, stations_factory, value, sizes
    ):
        strata = [(f"S{i}", 10 * size, [value] * size) for i, size in enumerate(sizes)]
        row = density(_dataset(dataset_factory, stations_factory, strata)).row(0, named=True)
        assert row["density"] == pytest.approx(value)
        assert row["var"] == pytest.approx(0.0, abs=1e-12)

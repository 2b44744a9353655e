"""
Shared fixtures for rvcstats tests.

Datasets are built from compact row descriptions so each test can state
its stations and strata inline.
"""

from typing import Optional

import polars as pl
import pytest

from rvcstats import SurveyDataset

SPECIES = "EPI MORI"
YEAR = 2012


def build_dataset(
    stations: list[dict],
    strata: list[dict],
    lhp: Optional[list[dict]] = None,
) -> SurveyDataset:
    """
    Build a SurveyDataset.

    stations: dicts with STRAT, PROT, PRIMARY_SAMPLE_UNIT, NUM and optionally
    LEN, SPECIES_CD, YEAR.
    strata: dicts with STRAT, PROT, NTOT and optionally NMTOT, YEAR.
    """
    sample_rows = [
        {
            "YEAR": s.get("YEAR", YEAR),
            "STRAT": s["STRAT"],
            "PROT": s.get("PROT", 0),
            "PRIMARY_SAMPLE_UNIT": s["PRIMARY_SAMPLE_UNIT"],
            "SPECIES_CD": s.get("SPECIES_CD", SPECIES),
            "NUM": float(s["NUM"]),
            "LEN": [float(x) for x in s.get("LEN", [])],
        }
        for s in stations
    ]
    sample_data = pl.DataFrame(
        sample_rows,
        schema={
            "YEAR": pl.Int64,
            "STRAT": pl.String,
            "PROT": pl.Int64,
            "PRIMARY_SAMPLE_UNIT": pl.String,
            "SPECIES_CD": pl.String,
            "NUM": pl.Float64,
            "LEN": pl.List(pl.Float64),
        },
    )

    stratum_rows = [
        {
            "YEAR": s.get("YEAR", YEAR),
            "STRAT": s["STRAT"],
            "PROT": s.get("PROT", 0),
            "NTOT": s["NTOT"],
            "NMTOT": s.get("NMTOT", s["NTOT"]),
        }
        for s in strata
    ]
    stratum_data = pl.DataFrame(
        stratum_rows,
        schema={
            "YEAR": pl.Int64,
            "STRAT": pl.String,
            "PROT": pl.Int64,
            "NTOT": pl.Int64,
            "NMTOT": pl.Int64,
        },
    )

    lhp_data = None
    if lhp is not None:
        lhp_data = pl.DataFrame(
            lhp,
            schema={
                "SPECIES_CD": pl.String,
                "LC": pl.Float64,
                "LM": pl.Float64,
                "WLEN_A": pl.Float64,
                "WLEN_B": pl.Float64,
            },
        )

    return SurveyDataset(sample_data, stratum_data, lhp_data)


def uniform_stations(strat: str, values: list[float], prot: int = 0) -> list[dict]:
    """One station per value in a stratum."""
    return [
        {"STRAT": strat, "PROT": prot, "PRIMARY_SAMPLE_UNIT": f"{strat}{prot}-{i}", "NUM": v}
        for i, v in enumerate(values)
    ]


@pytest.fixture(scope="session")
def dataset_factory():
    """Return the dataset builder."""
    return build_dataset


@pytest.fixture(scope="session")
def stations_factory():
    """Return the uniform station builder."""
    return uniform_stations


@pytest.fixture
def two_strata_dataset():
    """
    Two strata with constant density 2.

    Stratum A: NTOT = 100, n = 10 (wh = 10)
    Stratum B: NTOT = 50,  n = 5  (wh = 10)
    """
    stations = uniform_stations("A", [2.0] * 10) + uniform_stations("B", [2.0] * 5)
    strata = [{"STRAT": "A", "NTOT": 100}, {"STRAT": "B", "NTOT": 50}]
    return build_dataset(stations, strata)


@pytest.fixture
def single_stratum_dataset():
    """
    One stratum, NTOT = 20, four stations with NUM = [0, 2, 4, 6], NMTOT = 15.

    Hand calculation:
    - ybar = 3, s2 = 20/3, f = 4/20
    - V(density) = (1 - f) * s2 / n = 0.8 * (20/3) / 4 = 4/3
    """
    stations = uniform_stations("A", [0.0, 2.0, 4.0, 6.0])
    strata = [{"STRAT": "A", "NTOT": 20, "NMTOT": 15}]
    return build_dataset(stations, strata)

"""
Estimating RVC Statistics
=========================

This example walks through every statistic rvcstats computes, using a
small synthetic survey so it runs without downloading RVC data.

The Data
--------
An RVC dataset is three tables:

    sample_data:  one row per station and species (NUM, LEN)
    stratum_data: one row per stratum (NTOT, NMTOT)
    lhp_data:     life history parameters per species (LC, LM, WLEN_A, WLEN_B)

The survey below has two strata, one of them split into protected and
unprotected areas, and a third stratum that is in the sampling frame but
was not visited this year.

Levels and Pooling
------------------
    density(ds, level="stratum")              # one row per stratum
    density(ds, level="domain")               # pooled over the domain
    density(ds, merge_protected=False)        # protected areas reported apart
    density(ds, when_present=True)            # only where the species was seen

Run with:

    python examples/rvc_statistics_example.py
"""

import polars as pl

from rvcstats import (
    SurveyDataset,
    abundance,
    biomass,
    density,
    length_frequency,
    occurrence,
)
from rvcstats.display import display_estimate

SPECIES = "EPI MORI"


def build_survey() -> SurveyDataset:
    """Two sampled strata and one unsampled stratum for red grouper."""
    stations = [
        # (STRAT, PROT, station, NUM, lengths)
        ("FSLR", 0, "101", 2, [32.0, 41.5]),
        ("FSLR", 0, "102", 0, []),
        ("FSLR", 0, "103", 1, [28.0]),
        ("FSLR", 0, "104", 3, [35.0, 36.5, 52.0]),
        ("FSLR", 1, "201", 4, [44.0, 47.0, 55.5, 61.0]),
        ("FSLR", 1, "202", 2, [50.0, 58.0]),
        ("FMLR", 0, "301", 0, []),
        ("FMLR", 0, "302", 1, [24.5]),
        ("FMLR", 0, "303", 0, []),
    ]
    sample_data = pl.DataFrame(
        {
            "YEAR": [2012] * len(stations),
            "STRAT": [s[0] for s in stations],
            "PROT": [s[1] for s in stations],
            "PRIMARY_SAMPLE_UNIT": [s[2] for s in stations],
            "SPECIES_CD": [SPECIES] * len(stations),
            "NUM": [float(s[3]) for s in stations],
            "LEN": [s[4] for s in stations],
        },
        schema_overrides={"LEN": pl.List(pl.Float64)},
    )
    stratum_data = pl.DataFrame(
        {
            "YEAR": [2012, 2012, 2012, 2012],
            "STRAT": ["FSLR", "FSLR", "FMLR", "FDLR"],
            "PROT": [0, 1, 0, 0],
            "NTOT": [1200, 300, 800, 400],
            "NMTOT": [1100, 300, 700, 400],
        }
    )
    lhp_data = pl.DataFrame(
        {
            "SPECIES_CD": [SPECIES],
            "LC": [50.8],
            "LM": [29.2],
            "WLEN_A": [1.1e-5],
            "WLEN_B": [3.08],
        }
    )
    return SurveyDataset(sample_data, stratum_data, lhp_data)


# =============================================================================
# Example 1: Density by Stratum and Domain
# =============================================================================

def example_density(ds: SurveyDataset):
    """
    Mean fish per station.

    The unsampled FDLR stratum reports null, but its NTOT still counts in
    the domain denominator.
    """
    display_estimate(density(ds, level="stratum"), title="Density by stratum")
    display_estimate(density(ds), title="Domain density")


# =============================================================================
# Example 2: Protected Areas
# =============================================================================

def example_protected(ds: SurveyDataset):
    """Report protected and unprotected areas separately."""
    result = density(ds, level="stratum", merge_protected=False)
    display_estimate(result, title="Density by stratum and protection")


# =============================================================================
# Example 3: Occurrence and Abundance
# =============================================================================

def example_occurrence_abundance(ds: SurveyDataset):
    display_estimate(occurrence(ds), title="Occurrence")
    display_estimate(abundance(ds), title="Abundance", precision=1)


# =============================================================================
# Example 4: Length Classes
# =============================================================================

def example_length_class(ds: SurveyDataset):
    """
    Split density at length at maturity (LM) from the life history table.
    """
    result = density(ds, length_class="lm")
    display_estimate(result, title="Density by maturity class")


# =============================================================================
# Example 5: Biomass
# =============================================================================

def example_biomass(ds: SurveyDataset):
    """
    Biomass uses WLEN_A and WLEN_B unless parameters are passed explicitly.
    """
    display_estimate(biomass(ds), title="Biomass (life history parameters)")
    display_estimate(
        biomass(ds, growth_parameters={SPECIES: (1.0e-5, 3.1)}),
        title="Biomass (custom parameters)",
    )


# =============================================================================
# Example 6: Length Frequency
# =============================================================================

def example_length_frequency(ds: SurveyDataset):
    """Expected fish per station in 5 cm bins."""
    bins = list(range(20, 70, 5))
    result = length_frequency(ds, length_bins=bins)
    display_estimate(result, title="Length frequency", max_rows=len(bins))


if __name__ == "__main__":
    survey = build_survey()
    example_density(survey)
    example_protected(survey)
    example_occurrence_abundance(survey)
    example_length_class(survey)
    example_biomass(survey)
    example_length_frequency(survey)

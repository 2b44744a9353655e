"""
Weighted grouped reduction.

Every statistic is estimated by the same two-stage reduction:

1. Stratum units (year, stratum, protection status and the statistic's own
   group columns) get sample sizes, expansion weights and the sums
   ``yi = Σ wh × y`` and ``var = Σ wh² × c`` over their stations.
2. Units are summed into output groups (stratum or domain level). The
   estimate is ``yi / ΣNTOT`` with variance ``var / ΣNTOT²``, or ``yi`` and
   ``var`` directly for extrapolated totals.

Strata present in the stratum table without sampled stations keep their
NTOT in the denominator and contribute nothing to ``yi`` or ``var``.
"""

from __future__ import annotations

import logging
from typing import Callable

import polars as pl

from ..core.exceptions import EmptyGroup, InvalidDatasetError
from .constants import NMTOT, NTOT, PRESENT, PROT, REGION, SPECIES, STRAT, VALUE, YEAR
from .variance import safe_divide, safe_sqrt, stratified_station_variance
from .weighting import compute_weights

logger = logging.getLogger(__name__)

VarianceFn = Callable[[pl.Expr, pl.Expr, pl.Expr, pl.Expr], pl.Expr]


def output_keys(
    group_cols: list[str], stratum_keys: list[str], level: str, merge_protected: bool
) -> list[str]:
    """Columns identifying an output row for the given level."""
    keys = [SPECIES, YEAR]
    if REGION in stratum_keys:
        keys.append(REGION)
    if level == "stratum":
        keys.append(STRAT)
    if not merge_protected:
        keys.append(PROT)
    return keys + [c for c in group_cols if c not in keys]


def summarize_strata(
    stations: pl.DataFrame,
    strata: pl.DataFrame,
    stratum_keys: list[str],
    group_cols: list[str],
    variance_fn: VarianceFn = stratified_station_variance,
    when_present: bool = False,
) -> pl.DataFrame:
    """
    Reduce station rows to one row per stratum unit.

    Parameters
    ----------
    stations : pl.DataFrame
        Station-level values with stratum keys, group columns, ``y`` and
        ``present``.
    strata : pl.DataFrame
        Stratum table with NTOT (and NMTOT).
    stratum_keys : list[str]
        Columns identifying a stratum.
    group_cols : list[str]
        Statistic grouping columns (species, length class, length bin).
    variance_fn : callable
        Builds the per-station variance contribution from
        ``(y, ybar, n, total)`` expressions.
    when_present : bool
        Restrict the estimate to stations where the species was seen.

    Returns
    -------
    pl.DataFrame
        Unit keys with NTOT, [NMTOT], n, nm, yi and var.
    """
    unit_cols = stratum_keys + [c for c in group_cols if c not in stratum_keys]
    total_col, size_col, weight_col = (
        (NMTOT, "nm", "wh_m") if when_present else (NTOT, "n", "wh")
    )
    frame_cols = [NTOT] + ([NMTOT] if NMTOT in strata.columns else [])

    if when_present:
        if NMTOT not in strata.columns:
            raise InvalidDatasetError("when_present statistics require NMTOT in stratum_data")
        if strata[NMTOT].null_count() > 0:
            raise InvalidDatasetError("stratum_data has null NMTOT values")

    sizes = stations.group_by(unit_cols).agg(
        pl.len().cast(pl.Int64).alias("n"),
        pl.col(PRESENT).sum().cast(pl.Int64).alias("nm"),
    )
    units = sizes.join(strata.select(stratum_keys + frame_cols), on=stratum_keys, how="left")

    weights = compute_weights(units.filter(pl.col(size_col) > 0), unit_cols, when_present)

    active = stations.filter(pl.col(PRESENT)) if when_present else stations
    means = active.group_by(unit_cols).agg(pl.col(VALUE).mean().alias("ybar"))

    totals = (
        active.join(
            weights.select(unit_cols + [weight_col, size_col, total_col]),
            on=unit_cols,
            how="inner",
        )
        .join(means, on=unit_cols, how="inner")
        .with_columns(
            (pl.col(weight_col) * pl.col(VALUE)).alias("_wy"),
            (
                pl.col(weight_col) ** 2
                * variance_fn(
                    pl.col(VALUE), pl.col("ybar"), pl.col(size_col), pl.col(total_col)
                )
            ).alias("_wv"),
        )
        .group_by(unit_cols)
        .agg(
            pl.col("_wy").sum().alias("yi"),
            pl.col("_wv").sum().alias("var"),
        )
    )

    out_cols = unit_cols + frame_cols + ["n", "nm", "yi", "var"]
    units = (
        units.join(totals, on=unit_cols, how="left")
        .with_columns(
            pl.col("yi").fill_null(0.0).cast(pl.Float64),
            pl.col("var").fill_null(0.0).cast(pl.Float64),
        )
        .select(out_cols)
    )

    unsampled = _unsampled_units(stations, strata, stratum_keys, group_cols, frame_cols)
    if not unsampled.is_empty():
        logger.debug(f"{len(unsampled)} unsampled stratum units kept in frame totals")
        units = pl.concat(
            [units, unsampled.select(out_cols).cast(units.schema)], how="vertical"
        )
    return units


def _unsampled_units(
    stations: pl.DataFrame,
    strata: pl.DataFrame,
    stratum_keys: list[str],
    group_cols: list[str],
    frame_cols: list[str],
) -> pl.DataFrame:
    """Stratum rows without stations, crossed with the groups of their year."""
    period_keys = [k for k in stratum_keys if k in (YEAR, REGION)]
    extra_cols = [c for c in group_cols if c not in stratum_keys]
    combos = stations.select(period_keys + extra_cols).unique()
    sampled = stations.select(stratum_keys).unique()
    return (
        strata.select(stratum_keys + frame_cols)
        .join(sampled, on=stratum_keys, how="anti")
        .join(combos, on=period_keys, how="inner")
        .with_columns(
            pl.lit(0, dtype=pl.Int64).alias("n"),
            pl.lit(0, dtype=pl.Int64).alias("nm"),
            pl.lit(0.0).alias("yi"),
            pl.lit(0.0).alias("var"),
        )
    )


def combine_units(
    units: pl.DataFrame,
    keys: list[str],
    value_name: str,
    when_present: bool = False,
    per_station: bool = True,
) -> pl.DataFrame:
    """
    Sum stratum units into output groups and compute the reported estimate.

    Raises
    ------
    EmptyGroup
        If a group's frame total (NTOT, or NMTOT when present) is zero.
    """
    total_col, size_col = (NMTOT, "nm") if when_present else (NTOT, "n")
    sum_cols = [c for c in (NTOT, NMTOT) if c in units.columns] + ["n", "nm", "yi", "var"]

    groups = units.group_by(keys).agg([pl.col(c).sum() for c in sum_cols])

    empty = groups.filter(pl.col(total_col) == 0)
    if not empty.is_empty():
        raise EmptyGroup(empty.select(keys).to_dicts(), total_col)

    if per_station:
        denom = pl.col(total_col).cast(pl.Float64)
        estimate = safe_divide(pl.col("yi"), denom, default=None)
        variance = safe_divide(pl.col("var"), denom**2, default=None)
    else:
        estimate, variance = pl.col("yi"), pl.col("var")

    unsampled = pl.col(size_col) == 0
    frame_cols = [c for c in (NTOT, NMTOT) if c in units.columns]
    return (
        groups.with_columns(
            pl.when(unsampled).then(None).otherwise(estimate).alias(value_name),
            pl.when(unsampled).then(None).otherwise(variance).alias("var"),
        )
        .with_columns(safe_sqrt(pl.col("var")).alias("se"))
        .select(keys + frame_cols + ["n", "nm", value_name, "var", "se"])
        .sort(keys)
    )


def weighted_grouped_reduction(
    stations: pl.DataFrame,
    strata: pl.DataFrame,
    stratum_keys: list[str],
    group_cols: list[str],
    value_name: str,
    variance_fn: VarianceFn = stratified_station_variance,
    level: str = "domain",
    merge_protected: bool = True,
    when_present: bool = False,
    per_station: bool = True,
) -> pl.DataFrame:
    """
    Estimate a statistic from station values at stratum or domain level.

    Parameters
    ----------
    stations : pl.DataFrame
        Station-level values (``y``) and presence flags (``present``).
    strata : pl.DataFrame
        Stratum table with NTOT and optionally NMTOT.
    stratum_keys : list[str]
        Columns identifying a stratum (weighting unit).
    group_cols : list[str]
        Statistic grouping columns, always starting with SPECIES_CD.
    value_name : str
        Name of the estimate column.
    variance_fn : callable
        Per-station variance contribution.
    level : {'stratum', 'domain'}
        Aggregation level.
    merge_protected : bool
        Pool protected and unprotected strata.
    when_present : bool
        Condition on stations where the species was seen.
    per_station : bool
        Divide by the frame total (rates); False reports totals.

    Returns
    -------
    pl.DataFrame
        One row per output group.
    """
    units = summarize_strata(
        stations, strata, stratum_keys, group_cols, variance_fn, when_present
    )
    keys = output_keys(group_cols, stratum_keys, level, merge_protected)
    logger.debug(f"Combining {len(units)} stratum units by {keys}")
    return combine_units(units, keys, value_name, when_present, per_station)

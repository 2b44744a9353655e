"""
Variance calculation functions for RVC estimation.

This module provides the per-station variance contributions used by every
statistic, implementing the classical stratified random sampling variance
(Cochran 1977, Chapter 5).

Stratum Total Variance (V(Y_h)):
--------------------------------

For a stratum h with NTOT_h possible stations and n_h sampled stations:

    V(Y_h) = NTOT_h² × (1 - f_h) × s²_yh / n_h

Where:
- f_h = n_h / NTOT_h (sampling fraction, finite population correction)
- s²_yh = sample variance of station values within stratum h (ddof=1)

Written as a sum over the sampled stations with expansion weight
wh = NTOT_h / n_h:

    V(Y_h) = Σ_s wh² × c_s
    c_s    = (1 - f_h) × n_h × (y_s - ȳ_h)² / (n_h - 1)

so the aggregation engine only ever sums ``wh * y`` and ``wh² * c``.

Proportions:
------------

For a 0/1 presence indicator with stratum proportion p_h,
Σ_s (y_s - p_h)² = n_h × p_h × (1 - p_h), so each station contributes

    c_s = (1 - f_h) × n_h × p_h × (1 - p_h) / (n_h - 1)

Key implementation requirements:
- Include ALL stations (even with zero counts) in variance calculations
- Single-station strata have undefined variance (null, excluded from sums)
- Use ddof=1 for sample variance

Reference:
    Cochran, W.G. 1977. Sampling Techniques, 3rd ed. Wiley, New York.
"""

from __future__ import annotations

from typing import Optional

import polars as pl


def finite_population_correction(n: pl.Expr, total: pl.Expr) -> pl.Expr:
    """Finite population correction ``1 - n / N``."""
    return 1.0 - n.cast(pl.Float64) / total.cast(pl.Float64)


def stratified_station_variance(
    y: pl.Expr, ybar: pl.Expr, n: pl.Expr, total: pl.Expr
) -> pl.Expr:
    """
    Per-station contribution to the stratified variance of a total.

    Parameters
    ----------
    y : pl.Expr
        Station value
    ybar : pl.Expr
        Stratum mean of the station values
    n : pl.Expr
        Number of stations in the active sample of the stratum
    total : pl.Expr
        Frame size of the stratum (NTOT, or NMTOT when present)

    Returns
    -------
    pl.Expr
        ``c_s``; null for single-station strata
    """
    return (
        pl.when(n > 1)
        .then(
            finite_population_correction(n, total)
            * n
            * (y - ybar) ** 2
            / (n - 1)
        )
        .otherwise(None)
    )


def binomial_station_variance(
    y: pl.Expr, p: pl.Expr, n: pl.Expr, total: pl.Expr
) -> pl.Expr:
    """
    Per-station contribution for a 0/1 indicator with stratum proportion p.

    Equal for every station of the stratum; ``y`` is unused but kept so all
    variance expressions share one signature.
    """
    return (
        pl.when(n > 1)
        .then(finite_population_correction(n, total) * n * p * (1.0 - p) / (n - 1))
        .otherwise(None)
    )


def safe_divide(
    numerator: pl.Expr, denominator: pl.Expr, default: Optional[float] = 0.0
) -> pl.Expr:
    """
    Safe division that handles zero denominators.

    Parameters
    ----------
    numerator : pl.Expr
        Numerator expression
    denominator : pl.Expr
        Denominator expression
    default : float, optional
        Value when denominator is zero; None yields null

    Returns
    -------
    pl.Expr
        Safe division expression
    """
    return pl.when(denominator != 0).then(numerator / denominator).otherwise(default)


def safe_sqrt(expr: pl.Expr, default: float = 0.0) -> pl.Expr:
    """
    Safe square root that handles negative values.

    Parameters
    ----------
    expr : pl.Expr
        Expression to take square root of
    default : float
        Default value for negative inputs

    Returns
    -------
    pl.Expr
        Safe square root expression; nulls stay null
    """
    return pl.when(expr < 0).then(default).otherwise(expr.sqrt())

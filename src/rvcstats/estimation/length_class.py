"""
Length class partitioning.

A length class splits each station's length observations at a breakpoint
into ``"< b"`` (exclusive) and ``">= b"`` (inclusive). The breakpoint is a
number or a reference to a life history length (LC or LM), and is resolved
to a number per species before any station is touched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Mapping, Optional, Union

import polars as pl

from ..core.exceptions import InvalidDatasetError, UnresolvableLengthClass
from .constants import LC, LEN, LENGTH_CLASS, LM, NUM, SPECIES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LengthBreakpoint:
    """A literal breakpoint in cm."""

    value: float


@dataclass(frozen=True)
class LifeHistoryReference:
    """A breakpoint taken from the species' life history row."""

    key: Literal["LC", "LM"]


LengthClassSpec = Union[LengthBreakpoint, LifeHistoryReference]
LengthClassInput = Union[LengthClassSpec, float, int, str]


def parse_length_class(value: LengthClassInput) -> LengthClassSpec:
    """
    Parse a breakpoint given as a number, ``"lc"``/``"lm"`` or a spec object.

    Examples
    --------
    >>> parse_length_class(25)
    LengthBreakpoint(value=25.0)
    >>> parse_length_class("lm")
    LifeHistoryReference(key='LM')
    """
    if isinstance(value, (LengthBreakpoint, LifeHistoryReference)):
        return value
    if isinstance(value, str):
        key = value.strip().upper()
        if key not in (LC, LM):
            raise ValueError(f"length_class keyword must be 'lc' or 'lm', got {value!r}")
        return LifeHistoryReference(key=key)
    if isinstance(value, bool):
        raise ValueError("length_class must be a number or 'lc'/'lm'")
    return LengthBreakpoint(value=float(value))


def resolve_breakpoints(
    length_class: Union[LengthClassInput, Mapping[str, LengthClassInput]],
    species: list[str],
    lhp_data: Optional[pl.DataFrame],
) -> dict[str, float]:
    """
    Resolve a length class specification to one breakpoint per species.

    Parameters
    ----------
    length_class : number, str, spec or mapping
        A single specification applied to every species, or a mapping from
        species code to specification.
    species : list[str]
        Species present in the sample data.
    lhp_data : pl.DataFrame, optional
        Life history table used for LC/LM keywords.

    Raises
    ------
    UnresolvableLengthClass
        If a keyword is requested for a species without a life history
        value.
    """
    if isinstance(length_class, Mapping):
        specs = {str(k): parse_length_class(v) for k, v in length_class.items()}
        absent = [spc for spc in species if spc not in specs]
        if absent:
            raise ValueError(f"length_class has no breakpoint for species: {absent}")
    else:
        spec = parse_length_class(length_class)
        specs = {spc: spec for spc in species}

    lhp_rows = {}
    if lhp_data is not None:
        lhp_rows = {row[SPECIES]: row for row in lhp_data.iter_rows(named=True)}

    breakpoints = {}
    for spc in species:
        spec = specs[spc]
        if isinstance(spec, LengthBreakpoint):
            breakpoints[spc] = spec.value
            continue
        row = lhp_rows.get(spc)
        if row is None:
            raise UnresolvableLengthClass(spc, spec.key)
        if row.get(spec.key) is None:
            raise UnresolvableLengthClass(spc, spec.key, f"{spec.key} is missing")
        breakpoints[spc] = float(row[spec.key])
        logger.debug(f"Resolved {spec.key} breakpoint for {spc}: {breakpoints[spc]}")
    return breakpoints


def class_labels(breakpoint: float) -> tuple[str, str]:
    return f"< {breakpoint:g}", f">= {breakpoint:g}"


def partition_by_length(
    sample: pl.DataFrame, breakpoints: Mapping[str, float]
) -> pl.DataFrame:
    """
    Split every station row into a below and an at-or-above row.

    ``LEN`` keeps only the lengths of each class and ``NUM`` is allocated in
    proportion to the measured lengths falling in it.

    Raises
    ------
    InvalidDatasetError
        If LEN is missing or a station counted fish without lengths.
    """
    if LEN not in sample.columns:
        raise InvalidDatasetError("length classes require a LEN column of individual lengths")

    unmeasured = sample.filter((pl.col(NUM) > 0) & (pl.col(LEN).list.len() == 0))
    if not unmeasured.is_empty():
        raise InvalidDatasetError(
            f"{len(unmeasured)} station(s) counted fish without recording lengths; "
            f"cannot assign length classes"
        )

    parts = []
    for spc, b in breakpoints.items():
        rows = sample.filter(pl.col(SPECIES) == spc)
        if rows.is_empty():
            continue
        below_label, above_label = class_labels(b)
        measured = pl.col(LEN).list.len()
        for label, keep in (
            (below_label, pl.element() < b),
            (above_label, pl.element() >= b),
        ):
            kept = pl.col(LEN).list.eval(pl.element().filter(keep))
            parts.append(
                rows.with_columns(
                    pl.when(measured > 0)
                    .then(pl.col(NUM) * kept.list.len() / measured)
                    .otherwise(0.0)
                    .alias(NUM),
                    kept.alias(LEN),
                    pl.lit(label).alias(LENGTH_CLASS),
                )
            )

    if not parts:
        return sample.clear().with_columns(pl.lit(None, dtype=pl.String).alias(LENGTH_CLASS))
    return pl.concat(parts, how="vertical")

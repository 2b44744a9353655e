"""
The SurveyDataset bundle.

A SurveyDataset carries the three RVC tables together: sample data, stratum
metadata (NTOT/NMTOT) and life history parameters. It is created by the
retrieval layer and never mutated by the estimators.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import polars as pl

from ..estimation.constants import (
    NMTOT,
    REGION,
    REQUIRED_LHP_COLUMNS,
    REQUIRED_SAMPLE_COLUMNS,
    REQUIRED_STRATUM_COLUMNS,
    SPECIES,
    STATION,
    STRATUM_KEYS,
    YEAR,
)
from .exceptions import InvalidDatasetError, MissingStratumMetadata, MultipleRegionsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurveyDataset:
    """
    Analysis-ready RVC data.

    Attributes
    ----------
    sample_data : pl.DataFrame
        One row per station, species, year, stratum and protection status,
        with the station count ``NUM`` and optionally a list column ``LEN``
        of individual lengths (cm).
    stratum_data : pl.DataFrame
        One row per year, stratum and protection status with ``NTOT`` and
        optionally ``NMTOT``.
    lhp_data : pl.DataFrame, optional
        Life history parameters per species (``LC``, ``LM``, ``WLEN_A``,
        ``WLEN_B``). None when no data was available for the species.
    """

    sample_data: pl.DataFrame
    stratum_data: pl.DataFrame
    lhp_data: Optional[pl.DataFrame] = None

    @property
    def stratum_keys(self) -> list[str]:
        """Columns identifying a stratum (weighting unit)."""
        if REGION in self.sample_data.columns and REGION in self.stratum_data.columns:
            return [REGION] + STRATUM_KEYS
        return list(STRATUM_KEYS)

    @property
    def has_nmtot(self) -> bool:
        return NMTOT in self.stratum_data.columns

    def species(self) -> list[str]:
        return sorted(self.sample_data[SPECIES].unique().to_list())

    def years(self) -> list[int]:
        return sorted(self.sample_data[YEAR].unique().to_list())

    def life_history(self, species: str) -> Optional[dict]:
        """Return the life history row for a species, or None if absent."""
        if self.lhp_data is None:
            return None
        rows = self.lhp_data.filter(pl.col(SPECIES) == species)
        if rows.is_empty():
            return None
        return rows.row(0, named=True)

    def validate(self) -> "SurveyDataset":
        """
        Check schema and cross-table invariants before any computation.

        Raises
        ------
        InvalidDatasetError
            If required columns are missing, keys are duplicated or a
            sampled station lacks a row for some species.
        MultipleRegionsError
            If sample data spans more than one region.
        MissingStratumMetadata
            If a sampled stratum has no stratum_data row.
        """
        _require_columns(self.sample_data, REQUIRED_SAMPLE_COLUMNS, "sample_data")
        _require_columns(self.stratum_data, REQUIRED_STRATUM_COLUMNS, "stratum_data")
        if self.lhp_data is None:
            logger.warning("No life history data available for selected species")
        else:
            _require_columns(self.lhp_data, REQUIRED_LHP_COLUMNS, "lhp_data")

        if REGION in self.sample_data.columns:
            regions = self.sample_data[REGION].unique().to_list()
            if len(regions) > 1:
                raise MultipleRegionsError(regions)

        keys = self.stratum_keys
        duplicated = self.stratum_data.filter(pl.struct(keys).is_duplicated())
        if not duplicated.is_empty():
            raise InvalidDatasetError(
                f"stratum_data has {len(duplicated)} rows with duplicated keys {keys}"
            )

        station_keys = keys + [STATION, SPECIES]
        repeated = self.sample_data.filter(pl.struct(station_keys).is_duplicated())
        if not repeated.is_empty():
            raise InvalidDatasetError(
                f"sample_data has {len(repeated)} rows sharing station and species keys"
            )

        # Every sampled station carries a row (NUM = 0 when absent) for every species
        stations = self.sample_data.select(keys + [STATION]).unique()
        expected = stations.join(self.sample_data.select(SPECIES).unique(), how="cross")
        unfilled = expected.join(
            self.sample_data.select(station_keys), on=station_keys, how="anti"
        )
        if not unfilled.is_empty():
            shown = unfilled.sort(station_keys).head(5).to_dicts()
            raise InvalidDatasetError(
                f"sample_data is not zero-filled: {len(unfilled)} station/species "
                f"combination(s) have no row, e.g. {shown}. Add NUM = 0 rows for "
                f"species not seen at a sampled station."
            )

        missing = (
            self.sample_data.select(keys)
            .unique()
            .join(self.stratum_data.select(keys), on=keys, how="anti")
            .sort(keys)
        )
        if not missing.is_empty():
            raise MissingStratumMetadata(missing.to_dicts())

        logger.debug(
            f"Validated dataset: {len(self.sample_data)} sample rows, "
            f"{len(self.stratum_data)} strata"
        )
        return self


def _require_columns(df: pl.DataFrame, columns: list[str], table: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise InvalidDatasetError(f"{table} is missing required columns: {missing}")

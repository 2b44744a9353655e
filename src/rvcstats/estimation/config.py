"""
Estimator configuration.

Estimators accept a plain ``config`` dict; it is validated here once, before
any table is touched.
"""

from __future__ import annotations

from typing import Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .growth import GrowthParameters
from .length_class import LengthClassSpec, parse_length_class


class EstimatorConfig(BaseModel):
    """Validated estimation parameters."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    stat: Literal["density", "occurrence", "abundance", "biomass", "length_frequency"] = (
        "density"
    )
    level: Literal["stratum", "domain"] = "domain"
    when_present: bool = False
    merge_protected: bool = True
    growth_parameters: dict[str, GrowthParameters] = Field(default_factory=dict)
    length_class: Optional[Union[LengthClassSpec, dict[str, LengthClassSpec]]] = None
    length_bins: Optional[list[float]] = None

    @field_validator("growth_parameters", mode="before")
    @classmethod
    def _parse_growth(cls, value: Any) -> dict[str, GrowthParameters]:
        if value is None:
            return {}
        return GrowthParameters.from_mapping(value)

    @field_validator("length_class", mode="before")
    @classmethod
    def _parse_length_class(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, Mapping):
            return {str(k): parse_length_class(v) for k, v in value.items()}
        return parse_length_class(value)

    @field_validator("length_bins")
    @classmethod
    def _check_bins(cls, value: Optional[list[float]]) -> Optional[list[float]]:
        if value is None:
            return None
        if len(value) < 2:
            raise ValueError("length_bins needs at least two edges")
        if any(b <= a for a, b in zip(value, value[1:])):
            raise ValueError("length_bins must be strictly increasing")
        return value

    @model_validator(mode="after")
    def _check_when_present(self) -> "EstimatorConfig":
        if self.when_present and self.stat == "occurrence":
            raise ValueError("when_present is not meaningful for occurrence")
        return self

    @classmethod
    def from_dict(cls, config: Optional[Mapping[str, Any]]) -> "EstimatorConfig":
        if isinstance(config, EstimatorConfig):
            return config
        return cls(**{k: v for k, v in (config or {}).items() if v is not None})

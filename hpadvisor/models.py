# hpadvisor/models.py
from __future__ import annotations
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .catalog import get_bivalent_point, get_building_type, get_grid_connection
from .errors import InputValidationError


# Manual energy input for one analysis session
class ManualEnergyData(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    building_type: str
    apartment_size: Optional[str] = None     # label only, not used in calculations
    unit_count: int = Field(gt=0)
    is_coastal: bool
    grid_connection_id: str

    electricity_offtake_kwh: float = Field(ge=0)   # yearly
    electricity_feed_in_kwh: float = Field(ge=0)   # yearly
    gas_m3: float = Field(gt=0)                    # yearly
    dhw_liters_per_day: float = Field(ge=0)

    occupancy_weekday_start: int = Field(ge=0, le=23)
    occupancy_weekday_end: int = Field(ge=0, le=23)
    occupancy_weekend_start: int = Field(ge=0, le=23)
    occupancy_weekend_end: int = Field(ge=0, le=23)

    gas_price_per_m3: float = Field(ge=0)
    electricity_price_per_kwh: float = Field(ge=0)
    feed_in_tariff_per_kwh: float = Field(ge=0)
    feed_in_penalty_per_kwh: float = Field(ge=0)
    net_metering_enabled: bool
    bivalent_point: str

    @field_validator("building_type")
    @classmethod
    def _known_building_type(cls, v: str) -> str:
        if get_building_type(v) is None:
            raise ValueError(f"unknown building type '{v}'")
        return v

    @field_validator("grid_connection_id")
    @classmethod
    def _known_grid_connection(cls, v: str) -> str:
        if get_grid_connection(v) is None:
            raise ValueError(f"unknown grid connection '{v}'")
        return v

    @field_validator("bivalent_point", mode="before")
    @classmethod
    def _known_bivalent_point(cls, v: Any) -> str:
        v = str(v)
        if get_bivalent_point(v) is None:
            raise ValueError(f"unknown bivalent point '{v}'")
        return v


def _failures(exc: ValidationError) -> list[tuple[str, str]]:
    out = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"]) or "__root__"
        out.append((field, err["msg"]))
    return out


def validate_energy_data(values: Mapping[str, Any] | None = None, **kwargs) -> ManualEnergyData:
    """Build a ManualEnergyData or raise InputValidationError listing every failed field."""
    payload = dict(values or {})
    payload.update(kwargs)
    try:
        return ManualEnergyData(**payload)
    except ValidationError as exc:
        raise InputValidationError(_failures(exc)) from exc


def replace_energy_data(data: ManualEnergyData, **changes) -> ManualEnergyData:
    """Re-edit: a complete, re-validated replacement of the session input."""
    return validate_energy_data(data.model_dump(), **changes)

# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/catalog.py
# Reference tables: building types, heat pump catalog, grid connections,
# bivalent points. Parsed once per process, read-only afterwards.
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from .data_loading import (
    load_bivalent_points,
    load_building_types,
    load_grid_connections,
    load_heat_pumps,
)
from .errors import ReferenceDataError

OCCUPANCY_PROFILES = (
    "residential", "office", "healthcare", "healthcare_24h",
    "hospitality", "school", "sports",
)


@dataclass(frozen=True)
class BuildingType:
    id: str
    name: str
    gas_to_kwh_factor: float
    hot_water_percent: float
    default_dhw_liters_per_unit: float
    occupancy_profile: str


@dataclass(frozen=True)
class HeatPumpModel:
    id: str
    name: str
    type: str              # "MT" or "HT"
    power_kw: float
    scop: float
    max_flow_temp_c: float
    refrigerant: str
    gwp: int
    length_mm: int
    width_mm: int
    height_mm: int
    weight_kg: int
    max_current_a: float
    connection: str
    price_eur: float
    is_ec: bool            # coated for coastal sites
    price_on_request: bool = False


@dataclass(frozen=True)
class GridConnection:
    id: str
    max_current_a: float
    max_power_kw: float


@dataclass(frozen=True)
class BivalentPoint:
    id: str
    name: str
    switchover_temp_c: float
    beta_factor: float        # share of peak thermal power the HP must deliver
    coverage_percent: float   # share of annual heat the HP supplies

    @property
    def coverage_fraction(self) -> float:
        return self.coverage_percent / 100.0


def _records(df) -> list[dict]:
    return df.to_dict(orient="records")


@lru_cache(maxsize=None)
def building_types() -> Mapping[str, BuildingType]:
    out = {}
    for r in _records(load_building_types()):
        if r["occupancy_profile"] not in OCCUPANCY_PROFILES:
            raise ReferenceDataError(
                f"Building type '{r['id']}' has unknown occupancy profile '{r['occupancy_profile']}'"
            )
        out[r["id"]] = BuildingType(
            id=r["id"],
            name=str(r["name"]),
            gas_to_kwh_factor=float(r["gas_to_kwh_factor"]),
            hot_water_percent=float(r["hot_water_percent"]),
            default_dhw_liters_per_unit=float(r["default_dhw_liters_per_unit"]),
            occupancy_profile=str(r["occupancy_profile"]),
        )
    return MappingProxyType(out)


@lru_cache(maxsize=None)
def heat_pump_models() -> tuple[HeatPumpModel, ...]:
    models = []
    for r in _records(load_heat_pumps()):
        models.append(
            HeatPumpModel(
                id=r["id"],
                name=str(r["name"]),
                type=str(r["type"]),
                power_kw=float(r["power_kw"]),
                scop=float(r["scop"]),
                max_flow_temp_c=float(r["max_flow_temp_c"]),
                refrigerant=str(r["refrigerant"]),
                gwp=int(r["gwp"]),
                length_mm=int(r["length_mm"]),
                width_mm=int(r["width_mm"]),
                height_mm=int(r["height_mm"]),
                weight_kg=int(r["weight_kg"]),
                max_current_a=float(r["max_current_a"]),
                connection=str(r["connection"]),
                price_eur=float(r["price_eur"]),
                is_ec=bool(r["is_ec"]),
                price_on_request=bool(r["price_on_request"]),
            )
        )
    return tuple(models)


@lru_cache(maxsize=None)
def grid_connections() -> Mapping[str, GridConnection]:
    out = {
        r["id"]: GridConnection(
            id=r["id"],
            max_current_a=float(r["max_current_a"]),
            max_power_kw=float(r["max_power_kw"]),
        )
        for r in _records(load_grid_connections())
    }
    return MappingProxyType(out)


@lru_cache(maxsize=None)
def bivalent_points() -> Mapping[str, BivalentPoint]:
    out = {
        r["id"]: BivalentPoint(
            id=r["id"],
            name=str(r["name"]),
            switchover_temp_c=float(r["switchover_temp_c"]),
            beta_factor=float(r["beta_factor"]),
            coverage_percent=float(r["coverage_percent"]),
        )
        for r in _records(load_bivalent_points())
    }
    return MappingProxyType(out)


# ---------------------------------------------------------------------
# lookups: get_* -> None for unknown ids, require_* -> KeyError
# ---------------------------------------------------------------------
def get_building_type(building_type_id: str) -> BuildingType | None:
    return building_types().get(building_type_id)


def get_heat_pump_model(model_id: str) -> HeatPumpModel | None:
    for m in heat_pump_models():
        if m.id == model_id:
            return m
    return None


def get_grid_connection(connection_id: str) -> GridConnection | None:
    return grid_connections().get(connection_id)


def get_bivalent_point(bivalent_id: str) -> BivalentPoint | None:
    return bivalent_points().get(str(bivalent_id))


def require_building_type(building_type_id: str) -> BuildingType:
    bt = get_building_type(building_type_id)
    if bt is None:
        raise KeyError(f"Building type '{building_type_id}' not found in building_types")
    return bt


def require_heat_pump_model(model_id: str) -> HeatPumpModel:
    m = get_heat_pump_model(model_id)
    if m is None:
        raise KeyError(f"Heat pump model '{model_id}' not found in heat_pumps")
    return m


def require_grid_connection(connection_id: str) -> GridConnection:
    c = get_grid_connection(connection_id)
    if c is None:
        raise KeyError(f"Grid connection '{connection_id}' not found in grid_connections")
    return c


def require_bivalent_point(bivalent_id: str) -> BivalentPoint:
    b = get_bivalent_point(bivalent_id)
    if b is None:
        raise KeyError(f"Bivalent point '{bivalent_id}' not found in bivalent_points")
    return b

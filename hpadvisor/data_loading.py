# hpadvisor/data_loading.py
from __future__ import annotations
from pathlib import Path
import os
import json

import pandas as pd

from .errors import ReferenceDataError

DATA_DIR_ENV = "HPADVISOR_DATA_DIR"

_BUILDING_COLUMNS = [
    "id", "name", "gas_to_kwh_factor", "hot_water_percent",
    "default_dhw_liters_per_unit", "occupancy_profile",
]
_HEAT_PUMP_COLUMNS = [
    "id", "name", "type", "power_kw", "scop", "max_flow_temp_c", "refrigerant",
    "gwp", "length_mm", "width_mm", "height_mm", "weight_kg", "max_current_a",
    "connection", "price_eur", "is_ec", "price_on_request",
]
_GRID_COLUMNS = ["id", "max_current_a", "max_power_kw"]
_BIVALENT_COLUMNS = ["id", "name", "switchover_temp_c", "beta_factor", "coverage_percent"]
_PRICE_TEMP_COLUMNS = ["price_ct_per_kWh", "gas_price_eur_per_m3", "temperature_C"]


# you can call this with either str or Path
def _to_path(p) -> Path:
    return Path(p).expanduser().resolve()


def data_dir() -> Path:
    """Directory holding the reference tables (package data unless overridden)."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return _to_path(override)
    return Path(__file__).resolve().parent / "data"


def _read_table(path: Path, columns: list[str]) -> pd.DataFrame:
    # ids like "0" or "-7" must stay strings
    df = pd.read_csv(path, dtype={"id": str})
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ReferenceDataError(f"{path.name} is missing columns: {missing}")
    if df["id"].duplicated().any():
        dupes = sorted(df.loc[df["id"].duplicated(), "id"].unique())
        raise ReferenceDataError(f"{path.name} has duplicate ids: {dupes}")
    return df


def load_building_types(path: str | Path | None = None) -> pd.DataFrame:
    """Load building_types.csv"""
    path = _to_path(path) if path is not None else data_dir() / "building_types.csv"
    df = _read_table(path, _BUILDING_COLUMNS)
    if not df["hot_water_percent"].between(0, 100).all():
        raise ReferenceDataError(f"{path.name}: hot_water_percent must be within 0..100")
    return df


def load_heat_pumps(path: str | Path | None = None) -> pd.DataFrame:
    """Load heat_pumps.csv -> one row per catalog model"""
    path = _to_path(path) if path is not None else data_dir() / "heat_pumps.csv"
    df = _read_table(path, _HEAT_PUMP_COLUMNS)
    for col in ("is_ec", "price_on_request"):
        df[col] = df[col].astype(str).str.lower().map({"true": True, "false": False})
        if df[col].isna().any():
            raise ReferenceDataError(f"{path.name}: column {col} must be true/false")
    if (df["power_kw"] <= 0).any() or (df["scop"] <= 0).any():
        raise ReferenceDataError(f"{path.name}: power_kw and scop must be positive")
    if not df["type"].isin(["MT", "HT"]).all():
        raise ReferenceDataError(f"{path.name}: type must be MT or HT")
    return df


def load_grid_connections(path: str | Path | None = None) -> pd.DataFrame:
    """Load grid_connections.csv -> columns: id, max_current_a, max_power_kw"""
    path = _to_path(path) if path is not None else data_dir() / "grid_connections.csv"
    return _read_table(path, _GRID_COLUMNS)


def load_bivalent_points(path: str | Path | None = None) -> pd.DataFrame:
    """Load bivalent_points.csv"""
    path = _to_path(path) if path is not None else data_dir() / "bivalent_points.csv"
    df = _read_table(path, _BIVALENT_COLUMNS)
    if not df["beta_factor"].between(0, 1).all() or not df["coverage_percent"].between(0, 100).all():
        raise ReferenceDataError(f"{path.name}: beta_factor or coverage_percent out of range")
    return df


def load_load_profiles(path: str | Path | None = None) -> dict:
    """Load load_profiles.json (occupancy, gas heating and solar weight curves)"""
    path = _to_path(path) if path is not None else data_dir() / "load_profiles.json"
    with open(path, "r", encoding="utf-8") as f:
        curves = json.load(f)

    named = [(f"occupancy.{k}", v) for k, v in curves.get("occupancy", {}).items()]
    named += [("gas_heating", curves.get("gas_heating")), ("solar", curves.get("solar"))]
    for name, curve in named:
        if not curve:
            raise ReferenceDataError(f"{path.name}: missing curve {name}")
        if len(curve.get("hourly_factors", [])) != 24 or len(curve.get("monthly_factors", [])) != 12:
            raise ReferenceDataError(f"{path.name}: curve {name} needs 24 hourly and 12 monthly factors")
    return curves


def load_price_temp_csv(path: str | Path) -> pd.DataFrame:
    """Load a recorded price/temperature file as an hourly frame.

    Expected columns: timestamp, price_ct_per_kWh, gas_price_eur_per_m3, temperature_C
    Sub-hourly rows (quarter-hour exports, a repeated DST hour) are averaged per hour.
    """
    path = _to_path(path)
    df = pd.read_csv(path, parse_dates=["timestamp"])
    missing = [c for c in _PRICE_TEMP_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name} is missing columns: {missing}")
    hour = df["timestamp"].dt.floor("h").rename("timestamp")
    return df.groupby(hour, sort=True)[_PRICE_TEMP_COLUMNS].mean()


def load_meter_readings(path: str | Path) -> pd.DataFrame:
    """Smart-meter export ingestion is not supported; use the manual input path."""
    raise NotImplementedError(
        f"meter file upload is not available ({_to_path(path).name}); enter yearly totals instead"
    )

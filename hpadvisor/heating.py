# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/heating.py
# Synthetic hourly heat pump draw from degree-hours, occupancy and COP(T)
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations
from dataclasses import dataclass, replace
import logging

import numpy as np
import pandas as pd

from .catalog import HeatPumpModel, require_bivalent_point
from .constants import (
    COP_DROP_PER_K,
    COP_GAIN_PER_K,
    COP_MIN,
    COP_REFERENCE_TEMP_C,
    DEFAULT_OUTDOOR_TEMP_C,
    HEATING_THRESHOLD_C,
    NIGHT_SETBACK_END_HOUR,
    NIGHT_SETBACK_FACTOR,
    OCCUPIED_FACTOR,
    POST_OCCUPANCY_FACTOR,
    POST_OCCUPANCY_HOURS,
    PREHEAT_FACTOR,
    PREHEAT_HOURS,
    UNOCCUPIED_FACTOR,
)
from .heat_demand import useful_heat_kwh
from .models import ManualEnergyData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeatPumpProfile:
    building_type: str
    heat_pump_capacity_kw: float
    data: pd.DataFrame          # index: timestamp, columns: power_kW, heat_kW, cop
    peak_power_kw: float
    avg_power_kw: float
    min_power_kw: float         # smallest non-zero draw
    start: pd.Timestamp
    end: pd.Timestamp

    @property
    def total_data_points(self) -> int:
        return len(self.data)

    @property
    def total_kwh(self) -> float:
        # hourly points: kW == kWh
        return float(self.data["power_kW"].sum())


def calculate_cop(outdoor_temp_c, scop: float):
    """COP at an outdoor temperature; SCOP is rated at A7/W35.

    Above 7 °C COP rises 1 %/K, below it drops 2.5 %/K with a floor of 2.0.
    Works on scalars and numpy arrays.
    """
    t = np.asarray(outdoor_temp_c, dtype=float)
    above = scop * (1.0 + (t - COP_REFERENCE_TEMP_C) * COP_GAIN_PER_K)
    below = np.maximum(COP_MIN, scop * (1.0 - (COP_REFERENCE_TEMP_C - t) * COP_DROP_PER_K))
    cop = np.where(t >= COP_REFERENCE_TEMP_C, above, below)
    return float(cop) if cop.ndim == 0 else cop


def _occupancy_window(is_weekend, data: ManualEnergyData):
    start = np.where(is_weekend, data.occupancy_weekend_start, data.occupancy_weekday_start)
    end = np.where(is_weekend, data.occupancy_weekend_end, data.occupancy_weekday_end)
    return start, end


def occupancy_factors(hours, is_weekend, data: ManualEnergyData) -> np.ndarray:
    """Heating multiplier per hour; the first matching rule wins.

    occupied (end hour inclusive) 1.0, night 00-06h 0.3, two hours of
    pre-heat 1.2, two hours after occupancy 0.7, otherwise 0.5.
    """
    h = np.asarray(hours, dtype=int)
    start, end = _occupancy_window(np.asarray(is_weekend, dtype=bool), data)
    conditions = [
        (h >= start) & (h <= end),
        h < NIGHT_SETBACK_END_HOUR,
        (h >= start - PREHEAT_HOURS) & (h < start),
        (h > end) & (h <= end + POST_OCCUPANCY_HOURS),
    ]
    choices = [OCCUPIED_FACTOR, NIGHT_SETBACK_FACTOR, PREHEAT_FACTOR, POST_OCCUPANCY_FACTOR]
    return np.select(conditions, choices, default=UNOCCUPIED_FACTOR)


def occupancy_factor(hour: int, is_weekend: bool, data: ManualEnergyData) -> float:
    return float(occupancy_factors([hour], [is_weekend], data)[0])


def degree_hours(tout_c: np.ndarray) -> np.ndarray:
    return np.maximum(0.0, HEATING_THRESHOLD_C - np.asarray(tout_c, dtype=float))


def _summarize(building_type: str, capacity_kw: float, df: pd.DataFrame) -> HeatPumpProfile:
    p = df["power_kW"].to_numpy()
    running = p[p > 0]
    return HeatPumpProfile(
        building_type=building_type,
        heat_pump_capacity_kw=capacity_kw,
        data=df,
        peak_power_kw=float(running.max()) if running.size else 0.0,
        avg_power_kw=float(p.mean()) if p.size else 0.0,
        min_power_kw=float(running.min()) if running.size else 0.0,
        start=df.index[0] if len(df) else None,
        end=df.index[-1] if len(df) else None,
    )


def generate_synthetic_hp_profile(
    data: ManualEnergyData,
    model: HeatPumpModel,
    temperatures: pd.Series,
    start,
    end,
) -> HeatPumpProfile:
    """Hourly electrical draw of one heat pump unit between ``start`` and ``end``.

    The heat pump's yearly share of the heat demand (coverage of the bivalent
    point) is spread over the hours by degree-hours below 15 °C, scaled by the
    occupancy schedule and converted to electricity with COP(T). Hours warmer
    than both the bivalent point and 15 °C are switched off.
    """
    biv = require_bivalent_point(data.bivalent_point)
    hp_heat_kwh = useful_heat_kwh(data.gas_m3) * biv.coverage_fraction

    idx = pd.date_range(pd.Timestamp(start), pd.Timestamp(end), freq="h", name="timestamp")
    tout = temperatures.reindex(idx)
    n_missing = int(tout.isna().sum())
    if n_missing:
        logger.warning(
            "%d of %d hours have no outdoor temperature; using %.1f °C",
            n_missing, len(idx), DEFAULT_OUTDOOR_TEMP_C,
        )
    tout = tout.fillna(DEFAULT_OUTDOOR_TEMP_C).to_numpy(dtype=float)

    dh = degree_hours(tout)
    total_dh = float(dh.sum())
    heat_kwh = hp_heat_kwh * dh / total_dh if total_dh > 0 else np.zeros(len(idx))

    occ = occupancy_factors(idx.hour, idx.dayofweek >= 5, data)
    heat_kwh = heat_kwh * occ

    cop = calculate_cop(tout, model.scop)
    active = (tout <= biv.switchover_temp_c) | (tout <= HEATING_THRESHOLD_C)

    df = pd.DataFrame(
        {
            "power_kW": np.where(active, heat_kwh / cop, 0.0),
            "heat_kW": np.where(active, heat_kwh, 0.0),
            "cop": np.where(active, cop, np.nan),
        },
        index=idx,
    )

    logger.debug(
        "synthetic profile %s: %d hours, hp heat %.0f kWh, electricity %.0f kWh",
        model.id, len(df), hp_heat_kwh, df["power_kW"].sum(),
    )
    return _summarize(data.building_type, model.power_kw, df)


def scale_hp_profile(profile: HeatPumpProfile, scale_factor: float) -> HeatPumpProfile:
    """Rescale a one-unit profile to another installed unit count."""
    f = float(scale_factor)
    df = profile.data.copy()
    df["power_kW"] = df["power_kW"] * f
    df["heat_kW"] = df["heat_kW"] * f
    return replace(
        profile,
        data=df,
        peak_power_kw=profile.peak_power_kw * f,
        avg_power_kw=profile.avg_power_kw * f,
        min_power_kw=profile.min_power_kw * f,
    )

# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/profiles.py
# Hourly building profile (offtake, feed-in, gas) from yearly totals
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations
from functools import lru_cache

import numpy as np
import pandas as pd

from .catalog import require_building_type
from .data_loading import load_load_profiles

PROFILE_COLUMNS = ["offtake_kWh", "feed_in_kWh", "gas_m3"]


@lru_cache(maxsize=None)
def _curves() -> dict:
    return load_load_profiles()


def year_index(year: int) -> pd.DatetimeIndex:
    """Every hour of ``year`` (8760 or 8784 stamps)."""
    return pd.date_range(
        f"{int(year)}-01-01 00:00", f"{int(year)}-12-31 23:00", freq="h", name="timestamp"
    )


def hourly_weights(index: pd.DatetimeIndex, curve: dict, weekend_factor: float | None = None) -> np.ndarray:
    hourly = np.asarray(curve["hourly_factors"], dtype=float)
    monthly = np.asarray(curve["monthly_factors"], dtype=float)
    w = hourly[index.hour] * monthly[index.month - 1]
    if weekend_factor is not None:
        w = w * np.where(index.dayofweek >= 5, float(weekend_factor), 1.0)
    return w


def allocate(total: float, weights: np.ndarray) -> np.ndarray:
    """Spread ``total`` over the weights; the result sums to ``total``."""
    weight_sum = float(weights.sum())
    if weight_sum <= 0:
        return np.zeros_like(weights, dtype=float)
    return float(total) * (weights / weight_sum)


def get_profile_type(building_type_id: str) -> str:
    return require_building_type(building_type_id).occupancy_profile


def generate_profile(
    building_type_id: str,
    yearly_electricity_kwh: float,
    yearly_gas_m3: float,
    yearly_feed_in_kwh: float,
    year: int,
) -> pd.DataFrame:
    """Return the hourly building series for one calendar year.

    columns: [offtake_kWh, feed_in_kWh, gas_m3], index: hourly ``timestamp``.
    Electricity follows the occupancy curve of the building type, gas the
    heating curve and feed-in the solar curve.
    """
    curves = _curves()
    occupancy = curves["occupancy"][get_profile_type(building_type_id)]
    idx = year_index(year)

    elec_w = hourly_weights(idx, occupancy, occupancy["weekend_factor"])
    gas_w = hourly_weights(idx, curves["gas_heating"])
    solar_w = hourly_weights(idx, curves["solar"])

    return pd.DataFrame(
        {
            "offtake_kWh": allocate(yearly_electricity_kwh, elec_w),
            "feed_in_kWh": allocate(yearly_feed_in_kwh, solar_w),
            "gas_m3": allocate(yearly_gas_m3, gas_w),
        },
        index=idx,
    )


def summarize_profile(profile: pd.DataFrame) -> dict:
    """Totals and span of a building series."""
    if profile.empty:
        return {
            "total_offtake_kWh": 0.0, "total_feed_in_kWh": 0.0, "total_gas_m3": 0.0,
            "start": None, "end": None, "interval_minutes": None,
        }
    step = profile.index.to_series().diff().dropna()
    interval = int(step.median().total_seconds() // 60) if len(step) else None
    return {
        "total_offtake_kWh": float(profile["offtake_kWh"].sum()),
        "total_feed_in_kWh": float(profile["feed_in_kWh"].sum()),
        "total_gas_m3": float(profile["gas_m3"].sum()),
        "start": profile.index[0],
        "end": profile.index[-1],
        "interval_minutes": interval,
    }

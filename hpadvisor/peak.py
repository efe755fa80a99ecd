# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/peak.py
# Building + heat pump load against the grid connection, overload events
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations
from dataclasses import dataclass
import logging

import numpy as np
import pandas as pd

from .catalog import require_grid_connection
from .constants import DEFAULT_INTERVAL_MINUTES

logger = logging.getLogger(__name__)

EVENT_COLUMNS = ["start", "end", "duration_minutes", "peak_exceedance_kW", "avg_exceedance_kW"]


@dataclass(frozen=True)
class PeakLoadResult:
    peak_power_kw: float
    avg_power_kw: float
    connection_capacity_kw: float
    exceedance_count: int
    exceedance_percent: float
    event_count: int
    min_exceedance_duration_min: float
    max_exceedance_duration_hours: float
    median_exceedance_duration_min: float
    total_exceedance_time_hours: float


def _month_day_hour(index: pd.DatetimeIndex) -> pd.MultiIndex:
    return pd.MultiIndex.from_arrays([index.month, index.day, index.hour], names=["month", "day", "hour"])


def merge_loads(
    building: pd.DataFrame,
    hp_profile: pd.DataFrame,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
) -> pd.DataFrame:
    """Combine building offtake and heat pump draw per hour.

    The heat pump series is matched on (month, day, hour), so both series
    must cover the same single year. Hours without a heat pump value count
    as 0 kW.
    """
    interval_h = interval_minutes / 60.0
    building_kw = building["offtake_kWh"].fillna(0.0).to_numpy(dtype=float) / interval_h

    hp = hp_profile["power_kW"]
    hp_by_key = pd.Series(hp.to_numpy(dtype=float), index=_month_day_hour(hp.index))
    # on duplicate keys the later point wins
    hp_by_key = hp_by_key[~hp_by_key.index.duplicated(keep="last")]
    hp_kw = hp_by_key.reindex(_month_day_hour(building.index)).fillna(0.0).to_numpy()

    return pd.DataFrame(
        {
            "building_kW": building_kw,
            "hp_kW": hp_kw,
            "combined_kW": building_kw + hp_kw,
            "is_exceedance": False,
            "exceedance_kW": 0.0,
        },
        index=building.index.rename("timestamp"),
    )


def flag_exceedances(combined: pd.DataFrame, capacity_kw: float) -> pd.DataFrame:
    """Mark hours strictly above the connection capacity (returns a copy)."""
    out = combined.copy()
    over = out["combined_kW"].to_numpy() > capacity_kw
    out["is_exceedance"] = over
    out["exceedance_kW"] = np.where(over, out["combined_kW"].to_numpy() - capacity_kw, 0.0)
    return out


def find_exceedance_events(
    flagged: pd.DataFrame,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
) -> pd.DataFrame:
    """Group consecutive exceedance hours into events.

    columns: [start, end, duration_minutes, peak_exceedance_kW, avg_exceedance_kW]
    A run still open at the end of the series is closed there.
    """
    flags = flagged["is_exceedance"].astype(bool)
    if not flags.any():
        return pd.DataFrame(columns=EVENT_COLUMNS)

    run_id = (flags != flags.shift(fill_value=False)).cumsum()
    runs = flagged.loc[flags, ["exceedance_kW"]].copy()
    runs["run"] = run_id[flags].to_numpy()
    runs["ts"] = runs.index
    events = (
        runs.groupby("run", sort=True)
        .agg(
            start=("ts", "first"),
            end=("ts", "last"),
            n=("ts", "size"),
            peak_exceedance_kW=("exceedance_kW", "max"),
            avg_exceedance_kW=("exceedance_kW", "mean"),
        )
        .reset_index(drop=True)
    )
    events["duration_minutes"] = events["n"] * float(interval_minutes)
    return events[EVENT_COLUMNS]


def analyze_peak_load(
    combined: pd.DataFrame,
    grid_connection_id: str,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
) -> tuple[PeakLoadResult, pd.DataFrame]:
    """Return (peak_result, flagged_series) for a combined load series."""
    connection = require_grid_connection(grid_connection_id)
    capacity = connection.max_power_kw

    flagged = flag_exceedances(combined, capacity)
    load = flagged["combined_kW"].to_numpy()
    n = len(load)
    n_over = int(flagged["is_exceedance"].sum())

    events = find_exceedance_events(flagged, interval_minutes)
    durations = events["duration_minutes"].to_numpy(dtype=float)

    result = PeakLoadResult(
        peak_power_kw=float(max(0.0, load.max())) if n else 0.0,
        avg_power_kw=float(load.mean()) if n else 0.0,
        connection_capacity_kw=capacity,
        exceedance_count=n_over,
        exceedance_percent=n_over / n * 100.0 if n else 0.0,
        event_count=len(events),
        min_exceedance_duration_min=float(durations.min()) if durations.size else 0.0,
        max_exceedance_duration_hours=float(durations.max()) / 60.0 if durations.size else 0.0,
        median_exceedance_duration_min=float(np.median(durations)) if durations.size else 0.0,
        total_exceedance_time_hours=float(durations.sum()) / 60.0,
    )

    if n_over:
        logger.warning(
            "%s (%.1f kW) exceeded in %d hours, %d events, peak %.1f kW",
            connection.id, capacity, n_over, len(events), result.peak_power_kw,
        )
    return result, flagged

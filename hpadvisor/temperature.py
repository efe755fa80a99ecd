# hpadvisor/temperature.py
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

# (lower, upper) °C, lower bound inclusive
TEMPERATURE_BINS = [(-15, -10), (-10, -5), (-5, 0), (0, 5), (5, 10), (10, 15), (15, 20), (20, 35)]


@dataclass(frozen=True)
class TemperatureCorrelation:
    min_temp_c: float
    max_temp_c: float
    avg_temp_c: float
    count: int = 0
    temperatures: tuple[float, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return self.count == 0


def correlate_temperatures(flagged: pd.DataFrame, temperatures: pd.Series) -> TemperatureCorrelation:
    """Outdoor temperature statistics over the exceedance hours only.

    Exceedance hours without a temperature are skipped; no exceedances gives
    an all-zero result with ``count == 0``.
    """
    over_idx = flagged.index[flagged["is_exceedance"].to_numpy(dtype=bool)]
    temps = temperatures.reindex(over_idx).dropna().to_numpy(dtype=float)
    if temps.size == 0:
        return TemperatureCorrelation(0.0, 0.0, 0.0)
    return TemperatureCorrelation(
        min_temp_c=float(temps.min()),
        max_temp_c=float(temps.max()),
        avg_temp_c=float(temps.mean()),
        count=int(temps.size),
        temperatures=tuple(float(t) for t in temps),
    )


def temperature_distribution(temperatures) -> pd.DataFrame:
    """Count of temperatures per 5 K band -> columns: lower_C, upper_C, count"""
    t = np.asarray(list(temperatures), dtype=float)
    rows = [
        {"lower_C": lo, "upper_C": hi, "count": int(((t >= lo) & (t < hi)).sum())}
        for lo, hi in TEMPERATURE_BINS
    ]
    return pd.DataFrame(rows)

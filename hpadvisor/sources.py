# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/sources.py
# Hourly outdoor temperature and spot price providers
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations
from typing import Protocol

import numpy as np
import pandas as pd

PRICE_TEMP_COLUMNS = ["price_ct_per_kWh", "gas_price_eur_per_m3", "temperature_C"]


class PriceTempSource(Protocol):
    def hourly(self, index: pd.DatetimeIndex) -> pd.DataFrame:
        """Frame indexed like ``index`` with PRICE_TEMP_COLUMNS; NaN where unknown."""
        ...


class SyntheticPriceTempSource:
    """Random placeholder weather and prices with a seasonal and daily shape.

    temperature: 10 + 8 sin((month-3) pi/6) + 3 sin((hour-14) pi/12) +- 2 °C
    price: 22 ct/kWh, +15 at 07-09h, +20 at 17-20h, +- 5 ct
    gas: 1.40 +- 0.10 EUR/m3
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed

    def hourly(self, index: pd.DatetimeIndex) -> pd.DataFrame:
        # same seed, same year -> same data
        rng = np.random.default_rng(self.seed)
        n = len(index)
        month = index.month.to_numpy() - 1
        hour = index.hour.to_numpy()

        base_temp = 10 + 8 * np.sin((month - 3) * np.pi / 6)
        daily_temp = 3 * np.sin((hour - 14) * np.pi / 12)
        temp = base_temp + daily_temp + (rng.random(n) - 0.5) * 4

        peak = np.select([(hour >= 7) & (hour <= 9), (hour >= 17) & (hour <= 20)], [15.0, 20.0], default=0.0)
        price = 22 + peak + (rng.random(n) - 0.5) * 10
        gas = 1.40 + (rng.random(n) - 0.5) * 0.2

        return pd.DataFrame(
            {"price_ct_per_kWh": price, "gas_price_eur_per_m3": gas, "temperature_C": temp},
            index=index,
        )


class FramePriceTempSource:
    """Serves a recorded or hand-made hourly frame (fixtures, loaded CSV)."""

    def __init__(self, frame: pd.DataFrame):
        missing = [c for c in PRICE_TEMP_COLUMNS if c not in frame.columns]
        if missing:
            raise ValueError(f"price/temperature frame is missing columns: {missing}")
        self.frame = frame[PRICE_TEMP_COLUMNS].sort_index()

    def hourly(self, index: pd.DatetimeIndex) -> pd.DataFrame:
        return self.frame.reindex(index)

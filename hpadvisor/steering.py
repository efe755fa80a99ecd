# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/steering.py
# Greedy day-ahead load shifting of heat pump consumption (pre-heating)
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations
from dataclasses import dataclass
import logging

import numpy as np
import pandas as pd

from .constants import (
    CHEAP_PRICE_RATIO,
    DEFAULT_BUFFER_CAPACITY_KWH,
    DEFAULT_MAX_SHIFT_RATIO,
    DEFAULT_PRICE_CT_PER_KWH,
    EXPENSIVE_PRICE_RATIO,
)

logger = logging.getLogger(__name__)

HOURLY_COLUMNS = [
    "original_kWh", "steered_kWh", "price_ct_per_kWh", "original_cost_eur", "steered_cost_eur",
]


@dataclass(frozen=True)
class SmartSteeringResult:
    cost_without_steering_eur: float
    cost_with_steering_eur: float
    shifted_kwh: float
    hourly: pd.DataFrame     # index: timestamp, columns: HOURLY_COLUMNS

    @property
    def savings_eur(self) -> float:
        return self.cost_without_steering_eur - self.cost_with_steering_eur

    @property
    def steered_profile(self) -> pd.Series:
        return self.hourly["steered_kWh"]


def steer_day(
    kwh: pd.Series,
    price_ct: pd.Series,
    max_shift_ratio: float,
    buffer_capacity_kwh: float,
) -> pd.Series:
    """Shift consumption of one day from expensive hours to earlier cheap hours.

    Expensive hours (> 1.2x day average) are handled most expensive first;
    each moves up to ``kWh x max_shift_ratio`` into the cheapest cheap hour
    (< 0.8x day average) that lies before it. The buffer only fills up
    during the day.
    """
    avg = float(price_ct.mean())
    cheap = price_ct[price_ct < avg * CHEAP_PRICE_RATIO].sort_values(kind="stable")
    expensive = price_ct[price_ct > avg * EXPENSIVE_PRICE_RATIO].sort_values(ascending=False, kind="stable")

    steered = kwh.astype(float).copy()
    buffer_kwh = 0.0
    for ts in expensive.index:
        to_shift = min(float(kwh[ts]) * max_shift_ratio, buffer_capacity_kwh - buffer_kwh)
        if to_shift <= 0:
            continue
        earlier = [c for c in cheap.index if c < ts]
        if earlier:
            steered[earlier[0]] += to_shift
            steered[ts] -= to_shift
            buffer_kwh += to_shift
    return steered


def apply_smart_steering(
    hp_kwh: pd.Series,
    prices: pd.DataFrame,
    max_shift_ratio: float = DEFAULT_MAX_SHIFT_RATIO,
    buffer_capacity_kwh: float = DEFAULT_BUFFER_CAPACITY_KWH,
) -> SmartSteeringResult:
    """Steer an hourly heat pump consumption series against hourly spot prices.

    Hours without a spot price are valued at 22.5 ct/kWh.
    """
    hp = hp_kwh.sort_index().astype(float)
    price = prices["price_ct_per_kWh"].reindex(hp.index).fillna(DEFAULT_PRICE_CT_PER_KWH)

    days = []
    for _, day_kwh in hp.groupby(hp.index.normalize(), sort=True):
        days.append(steer_day(day_kwh, price.loc[day_kwh.index], max_shift_ratio, buffer_capacity_kwh))
    steered = pd.concat(days) if days else hp.copy()

    hourly = pd.DataFrame(
        {
            "original_kWh": hp,
            "steered_kWh": steered,
            "price_ct_per_kWh": price,
        }
    )
    hourly["original_cost_eur"] = hourly["original_kWh"] * hourly["price_ct_per_kWh"] / 100.0
    hourly["steered_cost_eur"] = hourly["steered_kWh"] * hourly["price_ct_per_kWh"] / 100.0

    # every kWh shows up once removed and once added
    shifted = float(np.abs(hourly["original_kWh"] - hourly["steered_kWh"]).sum()) / 2.0

    result = SmartSteeringResult(
        cost_without_steering_eur=float(hourly["original_cost_eur"].sum()),
        cost_with_steering_eur=float(hourly["steered_cost_eur"].sum()),
        shifted_kwh=shifted,
        hourly=hourly[HOURLY_COLUMNS],
    )
    logger.debug("smart steering shifted %.1f kWh, saves %.2f EUR", shifted, result.savings_eur)
    return result

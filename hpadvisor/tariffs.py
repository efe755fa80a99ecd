# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/tariffs.py
# Net metering (saldering) and dynamic vs fixed tariff scenarios
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations
from dataclasses import dataclass
import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# saldering
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class SalderingScenario:
    scenario: str
    feed_in_kwh: float
    netted_kwh: float       # offset kWh-for-kWh against offtake
    surplus_kwh: float      # feed-in that is paid out
    revenue_eur: float
    cost_eur: float         # feed-in penalty
    net_eur: float


@dataclass(frozen=True)
class SalderingRegime:
    without_hp: SalderingScenario
    with_hp: SalderingScenario

    @property
    def impact_eur(self) -> float:
        return self.with_hp.net_eur - self.without_hp.net_eur


@dataclass(frozen=True)
class SalderingAnalysis:
    net_metering: SalderingRegime
    no_net_metering: SalderingRegime
    self_consumption_kwh: float
    self_consumption_benefit_eur: float
    total_surplus_kwh: float
    total_consumption_kwh: float


def _payout(name: str, feed_in: float, netted: float, surplus: float, tariff: float, penalty: float) -> SalderingScenario:
    revenue = surplus * tariff
    cost = surplus * penalty
    return SalderingScenario(
        scenario=name,
        feed_in_kwh=feed_in,
        netted_kwh=netted,
        surplus_kwh=surplus,
        revenue_eur=revenue,
        cost_eur=cost,
        net_eur=revenue - cost,
    )


def _with_net_metering(name: str, feed_in: float, offtake: float, tariff: float, penalty: float) -> SalderingScenario:
    netted = min(feed_in, offtake)
    surplus = max(0.0, feed_in - offtake)
    return _payout(name, feed_in, netted, surplus, tariff, penalty)


def _without_net_metering(name: str, feed_in: float, tariff: float, penalty: float) -> SalderingScenario:
    return _payout(name, feed_in, 0.0, feed_in, tariff, penalty)


def calculate_saldering(
    building: pd.DataFrame,
    hp_extra_kwh: float,
    electricity_price_per_kwh: float,
    feed_in_tariff_per_kwh: float,
    feed_in_penalty_per_kwh: float,
) -> SalderingAnalysis:
    """Four scenarios: {without, with} heat pump x {with, without} net metering.

    Heat pump electricity is first taken from the solar surplus, the rest
    comes from the grid.
    """
    feed_in = float(building["feed_in_kWh"].fillna(0.0).sum())
    offtake = float(building["offtake_kWh"].fillna(0.0).sum())
    tariff, penalty = feed_in_tariff_per_kwh, feed_in_penalty_per_kwh

    from_solar = min(float(hp_extra_kwh), feed_in)
    hp_offtake = offtake + hp_extra_kwh - from_solar
    hp_feed_in = feed_in - from_solar

    net_metering = SalderingRegime(
        without_hp=_with_net_metering("without_hp", feed_in, offtake, tariff, penalty),
        with_hp=_with_net_metering("with_hp", hp_feed_in, hp_offtake, tariff, penalty),
    )
    no_net_metering = SalderingRegime(
        without_hp=_without_net_metering("without_hp", feed_in, tariff, penalty),
        with_hp=_without_net_metering("with_hp", hp_feed_in, tariff, penalty),
    )

    # value of solar kWh used by the heat pump instead of exported
    benefit = from_solar * (electricity_price_per_kwh - tariff + penalty)

    return SalderingAnalysis(
        net_metering=net_metering,
        no_net_metering=no_net_metering,
        self_consumption_kwh=from_solar,
        self_consumption_benefit_eur=benefit,
        total_surplus_kwh=feed_in,
        total_consumption_kwh=offtake,
    )


# ---------------------------------------------------------------------
# dynamic pricing
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class DynamicPricingScenario:
    scenario: str
    offtake_kwh: float
    feed_in_kwh: float
    fixed_eur: float
    dynamic_eur: float

    @property
    def difference_eur(self) -> float:
        # positive: dynamic is cheaper
        return self.fixed_eur - self.dynamic_eur


@dataclass(frozen=True)
class DynamicPricingRegime:
    without_hp: DynamicPricingScenario
    with_hp: DynamicPricingScenario

    @property
    def hp_impact_eur(self) -> float:
        return self.with_hp.dynamic_eur - self.without_hp.dynamic_eur


@dataclass(frozen=True)
class PriceStats:
    min_price_ct_per_kwh: float
    max_price_ct_per_kwh: float
    avg_price_ct_per_kwh: float
    min_gas_price_eur_per_m3: float
    max_gas_price_eur_per_m3: float
    avg_gas_price_eur_per_m3: float


@dataclass(frozen=True)
class DynamicPricingAnalysis:
    net_metering: DynamicPricingRegime
    no_net_metering: DynamicPricingRegime
    price_stats: PriceStats
    hours_with_dynamic_price: int
    total_hours: int


def _settle(cost: float, revenue: float, net_metering: bool) -> float:
    if net_metering:
        # revenue can offset the bill down to zero, no further
        return cost - min(revenue, cost)
    return cost - revenue


def _stats(values: np.ndarray) -> tuple[float, float, float]:
    if values.size == 0:
        return 0.0, 0.0, 0.0
    return float(values.min()), float(values.max()), float(values.mean())


def calculate_dynamic_pricing(
    building: pd.DataFrame,
    hp_kwh: pd.Series,
    prices: pd.DataFrame,
    fixed_electricity_price: float,
    fixed_feed_in_tariff: float,
) -> DynamicPricingAnalysis:
    """Fixed vs hourly spot price, with and without heat pump and net metering.

    ``prices`` is indexed by hour with columns price_ct_per_kWh and
    gas_price_eur_per_m3. Only hours that have a spot price enter the
    dynamic sums.
    """
    idx = building.index
    offtake = building["offtake_kWh"].fillna(0.0).to_numpy(dtype=float)
    feed_in = building["feed_in_kWh"].fillna(0.0).to_numpy(dtype=float)
    hp = hp_kwh.reindex(idx).fillna(0.0).to_numpy(dtype=float)

    spot_ct = prices["price_ct_per_kWh"].reindex(idx).to_numpy(dtype=float)
    priced = ~np.isnan(spot_ct)
    eur = np.where(priced, spot_ct / 100.0, 0.0)

    dyn_cost = float((offtake * eur).sum())
    dyn_rev = float((feed_in * eur).sum())
    dyn_cost_hp = float(((offtake + hp) * eur).sum())
    dyn_rev_hp = float((np.maximum(0.0, feed_in - hp) * eur).sum())

    total_offtake = float(offtake.sum())
    total_feed_in = float(feed_in.sum())
    total_hp = float(hp.sum())
    hp_feed_in = max(0.0, total_feed_in - total_hp)

    fixed_cost = total_offtake * fixed_electricity_price
    fixed_rev = total_feed_in * fixed_feed_in_tariff
    fixed_cost_hp = (total_offtake + total_hp) * fixed_electricity_price
    fixed_rev_hp = hp_feed_in * fixed_feed_in_tariff

    def regime(net_metering: bool) -> DynamicPricingRegime:
        return DynamicPricingRegime(
            without_hp=DynamicPricingScenario(
                "without_hp", total_offtake, total_feed_in,
                _settle(fixed_cost, fixed_rev, net_metering),
                _settle(dyn_cost, dyn_rev, net_metering),
            ),
            with_hp=DynamicPricingScenario(
                "with_hp", total_offtake + total_hp, hp_feed_in,
                _settle(fixed_cost_hp, fixed_rev_hp, net_metering),
                _settle(dyn_cost_hp, dyn_rev_hp, net_metering),
            ),
        )

    gas = prices["gas_price_eur_per_m3"].reindex(idx[priced]).to_numpy(dtype=float) \
        if "gas_price_eur_per_m3" in prices.columns else np.array([])
    gas = gas[~np.isnan(gas) & (gas != 0)]
    p_min, p_max, p_avg = _stats(spot_ct[priced])
    g_min, g_max, g_avg = _stats(gas)

    n_priced = int(priced.sum())
    if n_priced < len(idx):
        logger.debug("%d of %d hours have no spot price", len(idx) - n_priced, len(idx))

    return DynamicPricingAnalysis(
        net_metering=regime(True),
        no_net_metering=regime(False),
        price_stats=PriceStats(p_min, p_max, p_avg, g_min, g_max, g_avg),
        hours_with_dynamic_price=n_priced,
        total_hours=len(idx),
    )

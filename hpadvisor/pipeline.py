# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/pipeline.py
# Runs the calculation stages in order for one analysis session
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations
from dataclasses import dataclass
import logging

import pandas as pd

from .catalog import HeatPumpModel, require_bivalent_point
from .constants import (
    BOILER_EFFICIENCY,
    DEFAULT_ANALYSIS_YEAR,
    DEFAULT_INTERVAL_MINUTES,
    FALLBACK_ELEC_REDUCTION_SHARE,
    FALLBACK_GAS_LOAD_SHARE,
    GAS_ENERGY_CONTENT_KWH_PER_M3,
)
from .errors import InputValidationError
from .heat_demand import HeatDemandResult, calculate_heat_demand
from .heating import HeatPumpProfile, generate_synthetic_hp_profile, scale_hp_profile
from .models import ManualEnergyData
from .peak import PeakLoadResult, analyze_peak_load, find_exceedance_events, merge_loads
from .profiles import generate_profile
from .savings import SavingsResult, calculate_savings
from .selector import HPSelectionResult, select_heat_pump
from .sources import PriceTempSource
from .steering import SmartSteeringResult, apply_smart_steering
from .tariffs import (
    DynamicPricingAnalysis,
    SalderingAnalysis,
    calculate_dynamic_pricing,
    calculate_saldering,
)
from .temperature import TemperatureCorrelation, correlate_temperatures

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HybridFallback:
    switch_hours: int
    extra_gas_m3: float
    reduced_electricity_kwh: float
    extra_cost_eur: float


@dataclass(frozen=True)
class SelfConsumption:
    total_hp_kwh: float
    self_consumption_kwh: float
    benefit_eur: float


@dataclass(frozen=True)
class PeakAnalysis:
    building: pd.DataFrame
    hp_profile: HeatPumpProfile
    combined: pd.DataFrame
    events: pd.DataFrame
    peak: PeakLoadResult
    temperature: TemperatureCorrelation
    saldering: SalderingAnalysis
    dynamic_pricing: DynamicPricingAnalysis
    steering: SmartSteeringResult
    hybrid: HybridFallback
    self_consumption: SelfConsumption


def run_selection(data: ManualEnergyData, prefer_ht: bool = False) -> tuple[HeatDemandResult, HPSelectionResult]:
    heat = calculate_heat_demand(data)
    selection = select_heat_pump(heat.required_power_kw, data.bivalent_point, data.is_coastal, prefer_ht)
    return heat, selection


def _check_units(units: int) -> int:
    if int(units) < 1:
        raise InputValidationError([("units", "at least one heat pump unit is required")])
    return int(units)


def run_savings(
    data: ManualEnergyData,
    heat: HeatDemandResult,
    model: HeatPumpModel,
    units: int,
) -> SavingsResult:
    units = _check_units(units)
    return calculate_savings(
        heat,
        model,
        units,
        units * model.price_eur,
        data.bivalent_point,
        data.gas_price_per_m3,
        data.electricity_price_per_kwh,
        data.gas_m3,
    )


def hybrid_fallback(peak: PeakLoadResult, gas_price_per_m3: float) -> HybridFallback:
    """Boiler takes over during exceedance hours: extra gas vs electricity avoided."""
    hours = peak.exceedance_count
    extra_gas = hours * peak.avg_power_kw * FALLBACK_GAS_LOAD_SHARE / GAS_ENERGY_CONTENT_KWH_PER_M3 / BOILER_EFFICIENCY
    return HybridFallback(
        switch_hours=hours,
        extra_gas_m3=extra_gas,
        reduced_electricity_kwh=hours * peak.avg_power_kw * FALLBACK_ELEC_REDUCTION_SHARE,
        extra_cost_eur=extra_gas * gas_price_per_m3,
    )


def self_consumption(profile: HeatPumpProfile, data: ManualEnergyData) -> SelfConsumption:
    total = profile.total_kwh
    solar = min(total, data.electricity_feed_in_kwh)
    value = data.electricity_price_per_kwh - data.feed_in_tariff_per_kwh + data.feed_in_penalty_per_kwh
    return SelfConsumption(total_hp_kwh=total, self_consumption_kwh=solar, benefit_eur=solar * value)


def run_peak_analysis(
    data: ManualEnergyData,
    model: HeatPumpModel,
    units: int,
    source: PriceTempSource,
    year: int = DEFAULT_ANALYSIS_YEAR,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
) -> PeakAnalysis:
    """Profiles, grid exceedances and the financial scenarios for a chosen model."""
    units = _check_units(units)
    heat = calculate_heat_demand(data)
    biv = require_bivalent_point(data.bivalent_point)

    building = generate_profile(
        data.building_type,
        data.electricity_offtake_kwh,
        data.gas_m3,
        data.electricity_feed_in_kwh,
        year,
    )
    idx = building.index
    weather = source.hourly(idx)
    temps = weather["temperature_C"]

    one_unit = generate_synthetic_hp_profile(data, model, temps, idx[0], idx[-1])
    hp_profile = scale_hp_profile(one_unit, units)

    merged = merge_loads(building, hp_profile.data, interval_minutes)
    peak, combined = analyze_peak_load(merged, data.grid_connection_id, interval_minutes)
    events = find_exceedance_events(combined, interval_minutes)

    # yearly HP electricity at flat SCOP for the net metering balance
    hp_year_kwh = heat.total_heat_demand_kwh * biv.coverage_fraction / model.scop
    saldering = calculate_saldering(
        building,
        hp_year_kwh,
        data.electricity_price_per_kwh,
        data.feed_in_tariff_per_kwh,
        data.feed_in_penalty_per_kwh,
    )

    hp_kwh = hp_profile.data["power_kW"]     # hourly points
    dynamic = calculate_dynamic_pricing(
        building, hp_kwh, weather, data.electricity_price_per_kwh, data.feed_in_tariff_per_kwh
    )
    steering = apply_smart_steering(hp_kwh, weather)

    logger.info(
        "%s: %d x %s, peak %.1f kW on %s, %d exceedance hours",
        data.building_type, units, model.id, peak.peak_power_kw,
        data.grid_connection_id, peak.exceedance_count,
    )

    return PeakAnalysis(
        building=building,
        hp_profile=hp_profile,
        combined=combined,
        events=events,
        peak=peak,
        temperature=correlate_temperatures(combined, temps),
        saldering=saldering,
        dynamic_pricing=dynamic,
        steering=steering,
        hybrid=hybrid_fallback(peak, data.gas_price_per_m3),
        self_consumption=self_consumption(hp_profile, data),
    )

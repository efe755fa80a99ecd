# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/heat_demand.py
# Annual heat demand and current energy costs from yearly gas use
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations
from dataclasses import dataclass
import logging

from .catalog import require_building_type
from .constants import (
    BOILER_EFFICIENCY,
    DAYS_PER_YEAR,
    DHW_DELTA_T_K,
    FULL_LOAD_HOURS,
    GAS_ENERGY_CONTENT_KWH_PER_M3,
    KJ_PER_KWH,
    WATER_SPECIFIC_HEAT_KJ_PER_KG_K,
)
from .models import ManualEnergyData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeatDemandResult:
    total_heat_demand_kwh: float
    space_heating_kwh: float
    space_heating_percent: float
    hot_water_kwh: float
    hot_water_percent: float
    required_power_kw: float        # peak thermal power
    gas_current_eur: float
    electricity_current_eur: float
    total_current_eur: float


def useful_heat_kwh(gas_m3: float) -> float:
    """Heat delivered by the existing boiler for a gas volume."""
    return float(gas_m3) * GAS_ENERGY_CONTENT_KWH_PER_M3 * BOILER_EFFICIENCY


def calculate_heat_demand(data: ManualEnergyData) -> HeatDemandResult:
    building = require_building_type(data.building_type)

    total_kwh = useful_heat_kwh(data.gas_m3)
    hot_water_percent = building.hot_water_percent
    space_heating_percent = 100.0 - hot_water_percent

    hot_water_kwh = total_kwh * hot_water_percent / 100.0
    space_heating_kwh = total_kwh - hot_water_kwh

    # full-load-hours method
    required_power_kw = space_heating_kwh / FULL_LOAD_HOURS

    gas_eur = data.gas_m3 * data.gas_price_per_m3
    # net producers are not paid in the baseline
    net_kwh = data.electricity_offtake_kwh - data.electricity_feed_in_kwh
    elec_eur = max(0.0, net_kwh * data.electricity_price_per_kwh)

    logger.debug(
        "heat demand %s: total=%.0f kWh space=%.0f kWh dhw=%.0f kWh peak=%.2f kW",
        building.id, total_kwh, space_heating_kwh, hot_water_kwh, required_power_kw,
    )

    return HeatDemandResult(
        total_heat_demand_kwh=total_kwh,
        space_heating_kwh=space_heating_kwh,
        space_heating_percent=space_heating_percent,
        hot_water_kwh=hot_water_kwh,
        hot_water_percent=hot_water_percent,
        required_power_kw=required_power_kw,
        gas_current_eur=gas_eur,
        electricity_current_eur=elec_eur,
        total_current_eur=gas_eur + elec_eur,
    )


def calculate_default_dhw(building_type_id: str, unit_count: int) -> float:
    """Pre-fill value for daily hot water liters (the user may override it)."""
    building = require_building_type(building_type_id)
    return building.default_dhw_liters_per_unit * int(unit_count)


def calculate_dhw_heat_demand(liters_per_day: float) -> float:
    """Annual kWh to heat ``liters_per_day`` of tap water by 45 K."""
    daily_kwh = float(liters_per_day) * WATER_SPECIFIC_HEAT_KJ_PER_KG_K * DHW_DELTA_T_K / KJ_PER_KWH
    return daily_kwh * DAYS_PER_YEAR

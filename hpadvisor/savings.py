# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/savings.py
# Yearly cost, CO2 and payback of a hybrid heat pump installation
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations
from dataclasses import dataclass
import logging

from .catalog import HeatPumpModel, require_bivalent_point
from .constants import (
    ALL_ELECTRIC_BIVALENT_POINT,
    BOILER_EFFICIENCY,
    ELECTRICITY_KG_CO2_PER_KWH,
    GAS_ENERGY_CONTENT_KWH_PER_M3,
    GAS_KG_CO2_PER_M3,
)
from .heat_demand import HeatDemandResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavingsResult:
    heat_by_hp_kwh: float
    heat_by_hp_percent: float
    heat_by_boiler_kwh: float
    heat_by_boiler_percent: float
    hp_electricity_kwh: float
    boiler_gas_m3: float
    annual_savings_eur: float
    savings_percent: float | None     # None: no current gas cost to compare with
    current_co2_kg: float
    new_co2_kg: float
    co2_reduction_kg: float
    payback_years: float | None       # None: savings <= 0, never paid back

    @property
    def payback_unbounded(self) -> bool:
        return self.payback_years is None


def _share(part: float, whole: float) -> float:
    return part / whole * 100.0 if whole > 0 else 0.0


def calculate_savings(
    heat_demand: HeatDemandResult,
    model: HeatPumpModel,
    units_needed: int,
    total_price: float,
    bivalent_point: str,
    gas_price_per_m3: float,
    electricity_price_per_kwh: float,
    current_gas_m3: float,
) -> SavingsResult:
    biv = require_bivalent_point(bivalent_point)
    coverage = biv.coverage_fraction

    space_by_hp = heat_demand.space_heating_kwh * coverage
    space_by_boiler = heat_demand.space_heating_kwh - space_by_hp

    # hot water stays on the boiler unless all-electric
    if biv.id == ALL_ELECTRIC_BIVALENT_POINT:
        dhw_by_hp, dhw_by_boiler = heat_demand.hot_water_kwh, 0.0
    else:
        dhw_by_hp, dhw_by_boiler = 0.0, heat_demand.hot_water_kwh

    heat_by_hp = space_by_hp + dhw_by_hp
    heat_by_boiler = space_by_boiler + dhw_by_boiler

    # flat SCOP at this stage
    hp_kwh = heat_by_hp / model.scop
    boiler_m3 = heat_by_boiler / (GAS_ENERGY_CONTENT_KWH_PER_M3 * BOILER_EFFICIENCY)

    current_gas_eur = current_gas_m3 * gas_price_per_m3
    new_gas_eur = boiler_m3 * gas_price_per_m3
    new_elec_eur = hp_kwh * electricity_price_per_kwh

    savings_eur = current_gas_eur - new_gas_eur - new_elec_eur
    savings_pct = savings_eur / current_gas_eur * 100.0 if current_gas_eur > 0 else None

    if savings_eur > 0:
        payback = total_price / savings_eur
    else:
        payback = None
        logger.warning(
            "%d x %s does not save money (%.2f EUR/yr); payback unbounded",
            units_needed, model.id, savings_eur,
        )

    current_co2 = current_gas_m3 * GAS_KG_CO2_PER_M3
    new_co2 = boiler_m3 * GAS_KG_CO2_PER_M3 + hp_kwh * ELECTRICITY_KG_CO2_PER_KWH

    total_heat = heat_demand.total_heat_demand_kwh
    return SavingsResult(
        heat_by_hp_kwh=heat_by_hp,
        heat_by_hp_percent=_share(heat_by_hp, total_heat),
        heat_by_boiler_kwh=heat_by_boiler,
        heat_by_boiler_percent=_share(heat_by_boiler, total_heat),
        hp_electricity_kwh=hp_kwh,
        boiler_gas_m3=boiler_m3,
        annual_savings_eur=savings_eur,
        savings_percent=savings_pct,
        current_co2_kg=current_co2,
        new_co2_kg=new_co2,
        co2_reduction_kg=current_co2 - new_co2,
        payback_years=payback,
    )

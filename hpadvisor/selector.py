# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/selector.py
# Matches the required heat pump capacity against the catalog
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations
from dataclasses import dataclass, replace
import logging
import math

from .catalog import HeatPumpModel, heat_pump_models, require_bivalent_point
from .constants import MAX_UNITS_PER_SITE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HPOption:
    model: HeatPumpModel
    units_needed: int
    total_capacity_kw: float
    total_price: float
    is_recommended: bool = False


@dataclass(frozen=True)
class HPSelectionResult:
    required_capacity_kw: float
    coverage_percent: float
    recommendations: tuple[HPOption, ...]
    all_options: tuple[HPOption, ...]

    @property
    def has_recommendation(self) -> bool:
        return len(self.recommendations) > 0


def calculate_units_needed(model: HeatPumpModel, required_capacity_kw: float) -> int:
    return int(math.ceil(required_capacity_kw / model.power_kw))


def _candidate_models(is_coastal: bool, prefer_ht: bool) -> list[HeatPumpModel]:
    # EC coating is a site requirement: coastal gets EC only, inland non-EC only
    models = [m for m in heat_pump_models() if m.is_ec == bool(is_coastal)]
    if prefer_ht:
        ht = [m for m in models if m.type == "HT"]
        if ht:
            models = ht
    return models


def _option(model: HeatPumpModel, required_capacity_kw: float) -> HPOption:
    units = calculate_units_needed(model, required_capacity_kw)
    return HPOption(
        model=model,
        units_needed=units,
        total_capacity_kw=units * model.power_kw,
        total_price=units * model.price_eur,
    )


def _recommend(options: list[HPOption], required_capacity_kw: float) -> list[HPOption]:
    valid = [
        o for o in options
        if o.total_capacity_kw >= required_capacity_kw and o.units_needed <= MAX_UNITS_PER_SITE
    ]
    if not valid:
        return []

    # min() keeps the first of equal candidates, i.e. the best ranked one
    best_value = min(valid, key=lambda o: o.total_price)
    best_efficiency = max(valid, key=lambda o: o.model.scop)
    picks = [best_value]
    if best_efficiency.model.id != best_value.model.id:
        picks.append(best_efficiency)

    chosen = {p.model.id for p in picks}
    single = next((o for o in valid if o.units_needed == 1 and o.model.id not in chosen), None)
    if single is not None:
        picks.append(single)

    return [replace(p, is_recommended=True) for p in picks]


def select_heat_pump(
    required_power_kw: float,
    bivalent_point: str,
    is_coastal: bool,
    prefer_ht: bool = False,
) -> HPSelectionResult:
    """Rank catalog models for the peak power and pick up to three recommendations.

    Options are sorted by fewer units, then lower total price, then higher SCOP.
    An empty recommendation list means no catalog model fits the site.
    """
    biv = require_bivalent_point(bivalent_point)
    required_capacity_kw = float(required_power_kw) * biv.beta_factor

    options = [_option(m, required_capacity_kw) for m in _candidate_models(is_coastal, prefer_ht)]
    options.sort(key=lambda o: (o.units_needed, o.total_price, -o.model.scop))

    recommendations = _recommend(options, required_capacity_kw)
    rec_ids = {r.model.id for r in recommendations}
    all_options = [replace(o, is_recommended=o.model.id in rec_ids) for o in options]

    if not recommendations:
        logger.warning(
            "no heat pump fits %.1f kW (coastal=%s, prefer_ht=%s)",
            required_capacity_kw, is_coastal, prefer_ht,
        )
    else:
        logger.debug(
            "required %.2f kW -> recommended %s",
            required_capacity_kw, [r.model.id for r in recommendations],
        )

    return HPSelectionResult(
        required_capacity_kw=required_capacity_kw,
        coverage_percent=biv.coverage_percent,
        recommendations=tuple(recommendations),
        all_options=tuple(all_options),
    )

import logging

import pytest

from hpadvisor.catalog import heat_pump_models
from hpadvisor.selector import calculate_units_needed, select_heat_pump

# apartment scenario peak power
REQUIRED_KW = 307_723.5 / 1800


def test_required_capacity_uses_beta():
    r = select_heat_pump(REQUIRED_KW, "0", is_coastal=False)
    assert r.required_capacity_kw == pytest.approx(51.287, abs=1e-3)
    assert r.coverage_percent == 40


def test_inland_recommendations():
    r = select_heat_pump(REQUIRED_KW, "0", is_coastal=False)
    ids = [o.model.id for o in r.recommendations]
    # cheapest overall, then highest SCOP; the only single unit is already chosen
    assert ids == ["mt80i", "mt50i"]
    assert all(o.is_recommended for o in r.recommendations)
    assert r.recommendations[0].units_needed == 1
    assert r.recommendations[1].units_needed == 2


def test_options_sorted_by_units_then_price():
    r = select_heat_pump(REQUIRED_KW, "0", is_coastal=False)
    keys = [(o.units_needed, o.total_price) for o in r.all_options]
    assert keys == sorted(keys)
    flagged = {o.model.id for o in r.all_options if o.is_recommended}
    assert flagged == {"mt80i", "mt50i"}


def test_units_needed_is_minimal():
    r = select_heat_pump(REQUIRED_KW, "-7", is_coastal=False)
    for o in r.all_options:
        assert o.total_capacity_kw >= r.required_capacity_kw
        assert (o.units_needed - 1) * o.model.power_kw < r.required_capacity_kw
        assert o.total_price == pytest.approx(o.units_needed * o.model.price_eur)


def test_calculate_units_needed():
    mt20i = next(m for m in heat_pump_models() if m.id == "mt20i")
    assert calculate_units_needed(mt20i, 13.23) == 1
    assert calculate_units_needed(mt20i, 13.24) == 2


def test_beta_and_coverage_are_independent():
    hybrid = select_heat_pump(REQUIRED_KW, "0", is_coastal=False)
    electric = select_heat_pump(REQUIRED_KW, "-10", is_coastal=False)
    assert electric.required_capacity_kw / hybrid.required_capacity_kw == pytest.approx(0.90 / 0.30)
    assert (hybrid.coverage_percent, electric.coverage_percent) == (40, 95)


def test_coastal_gets_ec_models_only():
    r = select_heat_pump(REQUIRED_KW, "0", is_coastal=True)
    assert {o.model.id for o in r.all_options} == {"mt20i-ec", "ht20i-ec"}
    assert [o.model.id for o in r.recommendations] == ["mt20i-ec"]


def test_inland_excludes_ec_models():
    r = select_heat_pump(REQUIRED_KW, "0", is_coastal=False)
    assert not any(o.model.is_ec for o in r.all_options)


def test_prefer_high_temperature():
    r = select_heat_pump(REQUIRED_KW, "0", is_coastal=False, prefer_ht=True)
    assert {o.model.type for o in r.all_options} == {"HT"}
    assert [o.model.id for o in r.recommendations] == ["ht30i"]


def test_single_unit_pick_is_added():
    # 15 kW: many single-unit options, cheapest and most efficient differ
    r = select_heat_pump(50.0, "0", is_coastal=False)
    ids = [o.model.id for o in r.recommendations]
    assert ids == ["mt26i", "mt50i", "mt33i"]
    assert len(set(ids)) == len(ids)


def test_no_feasible_match(caplog):
    with caplog.at_level(logging.WARNING, logger="hpadvisor.selector"):
        r = select_heat_pump(10_000.0, "0", is_coastal=False)
    assert r.recommendations == ()
    assert not r.has_recommendation
    assert len(r.all_options) == 10
    assert "no heat pump fits" in caplog.text


def test_unknown_bivalent_point():
    with pytest.raises(KeyError):
        select_heat_pump(REQUIRED_KW, "-20", is_coastal=False)

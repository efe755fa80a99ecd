import numpy as np
import pytest

from hpadvisor.catalog import building_types
from hpadvisor.profiles import (
    PROFILE_COLUMNS,
    allocate,
    generate_profile,
    get_profile_type,
    summarize_profile,
    year_index,
)


@pytest.mark.parametrize("year, hours", [(2023, 8760), (2024, 8784)])
def test_year_length(year, hours):
    idx = year_index(year)
    assert len(idx) == hours
    assert idx.name == "timestamp"


@pytest.mark.parametrize("building_type_id", sorted(building_types()))
@pytest.mark.parametrize("year", [2023, 2024])
def test_totals_conserved(year, building_type_id):
    df = generate_profile(building_type_id, 600_000, 50_000, 180_000, year)
    assert list(df.columns) == PROFILE_COLUMNS
    assert df["offtake_kWh"].sum() == pytest.approx(600_000)
    assert df["gas_m3"].sum() == pytest.approx(50_000)
    assert df["feed_in_kWh"].sum() == pytest.approx(180_000)
    assert (df >= 0).all().all()


def test_zero_totals_give_zero_series():
    df = generate_profile("office", 0, 0, 0, 2023)
    assert (df.to_numpy() == 0).all()


def test_office_quiet_at_weekend():
    df = generate_profile("office", 100_000, 1_000, 0, 2023)
    # 2023-01-09 is a Monday, 2023-01-14 a Saturday
    weekday_noon = df.loc["2023-01-09 10:00", "offtake_kWh"]
    saturday_noon = df.loc["2023-01-14 10:00", "offtake_kWh"]
    assert saturday_noon == pytest.approx(weekday_noon * 0.2)


def test_winter_gas_exceeds_summer():
    df = generate_profile("apartment_building", 0, 50_000, 0, 2023)
    assert df.loc["2023-01", "gas_m3"].sum() > df.loc["2023-07", "gas_m3"].sum()


def test_solar_zero_at_night():
    df = generate_profile("apartment_building", 0, 0, 10_000, 2023)
    assert df.loc["2023-06-01 02:00", "feed_in_kWh"] == 0


def test_profile_type():
    assert get_profile_type("hospital") == "healthcare_24h"
    with pytest.raises(KeyError):
        get_profile_type("castle")


def test_allocate():
    out = allocate(10.0, np.array([1.0, 3.0]))
    assert out.tolist() == [2.5, 7.5]
    assert allocate(10.0, np.zeros(3)).sum() == 0


def test_summary():
    df = generate_profile("apartment_building", 600_000, 50_000, 180_000, 2024)
    s = summarize_profile(df)
    assert s["interval_minutes"] == 60
    assert s["total_offtake_kWh"] == pytest.approx(600_000)
    assert s["start"].year == 2024 and s["end"].hour == 23

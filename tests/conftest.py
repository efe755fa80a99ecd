import numpy as np
import pandas as pd
import pytest

from hpadvisor.models import validate_energy_data
from hpadvisor.profiles import year_index
from hpadvisor.sources import FramePriceTempSource

APARTMENT = dict(
    building_type="apartment_building",
    unit_count=40,
    is_coastal=False,
    grid_connection_id="3x80A",
    electricity_offtake_kwh=600_000,
    electricity_feed_in_kwh=180_000,
    gas_m3=50_000,
    dhw_liters_per_day=4_800,
    occupancy_weekday_start=7,
    occupancy_weekday_end=22,
    occupancy_weekend_start=8,
    occupancy_weekend_end=23,
    gas_price_per_m3=1.40,
    electricity_price_per_kwh=0.25,
    feed_in_tariff_per_kwh=0.07,
    feed_in_penalty_per_kwh=0.02,
    net_metering_enabled=True,
    bivalent_point="0",
)


@pytest.fixture
def apartment_values():
    return dict(APARTMENT)


@pytest.fixture
def apartment(apartment_values):
    return validate_energy_data(apartment_values)


def _weather(index: pd.DatetimeIndex) -> pd.DataFrame:
    month = index.month.to_numpy()
    hour = index.hour.to_numpy()
    # cold January, warm July, coldest at night
    temp = 8 - 10 * np.cos((month - 1) * np.pi / 6) + 3 * np.sin((hour - 9) * np.pi / 12)
    price = np.where((hour >= 17) & (hour <= 20), 40.0, np.where(hour < 5, 12.0, 22.0))
    return pd.DataFrame(
        {"price_ct_per_kWh": price, "gas_price_eur_per_m3": 1.40, "temperature_C": temp},
        index=index,
    )


@pytest.fixture
def weather_2024():
    return _weather(year_index(2024))


@pytest.fixture
def frame_source(weather_2024):
    return FramePriceTempSource(weather_2024)


@pytest.fixture
def day_index():
    return pd.date_range("2024-01-08 00:00", periods=24, freq="h", name="timestamp")

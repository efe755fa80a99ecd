import pytest

from hpadvisor.errors import InputValidationError
from hpadvisor.models import replace_energy_data, validate_energy_data


def test_valid_input(apartment):
    assert apartment.unit_count == 40
    assert apartment.bivalent_point == "0"
    assert apartment.apartment_size is None


def test_numeric_bivalent_point_coerced(apartment_values):
    apartment_values["bivalent_point"] = -7
    assert validate_energy_data(apartment_values).bivalent_point == "-7"


@pytest.mark.parametrize(
    "field, value",
    [
        ("building_type", "castle"),
        ("grid_connection_id", "1x6A"),
        ("bivalent_point", "-20"),
        ("unit_count", 0),
        ("gas_m3", 0),
        ("electricity_offtake_kwh", -1),
        ("occupancy_weekday_start", 24),
    ],
)
def test_invalid_field_reported(apartment_values, field, value):
    apartment_values[field] = value
    with pytest.raises(InputValidationError) as exc:
        validate_energy_data(apartment_values)
    assert field in exc.value.fields


def test_all_failures_listed(apartment_values):
    apartment_values.update(building_type="castle", unit_count=-3)
    with pytest.raises(InputValidationError) as exc:
        validate_energy_data(apartment_values)
    assert set(exc.value.fields) >= {"building_type", "unit_count"}
    assert isinstance(exc.value, ValueError)


def test_missing_field_is_not_defaulted(apartment_values):
    del apartment_values["gas_price_per_m3"]
    with pytest.raises(InputValidationError) as exc:
        validate_energy_data(apartment_values)
    assert exc.value.fields == ["gas_price_per_m3"]


def test_unknown_field_rejected(apartment_values):
    with pytest.raises(InputValidationError):
        validate_energy_data(apartment_values, heat_pump_brand="x")


def test_input_is_immutable(apartment):
    with pytest.raises(Exception):
        apartment.unit_count = 10


def test_replace_revalidates(apartment):
    edited = replace_energy_data(apartment, gas_m3=60_000)
    assert edited.gas_m3 == 60_000
    assert apartment.gas_m3 == 50_000
    with pytest.raises(InputValidationError):
        replace_energy_data(apartment, gas_m3=0)

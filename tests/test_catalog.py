import pandas as pd
import pytest

from hpadvisor import catalog
from hpadvisor.data_loading import (
    DATA_DIR_ENV,
    data_dir,
    load_building_types,
    load_grid_connections,
    load_heat_pumps,
    load_load_profiles,
    load_meter_readings,
    load_price_temp_csv,
)
from hpadvisor.errors import ReferenceDataError
from hpadvisor.sources import FramePriceTempSource


def test_reference_tables_load():
    assert len(catalog.building_types()) == 10
    assert len(catalog.heat_pump_models()) == 12
    assert set(catalog.bivalent_points()) == {"0", "-7", "-10"}
    assert catalog.grid_connections()["3x25A"].max_power_kw == pytest.approx(17.3)


def test_bivalent_factors():
    b = catalog.require_bivalent_point("-7")
    assert b.beta_factor == pytest.approx(0.70)
    assert b.coverage_percent == pytest.approx(70)
    assert b.coverage_fraction == pytest.approx(0.70)


def test_lookups_return_none_for_unknown_ids():
    assert catalog.get_building_type("castle") is None
    assert catalog.get_heat_pump_model("mt999") is None
    assert catalog.get_grid_connection("1x6A") is None
    assert catalog.get_bivalent_point("-20") is None


def test_bivalent_lookup_accepts_numbers():
    assert catalog.get_bivalent_point(0).id == "0"
    assert catalog.get_bivalent_point(-10).id == "-10"


def test_require_raises_key_error():
    with pytest.raises(KeyError, match="castle"):
        catalog.require_building_type("castle")
    with pytest.raises(KeyError, match="mt999"):
        catalog.require_heat_pump_model("mt999")


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        catalog.building_types()["new"] = None


def test_ec_models_flagged():
    ec = [m.id for m in catalog.heat_pump_models() if m.is_ec]
    assert sorted(ec) == ["ht20i-ec", "mt20i-ec"]
    assert catalog.require_heat_pump_model("mt20i-ec").price_on_request


def test_occupancy_profiles_cover_building_types():
    for bt in catalog.building_types().values():
        assert bt.occupancy_profile in load_load_profiles()["occupancy"]


def test_data_dir_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path))
    assert data_dir() == tmp_path.resolve()
    monkeypatch.delenv(DATA_DIR_ENV)
    assert (data_dir() / "heat_pumps.csv").exists()


def test_missing_column_rejected(tmp_path):
    p = tmp_path / "grid.csv"
    p.write_text("id,max_current_a\n3x25A,25\n")
    with pytest.raises(ReferenceDataError, match="max_power_kw"):
        load_grid_connections(p)


def test_duplicate_ids_rejected(tmp_path):
    p = tmp_path / "grid.csv"
    p.write_text("id,max_current_a,max_power_kw\n3x25A,25,17.3\n3x25A,25,17.3\n")
    with pytest.raises(ReferenceDataError, match="duplicate"):
        load_grid_connections(p)


def test_bad_boolean_rejected(tmp_path):
    header = (data_dir() / "heat_pumps.csv").read_text().splitlines()[0]
    p = tmp_path / "hp.csv"
    p.write_text(
        header + "\n"
        "x1,X1,MT,10,4.5,45,R290,3,1,1,1,1,10,400/50/3,1000,maybe,false\n"
    )
    with pytest.raises(ReferenceDataError, match="is_ec"):
        load_heat_pumps(p)


def test_hot_water_percent_range(tmp_path):
    src = load_building_types()
    src.loc[0, "hot_water_percent"] = 140
    p = tmp_path / "bt.csv"
    src.to_csv(p, index=False)
    with pytest.raises(ReferenceDataError):
        load_building_types(p)


def test_price_temp_csv_floors_to_hour(tmp_path):
    p = tmp_path / "prices.csv"
    p.write_text(
        "timestamp,price_ct_per_kWh,gas_price_eur_per_m3,temperature_C\n"
        "2024-01-01 01:30,25.0,1.5,2.0\n"
        "2024-01-01 00:15,20.0,1.4,1.0\n"
    )
    df = load_price_temp_csv(p)
    assert list(df.index) == [pd.Timestamp("2024-01-01 00:00"), pd.Timestamp("2024-01-01 01:00")]
    assert df["price_ct_per_kWh"].tolist() == [20.0, 25.0]


def test_meter_upload_not_supported(tmp_path):
    with pytest.raises(NotImplementedError):
        load_meter_readings(tmp_path / "meter.csv")


def test_price_temp_csv_averages_quarter_hours(tmp_path):
    p = tmp_path / "prices_15min.csv"
    rows = ["timestamp,price_ct_per_kWh,gas_price_eur_per_m3,temperature_C"]
    for i, minute in enumerate(range(0, 120, 15)):
        stamp = pd.Timestamp("2024-01-01") + pd.Timedelta(minutes=minute)
        rows.append(f"{stamp:%Y-%m-%d %H:%M},{20 + i},1.4,{i}")
    p.write_text("\n".join(rows) + "\n")

    df = load_price_temp_csv(p)
    assert df.index.is_unique
    assert len(df) == 2
    assert df["price_ct_per_kWh"].tolist() == [21.5, 25.5]

    hours = pd.date_range("2024-01-01", periods=2, freq="h", name="timestamp")
    served = FramePriceTempSource(df).hourly(hours)
    assert served["temperature_C"].tolist() == [1.5, 5.5]

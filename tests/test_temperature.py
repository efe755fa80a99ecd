import numpy as np
import pandas as pd
import pytest

from hpadvisor.temperature import correlate_temperatures, temperature_distribution


def _flagged(day_index, hours):
    flags = np.zeros(24, dtype=bool)
    flags[hours] = True
    return pd.DataFrame({"is_exceedance": flags}, index=day_index)


def test_stats_over_exceedance_hours(day_index):
    temps = pd.Series(np.arange(24, dtype=float) - 10, index=day_index)
    r = correlate_temperatures(_flagged(day_index, [0, 1, 5]), temps)
    assert r.count == 3
    assert r.min_temp_c == -10
    assert r.max_temp_c == -5
    assert r.avg_temp_c == pytest.approx(np.mean([-10, -9, -5]))
    assert r.temperatures == (-10.0, -9.0, -5.0)
    assert not r.is_empty


def test_no_exceedances_gives_zeros(day_index):
    temps = pd.Series(5.0, index=day_index)
    r = correlate_temperatures(_flagged(day_index, []), temps)
    assert (r.min_temp_c, r.max_temp_c, r.avg_temp_c, r.count) == (0.0, 0.0, 0.0, 0)
    assert r.is_empty


def test_hours_without_temperature_skipped(day_index):
    temps = pd.Series([2.0, np.nan], index=day_index[:2])
    r = correlate_temperatures(_flagged(day_index, [0, 1, 2]), temps)
    assert r.count == 1
    assert r.avg_temp_c == 2.0


def test_distribution():
    dist = temperature_distribution([-12.0, -10.0, -1.0, 0.0, 4.9, 22.0])
    counts = dict(zip(dist["lower_C"], dist["count"]))
    assert counts[-15] == 1
    assert counts[-10] == 1
    assert counts[-5] == 1
    assert counts[0] == 2
    assert counts[20] == 1
    assert dist["count"].sum() == 6

import math

from forecast_intel.aggregation import (
    accumulate_precip,
    aggregate,
    amount,
    mean,
    safe_num,
    summarize_dew_and_uv,
    summarize_temps,
    summarize_wind_gusts,
)
from forecast_intel.domain import HourlySeries, Window
from forecast_intel.windowing import slice_to_window


def _series(**arrays) -> HourlySeries:
    hours = max(len(v) for v in arrays.values())
    times = [f"2025-03-10T{h:02d}:00" for h in range(hours)]
    return HourlySeries(time=times, **arrays)


def test_safe_num_rejects_non_numbers():
    values = [1, 2.5, None, float("nan"), float("inf"), "3", True]
    assert safe_num(values, 0) == 1.0
    assert safe_num(values, 1) == 2.5
    for i in range(2, 7):
        assert safe_num(values, i) is None
    assert safe_num(values, 99) is None
    assert safe_num(None, 0) is None


def test_amount_reads_absent_and_negative_as_zero():
    values = [0.2, None, -0.1, "wet"]
    assert amount(values, 0) == 0.2
    assert amount(values, 1) == 0.0
    assert amount(values, 2) == 0.0
    assert amount(values, 3) == 0.0
    assert amount([], 0) == 0.0


def test_mean_ignores_none():
    assert mean([1.0, None, 3.0]) == 2.0
    assert mean([None, None]) is None
    assert mean([]) is None


def test_empty_window_yields_null_temps_and_zero_totals():
    series = _series(temperature=[50, 60], precipitation=[0.5, 0.5], wind_gust=[20, 30])
    summary = aggregate(series, Window(start=1, end=1))
    assert summary.hours == 0
    assert summary.min_temp is None
    assert summary.max_temp is None
    assert summary.avg_temp is None
    assert summary.total_precip == 0.0
    assert summary.total_snow == 0.0
    assert summary.max_gust == 0.0
    assert summary.max_dew is None
    assert summary.max_uv == 0.0


def test_invalid_samples_are_excluded_from_temperature_stats():
    series = _series(temperature=[40, None, float("nan"), "hot", 60])
    temps = summarize_temps(series, Window(start=0, end=5))
    assert temps.min_temp == 40.0
    assert temps.max_temp == 60.0
    assert temps.avg_temp == 50.0
    assert temps.count == 2


def test_all_invalid_temperatures_stay_null():
    series = _series(temperature=[None, float("nan")])
    summary = aggregate(series, Window(start=0, end=2))
    assert summary.min_temp is None
    assert summary.avg_temp is None


def test_missing_accumulation_arrays_total_zero():
    series = _series(temperature=[40, 41, 42])
    assert accumulate_precip(series, Window(start=0, end=3)) == (0.0, 0.0)
    assert summarize_wind_gusts(series, Window(start=0, end=3)) == 0.0
    assert summarize_dew_and_uv(series, Window(start=0, end=3)) == (None, 0.0)


def test_short_arrays_count_as_absent_past_their_end():
    series = _series(
        temperature=[40, 41, 42, 43],
        precipitation=[0.1, 0.2],
        snowfall=[0.0, 0.5, -1.0],
        dewpoint=[30],
        uv_index=[1, 5],
    )
    summary = aggregate(series, Window(start=0, end=4))
    assert math.isclose(summary.total_precip, 0.3)
    assert summary.total_snow == 0.5
    assert summary.max_dew == 30.0
    assert summary.max_uv == 5.0
    assert summary.hours == 4


def test_explicit_window_only_reads_its_indices():
    series = _series(temperature=[10, 90, 20, 80], wind_gust=[5, 50, 5, 45])
    summary = aggregate(series, Window.of([0, 2]))
    assert (summary.min_temp, summary.max_temp) == (10.0, 20.0)
    assert summary.max_gust == 5.0


def test_sliced_series_aggregates_like_the_window():
    series = _series(
        temperature=[30, 35, 41, None, 47, 52],
        dewpoint=[28, 30, 33, 35, 36, None],
        precipitation=[0.0, 0.05, 0.1, None, 0.3],
        snowfall=[0.2, 0.1],
        wind_gust=[12, 18, 33, 40, 22, 15],
        uv_index=[0, 0, 1, 3, 4, 2],
    )
    window = Window(start=1, end=6)
    sliced = slice_to_window(series, window)
    direct = aggregate(series, window)
    via_slice = aggregate(sliced, Window(start=0, end=sliced.length))
    assert direct == via_slice

from forecast_intel.aggregation import aggregate
from forecast_intel.domain import AggregateSummary, GoldilocksVariant, HourlySeries, PrecipType, Window
from forecast_intel.patterns import (
    analyze_thermal_profile,
    classify_hourly_precip_type,
    compute_wet_bulb,
    detect_cad_wedge,
    detect_cold_air_damming,
    detect_convective,
    detect_freezing_drizzle,
    detect_goldilocks,
    detect_nw_flow_snow,
    detect_patterns,
    detect_ridge_winds,
    detect_stratiform,
    describe_temp_swing,
)


def _series(**arrays) -> HourlySeries:
    hours = max(len(v) for v in arrays.values())
    times = [f"2025-02-03T{h:02d}:00" for h in range(hours)]
    return HourlySeries(time=times, **arrays)


def _all(series: HourlySeries) -> Window:
    return Window(start=0, end=series.length)


# ---------------------------------------------------------------------------
# Precipitation shape
# ---------------------------------------------------------------------------

def test_convective_spike_detected_with_magnitude():
    series = _series(precipitation=[0.0, 0.30, 0.05, 0.0])
    convective, spike = detect_convective(series, _all(series))
    assert convective is True
    assert spike == 0.30


def test_gradual_rain_is_not_convective():
    series = _series(precipitation=[0.0, 0.1, 0.2, 0.3])
    assert detect_convective(series, _all(series)) == (False, 0.0)


def test_convective_pairs_stay_inside_the_window():
    series = _series(precipitation=[0.0, 0.0, 0.4, 0.4])
    # the jump happens between index 1 and 2; a window starting at 2 never sees it
    assert detect_convective(series, Window(start=2, end=4))[0] is False


def test_stratiform_needs_four_gentle_hours():
    gentle = _series(precipitation=[0.05, 0.05, 0.05, 0.05, 0.0])
    assert detect_stratiform(gentle, _all(gentle)) is True

    short = _series(precipitation=[0.05, 0.05, 0.05, 0.0])
    assert detect_stratiform(short, _all(short)) is False

    # bounds are exclusive
    edge = _series(precipitation=[0.01, 0.10, 0.01, 0.10])
    assert detect_stratiform(edge, _all(edge)) is False


# ---------------------------------------------------------------------------
# Terrain signatures
# ---------------------------------------------------------------------------

def test_nw_flow_lenient_versus_strict():
    # each condition holds in a different hour
    scattered = _series(
        wind_direction=[300, 180, 180],
        temperature=[50, 30, 50],
        snowfall=[0.0, 0.0, 0.1],
    )
    assert detect_nw_flow_snow(scattered, _all(scattered)) is True
    assert detect_nw_flow_snow(scattered, _all(scattered), strict=True) is False

    same_hour = _series(wind_direction=[300], temperature=[30], snowfall=[0.1])
    assert detect_nw_flow_snow(same_hour, _all(same_hour), strict=True) is True


def test_nw_flow_requires_snowfall():
    series = _series(wind_direction=[310, 310], temperature=[28, 28], snowfall=[0.0, 0.05])
    assert detect_nw_flow_snow(series, _all(series)) is False


def test_cold_air_damming_lenient_versus_strict():
    scattered = _series(
        temperature=[50, 45, 45, 45],
        dewpoint=[30, 30, 35, 35],
        wind_gust=[5, 5, 5, 15],
    )
    assert detect_cold_air_damming(scattered, _all(scattered)) is True
    assert detect_cold_air_damming(scattered, _all(scattered), strict=True) is False

    same_pair = _series(temperature=[50, 45], dewpoint=[30, 35], wind_gust=[5, 15])
    assert detect_cold_air_damming(same_pair, _all(same_pair), strict=True) is True


def test_cad_wedge_needs_ne_flow_cold_and_saturated():
    wedge = _series(wind_direction=[45], temperature=[40], dewpoint=[39])
    assert detect_cad_wedge(wedge, _all(wedge)) is True

    dry = _series(wind_direction=[45], temperature=[40], dewpoint=[30])
    assert detect_cad_wedge(dry, _all(dry)) is False

    southerly = _series(wind_direction=[200], temperature=[40], dewpoint=[39])
    assert detect_cad_wedge(southerly, _all(southerly)) is False


def test_ridge_winds_threshold():
    assert detect_ridge_winds(_series(wind_gust=[10, 35]), Window(start=0, end=2)) is True
    assert detect_ridge_winds(_series(wind_gust=[10, 34.9]), Window(start=0, end=2)) is False


def test_freezing_drizzle_requires_same_hour():
    same_hour = _series(temperature=[30], dewpoint=[28], precipitation=[0.02])
    assert detect_freezing_drizzle(same_hour, _all(same_hour)) is True

    split = _series(temperature=[30, 40], dewpoint=[28, 38], precipitation=[0.0, 0.02])
    assert detect_freezing_drizzle(split, _all(split)) is False

    too_wet = _series(temperature=[30], dewpoint=[28], precipitation=[0.05])
    assert detect_freezing_drizzle(too_wet, _all(too_wet)) is False


# ---------------------------------------------------------------------------
# Thermal profile
# ---------------------------------------------------------------------------

def test_wet_bulb_approximation():
    assert compute_wet_bulb(40, 39) == 39.5
    assert compute_wet_bulb(40, 30) == 35.0
    assert compute_wet_bulb(50, 30) == 42.0
    assert compute_wet_bulb(None, 30) is None


def test_hourly_precip_type():
    assert classify_hourly_precip_type(40, 39, 0.1) == PrecipType.SNOW
    assert classify_hourly_precip_type(32, 31, 0.0) == PrecipType.SNOW
    assert classify_hourly_precip_type(33.5, 33, 0.0) == PrecipType.MIX
    assert classify_hourly_precip_type(40, 39, 0.0) == PrecipType.RAIN
    assert classify_hourly_precip_type(40, None, 0.0) == PrecipType.UNKNOWN


def test_thermal_profile_only_wet_hours_vote():
    dry = _series(temperature=[30, 31], dewpoint=[29, 30], precipitation=[0, 0])
    precip_type, wb_min, wb_max = analyze_thermal_profile(dry, _all(dry))
    assert precip_type == PrecipType.NONE
    assert (wb_min, wb_max) == (29.5, 30.5)

    rain = _series(temperature=[30, 45], dewpoint=[29, 44], precipitation=[0, 0.2])
    assert analyze_thermal_profile(rain, _all(rain))[0] == PrecipType.RAIN


def test_thermal_profile_rain_and_snow_hours_make_a_mix():
    series = _series(
        temperature=[45, 28],
        dewpoint=[44, 27],
        precipitation=[0.2, 0.0],
        snowfall=[0.0, 0.3],
    )
    assert analyze_thermal_profile(series, _all(series))[0] == PrecipType.MIX


# ---------------------------------------------------------------------------
# Temperature swing
# ---------------------------------------------------------------------------

def _swing(temps):
    series = _series(temperature=temps)
    window = _all(series)
    summary = aggregate(series, window)
    return describe_temp_swing(series, window, summary.min_temp, summary.max_temp)


def test_swing_needs_four_readings():
    assert _swing([30, 60, 30]) is None


def test_steady_fall():
    assert _swing([60 - i for i in range(24)]) == "temperatures fall steadily through the day"


def test_cold_morning_warm_afternoon():
    temps = [30] * 6 + [40] * 4 + [55] * 8 + [50] * 6
    assert _swing(temps) == "cold morning, much warmer afternoon"


def test_double_swing():
    temps = [30] * 6 + [40] * 4 + [50] * 8 + [30] * 6
    assert _swing(temps) == "big temperature swing: cold early, warm later, then colder again"


def test_short_window_uses_spread_rule():
    assert _swing([30, 55, 30, 55, 30, 55]) == "big temperature swings"
    assert _swing([50, 55, 50, 55]) is None


# ---------------------------------------------------------------------------
# Goldilocks
# ---------------------------------------------------------------------------

def _summary(**overrides) -> AggregateSummary:
    base = dict(hours=8, min_temp=60.0, max_temp=72.0, avg_temp=66.0, max_dew=48.0, max_gust=10.0, max_uv=4.0)
    base.update(overrides)
    return AggregateSummary(**base)


def test_goldilocks_variants_in_order():
    assert detect_goldilocks(_summary(), ridge_winds=False) == GoldilocksVariant.FULL
    assert detect_goldilocks(_summary(min_temp=40.0, max_gust=22.0, max_dew=40.0), False) == GoldilocksVariant.AFTERNOON
    assert detect_goldilocks(_summary(max_gust=30.0, max_dew=40.0), True) == GoldilocksVariant.VALLEYS
    assert detect_goldilocks(_summary(max_dew=62.0, total_precip=0.2), False) == GoldilocksVariant.EARLY_MUGGY_LATE
    assert detect_goldilocks(_summary(max_temp=80.0), False) is None


def test_detect_patterns_on_an_ideal_window():
    series = _series(
        temperature=[70] * 8,
        dewpoint=[48] * 8,
        wind_gust=[5] * 8,
        precipitation=[0] * 8,
    )
    flags = detect_patterns(series, _all(series))
    assert flags.goldilocks == GoldilocksVariant.FULL
    assert flags.precip_type == PrecipType.NONE
    assert not flags.convective
    assert not flags.big_temperature_swing
    assert flags.swing_phrase is None

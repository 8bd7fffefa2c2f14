import datetime as dt
import unittest

from forecast_intel.briefing import build_forecast_briefing
from forecast_intel.clock import FixedClock
from forecast_intel.config import Settings
from forecast_intel.domain import AlertId, HourlySeries, OutlookCategory


def _gusty_series() -> HourlySeries:
    start = dt.datetime(2025, 5, 14, 0, 0)
    return HourlySeries(
        time=[(start + dt.timedelta(hours=i)).isoformat(timespec="minutes") for i in range(48)],
        temperature=[62.0] * 48,
        dewpoint=[45.0] * 48,
        wind_gust=[45.0 if i == 30 else 8.0 for i in range(48)],
    )


class TestForecastBriefing(unittest.TestCase):
    def setUp(self):
        self.clock = FixedClock(dt.datetime(2025, 5, 14, 8, 30))

    def test_briefing_combines_outlook_and_alerts(self):
        briefing = build_forecast_briefing(_gusty_series(), clock=self.clock)
        self.assertEqual(briefing.generated_at, self.clock.instant)
        self.assertEqual(briefing.outlook.badge.category, OutlookCategory.STRONG_WIND)
        self.assertEqual([a.id for a in briefing.alerts], [AlertId.STRONG_WIND])

    def test_briefing_uses_supplied_settings(self):
        cfg = Settings(locale_name="Boone, NC", alert_start_hours=0, alert_end_hours=6)
        briefing = build_forecast_briefing(_gusty_series(), clock=self.clock, settings=cfg)
        self.assertEqual(briefing.locale, "Boone, NC")
        self.assertEqual(briefing.alerts, [])

    def test_empty_series_briefing(self):
        briefing = build_forecast_briefing(HourlySeries(), clock=self.clock)
        self.assertEqual(briefing.outlook.badge.category, OutlookCategory.NO_DATA)
        self.assertEqual(briefing.alerts, [])


if __name__ == "__main__":
    unittest.main()

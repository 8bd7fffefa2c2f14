import unittest

from forecast_intel.main import app


class TestMain(unittest.TestCase):
    def test_app_metadata(self):
        self.assertEqual(app.title, "Forecast Intel")
        paths = {getattr(route, "path", None) for route in app.routes}
        self.assertIn("/healthz", paths)
        self.assertIn("/v1/outlook", paths)
        self.assertIn("/v1/comfort", paths)


if __name__ == "__main__":
    unittest.main()

import os
import unittest

from pydantic import ValidationError

from weather_api.config import Settings


class TestConfig(unittest.TestCase):
    def setUp(self):
        self._saved = {k: v for k, v in os.environ.items() if k.startswith("WEATHER_")}
        for key in self._saved:
            os.environ.pop(key)

    def tearDown(self):
        for key in [k for k in os.environ if k.startswith("WEATHER_")]:
            os.environ.pop(key)
        os.environ.update(self._saved)

    def test_settings_defaults(self):
        s = Settings()
        self.assertEqual(s.environment, "development")
        self.assertEqual(s.port, 8000)
        self.assertEqual(s.log_level, "INFO")
        self.assertIsNone(s.random_seed)
        self.assertEqual(s.simulated_delay_ms, 10)
        self.assertTrue(s.docs_enabled)
        self.assertTrue(s.contract_dir.name == "contract")

    def test_settings_env_override(self):
        os.environ["WEATHER_ENVIRONMENT"] = "Production"
        os.environ["WEATHER_LOG_LEVEL"] = "debug"
        os.environ["WEATHER_RANDOM_SEED"] = "42"
        s = Settings()
        self.assertEqual(s.environment, "production")
        self.assertFalse(s.docs_enabled)
        self.assertEqual(s.log_level, "DEBUG")
        self.assertEqual(s.random_seed, 42)

    def test_negative_delay_rejected(self):
        with self.assertRaises(ValidationError):
            Settings(simulated_delay_ms=-1)


if __name__ == "__main__":
    unittest.main()

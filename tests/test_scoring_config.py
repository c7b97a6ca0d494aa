import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import scoring as scoring_config  # noqa: E402
from app.core.config.scoring import clear_scoring_config_cache, get_scoring_config, get_scoring_value  # noqa: E402


class ScoringConfigTests(unittest.TestCase):
    def tearDown(self):
        clear_scoring_config_cache()

    def test_loader_and_value_lookup(self):
        config = get_scoring_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_scoring_value("factors.recency.half_life_days"), 14)
        self.assertEqual(get_scoring_value("factors.company_tier.notable"), 0.6)
        self.assertEqual(get_scoring_value("neutral_score"), 0.5)

    def test_missing_paths_return_default(self):
        self.assertIsNone(get_scoring_value("factors.salary.weight"))
        self.assertEqual(get_scoring_value("factors.recency.half_life_days.value", 3), 3)
        self.assertEqual(get_scoring_value("", "fallback"), "fallback")

    def test_override_path_and_invalid_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            custom = Path(tmp) / "custom.yaml"
            custom.write_text("neutral_score: 0.4\n", encoding="utf-8")
            broken = Path(tmp) / "broken.yaml"
            broken.write_text("- just\n- a list\n", encoding="utf-8")

            with patch.object(scoring_config, "scoring_config_path", return_value=custom):
                clear_scoring_config_cache()
                self.assertEqual(get_scoring_value("neutral_score"), 0.4)

            with patch.object(scoring_config, "scoring_config_path", return_value=broken):
                clear_scoring_config_cache()
                with self.assertRaises(RuntimeError):
                    get_scoring_config()

            missing = Path(tmp) / os.path.join("nope", "scoring.yaml")
            with patch.object(scoring_config, "scoring_config_path", return_value=missing):
                clear_scoring_config_cache()
                with self.assertRaises(RuntimeError):
                    get_scoring_config()


if __name__ == "__main__":
    unittest.main()

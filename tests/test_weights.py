import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import scoring as scoring_config  # noqa: E402
from app.scoring import FACTORS, InvalidWeight, ScoringWeights, default_weights, normalize_weights  # noqa: E402
from app.scoring.weights import coerce_weight  # noqa: E402


class WeightConfigurationTests(unittest.TestCase):
    def test_defaults_are_neutral_for_every_factor(self):
        weights = default_weights()
        self.assertEqual(set(weights.as_dict()), set(FACTORS))
        self.assertTrue(all(value == 1.0 for value in weights.as_dict().values()))

    def test_out_of_range_values_are_clamped(self):
        weights = normalize_weights({"skills": 5.7, "location": -1})
        self.assertEqual(weights.skills, 2.0)
        self.assertEqual(weights.location, 0.0)
        self.assertEqual(weights.recency, 1.0)

    def test_camel_case_keys_and_unknown_keys(self):
        weights = normalize_weights({"titleMatch": 1.5, "company_tier": "0.25", "salary": 2})
        self.assertEqual(weights.title_match, 1.5)
        self.assertEqual(weights.company_tier, 0.25)
        self.assertNotIn("salary", weights.as_dict())

    def test_invalid_values_fall_back_to_default(self):
        weights = normalize_weights({"culture": "lots", "quality": None, "skills": True, "recency": float("nan")})
        self.assertEqual(weights.culture, 1.0)
        self.assertEqual(weights.quality, 1.0)
        self.assertEqual(weights.skills, 1.0)
        self.assertEqual(weights.recency, 1.0)
        self.assertEqual(normalize_weights(["not", "a", "mapping"]), default_weights())

    def test_coerce_weight_rejects_non_numbers(self):
        for value in ("abc", None, True, [1], float("nan")):
            with self.subTest(value=value):
                with self.assertRaises(InvalidWeight):
                    coerce_weight("skills", value)
        self.assertEqual(coerce_weight("skills", float("inf")), 2.0)
        self.assertEqual(coerce_weight("skills", " 0.5 "), 0.5)

    def test_with_weight_returns_a_new_snapshot(self):
        base = default_weights()
        updated = base.with_weight("skills", 1.8)
        self.assertEqual(base.skills, 1.0)
        self.assertEqual(updated.skills, 1.8)
        self.assertEqual(updated.with_weight("titleMatch", 9).title_match, 2.0)
        with self.assertRaises(KeyError):
            base.with_weight("salary", 1.0)

    def test_reset_is_idempotent(self):
        custom = normalize_weights({"skills": 2, "culture": 0})
        self.assertEqual(custom.reset(), default_weights())
        self.assertEqual(custom.reset().reset(), custom.reset())
        self.assertEqual(normalize_weights(normalize_weights(default_weights())), default_weights())
        self.assertEqual(normalize_weights(custom.reset()), default_weights())

    def test_serializes_with_camel_case_keys(self):
        dumped = normalize_weights({"company_tier": 1.2}).model_dump(by_alias=True)
        self.assertEqual(dumped["companyTier"], 1.2)
        self.assertEqual(ScoringWeights.model_validate(dumped).company_tier, 1.2)


class WeightRangeConfigTests(unittest.TestCase):
    def tearDown(self):
        scoring_config.clear_scoring_config_cache()

    def test_range_and_default_come_from_scoring_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            custom = Path(tmp) / "scoring.yaml"
            custom.write_text("weights:\n  default: 1.5\n  min: 0.5\n  max: 3.0\n", encoding="utf-8")
            with patch.object(scoring_config, "scoring_config_path", return_value=custom):
                scoring_config.clear_scoring_config_cache()
                self.assertEqual(default_weights().skills, 1.5)
                weights = normalize_weights({"skills": 5, "location": 0, "culture": "junk"})
                self.assertEqual(weights.skills, 3.0)
                self.assertEqual(weights.location, 0.5)
                self.assertEqual(weights.culture, 1.5)
                self.assertEqual(weights.recency, 1.5)

    def test_inverted_range_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            custom = Path(tmp) / "scoring.yaml"
            custom.write_text("weights:\n  min: 4\n  max: 1\n", encoding="utf-8")
            with patch.object(scoring_config, "scoring_config_path", return_value=custom):
                scoring_config.clear_scoring_config_cache()
                self.assertEqual(normalize_weights({"skills": 9}).skills, 2.0)
                self.assertEqual(default_weights().skills, 1.0)


if __name__ == "__main__":
    unittest.main()

import json
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.normalize import degraded_profile, normalize_profile, profile_as_draft  # noqa: E402
from app.normalize.normalize_profile import coerce_level, coerce_tier, normalize_experience  # noqa: E402
from app.normalize.utils import safe_non_negative_int  # noqa: E402
from app.schemas.profile import Skill  # noqa: E402

RAW_TEXT = "Jane Citizen\nFrontend engineer based in Sydney, open to remote work.\nReact, TypeScript, GraphQL"


def _react_draft() -> dict:
    return {
        "skills": [
            {"name": "React", "tier": "core"},
            {"name": "reactjs", "tier": "peripheral"},
            {"name": " TypeScript ", "tier": "strong"},
        ],
        "titles": ["Frontend Engineer", "frontend engineer"],
        "keywords": ["GraphQL", "design systems"],
        "experience": {"years": 5},
    }


class ProfileNormalizerTests(unittest.TestCase):
    def test_draft_becomes_clean_profile(self):
        profile = normalize_profile(RAW_TEXT, _react_draft())

        self.assertEqual(profile.raw_text, RAW_TEXT)
        self.assertEqual(profile.skills, (Skill(name="react", tier="core"), Skill(name="typescript", tier="strong")))
        self.assertEqual(profile.titles, ("frontend engineer",))
        self.assertEqual(profile.keywords, ("design systems", "graphql"))
        self.assertEqual(profile.experience.years, 5)
        self.assertEqual(profile.experience.level, "mid")
        self.assertEqual(profile.suggested_roles, ("Frontend Engineer",))
        self.assertEqual(profile.suggested_locations, ("Sydney", "Remote"))

    def test_highest_tier_wins_regardless_of_order(self):
        draft = {"skills": [{"name": "python", "tier": "peripheral"}, {"name": "Python", "tier": "core"}]}
        profile = normalize_profile("", draft)
        self.assertEqual(profile.skills, (Skill(name="python", tier="core"),))

    def test_skill_names_are_unique_case_insensitively(self):
        draft = {"skills": ["Docker", "docker", "DOCKER", "k8s", "Kubernetes"]}
        profile = normalize_profile("", draft)
        names = [skill.name for skill in profile.skills]
        self.assertEqual(names, ["docker", "kubernetes"])
        self.assertTrue(all(skill.tier == "peripheral" for skill in profile.skills))

    def test_renormalizing_a_profile_is_a_no_op(self):
        profile = normalize_profile(RAW_TEXT, _react_draft())
        again = normalize_profile(profile.raw_text, profile_as_draft(profile))
        self.assertEqual(again, profile)

        degraded = degraded_profile(RAW_TEXT)
        self.assertEqual(normalize_profile(RAW_TEXT, profile_as_draft(degraded)), degraded)

    def test_json_string_and_envelope_drafts(self):
        expected = normalize_profile(RAW_TEXT, _react_draft())
        self.assertEqual(normalize_profile(RAW_TEXT, json.dumps(_react_draft())), expected)
        self.assertEqual(normalize_profile(RAW_TEXT, {"profile": _react_draft()}), expected)

    def test_malformed_drafts_degrade(self):
        for draft in (None, "", "not json at all", "[1, 2]", [1, 2], 42, {"unrelated": True}):
            with self.subTest(draft=draft):
                profile = normalize_profile(RAW_TEXT, draft)
                self.assertEqual(profile, degraded_profile(RAW_TEXT))
                self.assertFalse(profile.has_structured_data())
                self.assertEqual(profile.suggested_roles, ())
                self.assertEqual(profile.suggested_locations, ())

    def test_draft_with_only_junk_values_degrades(self):
        draft = {"skills": [None, 3, {"tier": "core"}], "titles": "", "experience": {"years": -2}}
        self.assertEqual(normalize_profile(RAW_TEXT, draft), degraded_profile(RAW_TEXT))

    def test_unknown_tier_and_level_are_coerced(self):
        self.assertEqual(coerce_tier("Expert"), "core")
        self.assertEqual(coerce_tier("intermediate"), "strong")
        self.assertEqual(coerce_tier("wizard"), "peripheral")
        self.assertEqual(coerce_tier(None), "peripheral")
        self.assertEqual(coerce_level("Senior"), "senior")
        self.assertEqual(coerce_level("Principal"), "lead")
        self.assertIsNone(coerce_level("rockstar"))

    def test_experience_is_repaired_from_either_half(self):
        self.assertEqual(normalize_experience({"experience": {"level": "Senior"}}).years, 7)
        from_years = normalize_experience({"experience": {"years": "12+ years", "level": "rockstar"}})
        self.assertEqual((from_years.years, from_years.level), (12, "lead"))
        self.assertEqual(normalize_experience({"experience": 2}).level, "junior")
        self.assertEqual(normalize_experience({"experience": "mid-level"}).level, "mid")
        self.assertIsNone(normalize_experience({"experience": {"years": "lots"}}))

    def test_year_parsing_rejects_nonsense(self):
        self.assertEqual(safe_non_negative_int("5+ years"), 5)
        self.assertEqual(safe_non_negative_int("12 yrs"), 12)
        self.assertIsNone(safe_non_negative_int("150 years"))
        self.assertIsNone(safe_non_negative_int("2020-2024"))
        self.assertEqual(safe_non_negative_int(3.9), 3)
        self.assertIsNone(safe_non_negative_int(True))
        self.assertIsNone(safe_non_negative_int(-1))
        self.assertIsNone(safe_non_negative_int(float("nan")))
        self.assertEqual(safe_non_negative_int(float("inf")), 60)

    def test_roles_follow_titles_before_skills(self):
        draft = {
            "skills": [{"name": "docker", "tier": "core"}, {"name": "figma", "tier": "peripheral"}],
            "titles": ["Backend Developer"],
        }
        profile = normalize_profile("", draft)
        self.assertEqual(profile.suggested_roles, ("Backend Engineer", "Software Engineer", "DevOps Engineer"))
        # Remote-friendly families imply a remote preference even without a mention.
        self.assertEqual(profile.suggested_locations, ("Remote",))

    def test_locations_come_from_resume_text_in_order(self):
        draft = {"titles": ["Product Manager"]}
        profile = normalize_profile("Melbourne VIC, previously Adelaide and London", draft)
        self.assertEqual(profile.suggested_locations, ("Melbourne", "Adelaide", "London"))
        self.assertEqual(profile.suggested_roles, ("Product Manager",))


if __name__ == "__main__":
    unittest.main()

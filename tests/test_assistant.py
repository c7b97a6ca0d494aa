import json
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.ai.config import AIConfig  # noqa: E402
from app.ai.factory import get_draft_assistant  # noqa: E402
from app.ai.providers.null_provider import NullDraftAssistant  # noqa: E402
from app.ai.providers.openai_provider import OpenAIDraftAssistant  # noqa: E402
from app.ai.types import AssistantError  # noqa: E402


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class DraftAssistantTests(unittest.TestCase):
    def test_returns_parsed_json_object(self):
        client = MagicMock()
        draft = {"skills": [{"name": "React", "tier": "core"}], "titles": ["Frontend Engineer"]}
        client.chat.completions.create.return_value = _completion(json.dumps(draft))

        assistant = OpenAIDraftAssistant(model="gpt-4o-mini", client=client, max_input_chars=10)
        self.assertEqual(assistant.produce_draft_profile("React developer with five years"), draft)

        kwargs = client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["response_format"], {"type": "json_object"})
        self.assertIn("React deve", kwargs["messages"][1]["content"])
        self.assertNotIn("five years", kwargs["messages"][1]["content"])

    def test_failures_become_none(self):
        client = MagicMock()
        assistant = OpenAIDraftAssistant(model="gpt-4o-mini", client=client)

        client.chat.completions.create.side_effect = TimeoutError("timed out")
        self.assertIsNone(assistant.produce_draft_profile("resume"))

        client.chat.completions.create.side_effect = None
        for content in ("", "not json", "[1, 2, 3]"):
            with self.subTest(content=content):
                client.chat.completions.create.return_value = _completion(content)
                self.assertIsNone(assistant.produce_draft_profile("resume"))

    def test_blank_text_skips_the_call(self):
        client = MagicMock()
        assistant = OpenAIDraftAssistant(model="gpt-4o-mini", client=client)
        self.assertIsNone(assistant.produce_draft_profile("   "))
        client.chat.completions.create.assert_not_called()

    def test_missing_or_placeholder_key_is_rejected(self):
        for key in (None, "", "your_openai_key_here", "changeme"):
            with self.subTest(key=key):
                with self.assertRaises(AssistantError) as ctx:
                    OpenAIDraftAssistant(model="gpt-4o-mini", api_key=key)
                self.assertEqual(ctx.exception.code, "llm_disabled")

    def test_factory_falls_back_to_null_assistant(self):
        disabled = AIConfig(provider="openai", model="gpt-4o-mini", enabled=False, api_key="sk-test")
        self.assertIsInstance(get_draft_assistant(disabled), NullDraftAssistant)

        keyless = AIConfig(provider="openai", model="gpt-4o-mini", enabled=True, api_key=None)
        self.assertIsInstance(get_draft_assistant(keyless), NullDraftAssistant)

        none_provider = AIConfig(provider="none", model="", enabled=True)
        self.assertIsNone(get_draft_assistant(none_provider).produce_draft_profile("resume text"))

    def test_factory_builds_openai_assistant_with_key(self):
        config = AIConfig(provider="openai", model="gpt-4o-mini", enabled=True, api_key="sk-test-123")
        self.assertIsInstance(get_draft_assistant(config), OpenAIDraftAssistant)

    def test_factory_rejects_unknown_provider(self):
        with self.assertRaises(ValueError):
            get_draft_assistant(AIConfig(provider="gemini", model="x", enabled=True))


if __name__ == "__main__":
    unittest.main()

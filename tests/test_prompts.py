"""
Unit tests for prompts.py

Gemini is never called: the client is mocked and the key patched.
"""

import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

sys.path.insert(0, str(Path(__file__).parent.parent))

import config
import prompts
from renderer_selector import SECTIONS


class TestFallbackQuestions(unittest.TestCase):
    """Test suite for the bundled questions."""

    @patch.object(config, "GEMINI_API_KEY", None)
    def test_no_key_uses_fallback(self):
        result = prompts.discussion_questions("gender", "What is the athlete gender split at the Olympics?")
        self.assertEqual(result["source"], "fallback")
        self.assertEqual(len(result["questions"]), 3)

    def test_every_section_has_copy(self):
        for section in SECTIONS:
            with self.subTest(section=section.id):
                self.assertIn(section.id, prompts.FALLBACK_QUESTIONS)
                self.assertTrue(prompts.explanation_for(section.id)["source_url"])

    def test_unknown_section_gets_generic_questions(self):
        result = prompts.build_fallback_questions("medals")
        self.assertEqual(result["questions"], prompts.GENERIC_QUESTIONS)

    @patch.object(config, "GEMINI_API_KEY", None)
    def test_call_without_key_raises(self):
        with self.assertRaises(RuntimeError):
            prompts.call_gemini("gender", "title", None)


class TestParseQuestions(unittest.TestCase):

    def test_fenced_json(self):
        raw = '```json\n{"questions": ["a?", "b?", "c?", "d?"]}\n```'
        self.assertEqual(prompts.parse_questions(raw), ["a?", "b?", "c?"])

    def test_text_around_json(self):
        raw = 'Sure! {"questions": ["Why?"]} Hope this helps.'
        self.assertEqual(prompts.parse_questions(raw), ["Why?"])

    def test_no_questions(self):
        with self.assertRaises(ValueError):
            prompts.parse_questions('{"summary": "nothing"}')
        with self.assertRaises(ValueError):
            prompts.parse_questions("not json at all")


class TestGeminiCall(unittest.TestCase):
    """Test suite for the model call with a mocked client."""

    def _model_replying(self, text):
        model = MagicMock()
        model.generate_content.return_value = MagicMock(text=text)
        return model

    @patch.object(config, "GEMINI_API_KEY", "test-key")
    @patch("prompts.gen")
    def test_questions_from_model(self, mock_gen):
        mock_gen.GenerativeModel.return_value = self._model_replying('{"questions": ["One?", "Two?", "Three?"]}')
        result = prompts.discussion_questions("environment", "How do the Olympics impact the environment?", "year,event")
        self.assertEqual(result, {"questions": ["One?", "Two?", "Three?"], "source": "gemini"})
        mock_gen.configure.assert_called_once_with(api_key="test-key")
        mock_gen.GenerativeModel.assert_called_once_with(config.GEMINI_MODEL)

    @patch.object(config, "GEMINI_API_KEY", "test-key")
    @patch("prompts.gen")
    def test_broken_reply_falls_back(self, mock_gen):
        mock_gen.GenerativeModel.return_value = self._model_replying("I cannot help with that")
        result = prompts.discussion_questions("environment", "title")
        self.assertEqual(result["source"], "fallback")

    @patch.object(config, "GEMINI_API_KEY", "test-key")
    @patch("prompts.gen")
    def test_failed_call_falls_back(self, mock_gen):
        mock_gen.GenerativeModel.return_value.generate_content.side_effect = RuntimeError("quota")
        result = prompts.discussion_questions("first-time", "title")
        self.assertEqual(result["source"], "fallback")

    def test_prompt_carries_section_and_data(self):
        prompt = prompts.build_prompt("paralympics", "What is the history?", "year,competitors\n1960,209")
        self.assertIn("chart: paralympics", prompt)
        self.assertIn("1960,209", prompt)
        self.assertIn('"questions"', prompt)


if __name__ == "__main__":
    unittest.main()

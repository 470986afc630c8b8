#!/usr/bin/env python3
"""
Tests for configuration loading
"""

import importlib
import unittest
import sys
import os
from unittest.mock import patch

# Add the project root to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import config


class TestConfig(unittest.TestCase):
    """Test cases for configuration loading"""

    def tearDown(self):
        importlib.reload(config)

    def test_config_values(self):
        """Test that config values have expected types"""
        self.assertIsInstance(config.GEMINI_MODEL, str)
        self.assertIsInstance(config.OPENROUTER_IMAGE_MODEL, str)
        self.assertIsInstance(config.GEMINI_TIMEOUT, int)
        self.assertIsInstance(config.OPENROUTER_TIMEOUT, int)
        self.assertIsInstance(config.IMAGE_FETCH_TIMEOUT, int)
        self.assertEqual(config.OUTPUT_DIR, "generated_images")

        # Test that API URLs are valid URLs
        self.assertTrue(config.GEMINI_API_URL.startswith("https://"))
        self.assertTrue(config.OPENROUTER_API_URL.startswith("https://"))

    def test_gemini_url_uses_model(self):
        """Test the Gemini endpoint is built from the configured model"""
        with patch.dict(os.environ, {"GEMINI_MODEL": "gemini-test-model"}):
            importlib.reload(config)
            self.assertEqual(
                config.GEMINI_API_URL,
                "https://generativelanguage.googleapis.com/v1beta/models/gemini-test-model:generateContent",
            )

    def test_keys_from_environment(self):
        """Test provider keys are read from the environment"""
        with patch.dict(os.environ, {"GEMINI_API_KEY": "AIza-test", "OPENROUTER_API_KEY": "sk-or-test"}):
            importlib.reload(config)
            self.assertEqual(config.GEMINI_API_KEY, "AIza-test")
            self.assertEqual(config.OPENROUTER_API_KEY, "sk-or-test")

    def test_timeouts_from_environment(self):
        """Test timeouts can be overridden"""
        with patch.dict(os.environ, {"GEMINI_TIMEOUT": "30", "IMAGE_FETCH_TIMEOUT": "5"}):
            importlib.reload(config)
            self.assertEqual(config.GEMINI_TIMEOUT, 30)
            self.assertEqual(config.IMAGE_FETCH_TIMEOUT, 5)

    def test_log_to_file_flag(self):
        """Test the file logging flag parses booleans"""
        with patch.dict(os.environ, {"LOG_TO_FILE": "True"}):
            importlib.reload(config)
            self.assertTrue(config.LOG_TO_FILE)
        with patch.dict(os.environ, {"LOG_TO_FILE": "no"}):
            importlib.reload(config)
            self.assertFalse(config.LOG_TO_FILE)


if __name__ == '__main__':
    unittest.main()

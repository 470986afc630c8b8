"""
Tests for the error handling system.
"""

import json
import unittest
import sys
import os

import requests

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ai.exceptions.provider_exceptions import (
    APIError,
    ConfigurationError,
    ImageProviderError,
    ImageSaveError,
    ImageSourceError,
)
from utils.error_handler import (
    sanitize_error_message, categorize_error,
    determine_severity, handle_error,
    ErrorSeverity, ErrorCategory, SanitizedError
)


class TestErrorSanitization(unittest.TestCase):
    """Test error message sanitization."""

    def test_sanitize_google_keys(self):
        """Test removing Google API keys."""
        raw_message = "Request failed: key=AIzaSyA1234567890abcdefghijklmnop rejected"
        sanitized = sanitize_error_message(raw_message)

        self.assertNotIn("AIzaSyA1234567890abcdefghijklmnop", sanitized)
        self.assertIn("[KEY]", sanitized)

    def test_sanitize_openrouter_keys(self):
        """Test removing OpenRouter keys."""
        raw_message = "Invalid API key: sk-or-v1-1234567890abcdef1234567890abcdef"
        sanitized = sanitize_error_message(raw_message)

        self.assertNotIn("sk-or-v1-1234567890abcdef1234567890abcdef", sanitized)
        self.assertIn("[KEY]", sanitized)

    def test_sanitize_bearer_tokens(self):
        """Test removing bearer tokens."""
        sanitized = sanitize_error_message("Authorization: Bearer abc.def.ghi failed")
        self.assertNotIn("abc.def.ghi", sanitized)
        self.assertIn("Bearer [KEY]", sanitized)

    def test_sanitize_data_uris(self):
        """Test inline image data is collapsed."""
        sanitized = sanitize_error_message("bad image data:image/png;base64,iVBORw0KGgo=")
        self.assertEqual(sanitized, "bad image [DATA_URI]")

    def test_length_limit(self):
        """Test long messages are truncated."""
        sanitized = sanitize_error_message("x" * 1000)
        self.assertEqual(len(sanitized), 500)
        self.assertTrue(sanitized.endswith("..."))

    def test_empty_message(self):
        """Test empty messages get a placeholder."""
        self.assertEqual(sanitize_error_message(""), "An error occurred")


class TestErrorCategorization(unittest.TestCase):
    """Test error categorization."""

    def test_provider_errors(self):
        """Test provider exception types map to their categories."""
        self.assertEqual(categorize_error(ConfigurationError("no key")), ErrorCategory.CONFIGURATION)
        self.assertEqual(categorize_error(APIError("bad", 500)), ErrorCategory.API)
        self.assertEqual(categorize_error(ImageSourceError("gone")), ErrorCategory.NETWORK)
        self.assertEqual(categorize_error(ImageSaveError("disk")), ErrorCategory.PERSISTENCE)

    def test_network_errors(self):
        """Test transport failures are network errors."""
        self.assertEqual(categorize_error(requests.exceptions.Timeout()), ErrorCategory.NETWORK)
        self.assertEqual(categorize_error(requests.exceptions.ConnectionError()), ErrorCategory.NETWORK)

    def test_parsing_errors(self):
        """Test malformed responses are parsing errors."""
        self.assertEqual(categorize_error(KeyError("choices")), ErrorCategory.PARSING)
        self.assertEqual(categorize_error(json.JSONDecodeError("Expecting value", "", 0)), ErrorCategory.PARSING)
        self.assertEqual(
            categorize_error(requests.exceptions.JSONDecodeError("Expecting value", "", 0)),
            ErrorCategory.PARSING,
        )

    def test_context_categorization(self):
        """Test categorization from the operation context."""
        self.assertEqual(
            categorize_error(ValueError("bad"), {"operation": "save_image"}),
            ErrorCategory.PERSISTENCE,
        )

    def test_unknown(self):
        """Test unrecognized errors."""
        self.assertEqual(categorize_error(RuntimeError("?")), ErrorCategory.UNKNOWN)


class TestSeverity(unittest.TestCase):
    """Test severity determination."""

    def test_severity_levels(self):
        """Test severities per category."""
        self.assertEqual(
            determine_severity(ConfigurationError("x"), ErrorCategory.CONFIGURATION),
            ErrorSeverity.HIGH,
        )
        self.assertEqual(determine_severity(APIError("x"), ErrorCategory.API), ErrorSeverity.MEDIUM)
        self.assertEqual(determine_severity(RuntimeError("x"), ErrorCategory.UNKNOWN), ErrorSeverity.HIGH)


class TestHandleError(unittest.TestCase):
    """Test the main error handling entry point."""

    def test_handle_error(self):
        """Test errors are logged and returned sanitized."""
        error = APIError("Gemini API error: 401 - key AIzaSyA1234567890abcdefghijklmnop", status_code=401)

        with self.assertLogs("utils.error_handler", level="WARNING") as logs:
            result = handle_error(error, {"operation": "gemini_generate_image"})

        self.assertIsInstance(result, SanitizedError)
        self.assertEqual(result.category, ErrorCategory.API)
        self.assertEqual(result.severity, ErrorSeverity.MEDIUM)
        self.assertIs(result.original_error, error)
        self.assertNotIn("AIzaSy", result.message)
        self.assertTrue(result.error_id.startswith("ERR_"))
        self.assertIn("[api]", logs.output[0])
        self.assertNotIn("AIzaSy", logs.output[0])

    def test_provider_error_status_code(self):
        """Test provider errors keep their status code."""
        error = ImageProviderError("boom", status_code=503)
        self.assertEqual(error.status_code, 503)
        self.assertEqual(str(error), "boom")


if __name__ == '__main__':
    unittest.main()

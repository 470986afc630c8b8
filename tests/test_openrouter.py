#!/usr/bin/env python3
"""
Tests for the OpenRouter API provider
"""

import os
import sys
import tempfile
import unittest
from unittest.mock import MagicMock, patch

import requests

# Add the project root to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ai.exceptions.provider_exceptions import ConfigurationError
from ai.models.image_models import ImageGenerationRequest
from ai.openrouter import OpenRouterAPI


def make_response(status_code=200, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    response.json.return_value = payload or {}
    return response


def chat_payload(message, usage=None):
    payload = {"choices": [{"message": message}]}
    if usage:
        payload["usage"] = usage
    return payload


class TestOpenRouterAPI(unittest.TestCase):
    """Test OpenRouter request construction"""

    def setUp(self):
        self.api = OpenRouterAPI(api_key="sk-or-test")

    def test_headers(self):
        """Test authentication and attribution headers"""
        headers = self.api._get_headers()
        self.assertEqual(headers["Authorization"], "Bearer sk-or-test")
        self.assertIn("HTTP-Referer", headers)
        self.assertIn("X-Title", headers)

    def test_availability(self):
        """Test availability follows the key"""
        self.assertTrue(self.api.is_available())
        self.assertFalse(OpenRouterAPI(api_key="").is_available())

    def test_generate_without_key(self):
        """Test generating without a key is a configuration error"""
        with self.assertRaises(ConfigurationError):
            OpenRouterAPI(api_key="").generate_image(ImageGenerationRequest(prompt="x"))

    def test_content_order(self):
        """Test text comes first, then references in order, then the canvas"""
        request = ImageGenerationRequest(
            prompt="blend these",
            images=[
                {"url": "https://example.com/style.jpg"},
                {"base64": "QUFB", "mimeType": "image/jpeg"},
            ],
            aspect_ratio="portrait",
        )
        content, prompt = self.api.build_content(request)

        self.assertEqual(len(content), 4)
        self.assertEqual(content[0], {"type": "text", "text": prompt})
        self.assertEqual(content[1]["image_url"]["url"], "https://example.com/style.jpg")
        self.assertEqual(content[2]["image_url"]["url"], "data:image/jpeg;base64,QUFB")
        self.assertTrue(content[3]["image_url"]["url"].startswith("data:image/png;base64,"))
        self.assertIn("portrait orientation", prompt)

    def test_oversized_aspect_ratio_ignored(self):
        """Test a ratio with huge numbers adds no canvas and no aspect clause"""
        request = ImageGenerationRequest(prompt="x", aspect_ratio="1" + "0" * 400 + ":1")
        content, prompt = self.api.build_content(request)
        self.assertEqual(content, [{"type": "text", "text": "x"}])
        self.assertEqual(prompt, "x")

    def test_url_reference_not_fetched(self):
        """Test remote references are passed through without downloading"""
        request = ImageGenerationRequest(prompt="x", images=[{"url": "https://example.com/a.png"}])
        with patch("requests.get") as mock_get:
            self.api.build_content(request)
            mock_get.assert_not_called()

    def test_path_reference_inlined(self):
        """Test local files are sent as data URIs"""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, "ref.png")
            with open(path, "wb") as f:
                f.write(b"abc")
            request = ImageGenerationRequest(prompt="x", images=[{"path": path}])
            content, _ = self.api.build_content(request)

        self.assertEqual(content[1]["image_url"]["url"], "data:image/png;base64,YWJj")

    def test_payload(self):
        """Test the chat completion payload"""
        payload = self.api.build_payload([{"type": "text", "text": "x"}])
        self.assertEqual(payload["model"], self.api.model)
        self.assertEqual(payload["messages"], [{"role": "user", "content": [{"type": "text", "text": "x"}]}])
        self.assertIn("image", payload["modalities"])

    def test_model_info(self):
        """Test the model description mentions OpenRouter"""
        self.assertIn("OpenRouter", self.api.get_model_info())


class TestOpenRouterResponse(unittest.TestCase):
    """Test OpenRouter response handling"""

    def setUp(self):
        self.api = OpenRouterAPI(api_key="sk-or-test")
        self.request = ImageGenerationRequest(prompt="a red circle")

    @patch("requests.post")
    def test_images_field(self, mock_post):
        """Test images listed on the message are returned in order"""
        mock_post.return_value = make_response(payload=chat_payload(
            {
                "content": "Here is your image",
                "images": [
                    {"type": "image_url", "image_url": {"url": "data:image/png;base64,QUFB"}},
                    {"type": "image_url", "image_url": {"url": "https://cdn.example.com/out.webp"}},
                ],
            },
            usage={"prompt_tokens": 12, "completion_tokens": 1290, "total_tokens": 1302},
        ))

        result = self.api.generate_image(self.request)

        self.assertTrue(result.success)
        self.assertEqual(len(result.images), 2)
        self.assertEqual(result.images[0].type, "base64")
        self.assertEqual(result.images[0].data, "data:image/png;base64,QUFB")
        self.assertEqual(result.images[0].format, "png")
        self.assertEqual(result.images[1].type, "url")
        self.assertEqual(result.images[1].url, "https://cdn.example.com/out.webp")
        self.assertEqual(result.message, "Here is your image")
        self.assertEqual(result.usage.tokens, 1302)
        self.assertEqual(result.provider, "OpenRouter")

    @patch("requests.post")
    def test_data_uri_content_fallback(self, mock_post):
        """Test a data URI in the content is used when no images are listed"""
        mock_post.return_value = make_response(payload=chat_payload(
            {"content": "data:image/jpeg;base64,QkJC"}
        ))
        result = self.api.generate_image(self.request)
        self.assertEqual(len(result.images), 1)
        self.assertEqual(result.images[0].data, "data:image/jpeg;base64,QkJC")
        self.assertEqual(result.images[0].format, "jpeg")

    @patch("requests.post")
    def test_url_content_fallback(self, mock_post):
        """Test the first URL in the content is used when no images are listed"""
        mock_post.return_value = make_response(payload=chat_payload(
            {"content": "Done! See https://cdn.example.com/a.png and https://cdn.example.com/b.png"}
        ))
        result = self.api.generate_image(self.request)
        self.assertEqual(len(result.images), 1)
        self.assertEqual(result.images[0].url, "https://cdn.example.com/a.png")

    @patch("requests.post")
    def test_text_only_response(self, mock_post):
        """Test a reply without any image is a success with no images"""
        mock_post.return_value = make_response(payload=chat_payload({"content": "I cannot draw that"}))
        result = self.api.generate_image(self.request)
        self.assertTrue(result.success)
        self.assertEqual(result.images, [])
        self.assertEqual(result.message, "I cannot draw that")

    @patch("requests.post")
    def test_http_error(self, mock_post):
        """Test non-success statuses become failed results"""
        mock_post.return_value = make_response(status_code=402, text="Insufficient credits")
        result = self.api.generate_image(self.request)
        self.assertFalse(result.success)
        self.assertEqual(result.error, "OpenRouter API error: 402 - Insufficient credits")

    @patch("requests.post")
    def test_missing_choices(self, mock_post):
        """Test a malformed body becomes a failed result"""
        mock_post.return_value = make_response(payload={"error": {"message": "overloaded"}})
        result = self.api.generate_image(self.request)
        self.assertFalse(result.success)
        self.assertTrue(result.error)

    @patch("requests.post", side_effect=requests.exceptions.ConnectionError("connection refused"))
    def test_network_error(self, mock_post):
        """Test transport failures become failed results"""
        result = self.api.generate_image(self.request)
        self.assertFalse(result.success)
        self.assertIn("connection refused", result.error)


if __name__ == '__main__':
    unittest.main()

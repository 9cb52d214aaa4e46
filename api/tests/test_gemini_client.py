import base64
import unittest
from unittest.mock import MagicMock

import requests

from chalkboard.core.exceptions import (
    RateLimitError,
    RetryExhaustedError,
    UpstreamError,
    UpstreamTimeoutError,
)
from chalkboard.services.gemini_client import GeminiClient

from support import gemini_response


def http_response(status_code, body):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    response.text = str(body)
    return response


class TestGeminiClient(unittest.TestCase):

    def setUp(self):
        self.http = MagicMock()
        self.client = GeminiClient(
            api_key="secret",
            model_name="gemini-2.0-flash",
            timeout_seconds=5,
            max_attempts=1,
            http=self.http,
        )

    def test_build_payload_with_image(self):
        config = {"temperature": 0.7, "maxOutputTokens": 1024}
        payload = self.client.build_payload("Describe", b"img", "image/jpeg", config)

        parts = payload["contents"][0]["parts"]
        self.assertEqual(payload["contents"][0]["role"], "user")
        self.assertEqual(parts[0], {"text": "Describe"})
        self.assertEqual(parts[1]["inlineData"]["mimeType"], "image/jpeg")
        self.assertEqual(base64.b64decode(parts[1]["inlineData"]["data"]), b"img")
        self.assertEqual(payload["generationConfig"], config)
        self.assertEqual(len(payload["safetySettings"]), 4)

    def test_build_payload_text_only(self):
        payload = self.client.build_payload("Hello")
        self.assertEqual(payload["contents"][0]["parts"], [{"text": "Hello"}])
        self.assertNotIn("generationConfig", payload)

    def test_generate_posts_to_model_endpoint(self):
        self.http.post.return_value = http_response(200, gemini_response("HINT: ok"))

        data = self.client.generate("Prompt", operation="generate hint", image_bytes=b"x" * 10, mime_type="image/png")

        self.assertEqual(data["candidates"][0]["content"]["parts"][0]["text"], "HINT: ok")
        url = self.http.post.call_args[0][0]
        self.assertTrue(url.endswith("gemini-2.0-flash:generateContent"))
        self.assertNotIn("secret", url)
        self.assertEqual(self.http.post.call_args[1]["headers"]["x-goog-api-key"], "secret")
        self.assertEqual(self.http.post.call_args[1]["timeout"], 5)

    def test_connection_error_text_is_not_repeated(self):
        self.http.post.side_effect = requests.exceptions.ConnectionError(
            "HTTPSConnectionPool: Max retries exceeded with url: /v1beta/models?key=secret"
        )
        with self.assertRaises(UpstreamError) as ctx:
            self.client.generate_content({})
        self.assertEqual(str(ctx.exception), "Gemini API request failed (ConnectionError)")

    def test_http_429_is_rate_limit(self):
        self.http.post.return_value = http_response(429, {"error": {"status": "RESOURCE_EXHAUSTED"}})
        with self.assertRaises(RateLimitError):
            self.client.generate_content({})

    def test_resource_exhausted_is_rate_limit(self):
        self.http.post.return_value = http_response(400, {"error": {"status": "RESOURCE_EXHAUSTED"}})
        with self.assertRaises(RateLimitError):
            self.client.generate_content({})

    def test_server_error_is_upstream_error(self):
        self.http.post.return_value = http_response(500, {"error": {"message": "internal"}})
        with self.assertRaises(UpstreamError) as ctx:
            self.client.generate_content({})
        self.assertIn("Status: 500", str(ctx.exception))

    def test_transport_timeout(self):
        self.http.post.side_effect = requests.exceptions.ReadTimeout("read timed out")
        with self.assertRaises(UpstreamTimeoutError):
            self.client.generate_content({})

    def test_generate_wraps_final_failure(self):
        self.http.post.return_value = http_response(429, {"error": {"status": "RESOURCE_EXHAUSTED"}})
        with self.assertRaises(RetryExhaustedError) as ctx:
            self.client.generate("Prompt", operation="generate hint")
        self.assertEqual(ctx.exception.kind, "rate_limit")
        self.assertEqual(ctx.exception.attempts, 1)


if __name__ == "__main__":
    unittest.main()

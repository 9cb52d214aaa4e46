"""
Client for the Google Generative AI (Gemini) REST API.
"""
import base64
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

import requests

from chalkboard.core.config import settings
from chalkboard.core.exceptions import (
    ConfigurationError,
    RateLimitError,
    UpstreamError,
    UpstreamTimeoutError,
)
from chalkboard.services.retry import call_with_retry

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
]


class GeminiClient:
    """Thin wrapper around the generateContent endpoint with retries."""

    def __init__(
        self,
        api_key: str,
        model_name: str,
        timeout_seconds: float = 45.0,
        max_attempts: int = 3,
        http: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self.max_attempts = max_attempts
        self.http = http or requests.Session()
        self.base_url = f"{GEMINI_BASE_URL}/{model_name}:generateContent"

    def build_payload(
        self,
        prompt: str,
        image_bytes: Optional[bytes] = None,
        mime_type: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Build a generateContent request body.

        Args:
            prompt: Prompt text
            image_bytes: Optional raw image sent as inline data
            mime_type: MIME type of the image (defaults to image/png)
            generation_config: Sampling parameters (temperature, maxOutputTokens, topP, topK)

        Returns:
            JSON-serializable payload
        """
        parts: list = [{"text": prompt}]
        if image_bytes is not None:
            parts.append({
                "inlineData": {
                    "mimeType": mime_type or "image/png",
                    "data": base64.b64encode(image_bytes).decode("ascii"),
                }
            })

        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": parts}],
            "safetySettings": SAFETY_SETTINGS,
        }
        if generation_config:
            payload["generationConfig"] = generation_config
        return payload

    def generate_content(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Perform exactly one generateContent call.

        Raises:
            RateLimitError: On HTTP 429 or a RESOURCE_EXHAUSTED status
            UpstreamTimeoutError: If the transport timed out
            UpstreamError: On any other HTTP or connection failure
        """
        try:
            response = self.http.post(
                self.base_url,
                json=payload,
                headers={"Content-Type": "application/json", "x-goog-api-key": self.api_key},
                timeout=self.timeout_seconds,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(f"Gemini transport timeout: {e}")
            raise UpstreamTimeoutError(f"Gemini request timed out after {self.timeout_seconds:g} seconds") from e
        except requests.exceptions.RequestException as e:
            # Transport errors can quote the request; only the exception type reaches callers
            logger.warning(f"Gemini transport error: {e}")
            raise UpstreamError(f"Gemini API request failed ({type(e).__name__})") from e

        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = response.text[:500]
            error_msg = f"Gemini API request failed - Status: {response.status_code} - {error_data}"
            if response.status_code == 429 or "RESOURCE_EXHAUSTED" in str(error_data):
                raise RateLimitError(error_msg)
            raise UpstreamError(error_msg)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"Gemini API returned a non-JSON body: {response.text[:200]}") from e

        usage_metadata = data.get("usageMetadata", {})
        logger.debug(
            f"Gemini usage: prompt={usage_metadata.get('promptTokenCount', 0)} "
            f"output={usage_metadata.get('candidatesTokenCount', 0)} "
            f"thoughts={usage_metadata.get('thoughtsTokenCount', 0)}"
        )
        return data

    def generate(
        self,
        prompt: str,
        operation: str,
        image_bytes: Optional[bytes] = None,
        mime_type: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Build the payload once and send it through the retry wrapper.

        Args:
            prompt: Prompt text
            operation: Name of the call site, used in logs and errors
            image_bytes: Optional raw image
            mime_type: MIME type of the image
            generation_config: Sampling parameters

        Returns:
            Raw generateContent response (candidates/content/parts structure)
        """
        payload = self.build_payload(prompt, image_bytes, mime_type, generation_config)
        if image_bytes is not None:
            logger.info(f"Sending {operation} request to {self.model_name} - image {len(image_bytes)} bytes, MIME {mime_type}")
        else:
            logger.info(f"Sending {operation} request to {self.model_name}")

        return call_with_retry(
            lambda: self.generate_content(payload),
            operation=operation,
            max_attempts=self.max_attempts,
            timeout=self.timeout_seconds,
        )


@lru_cache(maxsize=1)
def get_gemini_client() -> GeminiClient:
    """Dependency returning the process-wide Gemini client, created on first use."""
    if not settings.gemini_api_key:
        raise ConfigurationError("Gemini API key is not configured in environment variables.")

    client = GeminiClient(
        api_key=settings.gemini_api_key,
        model_name=settings.gemini_model,
        timeout_seconds=settings.gemini_timeout_seconds,
        max_attempts=settings.gemini_max_attempts,
    )
    logger.info(f"Gemini model initialized: {settings.gemini_model}")
    return client

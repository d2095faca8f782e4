"""Client for the remote multimodal ``generateContent`` endpoint.

One request per call: no retries, no caching, no streaming. The API key is
sent as the ``key`` query parameter and is redacted from every message this
module produces.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from image_translator.config import DEFAULT_BASE_URL, DEFAULT_MODEL, DEFAULT_TIMEOUT, Settings
from image_translator.errors import ApiFailure, ConfigurationError, EmptyResponseFailure

logger = logging.getLogger(__name__)

INLINE_IMAGE_MIME_TYPE = "image/png"


def build_request_payload(prompt: str, image_encoded: Optional[str] = None) -> Dict[str, Any]:
    """Build the JSON body: one user message with a text part and an optional image part.

    Doxygen:
    - @param prompt: Instruction text, always the first part.
    - @param image_encoded: Base64 image bytes; adds an ``inlineData`` part when given.
    - @return: ``{"contents": [{"role": "user", "parts": [...]}]}``.
    """
    parts: List[Dict[str, Any]] = [{"text": prompt}]
    if image_encoded:
        parts.append({
            "inlineData": {
                "mimeType": INLINE_IMAGE_MIME_TYPE,
                "data": image_encoded,
            }
        })
    return {"contents": [{"role": "user", "parts": parts}]}


def extract_generated_text(body: Any) -> str:
    """Walk candidates[0].content.parts[0].text.

    Doxygen:
    - @param body: Decoded JSON response body.
    - @return: Generated text (may be an empty string).
    - @throws EmptyResponseFailure: If any node on the path is missing.
    """
    if not isinstance(body, dict):
        raise EmptyResponseFailure()
    candidates = body.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise EmptyResponseFailure()
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts:
        raise EmptyResponseFailure()
    part = parts[0]
    text = part.get("text") if isinstance(part, dict) else None
    if not isinstance(text, str):
        raise EmptyResponseFailure()
    return text


def extract_error_message(response: requests.Response) -> str:
    """Return ``error.message`` from the body, or the HTTP reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return response.reason or f"HTTP {response.status_code}"


class GeminiClient:
    """Thin request/response wrapper around ``models/{model}:generateContent``."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigurationError("An API key is required to call the inference endpoint.")
        self._api_key = api_key.strip()
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def __repr__(self) -> str:
        return f"GeminiClient(model={self.model!r}, base_url={self.base_url!r})"

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model}:generateContent"

    def _redact(self, text: str) -> str:
        return text.replace(self._api_key, "***")

    def invoke(self, prompt: str, image_encoded: Optional[str] = None) -> str:
        """Send one generation request and return the generated text.

        Doxygen:
        - @param prompt: Instruction text.
        - @param image_encoded: Optional base64 image sent as inline data.
        - @return: Text of the first candidate's first part.
        - @throws ApiFailure: On a non-success status or a failed request.
        - @throws EmptyResponseFailure: If the success envelope has no text.
        """
        payload = build_request_payload(prompt, image_encoded)
        logger.info(
            "Calling %s (prompt %d chars, image=%s)",
            self.model, len(prompt), "yes" if image_encoded else "no",
        )
        try:
            response = self._session.post(
                self.endpoint,
                params={"key": self._api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ApiFailure(f"request failed: {self._redact(str(e))}")

        if not response.ok:
            detail = self._redact(extract_error_message(response))
            logger.warning("Inference endpoint returned %s: %s", response.status_code, detail)
            raise ApiFailure(detail, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError:
            raise EmptyResponseFailure()
        return extract_generated_text(body)


def get_gemini_client(settings: Settings, session: Optional[requests.Session] = None) -> GeminiClient:
    """Create a client from loaded settings."""
    return GeminiClient(
        api_key=settings.api_key,
        model=settings.model,
        base_url=settings.base_url,
        timeout=settings.request_timeout,
        session=session,
    )


__all__ = [
    "INLINE_IMAGE_MIME_TYPE",
    "GeminiClient",
    "build_request_payload",
    "extract_error_message",
    "extract_generated_text",
    "get_gemini_client",
]

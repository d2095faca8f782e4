"""Prompt construction and the two single-call helpers of a workflow run.

Extraction sends the image with a fixed instruction; translation sends only
text, quoting the extracted text verbatim after the target language.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

_DEFAULT_PROMPTS = {
    "extract": "Extract the text from this image. Respond with only the extracted text.",
    "translate": 'Translate the following text to {target_language}: "{source_text}"',
}


class InferenceClient(Protocol):
    def invoke(self, prompt: str, image_encoded: str | None = None) -> str: ...


def build_extraction_prompt() -> str:
    return _DEFAULT_PROMPTS["extract"]


def build_translation_prompt(target_language: str, source_text: str) -> str:
    """Interpolate the target language and the exact source text.

    Values are substituted in a single pass, so braces inside `source_text`
    are never treated as format fields.
    """
    return _DEFAULT_PROMPTS["translate"].format(
        target_language=target_language,
        source_text=source_text,
    )


def extract_text(client: InferenceClient, image_encoded: str) -> str:
    """Ask the model for the text contained in the image.

    Doxygen:
    - @param client: Object exposing ``invoke(prompt, image_encoded)``.
    - @param image_encoded: Base64 image bytes.
    - @return: Extracted text as returned by the model.
    - @throws InferenceFailure: Propagated from the client.
    """
    return client.invoke(build_extraction_prompt(), image_encoded)


def translate_text(client: InferenceClient, text: str, target_language: str) -> str:
    """Translate `text` into `target_language` with a text-only call.

    Doxygen:
    - @param client: Object exposing ``invoke(prompt, image_encoded)``.
    - @param text: Source text, quoted verbatim in the prompt.
    - @param target_language: Canonical language name, e.g. 'Spanish'.
    - @return: Translated text as returned by the model.
    - @throws InferenceFailure: Propagated from the client.
    """
    logger.debug("Translating %d chars to %s", len(text), target_language)
    return client.invoke(build_translation_prompt(target_language, text))


__all__ = [
    "InferenceClient",
    "build_extraction_prompt",
    "build_translation_prompt",
    "extract_text",
    "translate_text",
]

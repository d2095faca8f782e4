"""LLM (Large Language Model) integration package.

This package wraps the remote multimodal generation endpoint and provides
the extraction/translation prompts and target-language helpers built on it.
"""

from .client import (
    INLINE_IMAGE_MIME_TYPE,
    GeminiClient,
    build_request_payload,
    extract_error_message,
    extract_generated_text,
    get_gemini_client,
)
from .translate import (
    build_extraction_prompt,
    build_translation_prompt,
    extract_text,
    translate_text,
)
from .language_detector import (
    DEFAULT_TARGET_LANGUAGE,
    TARGET_LANGUAGES,
    detect_source_language,
    map_lang_code_to_english_name,
    normalize_and_validate_target_language,
)

__all__ = [
    "INLINE_IMAGE_MIME_TYPE",
    "GeminiClient",
    "build_request_payload",
    "extract_error_message",
    "extract_generated_text",
    "get_gemini_client",
    "build_extraction_prompt",
    "build_translation_prompt",
    "extract_text",
    "translate_text",
    "DEFAULT_TARGET_LANGUAGE",
    "TARGET_LANGUAGES",
    "detect_source_language",
    "map_lang_code_to_english_name",
    "normalize_and_validate_target_language",
]

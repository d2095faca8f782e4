from __future__ import annotations

from typing import Tuple

from langdetect import DetectorFactory, LangDetectException, detect_langs

DetectorFactory.seed = 0


# Fixed set offered in the language selector, in display order
TARGET_LANGUAGES: Tuple[str, ...] = (
    "English",
    "Spanish",
    "French",
    "German",
    "Portuguese",
    "Italian",
    "Japanese",
    "Korean",
    "Chinese",
)

DEFAULT_TARGET_LANGUAGE = "English"

_BY_LOWER = {name.lower(): name for name in TARGET_LANGUAGES}

# ISO 639-1 base codes of the selectable languages; langdetect reports
# Chinese as zh-cn / zh-tw, both folded onto "zh"
_CODE_TO_LANGUAGE = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "pt": "Portuguese",
    "it": "Italian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
}

# Enough text for a stable guess; OCR output past this adds nothing
_SAMPLE_CHARS = 2000


def detect_source_language(text: str) -> Tuple[str | None, float | None]:
    """Guess the language of `text`.

    Returns ``(code, probability)`` with the code as reported by langdetect
    (e.g. ``"en"``, ``"zh-cn"``), or ``(None, None)`` for blank or
    undetectable input.
    """
    sample = (text or "").strip()[:_SAMPLE_CHARS]
    if not sample:
        return None, None
    try:
        candidates = detect_langs(sample)
    except LangDetectException:
        return None, None
    if not candidates:
        return None, None
    best = max(candidates, key=lambda c: c.prob)
    return best.lang, float(best.prob)


def map_lang_code_to_english_name(code: str | None) -> str | None:
    """Name from `TARGET_LANGUAGES` for a detected code, or None if not selectable."""
    if not code:
        return None
    return _CODE_TO_LANGUAGE.get(code.lower().split("-")[0])


def normalize_and_validate_target_language(name: str) -> str:
    """Return the canonical display name for `name`, e.g. ' spanish ' -> 'Spanish'."""
    if not name or not str(name).strip():
        raise ValueError(
            "Target language must be one of: " + ", ".join(TARGET_LANGUAGES) + "."
        )
    norm = str(name).strip().lower()
    if norm not in _BY_LOWER:
        raise ValueError(
            f"Unsupported target language: '{name}'. "
            f"Allowed values: {', '.join(TARGET_LANGUAGES)}."
        )
    return _BY_LOWER[norm]


__all__ = [
    "TARGET_LANGUAGES",
    "DEFAULT_TARGET_LANGUAGE",
    "detect_source_language",
    "map_lang_code_to_english_name",
    "normalize_and_validate_target_language",
]

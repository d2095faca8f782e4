"""High-level pipeline: encode → extract via the model → translate via the model.

This module sequences the two dependent inference calls and drives the
session through ``EXTRACTING`` → ``TRANSLATING`` → ``SUCCEEDED``, or to
``FAILED`` at the first step that does not produce usable text.
"""

from __future__ import annotations

import logging
from typing import Optional

from image_translator.errors import InferenceFailure, ReadFailure, UnexpectedFailure
from image_translator.image import UploadedImage, encode_image
from image_translator.llm.language_detector import (
    DEFAULT_TARGET_LANGUAGE,
    detect_source_language,
    map_lang_code_to_english_name,
)
from image_translator.llm.translate import InferenceClient, extract_text, translate_text
from image_translator.pipeline.state import WorkflowSession

logger = logging.getLogger(__name__)

EXTRACTION_FAILED = "failed to extract text from image"
TRANSLATION_FAILED = "failed to translate text; extracted text may be empty or translation failed"


def _detect_language_name(text: str) -> Optional[str]:
    try:
        code, prob = detect_source_language(text)
    except Exception as e:
        logger.warning("Language detection failed: %s", e)
        return None
    name = map_lang_code_to_english_name(code)
    if name:
        logger.info("Detected source language: %s (code=%s, prob=%.3f)", name, code, prob)
    return name


class TranslationPipeline:
    """Runs one extraction/translation workflow per call on a session."""

    def __init__(self, client: InferenceClient) -> None:
        self.client = client

    def _call(self, func, *args) -> tuple[Optional[str], Optional[str]]:
        """Return ``(text, failure_message)``; inference failures become ``(None, message)``."""
        try:
            return func(self.client, *args), None
        except InferenceFailure as e:
            logger.warning("Inference call failed: %s", e.message)
            return None, e.message

    def run(self, session: WorkflowSession) -> WorkflowSession:
        """Run the workflow for the session's current image and target language.

        Doxygen:
        - @param session: Session holding the image and the selected language.
        - @return: The same session, in a terminal state unless a newer
          upload superseded this run.
        - @throws ValidationFailure: If no image is selected or a run is
          already in progress; the state is left untouched.
        """
        run_id = session.begin_run()
        image = session.image
        target_language = session.target_language
        try:
            try:
                encoded = encode_image(image)
            except ReadFailure as e:
                session.record_failure(run_id, e.message)
                return session

            extracted, detail = self._call(extract_text, encoded)
            if not extracted:
                session.record_failure(run_id, EXTRACTION_FAILED, detail)
                return session

            if not session.record_extraction(run_id, extracted, _detect_language_name(extracted)):
                logger.info("Discarding results of superseded run %d", run_id)
                return session

            translated, detail = self._call(translate_text, extracted, target_language)
            if not translated:
                session.record_failure(run_id, TRANSLATION_FAILED, detail)
                return session

            session.record_translation(run_id, translated)
        except Exception as e:
            logger.exception("Workflow run %d failed unexpectedly", run_id)
            session.record_failure(run_id, UnexpectedFailure(str(e)).message)
        return session


def process_image_translate(
    client: InferenceClient,
    image: Optional[UploadedImage],
    target_language: str = DEFAULT_TARGET_LANGUAGE,
) -> WorkflowSession:
    """Run one workflow on a fresh session and return it.

    Doxygen:
    - @param client: Inference client (see `image_translator.llm.GeminiClient`).
    - @param image: Image to read text from.
    - @param target_language: Language name from the fixed set.
    - @return: Session in ``SUCCEEDED`` or ``FAILED`` state.
    - @throws ValidationFailure: If `image` is None or the language is unknown.
    """
    session = WorkflowSession()
    session.set_image(image)
    session.set_target_language(target_language)
    return TranslationPipeline(client).run(session)


__all__ = [
    "EXTRACTION_FAILED",
    "TRANSLATION_FAILED",
    "TranslationPipeline",
    "process_image_translate",
]

"""High-level pipeline orchestration for encode → extract → translate."""

from .state import WorkflowSession, WorkflowState
from .process import (
    EXTRACTION_FAILED,
    TRANSLATION_FAILED,
    TranslationPipeline,
    process_image_translate,
)

__all__ = [
    "WorkflowSession",
    "WorkflowState",
    "EXTRACTION_FAILED",
    "TRANSLATION_FAILED",
    "TranslationPipeline",
    "process_image_translate",
]

"""Workflow state and the per-session result holder.

Only the orchestrator mutates a :class:`WorkflowSession` during a run; the
UI reads it through :meth:`WorkflowSession.snapshot`. Every run is tagged
with a generation number, and writes from a run whose generation is no
longer current (a new image was uploaded meanwhile) are dropped.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from image_translator.errors import ValidationFailure
from image_translator.image import UploadedImage
from image_translator.llm.language_detector import (
    DEFAULT_TARGET_LANGUAGE,
    normalize_and_validate_target_language,
)

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    TRANSLATING = "translating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_running(self) -> bool:
        return self in (WorkflowState.EXTRACTING, WorkflowState.TRANSLATING)

    @property
    def is_terminal(self) -> bool:
        return self in (WorkflowState.SUCCEEDED, WorkflowState.FAILED)


@dataclass
class WorkflowSession:
    image: Optional[UploadedImage] = None
    target_language: str = DEFAULT_TARGET_LANGUAGE
    state: WorkflowState = WorkflowState.IDLE
    extracted_text: Optional[str] = None
    translated_text: Optional[str] = None
    detected_language: Optional[str] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None
    history: List[WorkflowState] = field(default_factory=list)
    generation: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def _clear_results(self) -> None:
        self.extracted_text = None
        self.translated_text = None
        self.detected_language = None
        self.error = None
        self.error_detail = None

    def _enter(self, state: WorkflowState) -> None:
        logger.debug("Workflow %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def set_image(self, image: Optional[UploadedImage]) -> None:
        """Replace the image wholesale and discard everything from the previous run."""
        with self._lock:
            self.image = image
            self.generation += 1
            self._clear_results()
            self.history = []
            self.state = WorkflowState.IDLE

    def set_target_language(self, name: str) -> str:
        with self._lock:
            if self.state.is_running:
                raise ValidationFailure("cannot change the language while a run is in progress")
            try:
                self.target_language = normalize_and_validate_target_language(name)
            except ValueError as e:
                raise ValidationFailure(str(e))
            return self.target_language

    def begin_run(self) -> int:
        """Check the start preconditions and enter ``EXTRACTING``; return the run's generation."""
        with self._lock:
            if self.image is None:
                self.error = "select an image first"
                raise ValidationFailure(self.error)
            if self.state.is_running:
                raise ValidationFailure("a run is already in progress")
            self.generation += 1
            self._clear_results()
            self._enter(WorkflowState.EXTRACTING)
            return self.generation

    def is_current(self, run_id: int) -> bool:
        return run_id == self.generation

    def record_extraction(self, run_id: int, text: str, detected_language: Optional[str] = None) -> bool:
        with self._lock:
            if not self.is_current(run_id):
                return False
            self.extracted_text = text
            self.detected_language = detected_language
            self._enter(WorkflowState.TRANSLATING)
            return True

    def record_translation(self, run_id: int, text: str) -> bool:
        with self._lock:
            if not self.is_current(run_id):
                return False
            self.translated_text = text
            self._enter(WorkflowState.SUCCEEDED)
            return True

    def record_failure(self, run_id: int, message: str, detail: Optional[str] = None) -> bool:
        with self._lock:
            if not self.is_current(run_id):
                return False
            self.error = message
            self.error_detail = detail
            self._enter(WorkflowState.FAILED)
            return True

    def snapshot(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "target_language": self.target_language,
            "extracted_text": self.extracted_text,
            "translated_text": self.translated_text,
            "detected_language": self.detected_language,
            "error": self.error,
            "has_image": self.image is not None,
        }


__all__ = ["WorkflowState", "WorkflowSession"]

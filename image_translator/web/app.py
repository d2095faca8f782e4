"""Browser upload surface: one page plus a JSON snapshot of the workflow.

Each browser session owns one :class:`WorkflowSession`, kept in process
memory and looked up through an id stored in the signed session cookie.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Optional

from flask import Flask, jsonify, redirect, render_template, request, session, url_for

from image_translator.config import Settings, load_settings
from image_translator.errors import ImageTranslatorError, ValidationFailure
from image_translator.image import UploadedImage, to_data_url
from image_translator.llm import TARGET_LANGUAGES, get_gemini_client
from image_translator.llm.translate import InferenceClient
from image_translator.pipeline import TranslationPipeline, WorkflowSession

logger = logging.getLogger(__name__)

_SESSION_KEY = "workflow_id"

DEFAULT_MAX_SESSIONS = 100


class SessionRegistry:
    """In-memory map of browser session id → workflow session.

    Least recently used sessions are evicted once `max_sessions` is
    exceeded, dropping their uploaded image with them.
    """

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        self._sessions: "OrderedDict[str, WorkflowSession]" = OrderedDict()
        self.max_sessions = max(1, int(max_sessions))
        self._lock = threading.Lock()

    def peek(self, workflow_id: Optional[str]) -> Optional[WorkflowSession]:
        """Return the session for `workflow_id` without creating one."""
        with self._lock:
            if not workflow_id or workflow_id not in self._sessions:
                return None
            self._sessions.move_to_end(workflow_id)
            return self._sessions[workflow_id]

    def get(self, workflow_id: Optional[str]) -> tuple[str, WorkflowSession]:
        with self._lock:
            if workflow_id and workflow_id in self._sessions:
                self._sessions.move_to_end(workflow_id)
                return workflow_id, self._sessions[workflow_id]
            new_id = uuid.uuid4().hex
            self._sessions[new_id] = WorkflowSession()
            while len(self._sessions) > self.max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.debug("Evicted workflow session %s (max=%d)", evicted_id, self.max_sessions)
            return new_id, self._sessions[new_id]

    def __len__(self) -> int:
        return len(self._sessions)


def create_app(
    settings: Optional[Settings] = None,
    client: Optional[InferenceClient] = None,
    max_sessions: int = DEFAULT_MAX_SESSIONS,
) -> Flask:
    """Build the Flask application.

    Doxygen:
    - @param settings: Loaded settings; read from the environment when None.
    - @param client: Inference client; built from `settings` when None.
    - @param max_sessions: Browser sessions kept in memory before the least
      recently used one is dropped.
    - @return: Configured Flask app.
    - @throws ConfigurationError: If no API key is configured.
    """
    if settings is None:
        settings = load_settings()
    if client is None:
        client = get_gemini_client(settings)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["MAX_CONTENT_LENGTH"] = 20 * 1024 * 1024

    registry = SessionRegistry(max_sessions)
    pipeline = TranslationPipeline(client)
    app.extensions["image_translator"] = {"registry": registry, "pipeline": pipeline, "settings": settings}

    def current_workflow() -> WorkflowSession:
        workflow_id, workflow = registry.get(session.get(_SESSION_KEY))
        session[_SESSION_KEY] = workflow_id
        return workflow

    def existing_workflow() -> WorkflowSession:
        """Session for the cookie, or a blank one that is not registered."""
        return registry.peek(session.get(_SESSION_KEY)) or WorkflowSession()

    def render_page(workflow: WorkflowSession, message: Optional[str] = None, status: int = 200):
        preview = to_data_url(workflow.image) if workflow.image is not None else None
        return render_template(
            "index.html",
            workflow=workflow,
            languages=TARGET_LANGUAGES,
            preview=preview,
            error=message or workflow.error,
        ), status

    @app.get("/")
    def index():
        return render_page(existing_workflow())

    @app.post("/upload")
    def upload():
        workflow = current_workflow()
        file = request.files.get("image")
        if file is None or not file.filename:
            return render_page(workflow, "select an image first", 400)
        try:
            image = UploadedImage.from_stream(file.stream, file.mimetype, file.filename)
        except ImageTranslatorError as e:
            return render_page(workflow, e.message, 400)
        workflow.set_image(image)
        logger.info("Received image %s (%s, %d bytes)", image.filename, image.mime_type, image.size)
        return redirect(url_for("index"))

    @app.post("/language")
    def language():
        workflow = current_workflow()
        try:
            workflow.set_target_language(request.form.get("target_language", ""))
        except ValidationFailure as e:
            return render_page(workflow, e.message, 400)
        return redirect(url_for("index"))

    @app.post("/run")
    def run():
        workflow = current_workflow()
        try:
            if request.form.get("target_language"):
                workflow.set_target_language(request.form["target_language"])
            pipeline.run(workflow)
        except ValidationFailure as e:
            return render_page(workflow, e.message, 400)
        return redirect(url_for("index"))

    @app.get("/api/state")
    def state():
        return jsonify(existing_workflow().snapshot())

    @app.get("/health")
    def health():
        return jsonify({"status": "ok", "model": settings.model})

    return app


__all__ = ["DEFAULT_MAX_SESSIONS", "SessionRegistry", "create_app"]

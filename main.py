"""
Entry point and facade for the image → extract → translate workflow.

This module exposes a stable API and launches the browser upload surface.

Packages:
- image_translator.image: Uploaded image container and base64 encoding
- image_translator.llm: Inference client, prompts and language helpers
- image_translator.pipeline: Workflow state and orchestration (`process_image_translate`)
- image_translator.web: Flask app factory (`create_app`)
"""

from __future__ import annotations

import logging

# Configuration and errors
from image_translator.config import Settings, load_settings
from image_translator.errors import (
    ApiFailure,
    ConfigurationError,
    EmptyResponseFailure,
    ReadFailure,
    UnexpectedFailure,
    ValidationFailure,
)
from image_translator.logging_config import setup_logger

# Image encoding
from image_translator.image import UploadedImage, decode_image, encode_image

# Inference client and language helpers
from image_translator.llm import (
    TARGET_LANGUAGES,
    GeminiClient,
    get_gemini_client,
    normalize_and_validate_target_language,
)

# High-level pipeline
from image_translator.pipeline import (
    TranslationPipeline,
    WorkflowSession,
    WorkflowState,
    process_image_translate,
)

# Upload surface
from image_translator.web import create_app

__all__ = [
    # config/errors
    "Settings",
    "load_settings",
    "ApiFailure",
    "ConfigurationError",
    "EmptyResponseFailure",
    "ReadFailure",
    "UnexpectedFailure",
    "ValidationFailure",
    "setup_logger",
    # image
    "UploadedImage",
    "decode_image",
    "encode_image",
    # client
    "TARGET_LANGUAGES",
    "GeminiClient",
    "get_gemini_client",
    "normalize_and_validate_target_language",
    # pipeline
    "TranslationPipeline",
    "WorkflowSession",
    "WorkflowState",
    "process_image_translate",
    # web
    "create_app",
]


def _serve() -> None:
    """Start the development server for the upload page.

    --host: Interface to bind (default: 127.0.0.1)
    --port / -p: Port to listen on (default: 5000)
    --debug: Enable Flask debug mode
    """
    import argparse

    parser = argparse.ArgumentParser(description="Serve the image text extraction and translation page.")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Interface to bind (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, default=5000, help="Port to listen on (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    args = parser.parse_args()

    # Fail fast: the server is useless without a credential
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        raise SystemExit(2)

    setup_logger(level=getattr(logging, settings.log_level, logging.INFO))
    app = create_app(settings)
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    _serve()

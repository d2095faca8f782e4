"""Image text extraction and translation via a remote multimodal model.

Packages:
- image_translator.image: Upload container and transport-safe encoding
- image_translator.llm: Inference client, prompts and language helpers
- image_translator.pipeline: Workflow state and the extract → translate run
- image_translator.web: Browser upload surface (Flask)
"""

__version__ = "0.1.0"

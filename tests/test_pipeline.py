import pytest

from conftest import ScriptedClient
from image_translator.errors import ApiFailure, EmptyResponseFailure, ValidationFailure
from image_translator.image import UploadedImage
from image_translator.llm.translate import build_extraction_prompt, build_translation_prompt
from image_translator.pipeline import (
    EXTRACTION_FAILED,
    TRANSLATION_FAILED,
    TranslationPipeline,
    WorkflowSession,
    WorkflowState,
    process_image_translate,
)


def _session(image, language="Spanish"):
    session = WorkflowSession()
    session.set_image(image)
    session.set_target_language(language)
    return session


def test_successful_run_extracts_then_translates(png_image):
    client = ScriptedClient("Hello", "Hola")
    session = process_image_translate(client, png_image, "Spanish")

    assert session.state is WorkflowState.SUCCEEDED
    assert session.extracted_text == "Hello"
    assert session.translated_text == "Hola"
    assert session.error is None
    assert session.history == [WorkflowState.EXTRACTING, WorkflowState.TRANSLATING, WorkflowState.SUCCEEDED]

    (prompt1, image1), (prompt2, image2) = client.calls
    assert prompt1 == build_extraction_prompt()
    assert image1
    assert prompt2 == build_translation_prompt("Spanish", "Hello")
    assert image2 is None


def test_translation_prompt_quotes_extracted_text_verbatim():
    prompt = build_translation_prompt("German", 'Say {hi} "now"')
    assert prompt.endswith(': "Say {hi} "now""')
    assert "German" in prompt


@pytest.mark.parametrize("extraction", [None, "", ApiFailure("invalid key", 403), EmptyResponseFailure()])
def test_extraction_failure_never_translates(png_image, extraction):
    client = ScriptedClient(extraction, "should not be used")
    session = TranslationPipeline(client).run(_session(png_image))

    assert session.state is WorkflowState.FAILED
    assert session.error == EXTRACTION_FAILED
    assert session.translated_text is None
    assert WorkflowState.TRANSLATING not in session.history
    assert len(client.calls) == 1


def test_extraction_failure_keeps_underlying_cause(png_image):
    client = ScriptedClient(ApiFailure("invalid key", 403))
    session = TranslationPipeline(client).run(_session(png_image))
    assert session.error_detail == "API Error: invalid key"


def test_translation_failure_keeps_extracted_text(png_image):
    client = ScriptedClient("Hello", EmptyResponseFailure())
    session = TranslationPipeline(client).run(_session(png_image))

    assert session.state is WorkflowState.FAILED
    assert session.error == TRANSLATION_FAILED
    assert session.extracted_text == "Hello"
    assert session.translated_text is None
    assert session.history == [WorkflowState.EXTRACTING, WorkflowState.TRANSLATING, WorkflowState.FAILED]


def test_run_without_image_does_not_change_state():
    client = ScriptedClient("Hello", "Hola")
    session = WorkflowSession()
    with pytest.raises(ValidationFailure) as excinfo:
        TranslationPipeline(client).run(session)
    assert excinfo.value.message == "select an image first"
    assert session.state is WorkflowState.IDLE
    assert session.error == "select an image first"
    assert session.history == []
    assert client.calls == []


def test_unreadable_image_fails_run():
    client = ScriptedClient("Hello", "Hola")
    session = TranslationPipeline(client).run(_session(UploadedImage(data=None)))
    assert session.state is WorkflowState.FAILED
    assert session.error.startswith("failed to read image")
    assert client.calls == []


class _ExplodingClient:
    def invoke(self, prompt, image_encoded=None):
        raise RuntimeError("boom")


def test_unexpected_exception_is_wrapped(png_image):
    session = TranslationPipeline(_ExplodingClient()).run(_session(png_image))
    assert session.state is WorkflowState.FAILED
    assert session.error == "an error occurred: boom"


def test_new_run_clears_previous_results(png_image):
    client = ScriptedClient("Hello", "Hola", None)
    pipeline = TranslationPipeline(client)
    session = pipeline.run(_session(png_image))
    assert session.translated_text == "Hola"

    pipeline.run(session)
    assert session.state is WorkflowState.FAILED
    assert session.extracted_text is None
    assert session.translated_text is None


class _UploadDuringCallClient:
    """Simulates a new upload arriving while the extraction call is in flight."""

    def __init__(self, session, new_image):
        self.session = session
        self.new_image = new_image

    def invoke(self, prompt, image_encoded=None):
        self.session.set_image(self.new_image)
        return "Old text"


def test_upload_during_run_discards_stale_results(png_image):
    session = _session(png_image)
    new_image = UploadedImage(b"\x89PNG new", "image/png", "new.png")
    TranslationPipeline(_UploadDuringCallClient(session, new_image)).run(session)

    assert session.image is new_image
    assert session.state is WorkflowState.IDLE
    assert session.extracted_text is None
    assert session.error is None


def test_second_run_rejected_while_in_flight(png_image):
    session = _session(png_image)
    session.begin_run()
    with pytest.raises(ValidationFailure):
        TranslationPipeline(ScriptedClient("x", "y")).run(session)
    assert session.state is WorkflowState.EXTRACTING


def test_language_locked_while_running(png_image):
    session = _session(png_image)
    session.begin_run()
    with pytest.raises(ValidationFailure):
        session.set_target_language("French")
    assert session.target_language == "Spanish"


def test_unknown_language_rejected(png_image):
    with pytest.raises(ValidationFailure):
        process_image_translate(ScriptedClient(), png_image, "Klingon")


def test_snapshot_reports_results(png_image):
    session = process_image_translate(ScriptedClient("Hello", "Hola"), png_image, "spanish")
    snap = session.snapshot()
    assert snap["state"] == "succeeded"
    assert snap["target_language"] == "Spanish"
    assert snap["extracted_text"] == "Hello"
    assert snap["translated_text"] == "Hola"
    assert snap["has_image"] is True


class _UploadDuringTranslationClient:
    """Returns the extraction, then swaps the image while translation is in flight."""

    def __init__(self, session, new_image, translation):
        self.session = session
        self.new_image = new_image
        self.translation = translation
        self.calls = 0

    def invoke(self, prompt, image_encoded=None):
        self.calls += 1
        if self.calls == 1:
            return "Hello"
        self.session.set_image(self.new_image)
        if isinstance(self.translation, BaseException):
            raise self.translation
        return self.translation


@pytest.mark.parametrize("translation", ["Hola", None, EmptyResponseFailure(), RuntimeError("boom")])
def test_upload_during_translation_discards_stale_results(png_image, translation):
    session = _session(png_image)
    new_image = UploadedImage(b"\x89PNG new", "image/png", "new.png")
    client = _UploadDuringTranslationClient(session, new_image, translation)
    TranslationPipeline(client).run(session)

    assert client.calls == 2
    assert session.image is new_image
    assert session.state is WorkflowState.IDLE
    assert session.extracted_text is None
    assert session.translated_text is None
    assert session.error is None
    assert session.history == []

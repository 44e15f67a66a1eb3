"""
Tests for the Event Classifier.
"""

from imgur_paste.engine.classifier import Verdict, classify
from imgur_paste.models.events import InputEvent, TransferData

from conftest import image, text_file


def drop_with(types, files):
    return InputEvent(kind="drop", transfer=TransferData(types=types, files=files))


class TestDropClassification:

    def test_single_image_is_eligible(self):
        assert classify(InputEvent.drop([image()]), True) is Verdict.ELIGIBLE

    def test_many_images_are_eligible(self):
        event = InputEvent.drop([image("a.png"), image("b.jpg", "image/jpeg")])
        assert classify(event, True) is Verdict.ELIGIBLE

    def test_any_non_image_is_not_eligible(self):
        event = InputEvent.drop([image(), text_file()])
        assert classify(event, True) is Verdict.NOT_ELIGIBLE

    def test_extra_transfer_types_are_not_eligible(self):
        event = drop_with(["Files", "text/uri-list"], [image()])
        assert classify(event, True) is Verdict.NOT_ELIGIBLE

    def test_text_drag_is_not_eligible(self):
        event = drop_with(["text/plain"], [])
        assert classify(event, True) is Verdict.NOT_ELIGIBLE

    def test_files_type_without_files_is_not_eligible(self):
        event = drop_with(["Files"], [])
        assert classify(event, True) is Verdict.NOT_ELIGIBLE

    def test_mime_prefix_must_be_image_slash(self):
        event = InputEvent.drop([image("x.bin", "imagery/custom")])
        assert classify(event, True) is Verdict.NOT_ELIGIBLE

    def test_unconfigured(self):
        assert classify(InputEvent.drop([image()]), False) is Verdict.UNCONFIGURED

    def test_unconfigured_non_image_is_just_not_eligible(self):
        assert classify(InputEvent.drop([text_file()]), False) is Verdict.NOT_ELIGIBLE

    def test_classification_does_not_mutate_event(self):
        event = InputEvent.drop([image(), text_file()])
        before = (list(event.transfer.types), list(event.files))
        classify(event, True)
        assert (event.transfer.types, event.files) == before


class TestPasteClassification:

    def test_image_paste_is_eligible(self):
        assert classify(InputEvent.paste([image()]), True) is Verdict.ELIGIBLE

    def test_only_first_file_decides(self):
        event = InputEvent.paste([image(), text_file()])
        assert classify(event, True) is Verdict.ELIGIBLE

    def test_first_file_not_image(self):
        event = InputEvent.paste([text_file(), image()])
        assert classify(event, True) is Verdict.NOT_ELIGIBLE

    def test_no_files(self):
        assert classify(InputEvent.paste([]), True) is Verdict.NOT_ELIGIBLE

    def test_unconfigured(self):
        assert classify(InputEvent.paste([image()]), False) is Verdict.UNCONFIGURED

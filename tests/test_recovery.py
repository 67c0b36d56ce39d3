import asyncio
import time

import pytest

from conftest import make_empty_pdf_bytes, make_pdf_bytes
from errors import HardFailure
from modules.documents.models.document import SigningMode
from modules.documents.models.envelope import TransferEnvelope
from modules.documents.models.uploaded_document import UploadedDocument
from modules.documents.services import composer as composer_module
from modules.documents.services.composer import DocumentComposer
from modules.documents.services.recovery import COPY_THROUGH_WARNING, RecoveryController


def staged(tmp_path, data: bytes, name="report.pdf") -> UploadedDocument:
    path = tmp_path / name
    path.write_bytes(data)
    return UploadedDocument(path=path, original_name=name, content_type="application/pdf", size=len(data))


class SlowComposer(DocumentComposer):
    def sign(self, document, image, captured_at=None, data=None):
        time.sleep(0.5)
        return super().sign(document, image, captured_at, data)


def test_signature_image_is_used(tmp_path, signature_data_url):
    data = make_pdf_bytes()
    result = RecoveryController().sign(staged(tmp_path, data), TransferEnvelope(data, signature_data_url))
    assert result.mode == SigningMode.IMAGE
    assert result.id.startswith("signed_")


def test_short_signature_degrades_to_text(tmp_path):
    data = make_pdf_bytes()
    envelope = TransferEnvelope(data, "data:image/png;base64,iVBORw0KGgo=")
    result = RecoveryController().sign(staged(tmp_path, data), envelope)
    assert result.mode == SigningMode.TEXT
    assert result.warning is None


def test_serialization_failure_returns_original_bytes(tmp_path, monkeypatch, signature_data_url):
    def broken_write(self, stream):
        raise ValueError("cannot serialize")

    monkeypatch.setattr(composer_module.PdfWriter, "write", broken_write)
    data = make_pdf_bytes()

    result = RecoveryController().sign(staged(tmp_path, data), TransferEnvelope(data, signature_data_url))

    assert result.mode == SigningMode.COPY_THROUGH
    assert result.content == data
    assert result.warning == COPY_THROUGH_WARNING
    assert result.id.startswith("fallback_")


def test_empty_document_is_copied_through(tmp_path):
    data = make_empty_pdf_bytes()
    result = RecoveryController().sign(staged(tmp_path, data), TransferEnvelope(data))
    assert result.mode == SigningMode.COPY_THROUGH
    assert result.content == data


def test_composer_uses_envelope_bytes_not_the_staged_file(tmp_path):
    data = make_pdf_bytes()
    document = staged(tmp_path, data)
    document.path.unlink()

    result = RecoveryController().sign(document, TransferEnvelope(data))
    assert result.mode == SigningMode.TEXT


def test_missing_staged_file_is_a_hard_failure(tmp_path):
    document = staged(tmp_path, make_pdf_bytes())
    document.path.unlink()

    # composer fails on the envelope bytes, copy-through cannot read the upload
    with pytest.raises(HardFailure) as exc:
        RecoveryController().sign(document, TransferEnvelope(b"not a pdf"))
    assert exc.value.status_code == 500
    assert exc.value.suggestion


def test_captured_at_is_carried_through(tmp_path, monkeypatch):
    from modules.documents.models.envelope import parse_timestamp

    def broken_write(self, stream):
        raise ValueError("cannot serialize")

    monkeypatch.setattr(composer_module.PdfWriter, "write", broken_write)
    data = make_pdf_bytes()
    captured = parse_timestamp("2025-11-03T14:05:09Z")

    result = RecoveryController().sign(staged(tmp_path, data), TransferEnvelope(data, captured_at=captured))
    assert result.captured_at == captured


def test_sign_async_returns_composed_document(tmp_path, signature_data_url):
    data = make_pdf_bytes()
    controller = RecoveryController()
    result = asyncio.run(controller.sign_async(staged(tmp_path, data), TransferEnvelope(data, signature_data_url), timeout=30))
    assert result.mode == SigningMode.IMAGE


def test_timeout_degrades_to_copy_through(tmp_path, signature_data_url):
    data = make_pdf_bytes()
    controller = RecoveryController(composer=SlowComposer())

    result = asyncio.run(controller.sign_async(staged(tmp_path, data), TransferEnvelope(data, signature_data_url), timeout=0.05))

    assert result.mode == SigningMode.COPY_THROUGH
    assert result.content == data
    assert result.warning == COPY_THROUGH_WARNING

import base64
from datetime import datetime, timezone

import pytest

from conftest import as_data_url, make_signature_png
from errors import InvalidSignature
from modules.documents.models.envelope import TransferEnvelope, ValidatedImage, parse_timestamp


def test_data_url_prefix_is_stripped():
    png = make_signature_png()
    image = ValidatedImage.parse(as_data_url(png))
    assert image.data == png
    assert image.media_type == "image/png"


def test_bare_base64_is_accepted():
    png = make_signature_png()
    image = ValidatedImage.parse(base64.b64encode(png).decode())
    assert image.data == png
    assert image.media_type is None


def test_whitespace_in_payload_is_ignored():
    png = make_signature_png()
    encoded = base64.b64encode(png).decode()
    wrapped = "\n".join(encoded[i:i + 40] for i in range(0, len(encoded), 40))
    assert ValidatedImage.parse("data:image/png;base64," + wrapped).data == png


@pytest.mark.parametrize("payload", [
    "",
    "data:image/png;base64,",
    "data:image/png;base64,iVBORw0KGgo=",
    "x" * 99,
])
def test_short_payloads_are_rejected(payload):
    with pytest.raises(InvalidSignature):
        ValidatedImage.parse(payload)


def test_malformed_base64_is_rejected():
    with pytest.raises(InvalidSignature):
        ValidatedImage.parse("data:image/png;base64," + "!@#$" * 50)


def test_malformed_prefix_degrades_instead_of_crashing():
    envelope = TransferEnvelope(b"%PDF", signature_image="data:image/png;" + "A" * 200)
    assert envelope.validated_image() is None


def test_decoded_size_threshold():
    # 120 base64 chars decode to 90 bytes
    payload = base64.b64encode(b"\x00" * 90).decode()
    with pytest.raises(InvalidSignature):
        ValidatedImage.parse(payload, min_bytes=100)
    assert ValidatedImage.parse(payload, min_bytes=67).data == b"\x00" * 90


def test_envelope_without_signature():
    assert TransferEnvelope(b"%PDF").validated_image() is None


def test_envelope_treats_undersized_signature_as_absent():
    assert TransferEnvelope(b"%PDF", signature_image="data:image/png;base64,abc").validated_image() is None


def test_envelope_returns_validated_image(signature_data_url):
    image = TransferEnvelope(b"%PDF", signature_image=signature_data_url).validated_image()
    assert isinstance(image, ValidatedImage)


def test_parse_timestamp():
    assert parse_timestamp("2025-11-03T14:05:09.123Z") == datetime(2025, 11, 3, 14, 5, 9, 123000, tzinfo=timezone.utc)
    assert parse_timestamp("2025-11-03T14:05:09").tzinfo == timezone.utc
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(None) is None

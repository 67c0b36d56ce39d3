import base64
import binascii
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from errors import InvalidSignature

logger = logging.getLogger(__name__)

MIN_SIGNATURE_CHARS = 100
MIN_SIGNATURE_BYTES = 67

DATA_URL_PREFIX = re.compile(r"^data:[\w.+-]+/[\w.+-]+;base64,", re.IGNORECASE)
WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ValidatedImage:
    """Decoded signature image bytes that passed the plausibility checks."""
    data: bytes
    media_type: Optional[str] = None

    @classmethod
    def parse(cls, payload: str, min_chars: int = MIN_SIGNATURE_CHARS,
              min_bytes: int = MIN_SIGNATURE_BYTES) -> "ValidatedImage":
        if not payload:
            raise InvalidSignature("no signature data")

        media_type = None
        match = DATA_URL_PREFIX.match(payload)
        if match:
            media_type = match.group(0)[5:].split(";", 1)[0].lower()
            payload = payload[match.end():]
        encoded = WHITESPACE.sub("", payload)

        if len(encoded) < min_chars:
            raise InvalidSignature(f"base64 data too short ({len(encoded)} chars)")
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidSignature(f"not valid base64: {e}")
        if len(data) < min_bytes:
            raise InvalidSignature(f"decoded image too small ({len(data)} bytes)")
        return cls(data=data, media_type=media_type)


def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 capture timestamp, ``Z`` suffix included. Bad input gives None."""
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Ignoring unparseable signature timestamp: %r", raw)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class TransferEnvelope:
    """Everything one signing request carries from the capture side to the composer."""
    pdf_bytes: bytes
    signature_image: Optional[str] = None
    captured_at: Optional[datetime] = None

    def validated_image(self, min_chars: int = MIN_SIGNATURE_CHARS,
                        min_bytes: int = MIN_SIGNATURE_BYTES) -> Optional[ValidatedImage]:
        """
        The signature as a usable image, or None when it is absent or implausible.

        An implausible payload is treated exactly like a missing one so the
        composer takes the text path.
        """
        if self.signature_image is None:
            return None
        try:
            return ValidatedImage.parse(self.signature_image, min_chars, min_bytes)
        except InvalidSignature as e:
            logger.info("Signature payload rejected, using fallback: %s", e.message)
            return None

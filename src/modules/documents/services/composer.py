import io
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from PIL import Image
from PyPDF2 import PdfReader, PdfWriter
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from errors import EmbedFailure, EmptyDocument, InvalidDocument, SerializationFailure
from modules.documents.models.document import SigningMode
from modules.documents.models.envelope import ValidatedImage
from modules.documents.models.placement import (
    FALLBACK_MARKER, FRAME_BORDER, FRAME_FILL, PlacementSpec, TextSlot, compute_placement
)
from modules.documents.models.signed_document import SignedDocument
from modules.documents.models.uploaded_document import UploadedDocument

logger = logging.getLogger(__name__)

FONT_NAME = "Helvetica"
EMBED_FAILURE_WARNING = "Signature image could not be embedded; a text signature was applied instead"

TextLine = Tuple[TextSlot, str]


def format_signing_date(moment: datetime) -> str:
    """US short date without zero padding, e.g. 3/7/2026."""
    return f"{moment.month}/{moment.day}/{moment.year}"


def format_signing_time(moment: datetime) -> str:
    """12-hour clock with seconds, e.g. 2:05:09 PM."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d}:{moment.second:02d} {suffix}"


def load_pdf(data: bytes) -> PdfReader:
    """Parse PDF bytes, raising InvalidDocument for anything PyPDF2 cannot open."""
    if not data:
        raise InvalidDocument("file is empty")
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted and not reader.decrypt(""):
            raise InvalidDocument("document is password protected")
        _ = len(reader.pages)
    except InvalidDocument:
        raise
    except Exception as e:
        raise InvalidDocument(str(e) or type(e).__name__)
    return reader


def caption_lines(placement: PlacementSpec, moment: datetime) -> List[TextLine]:
    date_slot, time_slot = placement.caption_slots
    return [
        (date_slot, f"Digitally signed on: {format_signing_date(moment)}"),
        (time_slot, f"Time: {format_signing_time(moment)}"),
    ]


def fallback_lines(placement: PlacementSpec, moment: datetime) -> List[TextLine]:
    marker_slot, date_slot, time_slot = placement.fallback_slots
    return [
        (marker_slot, FALLBACK_MARKER),
        (date_slot, f"Signed: {format_signing_date(moment)}"),
        (time_slot, f"Time: {format_signing_time(moment)}"),
    ]


class DocumentComposer:
    """
    Stamps a signature block onto the first page of a PDF.

    The block is drawn with reportlab on a transparent overlay page the size
    of page 1, which is then merged onto it with PyPDF2. Every other page is
    copied unchanged.
    """

    def sign(self, document: UploadedDocument, image: Optional[ValidatedImage],
             captured_at: Optional[datetime] = None, data: Optional[bytes] = None) -> SignedDocument:
        """``data`` is the upload already held in memory; without it the staged file is read."""
        if data is None:
            data = document.read_bytes()
        reader = load_pdf(data)
        page_count = len(reader.pages)
        if page_count == 0:
            raise EmptyDocument()

        first_page = reader.pages[0]
        width = float(first_page.mediabox.width)
        height = float(first_page.mediabox.height)
        placement = compute_placement(width, height)
        logger.info(
            "PDF dimensions: %sx%s, %d pages, signature position: (%s, %s)",
            width, height, page_count, placement.anchor_x, placement.anchor_y
        )

        signed_at = datetime.now().astimezone()
        mode = SigningMode.TEXT
        warning = None
        writer = None

        if image is not None:
            try:
                overlay = self._render_image_overlay(placement, image, signed_at)
                writer = self._stamp(data, overlay)
                mode = SigningMode.IMAGE
                logger.info("Signature image embedded (%s, %d bytes)", image.media_type or "unknown type", len(image.data))
            except EmbedFailure as e:
                logger.warning("%s; using text fallback", e.message)
                warning = EMBED_FAILURE_WARNING
        else:
            logger.info("No usable signature image, using text fallback")

        if writer is None:
            overlay = self._render_text_overlay(placement, signed_at)
            writer = self._stamp(data, overlay)

        content = self._serialize(writer)
        return SignedDocument(
            content=content,
            original_name=document.original_name,
            mode=mode,
            warning=warning,
            captured_at=captured_at,
            signed_at=signed_at,
            placement=placement,
        )

    def _render_image_overlay(self, placement: PlacementSpec, image: ValidatedImage, moment: datetime) -> bytes:
        try:
            picture = Image.open(io.BytesIO(image.data))
            picture.load()
            picture = picture.convert("RGBA")
        except Exception as e:
            raise EmbedFailure(f"undecodable image ({e})")

        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(placement.page_width, placement.page_height))
        try:
            frame = placement.frame_box
            pdf.setStrokeColorRGB(*FRAME_BORDER)
            pdf.setFillColorRGB(*FRAME_FILL)
            pdf.setLineWidth(1)
            pdf.rect(frame.x, frame.y, frame.width, frame.height, stroke=1, fill=1)

            box = placement.image_box
            pdf.drawImage(ImageReader(picture), box.x, box.y, width=box.width, height=box.height, mask='auto')

            self._draw_lines(pdf, caption_lines(placement, moment))
            pdf.showPage()
            pdf.save()
        except Exception as e:
            raise EmbedFailure(str(e))
        return buffer.getvalue()

    def _render_text_overlay(self, placement: PlacementSpec, moment: datetime) -> bytes:
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(placement.page_width, placement.page_height))
        self._draw_lines(pdf, fallback_lines(placement, moment))
        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    @staticmethod
    def _draw_lines(pdf: canvas.Canvas, lines: List[TextLine]):
        for slot, text in lines:
            pdf.setFont(FONT_NAME, slot.size)
            pdf.setFillColorRGB(*slot.color)
            pdf.drawString(slot.x, slot.y, text)

    def _stamp(self, data: bytes, overlay: bytes) -> PdfWriter:
        """Merge the overlay onto a fresh copy of page 1, so a failed attempt leaves nothing behind."""
        reader = load_pdf(data)
        try:
            overlay_page = PdfReader(io.BytesIO(overlay)).pages[0]
            writer = PdfWriter()
            for index, page in enumerate(reader.pages):
                if index == 0:
                    page.merge_page(overlay_page)
                writer.add_page(page)
        except Exception as e:
            raise EmbedFailure(f"could not merge signature onto page ({e})")
        return writer

    def _serialize(self, writer: PdfWriter) -> bytes:
        buffer = io.BytesIO()
        try:
            writer.write(buffer)
        except Exception as e:
            raise SerializationFailure(str(e))
        return buffer.getvalue()

import base64
import io
import logging
from typing import Iterable, List, Optional, Tuple

from PIL import Image, ImageDraw

from errors import EmptyCapture
from modules.capture.models.stroke import PointerEvent, Stroke, StrokePoint, SurfaceGeometry

logger = logging.getLogger(__name__)

STROKE_COLOR = (30, 64, 175)  # #1e40af
BACKGROUND = (255, 255, 255)
LINE_WIDTH = 3


def _draw_segment(draw: ImageDraw.ImageDraw, start: Tuple[float, float], end: Tuple[float, float], width: float):
    """Draw a segment with round caps, the way a canvas with lineCap='round' would."""
    draw.line([start, end], fill=STROKE_COLOR, width=max(1, round(width)), joint="curve")
    radius = width / 2
    for x, y in (start, end):
        draw.ellipse([x - radius, y - radius, x + radius, y + radius], fill=STROKE_COLOR)


class SignaturePad:
    """
    Records a handwritten signature from a single stream of pointer events.

    Segments are rendered live on a backing bitmap sized for the device pixel
    ratio. ``export`` redraws the recorded strokes at the logical display size,
    so the encoded image does not depend on the capturing device.

    Only the first pointer that goes down is tracked; other simultaneous
    touches are ignored until that pointer is released.
    """

    def __init__(self, geometry: SurfaceGeometry):
        self.geometry = geometry
        self._strokes: List[Stroke] = []
        self._active: Optional[Stroke] = None
        self._active_pointer: Optional[int] = None
        self._has_signature = False
        self._reset_bitmap()

    def _reset_bitmap(self):
        self._bitmap = Image.new("RGB", (self.geometry.backing_width, self.geometry.backing_height), BACKGROUND)
        self._draw = ImageDraw.Draw(self._bitmap)

    @property
    def is_drawing(self) -> bool:
        return self._active is not None

    @property
    def has_signature(self) -> bool:
        return self._has_signature

    @property
    def strokes(self) -> List[Stroke]:
        return list(self._strokes)

    def begin(self, event: PointerEvent):
        if self._active is not None:
            return
        stroke = Stroke()
        stroke.add(self.geometry.to_surface(event))
        self._strokes.append(stroke)
        self._active = stroke
        self._active_pointer = event.pointer_id

    def extend(self, event: PointerEvent):
        if self._active is None or event.pointer_id != self._active_pointer:
            return
        point = self.geometry.to_surface(event)
        previous = self._active.points[-1]
        self._active.add(point)

        ratio = self.geometry.pixel_ratio
        _draw_segment(
            self._draw,
            (previous.x * ratio, previous.y * ratio),
            (point.x * ratio, point.y * ratio),
            LINE_WIDTH * ratio,
        )
        if not self._has_signature:
            logger.debug("First signature stroke detected")
            self._has_signature = True

    def end(self, pointer_id: Optional[int] = None):
        if self._active is None:
            return
        if pointer_id is not None and pointer_id != self._active_pointer:
            return
        self._active = None
        self._active_pointer = None

    def clear(self):
        self._strokes = []
        self._active = None
        self._active_pointer = None
        self._has_signature = False
        self._reset_bitmap()

    def snapshot(self) -> Image.Image:
        """Copy of the backing bitmap as drawn so far."""
        return self._bitmap.copy()

    def render(self) -> Image.Image:
        """Redraw every recorded stroke at the logical display size."""
        image = Image.new("RGB", (self.geometry.display_width, self.geometry.display_height), BACKGROUND)
        draw = ImageDraw.Draw(image)
        for stroke in self._strokes:
            for previous, point in zip(stroke.points, stroke.points[1:]):
                _draw_segment(draw, (previous.x, previous.y), (point.x, point.y), LINE_WIDTH)
        return image

    def export(self) -> bytes:
        if not self._has_signature:
            raise EmptyCapture()
        buffer = io.BytesIO()
        self.render().save(buffer, format="PNG")
        data = buffer.getvalue()
        logger.info(
            "Signature exported: %dx%d, %d strokes, %d bytes",
            self.geometry.display_width, self.geometry.display_height, len(self._strokes), len(data)
        )
        return data

    def export_data_url(self) -> str:
        encoded = base64.b64encode(self.export()).decode("ascii")
        return f"data:image/png;base64,{encoded}"


def replay(geometry: SurfaceGeometry, events: Iterable[Tuple[str, Optional[PointerEvent]]]) -> SignaturePad:
    """Build a pad by applying ``(kind, event)`` pairs in order."""
    pad = SignaturePad(geometry)
    for kind, event in events:
        if kind == "down":
            pad.begin(event)
        elif kind == "move":
            pad.extend(event)
        elif kind in ("up", "cancel"):
            pad.end(event.pointer_id if event is not None else None)
        elif kind == "clear":
            pad.clear()
        else:
            raise ValueError(f"Unknown pointer event type: {kind}")
    return pad

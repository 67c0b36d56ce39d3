"""
Where the signature block goes on the first page.

All coordinates are PDF points with the origin at the bottom-left of the page.
The vertical anchor is a fixed 800pt below the top edge rather than a fraction
of the page height; pages shorter than 800pt clamp to the 50pt floor.
"""
from dataclasses import dataclass
from typing import Tuple

Color = Tuple[float, float, float]

TOP_OFFSET = 800
BOTTOM_FLOOR = 50
LEFT_FLOOR = 10
HALF_BLOCK_WIDTH = 100

IMAGE_WIDTH = 100
IMAGE_HEIGHT = 50
FRAME_PADDING = 5

INK_GREY: Color = (0.5, 0.5, 0.5)
INK_GREEN: Color = (0, 0.5, 0)
FRAME_BORDER: Color = (0, 0, 1)
FRAME_FILL: Color = (1, 1, 0.9)

FALLBACK_MARKER = "[DIGITALLY SIGNED - NO IMAGE]"


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class TextSlot:
    x: float
    y: float
    size: float
    color: Color


@dataclass(frozen=True)
class PlacementSpec:
    page_width: float
    page_height: float
    anchor_x: float
    anchor_y: float

    @property
    def anchor(self) -> Tuple[float, float]:
        return self.anchor_x, self.anchor_y

    @property
    def image_box(self) -> Box:
        return Box(self.anchor_x, self.anchor_y + 30, IMAGE_WIDTH, IMAGE_HEIGHT)

    @property
    def frame_box(self) -> Box:
        return Box(
            self.anchor_x - FRAME_PADDING,
            self.anchor_y + 25,
            IMAGE_WIDTH + 2 * FRAME_PADDING,
            IMAGE_HEIGHT + 2 * FRAME_PADDING,
        )

    @property
    def caption_slots(self) -> Tuple[TextSlot, TextSlot]:
        """Date and time lines under the embedded image."""
        return (
            TextSlot(self.anchor_x, self.anchor_y + 10, 8, INK_GREY),
            TextSlot(self.anchor_x, self.anchor_y - 5, 8, INK_GREY),
        )

    @property
    def fallback_slots(self) -> Tuple[TextSlot, TextSlot, TextSlot]:
        """Marker, date and time lines of the text-only signature."""
        return (
            TextSlot(self.anchor_x, self.anchor_y + 30, 12, INK_GREEN),
            TextSlot(self.anchor_x, self.anchor_y + 15, 10, INK_GREY),
            TextSlot(self.anchor_x, self.anchor_y, 8, INK_GREY),
        )


def compute_placement(page_width: float, page_height: float) -> PlacementSpec:
    return PlacementSpec(
        page_width=page_width,
        page_height=page_height,
        anchor_x=max(page_width / 2 - HALF_BLOCK_WIDTH, LEFT_FLOOR),
        anchor_y=max(page_height - TOP_OFFSET, BOTTOM_FLOOR),
    )

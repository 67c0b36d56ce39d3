from dataclasses import dataclass, field
from typing import List

MAX_BACKING_SIDE = 4096  # px per side of the backing bitmap


@dataclass(frozen=True)
class StrokePoint:
    """A point in surface-local logical coordinates."""
    x: float
    y: float


@dataclass(frozen=True)
class PointerEvent:
    """A raw pointer/touch sample in viewport coordinates."""
    client_x: float
    client_y: float
    pointer_id: int = 0


@dataclass
class Stroke:
    points: List[StrokePoint] = field(default_factory=list)

    def add(self, point: StrokePoint):
        self.points.append(point)


@dataclass(frozen=True)
class SurfaceGeometry:
    """
    Where the drawing surface sits on screen and how dense its backing store is.

    ``display_width``/``display_height`` are the logical (CSS) size; the
    backing bitmap is that size multiplied by ``pixel_ratio``.
    """
    display_width: int
    display_height: int
    left: float = 0.0
    top: float = 0.0
    pixel_ratio: float = 1.0

    def __post_init__(self):
        if self.display_width <= 0 or self.display_height <= 0:
            raise ValueError("Surface display size must be positive")
        if self.pixel_ratio <= 0:
            raise ValueError("Pixel ratio must be positive")
        if self.backing_width > MAX_BACKING_SIDE or self.backing_height > MAX_BACKING_SIDE:
            raise ValueError(f"Backing bitmap may not exceed {MAX_BACKING_SIDE}px per side")

    @property
    def backing_width(self) -> int:
        return max(1, round(self.display_width * self.pixel_ratio))

    @property
    def backing_height(self) -> int:
        return max(1, round(self.display_height * self.pixel_ratio))

    def to_surface(self, event: PointerEvent) -> StrokePoint:
        """Map a viewport coordinate into surface-local logical coordinates."""
        x = (event.client_x - self.left) * (self.backing_width / self.display_width) / self.pixel_ratio
        y = (event.client_y - self.top) * (self.backing_height / self.display_height) / self.pixel_ratio
        return StrokePoint(x, y)

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from modules.capture.models.stroke import MAX_BACKING_SIDE


class SurfaceSchema(BaseModel):
    display_width: int = Field(..., gt=0, le=4096)
    display_height: int = Field(..., gt=0, le=4096)
    left: float = 0.0
    top: float = 0.0
    pixel_ratio: float = Field(1.0, gt=0, le=8)

    @model_validator(mode="after")
    def check_backing_size(self):
        # The pad allocates display size times pixel ratio
        if max(self.display_width, self.display_height) * self.pixel_ratio > MAX_BACKING_SIDE:
            raise ValueError(f"Surface may not exceed {MAX_BACKING_SIDE}px per side at the given pixel ratio")
        return self


class PointerEventSchema(BaseModel):
    type: Literal["down", "move", "up", "cancel", "clear"]
    client_x: Optional[float] = None
    client_y: Optional[float] = None
    pointer_id: int = 0


class RenderSignatureRequest(BaseModel):
    surface: SurfaceSchema
    events: List[PointerEventSchema]


class RenderSignatureResponse(BaseModel):
    signature: str
    width: int
    height: int

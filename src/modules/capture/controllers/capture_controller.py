from fastapi import APIRouter, HTTPException

from modules.capture.models.schemas import RenderSignatureRequest, RenderSignatureResponse
from modules.capture.models.stroke import PointerEvent, SurfaceGeometry
from modules.capture.services.signature_pad import replay

router = APIRouter(
    prefix="/api/signatures",
    tags=["signatures"]
)


@router.post("/render", response_model=RenderSignatureResponse)
def render_signature(request: RenderSignatureRequest):
    """
    Replays recorded pointer events and returns the exported signature image.
    """
    geometry = SurfaceGeometry(
        display_width=request.surface.display_width,
        display_height=request.surface.display_height,
        left=request.surface.left,
        top=request.surface.top,
        pixel_ratio=request.surface.pixel_ratio,
    )

    events = []
    for item in request.events:
        if item.type in ("down", "move") and (item.client_x is None or item.client_y is None):
            raise HTTPException(422, f"'{item.type}' events need client_x and client_y")
        event = None
        if item.client_x is not None and item.client_y is not None:
            event = PointerEvent(item.client_x, item.client_y, item.pointer_id)
        elif item.type in ("up", "cancel"):
            event = PointerEvent(0.0, 0.0, item.pointer_id)
        events.append((item.type, event))

    # EmptyCapture propagates to the SigningError handler as a 400
    pad = replay(geometry, events)
    return RenderSignatureResponse(
        signature=pad.export_data_url(),
        width=geometry.display_width,
        height=geometry.display_height,
    )

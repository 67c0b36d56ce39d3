from .document import SignedDocumentRecord, SigningMode
from .envelope import TransferEnvelope, ValidatedImage
from .placement import PlacementSpec, compute_placement
from .signed_document import SignedDocument
from .uploaded_document import UploadedDocument

__all__ = [
    'SignedDocumentRecord', 'SigningMode', 'TransferEnvelope', 'ValidatedImage',
    'PlacementSpec', 'compute_placement', 'SignedDocument', 'UploadedDocument'
]

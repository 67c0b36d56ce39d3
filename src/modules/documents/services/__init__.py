from .cleanup import delete_expired_signed_documents
from .composer import DocumentComposer
from .document_service import DocumentService
from .recovery import RecoveryController
from .staging import StagingArea

__all__ = [
    'delete_expired_signed_documents', 'DocumentComposer', 'DocumentService',
    'RecoveryController', 'StagingArea'
]

from sqlalchemy import Column, Integer, String, DateTime, Enum
from datetime import datetime
from enum import Enum as PyEnum
from database import Base


class SigningMode(PyEnum):
    IMAGE = "IMAGE"
    TEXT = "TEXT"
    COPY_THROUGH = "COPY_THROUGH"


class SignedDocumentRecord(Base):
    __tablename__ = 'signed_documents'

    id = Column(String(64), primary_key=True)
    original_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False)
    mode = Column(Enum(SigningMode), nullable=False)
    warning = Column(String(512), nullable=True)
    signed_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    captured_at = Column(DateTime, nullable=True)
    sha256_hash = Column(String(64), nullable=False)

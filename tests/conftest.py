import base64
import io
import os
import tempfile

import pytest

# Settings are read at import time; point them somewhere harmless first
_TMP_ROOT = tempfile.mkdtemp(prefix="pdf-signing-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TMP_ROOT, 'app.db')}")
os.environ.setdefault("CLEANUP_ENABLED", "false")
os.environ.setdefault("STAGING_DIR", os.path.join(_TMP_ROOT, "staging"))
os.environ.setdefault("SIGNED_DIR", os.path.join(_TMP_ROOT, "signed"))

from PIL import Image, ImageDraw
from PyPDF2 import PdfWriter
from reportlab.pdfgen import canvas
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
from modules.documents.models.document import SignedDocumentRecord  # noqa: F401

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def make_pdf_bytes(width=600, height=800, pages=1, text="Test Document for Digital Signature"):
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=(width, height))
    for number in range(pages):
        c.drawString(50, height - 50, f"{text} - page {number + 1}")
        c.showPage()
    c.save()
    return buf.getvalue()


def make_empty_pdf_bytes():
    buf = io.BytesIO()
    PdfWriter().write(buf)
    return buf.getvalue()


def make_signature_png(width=50, height=50):
    image = Image.new("RGB", (width, height), "white")
    draw = ImageDraw.Draw(image)
    draw.line([(2, height - 5), (width // 3, 5), (2 * width // 3, height - 8), (width - 3, 10)],
              fill=(30, 64, 175), width=3)
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def as_data_url(data: bytes, media_type="image/png"):
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


@pytest.fixture
def example_pdf():
    return make_pdf_bytes()


@pytest.fixture
def signature_data_url():
    return as_data_url(make_signature_png())


@pytest.fixture
def corrupted_signature():
    # Plausible length and valid base64, but not an image
    return as_data_url(b"this is definitely not a PNG image, just filler bytes " * 4)


@pytest.fixture
def storage_dirs(tmp_path, monkeypatch):
    from config import settings

    staging = tmp_path / "staging"
    signed = tmp_path / "signed"
    monkeypatch.setattr(settings, "staging_dir", str(staging))
    monkeypatch.setattr(settings, "signed_dir", str(signed))
    return staging, signed


@pytest.fixture
def client(storage_dirs):
    from fastapi.testclient import TestClient

    from database import get_db
    from main import app

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # No "with": the lifespan (table creation, cleanup scheduler) stays off
    yield TestClient(app)
    app.dependency_overrides.clear()


def first_page_has_image(reader) -> bool:
    def walk(resources) -> bool:
        if resources is None:
            return False
        resources = resources.get_object()
        xobjects = resources.get("/XObject")
        if xobjects is None:
            return False
        xobjects = xobjects.get_object()
        for name in xobjects:
            xobject = xobjects[name].get_object()
            if xobject.get("/Subtype") == "/Image":
                return True
            if xobject.get("/Subtype") == "/Form" and walk(xobject.get("/Resources")):
                return True
        return False

    page = reader.pages[0]
    return walk(page.get("/Resources"))

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from create_tables import create_tables
from errors import SigningError
from modules.documents.job import start_deletion_job
from modules.capture.controllers.capture_controller import router as capture_router
from modules.documents.controllers.document_controller import router as document_router
from modules.documents.controllers.signing_controller import router as signing_router

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup logic ---
    create_tables()
    scheduler = None
    if settings.cleanup_enabled:
        scheduler = start_deletion_job()
        logger.info("Cleanup job started")
    logger.info("PDF signing service ready")
    yield
    # --- Shutdown logic ---
    if scheduler is not None:
        try:
            scheduler.shutdown()
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")
    logger.info("Application stopped")


app = FastAPI(
    title="PDF Signing Service",
    description="Upload a PDF and get it back with a handwritten signature on the first page",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(SigningError)
async def signing_error_handler(request: Request, exc: SigningError):
    body = {"error": exc.code, "details": exc.message}
    if exc.suggestion:
        body["suggestion"] = exc.suggestion
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=body)


# Routers
app.include_router(signing_router)
app.include_router(document_router)
app.include_router(capture_router)


@app.get("/health")
def health():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.dependencies import get_auth_service
from app.routers.auth import router as auth_router
from app.routers.proxy import router as proxy_router
from app.utils.exceptions import register_exception_handlers

logging.basicConfig(level=settings.log_level)

SERVICE_NAME = "pdf-reader-api"
VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Refuse to start without store credentials and a signing secret
    get_auth_service()
    yield


app = FastAPI(
    title="PDF Reader API",
    description="Auth, text-to-speech, LLM and OCR endpoints for the PDF reader",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix="/api")
app.include_router(proxy_router, prefix="/api")


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": SERVICE_NAME, "version": VERSION}

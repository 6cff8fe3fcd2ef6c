"""FastAPI entry point. Registers middleware, API routers and the uploads mount."""

import logging
import os
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from collegecms.config import settings
from collegecms.database import Base, engine
import collegecms.models  # noqa: F401 - registers model metadata
from collegecms.routers import (
    auth, directories, college_content, course_page_content, location_content,
    uploads, content_versions,
)

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="College CMS Admin API",
    description="Keyed page content (college sections, course pages, location pages) for the college site",
    version="1.0.0",
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(directories.router)
app.include_router(college_content.router)
app.include_router(course_page_content.router)
app.include_router(location_content.router)
app.include_router(uploads.router)
app.include_router(content_versions.router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    _ = request
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg") or "Invalid request")
    logger.info("[api] validation failed path=%s detail=%s", request.url.path, message)
    return JSONResponse(status_code=422, content={"success": False, "message": message})


@app.on_event("startup")
def ensure_schema():
    # Creates tables that are missing after a deploy.
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "College CMS Admin API"}


os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

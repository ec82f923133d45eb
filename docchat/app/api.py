"""
HTTP API for guided template filling.

POST /api/upload             - upload a .docx template, start a session
POST /api/chat               - answer the open question or confirm generation
POST /api/generate-document  - download the completed document
GET  /api/health             - service status
"""
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, Optional, Type

from fastapi import FastAPI, File, HTTPException, Request, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from loguru import logger

from docchat import __version__
from docchat.config.settings import Settings, settings as default_settings
from docchat.data.errors import (
    DocChatError,
    MalformedPackageError,
    NoPlaceholdersError,
    RenderError,
    SessionNotFoundError,
    SessionNotReadyError,
)
from docchat.service.conversation import ConversationService
from docchat.service.filler import DOCX_CONTENT_TYPE, DocumentRenderer
from docchat.service.parser import PlaceholderExtractor
from docchat.service.session_store import SessionStore
from docchat.app.schemas import (
    ChatRequest,
    ChatResponse,
    GenerateRequest,
    HealthResponse,
    PlaceholderStatus,
    UploadResponse,
)

ERROR_STATUS: Dict[Type[DocChatError], int] = {
    MalformedPackageError: status.HTTP_400_BAD_REQUEST,
    NoPlaceholdersError: status.HTTP_400_BAD_REQUEST,
    SessionNotFoundError: status.HTTP_404_NOT_FOUND,
    SessionNotReadyError: status.HTTP_409_CONFLICT,
    RenderError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_app(
    config: Optional[Settings] = None,
    store: Optional[SessionStore] = None,
    renderer: Optional[DocumentRenderer] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: settings, defaults to the global settings
        store: session store, defaults to one sized from the settings
        renderer: document renderer, defaults to one writing to the upload dir
    """
    config = config or default_settings
    if store is None:
        store = SessionStore(
            max_sessions=config.session.max_sessions,
            ttl=timedelta(seconds=config.session.ttl_seconds),
        )
    renderer = renderer or DocumentRenderer(config.document.upload_dir)
    extractor = PlaceholderExtractor()
    conversation = ConversationService()

    app = FastAPI(
        title="docchat API",
        description="Upload a .docx template, answer one question per placeholder, download the filled document.",
        version=__version__,
    )
    app.state.sessions = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log method, path, status and elapsed time of every request."""
        t0 = time.monotonic()
        response = await call_next(request)
        elapsed_ms = round((time.monotonic() - t0) * 1000, 2)
        if request.url.path != "/api/health":
            logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms} ms)")
        response.headers["X-Process-Time"] = f"{elapsed_ms}ms"
        return response

    @app.exception_handler(DocChatError)
    async def docchat_error_handler(request: Request, exc: DocChatError):
        status_code = next(
            (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)),
            status.HTTP_400_BAD_REQUEST,
        )
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Structured JSON for anything unhandled."""
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "error": str(exc),
                "path": str(request.url.path),
                "timestamp": datetime.now().isoformat(),
            },
        )

    @app.post("/api/upload", response_model=UploadResponse)
    def upload_template(file: Optional[UploadFile] = File(None)) -> UploadResponse:
        """Parse an uploaded template and open a fill session."""
        if file is None or not file.filename:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

        extension = Path(file.filename).suffix.lower()
        content_type = (file.content_type or "").split(";")[0].strip().lower()
        if (extension not in config.document.allowed_extensions
                or content_type not in config.document.allowed_content_types):
            logger.info(f"File rejected: {file.filename} (MIME: {content_type})")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only .docx files are allowed")

        package = file.file.read(config.server.max_upload_size + 1)
        if len(package) > config.server.max_upload_size:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File exceeds the {config.server.max_upload_size // (1024 * 1024)} MB size limit.",
            )
        logger.info(f"Processing file: {file.filename} ({len(package)} bytes)")

        normalized, placeholders = extractor.normalize(package)
        session = store.create(normalized, placeholders, filename=file.filename)
        reply = conversation.start(session)

        return UploadResponse(
            session_id=session.session_id,
            placeholders=[PlaceholderStatus.from_placeholder(p) for p in placeholders],
            response=reply.message,
            suggestions=reply.suggestions,
            total_placeholders=len(placeholders),
            should_show_generate_button=False,
        )

    @app.post("/api/chat", response_model=ChatResponse)
    def chat(request: ChatRequest) -> ChatResponse:
        """Answer the open placeholder or confirm generation."""
        session = store.get(request.session_id)
        reply = conversation.handle_message(session, request.message)

        return ChatResponse(
            response=reply.message,
            placeholders=[PlaceholderStatus.from_placeholder(p) for p in session.placeholders],
            suggestions=reply.suggestions,
            current_placeholder=reply.placeholder,
            filled_count=session.filled_count,
            total_placeholders=len(session.placeholders),
            all_filled=reply.all_filled,
            should_show_generate_button=reply.ready_to_generate,
        )

    @app.post("/api/generate-document")
    def generate_document(request: GenerateRequest) -> Response:
        """Render the session's template and return it as an attachment."""
        session = store.get(request.session_id)
        if not session.all_filled:
            raise SessionNotReadyError("Document is not ready yet. Answer every question first.")

        filename, completed = renderer.render_to_file(session.package, session.values())
        logger.info(f"Generated {filename} for session {session.session_id}")
        return Response(
            content=completed,
            media_type=DOCX_CONTENT_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/api/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        store.purge_expired()
        return HealthResponse(status="ok", version=__version__, active_sessions=len(store))

    return app


app = create_app()

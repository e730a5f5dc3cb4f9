"""JSON API over the catalog, reader state and explanation engine."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Body, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from scholarverse.config import AppConfig
from scholarverse.errors import (
    AccessDeniedError,
    NotFoundError,
    ScholarverseError,
    ValidationError,
)
from scholarverse.explain.engine import ExplanationEngine, to_data_url
from scholarverse.library import catalog
from scholarverse.library.dashboard import build_dashboard
from scholarverse.library.models import Book
from scholarverse.library.session import ReadingSession, open_page
from scholarverse.library.state import AppState
from scholarverse.library.store import KeyValueStore
from scholarverse.pages.discovery import discover_page_count, local_page_count
from scholarverse.pages.pdf import extract_page_text

log = logging.getLogger(__name__)


def create_app(
    config: AppConfig,
    state: Optional[AppState] = None,
    engine: Optional[ExplanationEngine] = None,
) -> FastAPI:
    store: Optional[KeyValueStore] = None
    if state is None:
        store = KeyValueStore(config.db_path)
        state = AppState(store)
    if engine is None:
        engine = ExplanationEngine(config)
    sessions: dict[str, ReadingSession] = {}

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state.hydrate()
        yield
        for session in list(sessions.values()):
            await session.stop()
        sessions.clear()
        await engine.close()
        if store is not None:
            store.close()

    app = FastAPI(title="Scholarverse", lifespan=lifespan)
    app.state.config = config
    config.pages_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        "/pdfbooks",
        StaticFiles(directory=config.pages_dir),
        name="pdfbooks",
    )

    @app.exception_handler(ScholarverseError)
    async def handle_error(request: Request, exc: ScholarverseError) -> JSONResponse:
        log.warning("%s %s failed: %s", request.method, request.url.path, exc)
        payload: dict[str, object] = {"error": str(exc)}
        if isinstance(exc, NotFoundError) and exc.path:
            payload["path"] = exc.path
        return JSONResponse(payload, status_code=exc.status_code)

    def _book_or_404(book_id: str) -> Book:
        book = catalog.get_book(book_id)
        if book is None:
            raise NotFoundError(f"Book not found: {book_id}")
        return book

    def _owned_or_403(book_id: str) -> Book:
        book = _book_or_404(book_id)
        if not state.is_book_in_library(book_id):
            raise AccessDeniedError(
                "You do not own this book. Please purchase it to read."
            )
        return book

    def _check_page(page: int) -> None:
        if page < 1:
            raise ValidationError("page must be a positive integer.")

    def _book_payload(book: Book) -> dict[str, object]:
        payload = book.to_dict()
        payload["in_library"] = state.is_book_in_library(book.id)
        return payload

    # ── Catalog & library ──────────────────────────

    @app.get("/api/books")
    async def api_books() -> JSONResponse:
        return JSONResponse(
            {
                "hydrated": state.is_hydrated,
                "books": [_book_payload(b) for b in catalog.list_books()],
            }
        )

    @app.get("/api/library")
    async def api_library() -> JSONResponse:
        return JSONResponse(
            {"books": [_book_payload(b) for b in catalog.owned_books(state)]}
        )

    @app.post("/api/library/{book_id}")
    async def api_purchase(book_id: str) -> JSONResponse:
        book = _book_or_404(book_id)
        state.add_book_to_library(book.id)
        log.info("Added %s to library", book.id)
        return JSONResponse(
            {
                "message": f'"{book.title}" has been added to your library.',
                "book": _book_payload(book),
            }
        )

    # ── Reader ─────────────────────────────────────

    @app.get("/api/books/{book_id}/pages")
    async def api_page_count(book_id: str) -> JSONResponse:
        _owned_or_403(book_id)
        if (config.pages_dir / book_id).is_dir():
            total = local_page_count(config.pages_dir, book_id)
        elif config.fallback_origin:
            total = await discover_page_count(book_id, config.fallback_origin)
        else:
            total = 0
        return JSONResponse({"book_id": book_id, "total_pages": total})

    @app.get("/api/books/{book_id}/pages/{page}")
    async def api_open_page(book_id: str, page: int) -> JSONResponse:
        _book_or_404(book_id)
        _check_page(page)
        opened = open_page(state, book_id, page)
        return JSONResponse(
            {
                "book_id": opened.book_id,
                "page": opened.page,
                "image": opened.image_path,
                "note": opened.note,
            }
        )

    @app.get("/api/books/{book_id}/pages/{page}/text")
    def api_page_text(book_id: str, page: int) -> JSONResponse:
        book = _owned_or_403(book_id)
        _check_page(page)
        if not book.pdf_path:
            raise NotFoundError(f"No PDF available for book {book_id}")
        text = extract_page_text(config.static_dir / book.pdf_path, page)
        return JSONResponse({"book_id": book_id, "page": page, "text": text})

    @app.put("/api/books/{book_id}/notes/{page}")
    async def api_update_note(
        book_id: str, page: int, payload: dict[str, object] = Body(...)
    ) -> JSONResponse:
        _owned_or_403(book_id)
        _check_page(page)
        content = payload.get("content")
        if not isinstance(content, str):
            raise ValidationError("content must be a string.")
        state.update_note(book_id, page, content)
        return JSONResponse({"book_id": book_id, "page": page, "content": content})

    @app.get("/api/books/{book_id}/notes/{page}")
    async def api_get_note(book_id: str, page: int) -> JSONResponse:
        _book_or_404(book_id)
        _check_page(page)
        return JSONResponse(
            {"book_id": book_id, "page": page, "content": state.get_note(book_id, page)}
        )

    @app.post("/api/books/{book_id}/session")
    async def api_start_session(book_id: str) -> JSONResponse:
        _owned_or_403(book_id)
        session = sessions.get(book_id)
        if session is None:
            session = ReadingSession(state, book_id, interval=config.reading_interval)
            sessions[book_id] = session
        session.start()
        return JSONResponse({"book_id": book_id, "running": session.running})

    @app.delete("/api/books/{book_id}/session")
    async def api_stop_session(book_id: str) -> JSONResponse:
        session = sessions.pop(book_id, None)
        if session is None:
            raise NotFoundError(f"No reading session for book {book_id}")
        seconds = await session.stop()
        return JSONResponse({"book_id": book_id, "logged_seconds": seconds})

    # ── Stats ──────────────────────────────────────

    @app.post("/api/stats/reading-time")
    async def api_log_reading_time(payload: dict[str, object] = Body(...)) -> JSONResponse:
        seconds = payload.get("seconds")
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            raise ValidationError("seconds must be a number.")
        state.log_reading_time(float(seconds))
        return JSONResponse({"total_time_seconds": state.stats.total_time_seconds})

    @app.get("/api/dashboard")
    async def api_dashboard() -> JSONResponse:
        payload = build_dashboard(state).to_dict()
        payload["hydrated"] = state.is_hydrated
        return JSONResponse(payload)

    # ── Images & explanations ──────────────────────

    @app.post("/api/image")
    async def api_image(payload: dict[str, object] = Body(...)) -> JSONResponse:
        image_url = payload.get("imageUrl")
        if not isinstance(image_url, str) or not image_url.strip():
            raise ValidationError("Image URL is required")
        data = await engine.resolve_image(image_url)
        return JSONResponse({"imageData": to_data_url(data)})

    @app.post("/api/explain")
    async def api_explain(payload: dict[str, object] = Body(...)) -> JSONResponse:
        image_url = payload.get("imageUrl")
        page_content = payload.get("pageContent")
        prompt = payload.get("prompt")
        api_key = payload.get("apiKey")
        if api_key is not None and not isinstance(api_key, str):
            raise ValidationError("apiKey must be a string.")
        if prompt is not None and not isinstance(prompt, str):
            raise ValidationError("prompt must be a string.")

        if isinstance(image_url, str) and image_url.strip():
            explanation = await engine.explain_image(
                image_url, prompt=prompt, api_key=api_key
            )
        elif isinstance(page_content, str) and page_content.strip():
            explanation = await engine.explain_text(page_content, api_key=api_key)
        else:
            raise ValidationError("Missing required fields")
        return JSONResponse({"explanation": explanation})

    return app


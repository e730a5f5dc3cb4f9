"""In-memory reader state with write-through persistence."""

from __future__ import annotations

import copy
import logging
from typing import Callable, TypeVar

from scholarverse.errors import StorageError, ValidationError

from . import records
from .models import Notes, ReadPages, Stats
from .store import (
    LIBRARY_KEY,
    NOTES_KEY,
    READ_PAGES_KEY,
    STATS_KEY,
    KeyValueStore,
)

log = logging.getLogger(__name__)

T = TypeVar("T")


class AppState:
    """Authoritative copy of library, notes, stats and read pages.

    Reads return empty defaults until :meth:`hydrate` has run. Every
    mutation that changes a record re-serializes that record alone.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._library: list[str] = []
        self._notes: Notes = {}
        self._stats = Stats()
        self._read_pages: ReadPages = {}
        self._hydrated = False

    @property
    def is_hydrated(self) -> bool:
        return self._hydrated

    # ── Hydration ──────────────────────────────────────

    def hydrate(self) -> None:
        if self._hydrated:
            return
        self._library = self._load(LIBRARY_KEY, records.decode_library, list)
        self._notes = self._load(NOTES_KEY, records.decode_notes, dict)
        self._stats = self._load(STATS_KEY, records.decode_stats, Stats)
        self._read_pages = self._load(READ_PAGES_KEY, records.decode_read_pages, dict)
        self._hydrated = True
        log.info(
            "Hydrated state: %d books, %d notes, %d pages read",
            len(self._library),
            self.get_notes_taken_count(),
            self.get_pages_read_count(),
        )

    def _load(
        self, key: str, decode: Callable[[str], T], default: Callable[[], T]
    ) -> T:
        raw = self._store.load(key)
        if raw is None:
            return default()
        try:
            return decode(raw)
        except StorageError as e:
            log.warning("Ignoring stored %s: %s", key, e)
            return default()

    def _persist(self, key: str, value: str) -> None:
        # Nothing is written before hydration so that a half-loaded state
        # never overwrites what is on disk.
        if self._hydrated:
            self._store.save(key, value)

    # ── Snapshots ──────────────────────────────────────

    @property
    def library(self) -> list[str]:
        return list(self._library) if self._hydrated else []

    @property
    def notes(self) -> Notes:
        return copy.deepcopy(self._notes) if self._hydrated else {}

    @property
    def stats(self) -> Stats:
        if not self._hydrated:
            return Stats()
        return Stats(
            total_time_seconds=self._stats.total_time_seconds,
            pages_read=self.get_pages_read_count(),
        )

    # ── Library ────────────────────────────────────────

    def add_book_to_library(self, book_id: str) -> None:
        if book_id in self._library:
            return
        self._library.append(book_id)
        self._persist(LIBRARY_KEY, records.encode_library(self._library))

    def is_book_in_library(self, book_id: str) -> bool:
        return self._hydrated and book_id in self._library

    # ── Notes ──────────────────────────────────────────

    def update_note(self, book_id: str, page: int, content: str) -> None:
        self._notes.setdefault(book_id, {})[page] = content
        self._persist(NOTES_KEY, records.encode_notes(self._notes))

    def get_note(self, book_id: str, page: int) -> str:
        if not self._hydrated:
            return ""
        return self._notes.get(book_id, {}).get(page, "")

    def get_notes_taken_count(self) -> int:
        if not self._hydrated:
            return 0
        return sum(
            1
            for pages in self._notes.values()
            for text in pages.values()
            if text.strip()
        )

    # ── Reading stats ──────────────────────────────────

    def log_reading_time(self, seconds: float) -> None:
        if seconds < 0:
            raise ValidationError(f"Reading time must be non-negative, got {seconds}")
        self._stats.total_time_seconds += seconds
        self._persist(STATS_KEY, records.encode_stats(self._stats))

    def log_page_read(self, book_id: str, page: int) -> None:
        pages = self._read_pages.setdefault(book_id, set())
        if page in pages:
            return
        pages.add(page)
        self._persist(READ_PAGES_KEY, records.encode_read_pages(self._read_pages))
        self._stats.pages_read = sum(len(p) for p in self._read_pages.values())
        self._persist(STATS_KEY, records.encode_stats(self._stats))

    def get_pages_read_count(self) -> int:
        if not self._hydrated:
            return 0
        return sum(len(pages) for pages in self._read_pages.values())

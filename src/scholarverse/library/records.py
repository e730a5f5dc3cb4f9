"""JSON encoding of the persisted records.

Decoders validate the decoded structure field by field and raise
``StorageError`` on any mismatch; the state manager treats that as an
absent record.
"""

from __future__ import annotations

import json
import math

from scholarverse.errors import StorageError

from .models import Notes, ReadPages, Stats


def _parse(raw: str) -> object:
    try:
        return json.loads(raw)
    # JSONDecodeError is a ValueError; RecursionError on pathological nesting
    except (ValueError, TypeError, RecursionError) as e:
        raise StorageError(f"Malformed record: {e}") from e


def _page_number(value: object) -> int:
    # JSON object keys are always strings; isdigit() alone accepts "²"
    if isinstance(value, str) and value.isascii() and value.isdigit():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise StorageError(f"Invalid page number: {value!r}")
    return value


def _number(value: object, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise StorageError(f"Invalid {name}: {value!r}")
    try:
        number = float(value)
    except OverflowError as e:
        raise StorageError(f"Invalid {name}: out of range") from e
    if not math.isfinite(number) or number < 0:
        raise StorageError(f"Invalid {name}: {value!r}")
    return number


# ── Library ─────────────────────────────────────────────


def encode_library(library: list[str]) -> str:
    return json.dumps(library, ensure_ascii=False)


def decode_library(raw: str) -> list[str]:
    data = _parse(raw)
    if not isinstance(data, list) or not all(isinstance(b, str) for b in data):
        raise StorageError("Library must be a list of book ids")
    # Order kept, duplicates dropped
    return list(dict.fromkeys(data))


# ── Notes ───────────────────────────────────────────────


def encode_notes(notes: Notes) -> str:
    return json.dumps(
        {
            book_id: {str(p): text for p, text in pages.items()}
            for book_id, pages in notes.items()
        },
        ensure_ascii=False,
    )


def decode_notes(raw: str) -> Notes:
    data = _parse(raw)
    if not isinstance(data, dict):
        raise StorageError("Notes must be a mapping of book id to pages")
    notes: Notes = {}
    for book_id, pages in data.items():
        if not isinstance(pages, dict):
            raise StorageError(f"Notes for book {book_id!r} must be a mapping")
        book_notes: dict[int, str] = {}
        for page, text in pages.items():
            if not isinstance(text, str):
                raise StorageError(f"Note text must be a string: {text!r}")
            book_notes[_page_number(page)] = text
        notes[book_id] = book_notes
    return notes


# ── Stats ───────────────────────────────────────────────


def encode_stats(stats: Stats) -> str:
    return json.dumps(
        {"totalTimeSeconds": stats.total_time_seconds, "pagesRead": stats.pages_read}
    )


def decode_stats(raw: str) -> Stats:
    data = _parse(raw)
    if not isinstance(data, dict):
        raise StorageError("Stats must be a mapping")
    return Stats(
        total_time_seconds=float(
            _number(data.get("totalTimeSeconds", 0), "totalTimeSeconds")
        ),
        pages_read=int(_number(data.get("pagesRead", 0), "pagesRead")),
    )


# ── Read pages ──────────────────────────────────────────


def read_pages_to_lists(read_pages: ReadPages) -> dict[str, list[int]]:
    """Sets have no JSON form; store each one as a sorted list."""
    return {book_id: sorted(pages) for book_id, pages in read_pages.items()}


def read_pages_from_lists(data: dict[str, list[int]]) -> ReadPages:
    return {book_id: set(pages) for book_id, pages in data.items()}


def encode_read_pages(read_pages: ReadPages) -> str:
    return json.dumps(read_pages_to_lists(read_pages), ensure_ascii=False)


def decode_read_pages(raw: str) -> ReadPages:
    data = _parse(raw)
    if not isinstance(data, dict):
        raise StorageError("Read pages must be a mapping of book id to pages")
    lists: dict[str, list[int]] = {}
    for book_id, pages in data.items():
        if not isinstance(pages, list):
            raise StorageError(f"Read pages for book {book_id!r} must be a list")
        lists[book_id] = [_page_number(p) for p in pages]
    return read_pages_from_lists(lists)

"""Data models for the catalog and the reader's persisted records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# book id -> page -> note text
Notes = dict[str, dict[int, str]]
# book id -> pages viewed at least once
ReadPages = dict[str, set[int]]


@dataclass
class Book:
    id: str
    title: str
    author: str = "Unknown"
    price: float = 0.0
    cover_image: str = ""
    pdf_path: Optional[str] = None  # source PDF the page images are rendered from

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "price": self.price,
            "cover_image": self.cover_image,
        }


@dataclass
class Stats:
    total_time_seconds: float = 0.0
    pages_read: int = 0  # derived from ReadPages


@dataclass
class DashboardMetrics:
    total_time_seconds: float = 0.0
    time_spent: str = "00:00"
    pages_read: int = 0
    notes_taken: int = 0
    productivity_score: int = 0
    books_owned: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "total_time_seconds": self.total_time_seconds,
            "time_spent": self.time_spent,
            "pages_read": self.pages_read,
            "notes_taken": self.notes_taken,
            "productivity_score": self.productivity_score,
            "books_owned": self.books_owned,
        }


@dataclass
class OpenedPage:
    """What the reader needs when a page is shown."""

    book_id: str
    page: int
    image_path: str
    note: str = ""

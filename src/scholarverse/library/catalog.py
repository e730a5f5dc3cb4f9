"""The static book catalog."""

from __future__ import annotations

from typing import Optional

from .models import Book
from .state import AppState

BOOKS: list[Book] = [
    Book(
        id="1",
        title="বায়োলজি ১ম পত্র",
        author="মোঃ সাব্বির হোসেন",
        price=25.99,
        cover_image="computer-programming-cover",
        pdf_path="books/biology.pdf",
    ),
    Book(
        id="2",
        title="Introduction to Quantum Mechanics",
        author="David J. Griffiths",
        price=35.50,
        cover_image="quantum-mechanics-cover",
    ),
    Book(
        id="3",
        title="Sapiens: A Brief History of Humankind",
        author="Yuval Noah Harari",
        price=18.00,
        cover_image="sapiens-cover",
    ),
    Book(
        id="4",
        title="Organic Chemistry",
        author="Paula Yurkanis Bruice",
        price=45.99,
        cover_image="organic-chemistry-cover",
    ),
    Book(
        id="5",
        title="Cosmos",
        author="Carl Sagan",
        price=21.99,
        cover_image="cosmos-cover",
    ),
]


def list_books() -> list[Book]:
    return list(BOOKS)


def get_book(book_id: str) -> Optional[Book]:
    for book in BOOKS:
        if book.id == book_id:
            return book
    return None


def owned_books(state: AppState) -> list[Book]:
    """Books in the user's library, in catalog order."""
    return [b for b in BOOKS if state.is_book_in_library(b.id)]

"""Tests for the catalog and dashboard metrics."""

from __future__ import annotations

import pytest

from scholarverse.library import catalog
from scholarverse.library.dashboard import build_dashboard, format_time, productivity_score
from scholarverse.library.state import AppState


class TestCatalog:
    def test_five_books(self):
        assert [b.id for b in catalog.list_books()] == ["1", "2", "3", "4", "5"]

    def test_get_book(self):
        book = catalog.get_book("5")
        assert book is not None
        assert book.title == "Cosmos"
        assert book.author == "Carl Sagan"

    def test_get_unknown_book(self):
        assert catalog.get_book("99") is None

    def test_owned_books_in_catalog_order(self, state: AppState):
        state.add_book_to_library("4")
        state.add_book_to_library("2")
        state.add_book_to_library("not-in-catalog")
        assert [b.id for b in catalog.owned_books(state)] == ["2", "4"]


class TestFormatTime:
    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (0, "00:00"),
            (59.9, "00:59"),
            (61, "01:01"),
            (3600, "01:00:00"),
            (3725, "01:02:05"),
            (36000, "10:00:00"),
        ],
    )
    def test_format(self, seconds: float, expected: str):
        assert format_time(seconds) == expected


class TestProductivityScore:
    def test_zero_without_time(self):
        assert productivity_score(0, 10, 3) == 0

    def test_pages_per_hour_plus_notes(self):
        # 30 pages in 30 minutes -> 60 pages/hour, plus 2 per note
        assert productivity_score(1800, 30, 2) == 64

    def test_rounds_half_up(self):
        # 1 page in 8 minutes -> 7.5 pages/hour
        assert productivity_score(480, 1, 0) == 8


class TestBuildDashboard:
    def test_metrics(self, state: AppState):
        state.add_book_to_library("1")
        state.log_reading_time(3600)
        for page in range(1, 11):
            state.log_page_read("1", page)
        state.update_note("1", 1, "note")
        state.update_note("1", 2, "")
        metrics = build_dashboard(state)
        assert metrics.time_spent == "01:00:00"
        assert metrics.pages_read == 10
        assert metrics.notes_taken == 1
        assert metrics.productivity_score == 12
        assert metrics.books_owned == 1
        assert metrics.to_dict()["pages_read"] == 10

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

from scholarverse.errors import AccessDeniedError
from scholarverse.pages.discovery import page_image_path

from .models import OpenedPage
from .state import AppState

log = logging.getLogger(__name__)


class ReadingSession:
    """Accumulates reading time for one open book while it is being read.

    Elapsed time is logged every ``interval`` seconds; :meth:`stop` logs
    whatever partial interval is left before the timer goes away.
    """

    def __init__(
        self,
        state: AppState,
        book_id: str,
        interval: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._state = state
        self._book_id = book_id
        self._interval = interval
        self._clock = clock
        self._since = clock()
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def book_id(self) -> str:
        return self._book_id

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._since = self._clock()
        self._task = asyncio.get_running_loop().create_task(self._tick())

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.flush()

    def flush(self) -> float:
        now = self._clock()
        seconds = now - self._since
        if seconds <= 0:
            return 0.0
        self._state.log_reading_time(seconds)
        self._since = now
        return seconds

    async def stop(self) -> float:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        return self.flush()

    def open_page(self, page: int) -> OpenedPage:
        return open_page(self._state, self._book_id, page)


def open_page(state: AppState, book_id: str, page: int) -> OpenedPage:
    """Mark a page of an owned book as read and return what the reader shows."""
    if not state.is_book_in_library(book_id):
        raise AccessDeniedError("You do not own this book. Please purchase it to read.")
    state.log_page_read(book_id, page)
    log.debug("Opened %s page %d", book_id, page)
    return OpenedPage(
        book_id=book_id,
        page=page,
        image_path=page_image_path(book_id, page),
        note=state.get_note(book_id, page),
    )

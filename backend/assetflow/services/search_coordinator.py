"""
Debounced search box state: query text, result panel, selection cursor.

Only the latest debounce timer may start a search, and every search carries a
generation number so that a response for superseded input is dropped even if
it resolves after a newer one.
"""
import asyncio
import logging
from typing import Awaitable, Callable

from assetflow.config import settings
from assetflow.schemas.search import PanelSnapshot, SearchResult

logger = logging.getLogger("assetflow.search.coordinator")

Searcher = Callable[[str], Awaitable[list[SearchResult]]]


class SearchCoordinator:
    def __init__(
        self,
        search: Searcher,
        navigate: Callable[[str], None],
        on_change: Callable[[], None] | None = None,
        debounce_seconds: float | None = None,
    ):
        self._search = search
        self._navigate = navigate
        self._on_change = on_change
        self.debounce_seconds = (
            settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds
        )

        self.query = ""
        self.results: list[SearchResult] = []
        self.is_open = False
        self.is_loading = False
        self.selected_index = 0

        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._inflight: set[asyncio.Task] = set()

    # --- input ---

    def on_query_change(self, text: str):
        self.query = text
        self._cancel_timer()
        # Any keystroke supersedes a search already in flight.
        self._generation += 1
        if not text.strip():
            self._clear_results()
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce_seconds, self._fire)

    def _fire(self):
        self._timer = None
        task = asyncio.ensure_future(self.execute_search(self.query))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def execute_search(self, text: str) -> list[SearchResult]:
        self._generation += 1
        generation = self._generation
        self.is_loading = True
        self._changed()

        try:
            results = await self._search(text.strip())
        except Exception:
            logger.exception("Search failed for %r", text)
            results = []

        if generation != self._generation:
            logger.debug("Dropping stale results for %r", text)
            return results

        self.results = results
        self.selected_index = 0
        self.is_open = True
        self.is_loading = False
        self._changed()
        return results

    # --- keyboard / pointer ---

    def on_key_down(self, key: str) -> bool:
        if not self.is_open or not self.results:
            return False

        count = len(self.results)
        if key == "ArrowDown":
            self.selected_index = (self.selected_index + 1) % count
        elif key == "ArrowUp":
            self.selected_index = (self.selected_index - 1 + count) % count
        elif key == "Enter":
            self.select(self.results[self.selected_index])
            return True
        elif key == "Escape":
            self.is_open = False
        else:
            return False
        self._changed()
        return True

    def select(self, result: SearchResult):
        self._cancel_timer()
        self.query = ""
        self._clear_results()
        self._navigate(result.link)

    def on_focus(self):
        if self.query and not self.is_open:
            self.is_open = True
            self._changed()

    def on_pointer_down(self, inside: bool):
        if not inside and self.is_open:
            self.is_open = False
            self._changed()

    # --- lifecycle ---

    def snapshot(self) -> PanelSnapshot:
        return PanelSnapshot(
            query=self.query,
            open=self.is_open,
            loading=self.is_loading,
            selected_index=self.selected_index,
            results=self.results if self.is_open else [],
        )

    def close(self):
        self._cancel_timer()
        self._generation += 1
        for task in list(self._inflight):
            task.cancel()

    def _clear_results(self):
        # Invalidate any search still in flight for the previous text.
        self._generation += 1
        self.results = []
        self.selected_index = 0
        self.is_open = False
        self.is_loading = False
        self._changed()

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _changed(self):
        if self._on_change is not None:
            self._on_change()

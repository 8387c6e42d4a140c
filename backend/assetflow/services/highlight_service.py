"""
Deep-link highlighting for table rows.

A row is located by its element id (``highlight-<id>``). The owning table may
still be loading or switching pages, so the lookup is retried on a fixed
interval until the attempt budget runs out, at which point the highlight is
abandoned silently.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Protocol
from urllib.parse import parse_qs, urlsplit

from assetflow.config import settings

logger = logging.getLogger("assetflow.highlight")

ROW_ID_PREFIX = "highlight-"
EMPHASIS_CLASSES = ("animate-pulse", "ring-2", "ring-yellow-400", "bg-yellow-100")


def row_element_id(entity_id: int | str) -> str:
    return f"{ROW_ID_PREFIX}{entity_id}"


@dataclass(frozen=True)
class HighlightTarget:
    highlight_id: str | None = None
    page: int | None = None

    @classmethod
    def from_query(cls, params: Mapping[str, str | None]) -> "HighlightTarget":
        highlight_id = params.get("highlight") or None
        page = None
        raw_page = params.get("page")
        if raw_page:
            try:
                page = int(raw_page)
            except ValueError:
                page = None
            if page is not None and page < 1:
                page = None
        return cls(highlight_id=highlight_id, page=page)

    @classmethod
    def from_url(cls, url: str) -> "HighlightTarget":
        query = parse_qs(urlsplit(url).query)
        return cls.from_query({k: v[0] for k, v in query.items() if v})


class Element(Protocol):
    classes: set[str]

    def scroll_into_view(self, behavior: str = "smooth", block: str = "center") -> None: ...


ElementLookup = Callable[[str], "Element | None"]


class HighlightState(str, Enum):
    idle = "idle"
    searching = "searching"
    found = "found"
    highlighting = "highlighting"
    cleared = "cleared"
    exhausted = "exhausted"


class HighlightScroller:
    def __init__(
        self,
        lookup: ElementLookup,
        retry_interval: float | None = None,
        max_attempts: int | None = None,
        settle_delay: float | None = None,
        duration: float | None = None,
    ):
        self._lookup = lookup
        self.retry_interval = (
            settings.highlight_retry_interval_seconds if retry_interval is None else retry_interval
        )
        self.max_attempts = settings.highlight_max_attempts if max_attempts is None else max_attempts
        self.settle_delay = settings.highlight_settle_ms / 1000 if settle_delay is None else settle_delay
        self.duration = settings.highlight_duration_ms / 1000 if duration is None else duration

        self.state = HighlightState.idle
        self.highlight_id: str | None = None
        self.attempts = 0
        self._generation = 0
        self._task: asyncio.Task | None = None

    def activate(self, highlight_id: int | str | None) -> asyncio.Task | None:
        if highlight_id is None or highlight_id == "":
            return None

        self.cancel()
        self._generation += 1
        self.highlight_id = str(highlight_id)
        self.attempts = 0
        self.state = HighlightState.searching
        self._task = asyncio.ensure_future(self._run(self._generation, self.highlight_id))
        return self._task

    def cancel(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
            self.state = HighlightState.idle
        self._task = None

    async def _run(self, generation: int, highlight_id: str) -> bool:
        element_id = row_element_id(highlight_id)
        while self.attempts < self.max_attempts:
            self.attempts += 1
            element = self._lookup(element_id)
            if element is not None:
                await self._highlight(generation, element)
                return True
            if self.attempts < self.max_attempts:
                await asyncio.sleep(self.retry_interval)

        self.state = HighlightState.exhausted
        logger.debug("Row %s not rendered after %d attempts", element_id, self.attempts)
        return False

    async def _highlight(self, generation: int, element: Element):
        self.state = HighlightState.found
        # Let the table finish switching pages before scrolling.
        await asyncio.sleep(self.settle_delay)
        if generation != self._generation:
            return

        element.scroll_into_view(behavior="smooth", block="center")
        element.classes.update(EMPHASIS_CLASSES)
        self.state = HighlightState.highlighting
        try:
            await asyncio.sleep(self.duration)
        finally:
            element.classes.difference_update(EMPHASIS_CLASSES)
        self.state = HighlightState.cleared

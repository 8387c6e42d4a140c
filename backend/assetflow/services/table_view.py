import asyncio
from dataclasses import dataclass, field
from typing import Any, Iterable

from assetflow.config import settings
from assetflow.services.highlight_service import HighlightScroller, HighlightTarget, row_element_id
from assetflow.utils.pagination import clamp_page, page_bounds, page_number, total_pages


@dataclass
class PaginationState:
    current_page: int
    page_size: int
    total_items: int


@dataclass
class RowElement:
    element_id: str
    item: dict[str, Any]
    classes: set[str] = field(default_factory=set)
    scroll_history: list[tuple[str, str]] = field(default_factory=list)

    def scroll_into_view(self, behavior: str = "smooth", block: str = "center") -> None:
        self.scroll_history.append((behavior, block))


def find_index(items: list[dict[str, Any]], entity_id: int | str) -> int | None:
    target = str(entity_id)
    for index, item in enumerate(items):
        if isinstance(item, dict) and str(item.get("id")) == target:
            return index
    return None


class TableView:
    """Paginated table of one entity collection.

    Rows on the current page are addressable by ``highlight-<id>`` so the
    scroller can find them. Data may arrive after the table is mounted; page
    selection for the highlight target is re-run whenever it does.
    """

    def __init__(
        self,
        page_size: int | None = None,
        search_key: str | None = None,
        scroller: HighlightScroller | None = None,
    ):
        self.page_size = page_size or settings.page_size
        self.search_key = search_key
        self.items: list[dict[str, Any]] = []
        self.is_loading = True
        self.current_page = 1
        self.filter_query = ""
        self.target = HighlightTarget()
        self._rows: dict[str, RowElement] = {}
        self.scroller = scroller or HighlightScroller(self.get_element_by_id)

    # --- data ---

    def load(self, items: Iterable[dict[str, Any]]):
        self.items = list(items)
        self.is_loading = False
        self._select_page()
        self._render()

    def apply_target(self, target: HighlightTarget):
        self.target = target
        self._select_page()
        self._render()

    def mount(self, target: HighlightTarget) -> asyncio.Task | None:
        self.apply_target(target)
        return self.scroller.activate(target.highlight_id)

    def unmount(self):
        self.scroller.cancel()

    def _select_page(self):
        if self.target.page is not None:
            self.current_page = self.target.page
        elif self.target.highlight_id is not None:
            index = find_index(self.items, self.target.highlight_id)
            if index is not None:
                self.current_page = page_number(index, self.page_size)

    # --- filtering / paging ---

    def set_filter(self, text: str):
        self.filter_query = text
        self.current_page = 1
        self._render()

    def go_to_page(self, page: int):
        self.current_page = clamp_page(page, len(self.filtered_items), self.page_size)
        self._render()

    @property
    def filtered_items(self) -> list[dict[str, Any]]:
        if not self.search_key or not self.filter_query:
            return self.items
        q = self.filter_query.lower()
        return [
            item for item in self.items
            if isinstance(item, dict) and q in str(item.get(self.search_key)).lower()
        ]

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.filtered_items), self.page_size)

    @property
    def pagination(self) -> PaginationState:
        return PaginationState(
            current_page=self.current_page,
            page_size=self.page_size,
            total_items=len(self.filtered_items),
        )

    def visible_items(self) -> list[dict[str, Any]]:
        if self.is_loading:
            return []
        start, end = page_bounds(self.current_page, self.page_size)
        return self.filtered_items[start:end]

    def summary(self) -> str | None:
        if self.is_loading or self.total_pages <= 1:
            return None
        total = len(self.filtered_items)
        start, end = page_bounds(self.current_page, self.page_size)
        return f"Showing {start + 1} to {min(end, total)} of {total} results"

    # --- rendered rows ---

    def _render(self):
        if not self.is_loading and self.items:
            self.current_page = clamp_page(self.current_page, len(self.filtered_items), self.page_size)
        # Rows that stay on screen keep their element, like a keyed re-render.
        previous, self._rows = self._rows, {}
        for index, item in enumerate(self.visible_items()):
            if not isinstance(item, dict):
                continue
            element_id = row_element_id(item.get("id") or index)
            element = previous.get(element_id) or RowElement(element_id=element_id, item=item)
            element.item = item
            self._rows[element_id] = element

    @property
    def rows(self) -> list[RowElement]:
        return list(self._rows.values())

    def get_element_by_id(self, element_id: str) -> RowElement | None:
        return self._rows.get(element_id)

from typing import Any

from pydantic import BaseModel

from assetflow.schemas.search import EntityType


class TableRow(BaseModel):
    element_id: str
    item: dict[str, Any]


class TablePageResponse(BaseModel):
    entity_type: EntityType
    current_page: int
    page_size: int
    total_items: int
    total_pages: int
    rows: list[TableRow]
    highlight_element_id: str | None
    summary: str | None


class LocateResponse(BaseModel):
    entity_type: EntityType
    id: int
    index: int
    page_number: int
    link: str

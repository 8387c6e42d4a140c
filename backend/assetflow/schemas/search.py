from enum import Enum

from pydantic import BaseModel


class EntityType(str, Enum):
    asset = "asset"
    movement = "movement"
    vendor = "vendor"
    costing = "costing"


class SearchResult(BaseModel):
    id: int
    title: str
    description: str
    entity_type: EntityType
    page_label: str  # "Assets", "Movements", "Vendors" or "Costings"
    page_number: int
    link: str
    rank: int  # 0 = searchable text starts with the query


class SearchResponse(BaseModel):
    results: list[SearchResult]
    total: int
    query: str


class PanelSnapshot(BaseModel):
    type: str = "panel"
    query: str
    open: bool
    loading: bool
    selected_index: int
    results: list[SearchResult]

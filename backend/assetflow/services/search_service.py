"""
Cross-entity search over the AssetFlow collections.
The four collections are fetched concurrently, filtered client-side by
case-insensitive substring, and ordered with prefix matches first.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from assetflow.config import settings
from assetflow.schemas.entities import Asset, CostingRecord, Movement, Vendor
from assetflow.schemas.search import EntityType, SearchResult
from assetflow.services.table_view import find_index
from assetflow.services.upstream_client import AssetFlowClient, UpstreamError
from assetflow.utils.pagination import page_number

logger = logging.getLogger("assetflow.search")

UNKNOWN_ASSET = "Unknown Asset"


@dataclass(frozen=True)
class SearchSource:
    entity_type: EntityType
    collection: str
    route: str
    page_label: str
    model: type[BaseModel]
    fields: Callable[[Any], tuple[str | None, ...]]
    search_text: Callable[[Any], str]
    title: Callable[[Any], str]
    description: Callable[[Any], str]
    table_search_key: str | None = None


def _name(ref) -> str | None:
    return ref.name if ref else None


def _text(*parts: str | None) -> str:
    return " ".join(p or "" for p in parts)


def _format_amount(value: float | None) -> str:
    if not value:
        return "0"
    return str(int(value)) if float(value).is_integer() else str(value)


SOURCES: tuple[SearchSource, ...] = (
    SearchSource(
        entity_type=EntityType.asset,
        collection="/atms",
        route="/assets",
        page_label="Assets",
        model=Asset,
        fields=lambda a: (a.name, a.serial_number, a.location, _name(a.vendor)),
        search_text=lambda a: _text(a.name, a.serial_number, a.location),
        title=lambda a: a.name or UNKNOWN_ASSET,
        description=lambda a: f"Serial: {a.serial_number or ''} | Location: {a.location or ''}",
        table_search_key="name",
    ),
    SearchSource(
        entity_type=EntityType.movement,
        collection="/movements",
        route="/movements",
        page_label="Movements",
        model=Movement,
        fields=lambda m: (_name(m.atm), m.from_location, m.to_location, m.docket_no),
        search_text=lambda m: _text(_name(m.atm), m.from_location, m.to_location),
        title=lambda m: _name(m.atm) or UNKNOWN_ASSET,
        description=lambda m: f"{m.from_location or ''} → {m.to_location or ''}",
        table_search_key="assetName",
    ),
    SearchSource(
        entity_type=EntityType.vendor,
        collection="/vendors",
        route="/vendors",
        page_label="Vendors",
        model=Vendor,
        fields=lambda v: (v.name, v.email, v.phone),
        search_text=lambda v: _text(v.name, v.email),
        title=lambda v: v.name or "",
        description=lambda v: f"{v.email or 'N/A'} | {v.status}",
    ),
    SearchSource(
        entity_type=EntityType.costing,
        collection="/costings",
        route="/costing",
        page_label="Costings",
        model=CostingRecord,
        fields=lambda c: (_name(c.atm), _name(c.vendor), c.billing_status),
        search_text=lambda c: _text(_name(c.atm), _name(c.vendor)),
        title=lambda c: _name(c.atm) or UNKNOWN_ASSET,
        description=lambda c: (
            f"Vendor: {_name(c.vendor) or 'N/A'} | Amount: ₹{_format_amount(c.final_amount)}"
        ),
    ),
)

SOURCES_BY_TYPE: dict[EntityType, SearchSource] = {s.entity_type: s for s in SOURCES}


def build_link(route: str, entity_id: int | str, page: int) -> str:
    return f"{route}?highlight={entity_id}&page={page}"


def match_collection(
    source: SearchSource,
    items: list[dict[str, Any]],
    query: str,
    page_size: int | None = None,
) -> list[SearchResult]:
    """Match ``items`` against ``query``, keeping each item's index in the unfiltered list."""
    size = page_size or settings.page_size
    q = query.strip().lower()
    if not q:
        return []

    results = []
    for index, raw in enumerate(items):
        try:
            entity = source.model.model_validate(raw)
        except ValidationError:
            logger.debug("Skipping malformed %s at index %d", source.entity_type.value, index)
            continue
        if not any(f and q in f.lower() for f in source.fields(entity)):
            continue
        page = page_number(index, size)
        results.append(
            SearchResult(
                id=entity.id,
                title=source.title(entity),
                description=source.description(entity),
                entity_type=source.entity_type,
                page_label=source.page_label,
                page_number=page,
                link=build_link(source.route, entity.id, page),
                rank=0 if source.search_text(entity).lower().startswith(q) else 1,
            )
        )
    return results


def rank_results(results: list[SearchResult]) -> list[SearchResult]:
    # sorted() is stable: ties keep source order, then collection order
    return sorted(results, key=lambda r: r.rank)


async def fetch_source(client: AssetFlowClient, source: SearchSource, token: str | None = None) -> list[dict]:
    try:
        return await client.fetch_collection(source.collection, token=token)
    except UpstreamError as exc:
        logger.warning("Search source %s unavailable: %s", source.entity_type.value, exc)
        return []


async def execute_search(
    client: AssetFlowClient,
    query: str,
    token: str | None = None,
    page_size: int | None = None,
) -> list[SearchResult]:
    if not query.strip():
        return []

    collections = await asyncio.gather(
        *(fetch_source(client, source, token) for source in SOURCES)
    )

    results: list[SearchResult] = []
    for source, items in zip(SOURCES, collections):
        results.extend(match_collection(source, items, query, page_size))
    return rank_results(results)


async def locate_entity(
    client: AssetFlowClient,
    entity_type: EntityType,
    entity_id: int,
    token: str | None = None,
    page_size: int | None = None,
) -> dict:
    """Resolve the deep link for one entity. Raises UpstreamError or LookupError."""
    source = SOURCES_BY_TYPE[entity_type]
    items = await client.fetch_collection(source.collection, token=token)
    index = find_index(items, entity_id)
    if index is None:
        raise LookupError(f"{entity_type.value} {entity_id} not found")
    page = page_number(index, page_size or settings.page_size)
    return {
        "entity_type": entity_type,
        "id": entity_id,
        "index": index,
        "page_number": page,
        "link": build_link(source.route, entity_id, page),
    }

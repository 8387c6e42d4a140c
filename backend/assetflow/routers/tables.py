from fastapi import APIRouter, Depends, HTTPException, Query

from assetflow.dependencies import get_upstream_client, require_bearer_token
from assetflow.schemas.search import EntityType
from assetflow.schemas.table import TablePageResponse, TableRow
from assetflow.services.highlight_service import HighlightTarget, row_element_id
from assetflow.services.search_service import SOURCES_BY_TYPE
from assetflow.services.table_view import TableView
from assetflow.services.upstream_client import AssetFlowClient, UpstreamError

router = APIRouter(
    prefix="/tables",
    tags=["tables"],
    dependencies=[Depends(require_bearer_token)],
)


@router.get("/{entity_type}", response_model=TablePageResponse)
async def get_table_page(
    entity_type: EntityType,
    highlight: str | None = Query(None),
    page: str | None = Query(None),  # malformed values are ignored, not rejected
    q: str = Query(""),
    token: str = Depends(require_bearer_token),
    client: AssetFlowClient = Depends(get_upstream_client),
):
    source = SOURCES_BY_TYPE[entity_type]
    try:
        items = await client.fetch_collection(source.collection, token=token)
    except UpstreamError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    table = TableView(search_key=source.table_search_key)
    table.load(items)
    if q:
        table.set_filter(q)
    table.apply_target(HighlightTarget.from_query({"highlight": highlight, "page": page}))

    highlight_element_id = None
    if table.target.highlight_id is not None:
        element_id = row_element_id(table.target.highlight_id)
        if table.get_element_by_id(element_id) is not None:
            highlight_element_id = element_id

    pagination = table.pagination
    return TablePageResponse(
        entity_type=entity_type,
        current_page=pagination.current_page,
        page_size=pagination.page_size,
        total_items=pagination.total_items,
        total_pages=table.total_pages,
        rows=[TableRow(element_id=row.element_id, item=row.item) for row in table.rows],
        highlight_element_id=highlight_element_id,
        summary=table.summary(),
    )

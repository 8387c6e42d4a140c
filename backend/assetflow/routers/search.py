from fastapi import APIRouter, Depends, Query

from assetflow.dependencies import get_upstream_client, require_bearer_token
from assetflow.schemas.search import SearchResponse
from assetflow.services.search_service import execute_search
from assetflow.services.upstream_client import AssetFlowClient

router = APIRouter(
    prefix="/search",
    tags=["search"],
    dependencies=[Depends(require_bearer_token)],
)


@router.get("", response_model=SearchResponse)
async def search(
    q: str = Query(..., min_length=1),
    token: str = Depends(require_bearer_token),
    client: AssetFlowClient = Depends(get_upstream_client),
):
    # Unavailable collections contribute no results instead of failing the request.
    results = await execute_search(client, q, token=token)
    return SearchResponse(results=results, total=len(results), query=q)

from fastapi import APIRouter, Depends, HTTPException

from assetflow.dependencies import get_upstream_client, require_bearer_token
from assetflow.schemas.search import EntityType
from assetflow.schemas.table import LocateResponse
from assetflow.services.search_service import locate_entity
from assetflow.services.upstream_client import AssetFlowClient, UpstreamError

router = APIRouter(
    prefix="/locate",
    tags=["locate"],
    dependencies=[Depends(require_bearer_token)],
)


@router.get("/{entity_type}/{entity_id}", response_model=LocateResponse)
async def locate(
    entity_type: EntityType,
    entity_id: int,
    token: str = Depends(require_bearer_token),
    client: AssetFlowClient = Depends(get_upstream_client),
):
    try:
        found = await locate_entity(client, entity_type, entity_id, token=token)
    except UpstreamError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return LocateResponse(**found)

from fastapi import Header, HTTPException
from starlette.requests import HTTPConnection

from assetflow.services.upstream_client import AssetFlowClient


async def require_bearer_token(authorization: str = Header(...)):
    # The gateway does not verify the token itself; the AssetFlow API does.
    if not authorization.startswith("Bearer ") or not authorization[7:].strip():
        raise HTTPException(status_code=401, detail="Missing bearer token")
    return authorization[7:].strip()


def get_upstream_client(connection: HTTPConnection) -> AssetFlowClient:
    return connection.app.state.upstream_client

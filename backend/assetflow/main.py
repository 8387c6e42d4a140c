import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from assetflow.config import settings
from assetflow.routers import locate, search, session, tables
from assetflow.services.upstream_client import AssetFlowClient

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("assetflow")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.upstream_client = AssetFlowClient()
    logger.info("Using AssetFlow API at %s", settings.api_base_url)
    yield
    await app.state.upstream_client.aclose()


app = FastAPI(
    title="AssetFlow Search Gateway",
    description="Cross-entity search and deep-link highlighting for the AssetFlow dashboard",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(search.router, prefix=settings.api_prefix)
app.include_router(session.router, prefix=settings.api_prefix)
app.include_router(tables.router, prefix=settings.api_prefix)
app.include_router(locate.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}

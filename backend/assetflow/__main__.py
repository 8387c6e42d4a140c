import uvicorn

from assetflow.config import settings

uvicorn.run("assetflow.main:app", host=settings.host, port=settings.port)

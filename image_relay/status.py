"""
Standalone status app.

Deployed separately from the relay so a platform can confirm a rollout
without touching the upload path:

    uvicorn image_relay.status:app
"""

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse


STATUS_MESSAGE = "deployed"


def create_status_app() -> FastAPI:
    """Application factory for the status deployment."""
    app = FastAPI(title="Image Relay Status", docs_url=None, redoc_url=None)

    @app.get("/", response_class=PlainTextResponse)
    async def status() -> str:
        return STATUS_MESSAGE

    return app


app = create_status_app()

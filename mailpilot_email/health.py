"""FastAPI health endpoint reporting mailbox connectivity."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from mailpilot_connector import MailboxInterface


def create_health_app(mailbox: MailboxInterface) -> FastAPI:
    """Build a minimal FastAPI app with a ``/health`` route.

    Each request opens and closes a mailbox session through
    ``mailbox.test_connection()``.  The process is reported healthy even
    when the mailbox is unreachable; ``email_connection`` says which.
    """
    app = FastAPI(title="mailpilot health", docs_url=None, redoc_url=None)

    @app.get("/health")
    async def health() -> JSONResponse:
        connected = await mailbox.test_connection()
        return JSONResponse(
            content={
                "status": "ok",
                "email_connection": "connected" if connected else "disconnected",
            },
        )

    return app

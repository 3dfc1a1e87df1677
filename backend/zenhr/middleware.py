from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI

    from zenhr.config import Settings

# Verbs used by the leave command surface.
_ALLOWED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Allow the browser front end to call the command API."""
    app.add_middleware(
        CORSMiddleware,  # ty: ignore[invalid-argument-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=_ALLOWED_METHODS,
        allow_headers=["Content-Type"],
    )

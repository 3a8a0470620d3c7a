import os
from typing import List, Optional, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from meterbill import __version__
from meterbill.api import api_router

DEFAULT_CORS_ORIGINS = ["http://localhost:3002", "http://127.0.0.1:3002"]

# generation metadata read by a browser front end on another origin
EXPOSED_HEADERS = ["Content-Disposition", "X-Merchant-Count", "X-Page-Count"]


def _parse_cors_origins(env_value: str | None) -> List[str]:
    """
    CORS_ALLOW_ORIGINS="http://a.example,http://b.example"; empty -> defaults.
    """
    if not env_value:
        return list(DEFAULT_CORS_ORIGINS)
    parts = [p.strip() for p in env_value.split(",")]
    return [p for p in parts if p]


def create_app(cors_origins: Optional[Sequence[str]] = None) -> FastAPI:
    """Upload form, generation endpoint and /health (Docker healthcheck)."""
    application = FastAPI(title="meterbill", version=__version__)

    @application.get("/health", include_in_schema=False)
    def health() -> PlainTextResponse:
        return PlainTextResponse("ok")

    if cors_origins is None:
        cors_origins = _parse_cors_origins(os.getenv("CORS_ALLOW_ORIGINS"))

    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=EXPOSED_HEADERS,
    )
    application.include_router(api_router)
    return application


app = create_app()

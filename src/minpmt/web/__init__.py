"""min-pmt web server: JSON ticket API and a read-only board page."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from minpmt.config import ProjectConfig

TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"


def create_app(
    root: str | Path = ".",
    config: ProjectConfig | None = None,
) -> FastAPI:
    """Create the FastAPI app serving one project's tickets.

    Args:
        root: Project root directory.
        config: Project configuration (loaded from ``root`` if None).

    Returns:
        Configured FastAPI application.
    """
    from minpmt.config import load_config
    from minpmt.storage import TicketStore

    resolved_config = config if config is not None else load_config(root)

    app = FastAPI(
        title="min-pmt",
        docs_url=None,
        redoc_url=None,
    )

    app.state.store = TicketStore(resolved_config, root=Path(root))
    app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    from starlette.middleware.base import BaseHTTPMiddleware

    class SecurityHeadersMiddleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next: Any) -> Response:
            response = await call_next(request)
            response.headers["X-Content-Type-Options"] = "nosniff"
            response.headers["X-Frame-Options"] = "DENY"
            response.headers["Content-Security-Policy"] = (
                "default-src 'none'; style-src 'self' 'unsafe-inline'"
            )
            return response

    app.add_middleware(SecurityHeadersMiddleware)

    from starlette.staticfiles import StaticFiles

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    from minpmt.web.routes import router

    app.include_router(router)

    return app


__all__ = ["create_app"]

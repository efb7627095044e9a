"""FastAPI application entry point."""

import uvicorn
from fastapi import FastAPI

from .config import AppConfig, load_config
from .dependencies import include_routers
from .logging import configure_logging


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    configure_logging()
    cfg = config or load_config()
    app = FastAPI(title="Tubely")

    @app.get("/healthz", tags=["health"])
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    include_routers(app, cfg)
    return app


def run() -> None:
    """Serve the app with uvicorn on the configured port."""
    cfg = load_config()
    uvicorn.run(create_app(cfg), host="0.0.0.0", port=cfg.settings.port)

import logging
from datetime import datetime

from fastapi import FastAPI, Request

from . import __version__
from .core.config import Config
from .core.middleware import global_exception_handler, log_requests

logger = logging.getLogger(__name__)


def create_app(config: Config) -> FastAPI:
    """Build the HTTP application around an already parsed configuration.

    The record is stored on `app.state.config`; handlers read it from there
    instead of reloading it.
    """
    app = FastAPI(title="Metasearch", version=__version__)
    app.state.config = config

    if config.logging:
        @app.middleware("http")
        async def _log_requests(request, call_next):
            return await log_requests(request, call_next)

    @app.exception_handler(Exception)
    async def _global_exception_handler(request, exc):
        return await global_exception_handler(request, exc)

    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:
    @app.get("/")
    async def index(request: Request):
        """Return the page style the front end renders with."""
        style = request.app.state.config.style
        return {
            "theme": style.theme,
            "colorscheme": style.colorscheme,
            "animation": style.animation,
        }

    @app.get("/health")
    async def health_check(request: Request):
        """Basic health report with the settings that shape search results."""
        config: Config = request.app.state.config
        return {
            "status": "healthy",
            "service": "metasearch",
            "timestamp": datetime.now().isoformat(),
            "safe_search": config.safe_search,
            "upstream_search_engines": config.enabled_engines(),
        }

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import Settings, get_settings
from routes.leaderboard import router as leaderboard_router
from routes.sessions import router as sessions_router
from routes.signalling_ws import router as signalling_router

logger = logging.getLogger(__name__)


def health() -> dict[str, str]:
    return {"status": "ok"}


def create_app(settings: Settings) -> FastAPI:
    app = FastAPI(title="Snake Versus API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_api_route("/health", health, methods=["GET"])
    app.include_router(sessions_router, prefix="/api")
    app.include_router(leaderboard_router, prefix="/api")
    app.include_router(signalling_router)

    # Mounted last so API and /ws routes win over the catch-all static mount.
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
        logger.info("Serving static files from %s", settings.static_dir)
    else:
        logger.info("Static dir %s not found; serving API only", settings.static_dir)
    return app


app = create_app(get_settings())

import logging
from typing import Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from bookswap.auth.providers import IdentityProvider, build_identity_providers
from bookswap.auth.resolver import SessionResolver
from bookswap.config import Settings
from bookswap.database import build_engine, init_db
from bookswap.logging_config import configure_logging
from bookswap.routes import auth as auth_routes
from bookswap.routes import swap as swap_routes

logger = logging.getLogger(__name__)

APP_NAME = "Book Swap API"


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    identity_providers: Optional[Dict[str, IdentityProvider]] = None,
) -> FastAPI:
    """
    Build the application and everything it depends on.

    The engine, identity providers and session resolver live on app.state;
    request dependencies read them from there.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    if engine is None:
        engine = build_engine(settings.database_url, echo=settings.sql_echo)
    if identity_providers is None:
        identity_providers = build_identity_providers(settings)

    app = FastAPI(title=APP_NAME)
    app.state.settings = settings
    app.state.engine = engine
    app.state.identity_providers = identity_providers
    app.state.session_resolver = SessionResolver.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(swap_routes.router)
    app.include_router(auth_routes.router)

    @app.on_event("startup")
    def on_startup():
        init_db(engine)
        logger.info(f"{APP_NAME} started; identity providers: {', '.join(sorted(identity_providers)) or 'none'}")

    @app.get("/api/health")
    def health_check():
        return {"app_name": APP_NAME, "status": "healthy", "identity_providers": sorted(identity_providers)}

    return app


app = create_app()

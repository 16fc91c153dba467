import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from farmlink.api import crops, products, users
from farmlink.auth.jwt import router as auth_router
from farmlink.auth.security import PasswordHasher, SessionManager
from farmlink.config import Config, load_config
from farmlink.db.init import init_db
from farmlink.db.session import build_engine, build_session_factory
from farmlink.errors import register_exception_handlers
from farmlink.log import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize database
    init_db(app.state.engine)
    logger.info("Connected to database %s", app.state.engine.url.render_as_string(hide_password=True))
    yield
    app.state.engine.dispose()


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Build the API with its own engine, hasher and session manager."""
    config = config or load_config()
    configure_logging(config.LOG_LEVEL)

    app = FastAPI(
        title="farmlink",
        description="Backend API for the FarmLink farmer and vendor marketplace",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.engine = build_engine(config.DATABASE_URL)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.hasher = PasswordHasher(rounds=config.BCRYPT_ROUNDS)
    app.state.sessions = SessionManager(config.JWT_SECRET, ttl_hours=config.TOKEN_TTL_HOURS)

    # CORS configuration
    origins = config.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials="*" not in origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    # Include routers
    app.include_router(auth_router, prefix="/api", tags=["auth"])
    app.include_router(users.router, prefix="/api", tags=["users"])
    app.include_router(crops.router, prefix="/api", tags=["crops"])
    app.include_router(products.router, prefix="/api", tags=["products"])

    @app.get("/")
    def read_root():
        return {"success": True, "message": "Welcome to FarmLink API"}

    return app


def run() -> None:
    config = load_config()
    uvicorn.run(create_app(config), host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()

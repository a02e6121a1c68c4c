"""
Users API Server
Create/read/update/delete over a single users collection
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS, API_PREFIX
from database.connection import init_database, close_database
from database.user_store import UserStore
from api.routes import health, users
from utils.error_handling import setup_error_handling

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager; connects only when no store was injected"""
    owns_store = getattr(app.state, "user_store", None) is None
    if owns_store:
        app.state.user_store = await init_database()
    yield
    if owns_store:
        await close_database(app.state.user_store)
        app.state.user_store = None


def create_app(store: Optional[UserStore] = None) -> FastAPI:
    """Build the application, optionally around an already constructed store"""
    app = FastAPI(
        title="Users API",
        description="Backend API for managing user records",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.user_store = store

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials="*" not in ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Setup centralized error handling
    setup_error_handling(app)

    # Include API routes
    app.include_router(health.router, tags=["Health"])
    app.include_router(users.router, prefix=f"{API_PREFIX}/users", tags=["Users"])

    return app


# FastAPI app instance is exported for use by uvicorn
app = create_app()

"""
Items CRUD front-end
Server-rendered items page plus a JSON API over one document collection
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database.documents import DocumentStore
from database.factory import open_document_store
from api.routes import health, items, items_api
from utils.error_handling import setup_error_handling

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store client once at startup unless one was injected, close it on shutdown"""
    owns_store = getattr(app.state, "store", None) is None
    if owns_store:
        app.state.store = await open_document_store(
            settings.STORE_BACKEND,
            settings.DATABASE_URL,
            min_size=settings.DB_POOL_MIN_SIZE,
            max_size=settings.DB_POOL_MAX_SIZE,
            command_timeout=settings.DB_COMMAND_TIMEOUT
        )
    yield
    if owns_store:
        await app.state.store.close()
        app.state.store = None


def create_app(store: Optional[DocumentStore] = None, items_collection: Optional[str] = None) -> FastAPI:
    """
    Build the application

    Args:
        store: Store client to use; when None one is opened from settings at startup
        items_collection: Collection backing the items page (default: ITEMS_COLLECTION)
    """
    app = FastAPI(
        title="Items Backend",
        description="CRUD front-end over a document collection",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.store = store
    app.state.items_collection = items_collection or settings.ITEMS_COLLECTION

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    setup_error_handling(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(items.router, tags=["Items Page"])
    app.include_router(items_api.router, prefix="/api/items", tags=["Items"])

    return app


# FastAPI app instance is exported for use by uvicorn
app = create_app()

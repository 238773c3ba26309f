"""
Main application entry point for the Address Book API.

This module initializes the FastAPI application, configures logging and
CORS, installs the JSON error handlers, creates the database tables on
startup and includes routers for authentication, users and addresses.

Modules:
- FastAPI: Web framework
- CORSMiddleware: Middleware for handling CORS
- address_book.database: Database engine
- address_book.models: SQLAlchemy models
- address_book.auth: Registration and login router
- address_book.users: Users router
- address_book.addresses: Addresses router
- address_book.errors: Error taxonomy and handlers
- address_book.core: Application settings
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from address_book.database import engine
from address_book import models, addresses
from address_book.auth import router as auth_router
from address_book.users import router as users_router
from address_book.core import configure_logging, get_settings
from address_book.errors import register_exception_handlers

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan handler.

    Creates missing tables on startup (schema migrations are out of scope).
    """
    models.Base.metadata.create_all(bind=engine)
    logger.info("Address Book API started")
    yield


# Initialize FastAPI application
app = FastAPI(title="Address Book API", lifespan=lifespan)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers for application areas
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(addresses.router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """
    Root endpoint for the API.

    Returns a simple JSON message directing users to the Swagger UI.

    Returns:
        dict: JSON message with information about the API
    """
    return {"msg": "Address Book API. Visit /docs for Swagger UI"}


@app.get("/health")
def health():
    """Liveness probe."""
    return {"status": "ok"}

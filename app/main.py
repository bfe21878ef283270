# app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.api import api_router
from app.core.config import settings
from app.db.base_class import Base
from app.db.session import engine
from app.middleware import register_error_handlers
from app import models  # noqa: F401  registers every table on Base.metadata

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Registration lifecycle service starting up...")
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables checked and created if necessary.")
    yield
    logger.info("Registration lifecycle service shutting down...")


app = FastAPI(
    title="GlobalConnect Registration Lifecycle Microservice",
    version="1.0.0",
    description="""
        **Registration Lifecycle Service**

        Owns the per-user, per-event registration record and its admission workflow.

        ## Features

        * **Registration**: one registration per user and event, capped by event capacity
        * **Face Verification**: start / complete verification, capped attempts
        * **Ticket Issuance**: issue tickets once verification or an override allows it
        * **Admin Override**: manual verification with a recorded justification
        * **Check-in**: single check-in per verified registration
        * **Stats**: counts by status, verification outcome and tickets issued

        ## Authentication

        All endpoints except health checks require JWT authentication via the
        `Authorization: Bearer <token>` header. Update, delete and admin override
        require the admin role.
        """,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_error_handlers(app)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"status": "Registration Lifecycle Service is running"}

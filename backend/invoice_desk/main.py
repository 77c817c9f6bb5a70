import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoice_desk.config import settings
from invoice_desk.database import init_db

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the JSON store on startup."""
    logger.info("Starting Invoice Desk API...")

    # Create the data directory and seed missing documents
    app.state.store = init_db()

    logger.info("Invoice Desk API is ready (data dir: %s).", settings.data_dir)
    yield

    logger.info("Shutting down Invoice Desk API.")


app = FastAPI(
    title="Invoice Desk API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
from invoice_desk.api import business, customers, dashboard, invoices, settings as settings_api  # noqa: E402

app.include_router(business.router)
app.include_router(customers.router)
app.include_router(invoices.router)
app.include_router(settings_api.router)
app.include_router(dashboard.router)

"""
main.py
-------
Entry point for the Barrier Service HTTP API.

Responsibilities:
    - Own the database connection pool: open it at startup, close it at exit.
    - Create the schema on startup when INIT_SCHEMA is enabled.
    - Register the employee, deal and barrier routers and the error handlers.
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from config import API_HOST, API_PORT, DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN, INIT_SCHEMA
from db.connection import Database
from db.init_db import create_tables
from handlers.barrier_handler import router as barrier_router
from handlers.deal_handler import router as deal_router
from handlers.employee_handler import router as employee_router
from handlers.error_handler import register_error_handlers
from schemas.common import ErrorResponse
from utils.logger import get_logger

logger = get_logger(__name__)


def create_app(database: Optional[Database] = None, init_schema: bool = INIT_SCHEMA) -> FastAPI:
    """
    Build the application.

    Args:
        database: Database to serve from; one is built from config if omitted.
        init_schema: Create missing tables when the app starts.
    """
    database = database or Database(DATABASE_URL, DB_POOL_MIN, DB_POOL_MAX)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ── 1. Database setup ─────────────────────────────
        logger.info("Initializing database...")
        database.open()
        if init_schema:
            create_tables(database)
        logger.info("🚀 Barrier Service is ready.")

        yield

        # ── 2. Cleanup on shutdown ────────────────────────
        database.close()
        logger.info("Barrier Service stopped.")

    app = FastAPI(title="Barrier Service", lifespan=lifespan)
    app.state.database = database

    register_error_handlers(app)
    errors = {code: {"model": ErrorResponse} for code in (400, 404, 409, 500)}
    app.include_router(employee_router, prefix="/employee", tags=["Employee"], responses=errors)
    app.include_router(deal_router, prefix="/deal", tags=["Deal"], responses=errors)
    app.include_router(barrier_router, prefix="/barrier", tags=["Barrier"], responses=errors)

    @app.get("/ping")
    def ping():
        return {"message": "pong"}

    return app


def main() -> None:
    """Run the API with uvicorn."""
    logger.info(f"Starting Barrier Service on {API_HOST}:{API_PORT}")
    uvicorn.run(create_app(), host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    main()

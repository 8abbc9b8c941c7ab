"""User Service — FastAPI application for managing users stored in MongoDB."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from userdb.errors import OperationError
from userdb.logsetup import setup_logging
from userdb.settings import StoreSettings, get_app_settings, get_store_settings
from userdb.store import MongoConnector

from user_service.pipeline import operation_error_handler, request_validation_handler
from user_service.routes import router


def create_app(
    store_settings: Optional[StoreSettings] = None,
    connector: Optional[MongoConnector] = None,
) -> FastAPI:
    store_settings = store_settings or get_store_settings()
    connector = connector or MongoConnector(store_settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        # an unreachable database aborts startup
        await connector.connect()
        try:
            yield
        finally:
            connector.close()

    app = FastAPI(title="User Service", version="0.1.0", lifespan=lifespan)
    app.state.connector = connector
    app.state.request_timeout = store_settings.request_timeout_seconds
    app.add_exception_handler(OperationError, operation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(router)
    return app


app = create_app()


def main() -> None:
    settings = get_app_settings()
    setup_logging(settings.log_level, settings.log_format)
    # log_config=None keeps the dictConfig above instead of uvicorn's defaults
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)

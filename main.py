"""
ERP Core - Customers, Products, Orders & Inventory
FastAPI Application Entry Point
"""
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError

from erp.core import settings, engine, Base
from erp.core.errors import ErpError, ErrorKind, status_code_for
from erp.api.router import api_router
import erp.models  # noqa: F401  registers tables on Base.metadata

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("erp")


# Lifespan for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create tables if not exist
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.APP_NAME} starting on port {settings.APP_PORT}")

    yield

    logger.info(f"{settings.APP_NAME} shutting down")


def error_body(kind: ErrorKind, detail: str, errors=None) -> dict:
    return {"detail": detail, "kind": kind.value, "errors": errors or []}


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Customers, Products, Orders & Inventory Ledger",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ErpError)
    async def erp_error_handler(request: Request, exc: ErpError):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.kind, exc.message, jsonable_encoder(exc.errors)),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status_code_for(ErrorKind.VALIDATION),
            content=error_body(ErrorKind.VALIDATION, "Validation failed", jsonable_encoder(exc.errors())),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(f"Database error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status_code_for(ErrorKind.UNKNOWN),
            content=error_body(ErrorKind.UNKNOWN, "Internal server error"),
        )

    # Include routers
    app.include_router(api_router, prefix="/api")

    # Health check
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "app": settings.APP_NAME}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.DEBUG
    )

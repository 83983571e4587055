# -*- coding: utf-8 -*-
"""
Main FastAPI application for the barcode inventory tracker.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from stockscan.config import Config
from stockscan.database import init_db
from stockscan.routes import products_fastapi

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)

logger = logging.getLogger("stockscan")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # exits the process if the database is unreachable
    init_db()
    yield


docs_url = "/docs" if Config.ENVIRONMENT != "production" else None
redoc_url = "/redoc" if Config.ENVIRONMENT != "production" else None

app = FastAPI(
    title="StockScan API",
    description="Barcode inventory tracker: products, stock levels and statistics",
    version="1.0.0",
    docs_url=docs_url,
    redoc_url=redoc_url,
    openapi_url="/openapi.json" if Config.ENVIRONMENT != "production" else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = round((time.time() - start_time) * 1000, 2)
    logger.info(f"{request.method} {request.url.path} - Status: {response.status_code} - {duration}ms")
    return response


# --- Error envelope: every failure is {"error": message} ---

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


def _format_validation_errors(errors):
    messages = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location)
        messages.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))
    return "; ".join(messages)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = _format_validation_errors(exc.errors())
    logger.warning(f"Validation error on {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


app.include_router(products_fastapi.router, prefix="/api")


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "StockScan API - barcode inventory tracker",
        "documentation": docs_url,
        "endpoints": [
            {"lookup": "/api/products/barcode/{barcode}"},
            {"products": "/api/products"},
            {"stock": "/api/products/{barcode}/stock"},
            {"categories": "/api/categories"},
            {"stats": "/api/stats"},
        ],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=Config.HOST, port=Config.PORT)

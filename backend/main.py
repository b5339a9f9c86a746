"""
Baroque Print API — FastAPI Application

Takes a product choice and an image, charges through Stripe Checkout, and
on payment confirmation places the print order with Prodigi.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from domain.enums import ErrorKind
from routes import checkout, health, products, webhook

# ── Logging ─────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: validate settings. Nothing to tear down."""
    settings.validate_production_settings()
    logger.info(
        f"Baroque Print API starting (environment={settings.environment}, "
        f"image strategy={settings.image_strategy})"
    )

    yield  # app runs here

    logger.info("Shutting down")


# ── App Factory ─────────────────────────────────────────────────────

app = FastAPI(
    title="Baroque Print API",
    description="Stripe Checkout in front of Prodigi print-on-demand fulfillment",
    version="2.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_origin_regex=settings.cors_origin_regex or None,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routes ──────────────────────────────────────────────────────────

app.include_router(health.router)
app.include_router(products.router)
app.include_router(checkout.router)
app.include_router(webhook.router)


# ── Exception Handlers ──────────────────────────────────────────────


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """
    Catch-all for unhandled exceptions.

    Never return raw exception details to clients. The full traceback is
    logged server-side for debugging.
    """
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "code": ErrorKind.INTERNAL_ERROR.value},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """
    Render errors as {"error": <message>, "code": <kind>}.

    Keeps the original HTTP status code.
    """
    # DomainError (a subclass of HTTPException) carries its own kind
    kind = getattr(exc, "kind", None)
    if kind is not None and hasattr(exc, "message"):
        if exc.status_code >= 500:
            logger.error(f"{request.url.path} failed [{kind.value}]: {exc.message} {exc.details}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "code": kind.value},
        )

    # Regular HTTPException
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message, "code": "http_error"},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Malformed JSON bodies are client errors like any other: 400 with {error}."""
    logger.info(f"Rejected malformed request on {request.url.path} ({len(exc.errors())} errors)")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "code": ErrorKind.INVALID_REQUEST.value},
    )


# ── Entrypoint ──────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level="info")

import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from masecurite.core.constants import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_ALLOW_ORIGINS,
    SERVICE_NAME,
    SERVICE_VERSION,
)

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s"
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="MaSécurité API",
    version=SERVICE_VERSION,
)

from masecurite.middleware.request_logging import RequestLoggingMiddleware
app.add_middleware(RequestLoggingMiddleware)

# CORS is added last so it wraps everything and answers preflights first
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=False,
    allow_methods=CORS_ALLOW_METHODS,
    allow_headers=CORS_ALLOW_HEADERS,
)


from fastapi.exceptions import RequestValidationError

from masecurite.routes.breach import breach_validation_error_handler
from masecurite.routes.breach import router as breach_router
from masecurite.routes.diagnostics import router as diagnostics_router
from masecurite.routes.articles import router as articles_router
from masecurite.routes.contact import router as contact_router

app.add_exception_handler(RequestValidationError, breach_validation_error_handler)

app.include_router(breach_router)
app.include_router(diagnostics_router)
app.include_router(articles_router)
app.include_router(contact_router)


@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }

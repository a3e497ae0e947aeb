# marketplace/core/middleware.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import time
import logging

from marketplace.config.settings import settings

logger = logging.getLogger(__name__)

# Prefixes served only to one account role
ROLE_SCOPED_PREFIXES = {
    "/api/v1/delivery": "delivery",
    "/api/v1/vendor": "vendor",
}

PROCESS_TIME_HEADER = "X-Process-Time"


def request_scope(path: str) -> str:
    """Role a path is scoped to, or 'public'"""
    for prefix, role in ROLE_SCOPED_PREFIXES.items():
        if path == prefix or path.startswith(prefix + "/"):
            return role
    return "public"


def setup_middleware(app: FastAPI):
    """CORS for the web and mobile clients plus per-request access logging"""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[PROCESS_TIME_HEADER],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()

        response = await call_next(request)

        elapsed = time.perf_counter() - started
        response.headers[PROCESS_TIME_HEADER] = f"{elapsed:.4f}"

        scope = request_scope(request.url.path)
        message = f"{request.method} {request.url.path} [{scope}] - Status: {response.status_code} - Time: {elapsed:.4f}s"
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code in (401, 409) and scope != "public":
            # Rejected role access or a lost assignment race
            logger.warning(message)
        else:
            logger.info(message)

        return response

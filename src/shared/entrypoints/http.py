"""HTTP plumbing shared by the service entrypoints."""
import json
import logging
from typing import Any, Optional

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config

logger = logging.getLogger(__name__)


def configure_logging():
    logging.basicConfig(
        level=getattr(logging, config.get_log_level(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def require_cases_token(x_cases_token: Optional[str] = Header(default=None)):
    """Shared-secret check for write routes; open access when CASES_TOKEN is unset."""
    token = config.get_cases_token()
    if token and x_cases_token != token:
        logger.warning("Rejected request with missing or wrong x-cases-token header")
        raise HTTPException(status_code=401, detail="unauthorized")


async def read_json(request: Request, error: str = "invalid_json") -> Any:
    """Parse the request body as JSON or fail with a 400."""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail=error)


def install_error_handlers(app: FastAPI):
    """Render HTTP errors as {"error": <code>} bodies."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

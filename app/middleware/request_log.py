"""Intake request logging middleware: appends feedback submissions to JSONL."""

import json
import logging
import time
from pathlib import Path

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

LOG_FILE_NAME = "intake_log.jsonl"


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Logs timing and status of POST / requests to a JSONL file."""

    def __init__(self, app: ASGIApp, log_dir: str | Path = "logs") -> None:
        super().__init__(app)
        self.log_dir = Path(log_dir)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path != "/" or request.method != "POST":
            response: Response = await call_next(request)
            return response

        start = time.monotonic()
        response = await call_next(request)
        elapsed = time.monotonic() - start

        entry = {
            "timestamp": time.time(),
            "path": "/",
            "method": "POST",
            "elapsed_seconds": round(elapsed, 3),
            "status_code": response.status_code,
        }
        logger.info(
            "POST / -> %d in %.3fs", response.status_code, entry["elapsed_seconds"]
        )

        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            with open(self.log_dir / LOG_FILE_NAME, "a") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError:
            logger.warning("Could not write intake log entry")

        return response

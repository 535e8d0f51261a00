import json
import time
import uuid
from typing import Callable, List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from trasporti.core.constants import LOG_EXCLUDE_PATHS
from trasporti.core.logging import get_logger

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Request/response logging with request id and timing headers.
    """

    def __init__(self, app, exclude_paths: Optional[List[str]] = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or LOG_EXCLUDE_PATHS

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self._should_skip_logging(request.url.path):
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"ERROR: {request.method} {request.url.path} failed after "
                f"{process_time:.4f}s [{request_id}]: {type(e).__name__}: {str(e)}"
            )
            raise

        process_time = time.time() - start_time
        self._log_response(request, response, request_id, process_time)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(round(process_time, 4))
        return response

    def _should_skip_logging(self, path: str) -> bool:
        """Check if path should skip detailed logging"""
        return any(path.startswith(excluded) for excluded in self.exclude_paths)

    def _log_response(self, request: Request, response: Response, request_id: str, process_time: float):
        response_data = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "status_code": response.status_code,
            "process_time": round(process_time, 4),
            "client_ip": self._get_client_ip(request),
        }

        if response.status_code >= 500:
            logger.error(f"RESPONSE: {json.dumps(response_data, default=str)}")
        elif response.status_code >= 400:
            logger.warning(f"RESPONSE: {json.dumps(response_data, default=str)}")
        else:
            logger.info(f"RESPONSE: {json.dumps(response_data, default=str)}")

    def _get_client_ip(self, request: Request) -> str:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

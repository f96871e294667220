import time
import uuid
from typing import Awaitable, Callable, Optional

from loguru import logger as _root_logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from intake.logging_config import get_logger

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for the intake API, tagging every request with an id.

    The id is taken from the incoming ``X-Request-ID`` header when present,
    echoed on the response, and attached to every record logged while the
    request is handled.
    """

    def __init__(self, app, logger: Optional[object] = None):
        super().__init__(app)
        self.logger = (logger or get_logger(name="intake.http")).bind(component="http")

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        client = request.client.host if request.client else "unknown"
        start_time = time.perf_counter()

        with _root_logger.contextualize(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception:
                duration_ms = (time.perf_counter() - start_time) * 1000
                self.logger.exception(
                    "{method} {path} -> unhandled error ({duration:.2f} ms) [client={client}]",
                    method=request.method,
                    path=request.url.path,
                    duration=duration_ms,
                    client=client,
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            self.logger.info(
                "{method} {path} -> {status} ({duration:.2f} ms) [client={client}]",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration=duration_ms,
                client=client,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

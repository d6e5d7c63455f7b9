"""
Core middleware.
"""

import time
import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from apps.core.logging import bind_contextvars, clear_contextvars, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware:
    """
    Binds a trace id and HTTP attributes to every log line of a request.

    The id comes from X-Request-ID when a proxy set one, otherwise a new
    UUID is generated. It is echoed back on the response.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        clear_contextvars()
        bind_contextvars(
            request_id=request_id,
            **{
                "http.method": request.method,
                "http.url_details.path": request.path,
            },
        )
        started = time.perf_counter()

        try:
            response = self.get_response(request)
            logger.info(
                "request_completed",
                duration_ms=(time.perf_counter() - started) * 1000,
                **{"http.status_code": response.status_code},
            )
            response[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_contextvars()

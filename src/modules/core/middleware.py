import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware:
    """Bind a per-request correlation ID into the structlog context.

    The ID comes from the ``X-Request-ID`` header, or a fresh UUID4 when the
    client sends none, and is echoed back on the response so a caller can
    match its request to the service's log lines.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        log = logger.bind(method=request.method, path=request.path)
        log.info("http.request_started")

        response = self.get_response(request)

        log.info("http.request_finished", status_code=response.status_code)

        response[REQUEST_ID_HEADER] = cid
        return response

"""HTTP middleware: per-request log context and timing."""
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from core.logging import api_logger, bind_context, clear_context, generate_correlation_id

log = api_logger()

CORRELATION_HEADER = "X-Correlation-ID"
LEARNER_HEADER = "X-Learner-ID"
MAX_LEARNER_ID_LENGTH = 64


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind correlation and learner ids for the request, log its outcome.

    The correlation id is taken from the caller when present and echoed back
    on the response either way.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        clear_context()
        bind_context(correlation_id=correlation_id, method=request.method, path=request.url.path)
        if learner_id := request.headers.get(LEARNER_HEADER):
            bind_context(learner_id=learner_id[:MAX_LEARNER_ID_LENGTH])

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception("request_failed", duration_ms=_elapsed_ms(start))
            raise
        else:
            response.headers[CORRELATION_HEADER] = correlation_id
            status = response.status_code
            if status >= 500:
                log.error("request_completed", status=status, duration_ms=_elapsed_ms(start))
            elif status >= 400:
                log.warning("request_completed", status=status, duration_ms=_elapsed_ms(start))
            else:
                log.info("request_completed", status=status, duration_ms=_elapsed_ms(start))
            return response
        finally:
            clear_context()


class SlowRequestMiddleware(BaseHTTPMiddleware):
    """Warn when a request takes longer than ``slow_threshold_ms``.

    Scheduling is in-memory work over one snapshot, so anything slow usually
    means an oversized vocabulary payload.
    """

    def __init__(self, app, slow_threshold_ms: float = 250):
        super().__init__(app)
        self.slow_threshold_ms = slow_threshold_ms

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = _elapsed_ms(start)
        if duration_ms > self.slow_threshold_ms:
            log.warning(
                "slow_request",
                duration_ms=duration_ms,
                threshold_ms=self.slow_threshold_ms,
                content_length=request.headers.get("content-length"),
            )
        return response

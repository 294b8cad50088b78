"""Request tracing middleware.

Opens one server span per request and records request count and latency.
Spans and metrics are labelled with the matched route template
(e.g. "/{short_code}") rather than the raw path, so every short code
shares one series.
"""

import time

from fastapi import Request
from opentelemetry.trace import SpanKind, Status, StatusCode
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from shortlink.core.telemetry import get_meter, get_tracer

tracer = get_tracer("shortlink.middleware")
meter = get_meter("shortlink.middleware")

request_counter = meter.create_counter(
    name="shortlink.http.requests",
    description="Number of HTTP requests",
    unit="1",
)
request_duration = meter.create_histogram(
    name="shortlink.http.duration",
    description="Duration of HTTP requests",
    unit="ms",
)


def route_template(request: Request) -> str:
    """Return the matched route path, or "unmatched" when routing failed."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class TracingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        method = request.method

        with tracer.start_as_current_span(
            f"{method} {request.url.path}",
            kind=SpanKind.SERVER,
            attributes={
                "http.method": method,
                "http.target": request.url.path,
                "http.user_agent": request.headers.get("user-agent", ""),
            },
        ) as span:
            response = await call_next(request)

            route = route_template(request)
            span.update_name(f"{method} {route}")
            span.set_attribute("http.route", route)
            span.set_attribute("http.status_code", response.status_code)
            if response.status_code >= 500:
                span.set_status(Status(StatusCode.ERROR))

            labels = {
                "http.method": method,
                "http.route": route,
                "http.status_code": response.status_code,
            }
            request_counter.add(1, labels)
            request_duration.record((time.perf_counter() - start_time) * 1000, labels)

            return response

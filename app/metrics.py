from __future__ import annotations

import time
from typing import Callable

from fastapi import Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, Info, generate_latest

from app.core.settings import S

METRICS_ENABLED = S.metrics_enabled

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
LOGIN_SUCCESSES = Counter(
    "login_success_total",
    "Total successful logins",
)
LOGIN_FAILURES = Counter(
    "login_failure_total",
    "Total failed logins",
)
REGISTRATIONS = Counter(
    "registrations_total",
    "Total registered users",
)
NOTIFICATIONS_CREATED = Counter(
    "notifications_created_total",
    "Notifications recorded, by type",
    ["type"],
)
UPLOADS = Counter(
    "uploads_total",
    "Files relayed to object storage, by outcome",
    ["outcome"],
)
REQUEST_ERRORS = Counter(
    "http_request_errors_total",
    "Total HTTP requests resulting in server errors",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
IN_PROGRESS = Gauge(
    "http_requests_in_progress",
    "In-progress HTTP requests",
    ["method"],
)
UPTIME_SECONDS = Gauge(
    "app_uptime_seconds",
    "Application uptime in seconds",
)
APP_INFO = Info(
    "app",
    "Application metadata",
)

_START_TIME = time.monotonic()
UNMATCHED_PATH = "<unmatched>"


def _route_path(request: Request) -> str:
    route = request.scope.get("route")
    if route and getattr(route, "path", None):
        return route.path
    # Unmatched URLs all share one label.
    return UNMATCHED_PATH


def record_login(success: bool) -> None:
    if success:
        LOGIN_SUCCESSES.inc()
    else:
        LOGIN_FAILURES.inc()


def record_registration() -> None:
    REGISTRATIONS.inc()


def record_notification(kind: str) -> None:
    NOTIFICATIONS_CREATED.labels(type=kind).inc()


def record_upload(outcome: str) -> None:
    UPLOADS.labels(outcome=outcome).inc()


async def metrics_middleware(request: Request, call_next: Callable[[Request], Response]) -> Response:
    method = request.method
    start = time.perf_counter()
    status_code = 500
    # The route is only resolved after call_next, so in-progress is per method.
    IN_PROGRESS.labels(method=method).inc()
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        IN_PROGRESS.labels(method=method).dec()
        path = _route_path(request)
        REQUEST_LATENCY.labels(method=method, path=path).observe(time.perf_counter() - start)
        REQUEST_COUNT.labels(method=method, path=path, status=str(status_code)).inc()
        if status_code >= 500:
            REQUEST_ERRORS.labels(method=method, path=path, status=str(status_code)).inc()


def set_app_info(name: str, version: str) -> None:
    APP_INFO.info({"name": name, "version": version, "environment": S.app_env})


def metrics_endpoint() -> Response:
    UPTIME_SECONDS.set(time.monotonic() - _START_TIME)
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

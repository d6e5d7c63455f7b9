"""
Tests for RequestContextMiddleware.
"""

import structlog
from django.http import HttpRequest, HttpResponse
from django.test import RequestFactory

from apps.core.middleware import REQUEST_ID_HEADER, RequestContextMiddleware


class TestRequestContextMiddleware:
    """Tests for per-request log context."""

    def test_echoes_incoming_request_id(self) -> None:
        request = RequestFactory().get("/api/v1/health", HTTP_X_REQUEST_ID="req-abc")
        middleware = RequestContextMiddleware(lambda r: HttpResponse("ok"))

        response = middleware(request)

        assert response[REQUEST_ID_HEADER] == "req-abc"

    def test_generates_request_id_when_missing(self) -> None:
        request = RequestFactory().get("/api/v1/health")
        middleware = RequestContextMiddleware(lambda r: HttpResponse("ok"))

        response = middleware(request)

        assert len(response[REQUEST_ID_HEADER]) == 36

    def test_binds_context_during_request_and_clears_after(self) -> None:
        seen: dict = {}

        def view(request: HttpRequest) -> HttpResponse:
            seen.update(structlog.contextvars.get_contextvars())
            return HttpResponse("ok")

        request = RequestFactory().post("/webhooks/stripe/", HTTP_X_REQUEST_ID="req-1")
        RequestContextMiddleware(view)(request)

        assert seen["request_id"] == "req-1"
        assert seen["http.method"] == "POST"
        assert seen["http.url_details.path"] == "/webhooks/stripe/"
        assert structlog.contextvars.get_contextvars() == {}

"""Tests for access logging, request logging and telemetry helpers."""

import pytest
from loguru import logger
from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio, TraceIdRatioBased

from shortlink.core import telemetry
from shortlink.core.config import settings
from shortlink.core.telemetry import create_sampler, parse_resource_attributes, setup_telemetry, shutdown_telemetry
from shortlink.core.url_logger import URL_ACCESS_EVENT


@pytest.fixture
def access_records():
    """Collect url_access log records emitted during a test."""
    records = []
    sink_id = logger.add(
        lambda message: records.append(message.record),
        filter=lambda record: record["extra"].get("event_type") == URL_ACCESS_EVENT,
        level="INFO",
    )
    yield records
    logger.remove(sink_id)


@pytest.mark.api
class TestAccessLog:

    def test_hit_is_logged(self, client, url_repository, access_records):
        url_repository.put("https://a.com", "abc1234")

        client.get("/abc1234", follow_redirects=False, headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"})

        assert len(access_records) == 1
        extra = access_records[0]["extra"]
        assert extra["short_code"] == "abc1234"
        assert extra["status_code"] == 301
        assert extra["ip"] == "203.0.113.9"
        assert "https://a.com" in access_records[0]["message"]

    def test_miss_is_logged(self, client, access_records):
        client.get("/nothere", follow_redirects=False)

        assert [r["extra"]["status_code"] for r in access_records] == [404]
        assert access_records[0]["message"] == "nothere not found"

    def test_api_calls_are_not_access_events(self, client, access_records):
        client.post("/api/shorten", json={"url": "https://a.com"})

        assert access_records == []


class TestTelemetryHelpers:

    def test_parse_resource_attributes(self):
        assert parse_resource_attributes("service.namespace=shortlink, team=links,broken") == {
            "service.namespace": "shortlink",
            "team": "links",
        }
        assert parse_resource_attributes("") == {}

    def test_create_sampler(self):
        assert isinstance(create_sampler("parentbased_traceidratio", 0.5), ParentBasedTraceIdRatio)
        assert isinstance(create_sampler("TraceIdRatio", 1), TraceIdRatioBased)
        assert isinstance(create_sampler("unknown", 1.0), TraceIdRatioBased)

    def test_disabled_telemetry_installs_nothing(self, monkeypatch):
        monkeypatch.setattr(telemetry, "_providers", None)

        assert setup_telemetry() == (None, None)

    def test_shutdown_without_setup_builds_nothing(self, monkeypatch):
        monkeypatch.setattr(telemetry, "_providers", None)
        monkeypatch.setattr(settings, "OTEL_ENABLED", True)

        def fail():
            raise AssertionError("exporters must not be created on shutdown")

        monkeypatch.setattr(telemetry, "_create_exporters", fail)

        shutdown_telemetry()

        assert telemetry._providers is None

    def test_shutdown_flushes_installed_providers(self, monkeypatch):
        calls = []

        class FakeProvider:
            def __init__(self, name):
                self.name = name

            def shutdown(self):
                calls.append(self.name)

        monkeypatch.setattr(telemetry, "_providers", (FakeProvider("tracer"), FakeProvider("meter")))

        shutdown_telemetry()
        shutdown_telemetry()

        assert calls == ["tracer", "meter"]
        assert telemetry._providers is None

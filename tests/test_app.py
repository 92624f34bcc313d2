"""Tests for app factory, configuration, logging and health probes."""

from __future__ import annotations

import json
import logging

import pytest

from config import ProductionConfig, TestingConfig, config_by_name


class TestConfig:
    def test_config_names(self):
        assert set(config_by_name) == {"development", "production", "testing"}

    def test_testing_config(self, app):
        assert app.config["TESTING"] is True
        assert app.config["ORACLE_MAX_ATTEMPTS"] == 1
        assert app.config["PORT"] == 3000

    def test_production_rejects_default_secret(self, monkeypatch):
        monkeypatch.setattr(ProductionConfig, "SECRET_KEY", "dev-key-change-in-production")
        with pytest.raises(RuntimeError, match="SECRET_KEY"):
            ProductionConfig.validate()

    def test_production_warns_without_oracle_key(self, monkeypatch):
        monkeypatch.setattr(ProductionConfig, "SECRET_KEY", "s3cret")
        monkeypatch.setattr(ProductionConfig, "GEMINI_API_KEY", "")
        with pytest.warns(UserWarning, match="GEMINI_API_KEY"):
            ProductionConfig.validate()

    def test_testing_has_no_oracle_key(self):
        assert TestingConfig.GEMINI_API_KEY == ""


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "ok"

    def test_ready(self, client):
        assert client.get("/ready").get_json() == {"status": "ready"}

    def test_live(self, client):
        assert client.get("/live").status_code == 200


class TestLogging:
    def test_request_id_header(self, client):
        resp = client.get("/health")
        assert len(resp.headers["X-Request-ID"]) == 12

    def test_request_id_propagated(self, client):
        resp = client.get("/health", headers={"X-Request-ID": "abc123"})
        assert resp.headers["X-Request-ID"] == "abc123"

    def test_oversized_request_id_replaced(self, client):
        resp = client.get("/health", headers={"X-Request-ID": "a" * 65})
        assert len(resp.headers["X-Request-ID"]) == 12

    def test_request_id_with_unsafe_characters_replaced(self, client):
        resp = client.get("/health", headers={"X-Request-ID": "abc def;<script>"})
        rid = resp.headers["X-Request-ID"]
        assert rid != "abc def;<script>"
        assert len(rid) == 12
        assert rid.isalnum()

    def test_access_log_line(self, client, caplog):
        with caplog.at_level(logging.INFO):
            client.get("/api/stats")
        assert any("GET /api/stats 200" in r.getMessage() for r in caplog.records)

    def test_json_formatter(self):
        from logging_config import JSONFormatter

        record = logging.LogRecord("somatext", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.request_id = "r1"
        entry = json.loads(JSONFormatter().format(record))
        assert entry["message"] == "hello world"
        assert entry["request_id"] == "r1"
        assert entry["level"] == "INFO"

    def test_request_id_filter_outside_request(self):
        from logging_config import RequestIdFilter

        record = logging.LogRecord("somatext", logging.INFO, __file__, 1, "msg", (), None)
        assert RequestIdFilter().filter(record)
        assert record.request_id == "-"


class TestSecurityHeaders:
    def test_headers_present(self, client):
        resp = client.get("/health")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Frame-Options"] == "SAMEORIGIN"

"""Tests for API request/response capture."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from board_extract.monday.api_logging import (
    LoggingTransport,
    _reset_sequence,
    _sanitize_headers,
    clear_logs,
    create_logging_client,
    get_log_directory,
    is_api_logging_enabled,
    log_request,
    log_response,
)
from board_extract.monday.client import MondayClient

API_URL = "https://api.monday.test/v2"


@pytest.fixture
def log_env(tmp_path: Path):
    """Enable capture into a temporary directory."""
    _reset_sequence()
    env = {"BOARD_EXTRACT_LOG_API": "1", "BOARD_EXTRACT_LOG_API_DIR": str(tmp_path)}
    with patch.dict(os.environ, env):
        yield tmp_path


class TestApiLoggingEnabled:
    def test_disabled_by_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert is_api_logging_enabled() is False

    @pytest.mark.parametrize("value", ["1", "true", "yes", "ON"])
    def test_enabled_values(self, value):
        with patch.dict(os.environ, {"BOARD_EXTRACT_LOG_API": value}):
            assert is_api_logging_enabled() is True

    @pytest.mark.parametrize("value", ["0", "false", "off", ""])
    def test_disabled_values(self, value):
        with patch.dict(os.environ, {"BOARD_EXTRACT_LOG_API": value}):
            assert is_api_logging_enabled() is False


class TestLogDirectory:
    def test_default_directory(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_log_directory() == Path.home() / ".board-extract" / "api_logs"

    def test_custom_directory(self):
        with patch.dict(os.environ, {"BOARD_EXTRACT_LOG_API_DIR": "/tmp/board_logs"}):
            assert get_log_directory() == Path("/tmp/board_logs")


class TestSanitizeHeaders:
    def test_masks_raw_token(self):
        """monday.com tokens have no scheme and are masked entirely."""
        result = _sanitize_headers({"Authorization": "eyJhbGciOiJIUzI1NiJ9.payload"})
        assert result["Authorization"] == "[REDACTED]"

    def test_keeps_scheme(self):
        result = _sanitize_headers({"Authorization": "Bearer abc123"})
        assert result["Authorization"] == "Bearer [REDACTED]"

    def test_case_insensitive_matching(self):
        result = _sanitize_headers({"AUTHORIZATION": "secret"})
        assert result["AUTHORIZATION"] == "[REDACTED]"

    def test_preserves_other_headers(self):
        headers = {"Content-Type": "application/json", "API-Version": "2024-01"}
        assert _sanitize_headers(headers) == headers


class TestLogRequestResponse:
    def test_logs_graphql_request(self, log_env):
        request = httpx.Request(
            "POST",
            API_URL,
            headers={"Authorization": "token123"},
            json={"query": "{ boards { name } }", "variables": {"boardIds": ["1"]}},
        )
        log_request(request)

        data = json.loads((log_env / "0001_request.json").read_text())
        assert data["sequence"] == 1
        assert data["method"] == "POST"
        assert data["url"] == API_URL
        assert data["headers"]["authorization"] == "[REDACTED]"
        assert data["body"]["variables"] == {"boardIds": ["1"]}
        assert request.extensions["log_sequence"] == 1

    def test_response_reuses_request_sequence(self, log_env):
        request = httpx.Request("POST", API_URL)
        request.extensions["log_sequence"] = 7
        response = httpx.Response(200, json={"data": {"boards": []}}, request=request)

        log_response(response)

        data = json.loads((log_env / "0007_response.json").read_text())
        assert data["status_code"] == 200
        assert data["body"] == {"data": {"boards": []}}

    def test_non_json_response_logged_as_text(self, log_env):
        request = httpx.Request("POST", API_URL)
        request.extensions["log_sequence"] = 1
        log_response(httpx.Response(502, text="Bad Gateway", request=request))

        data = json.loads((log_env / "0001_response.json").read_text())
        assert data["body"] == "Bad Gateway"

    def test_sequence_increments(self, log_env):
        for _ in range(3):
            log_request(httpx.Request("POST", API_URL))

        names = sorted(p.name for p in log_env.glob("*_request.json"))
        assert names == ["0001_request.json", "0002_request.json", "0003_request.json"]

    def test_no_log_when_disabled(self, tmp_path):
        env = {"BOARD_EXTRACT_LOG_API": "0", "BOARD_EXTRACT_LOG_API_DIR": str(tmp_path)}
        with patch.dict(os.environ, env):
            log_request(httpx.Request("POST", API_URL))

        assert list(tmp_path.glob("*.json")) == []


class TestLoggingTransport:
    def test_client_traffic_is_captured(self, log_env):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"data": {"ok": True}}))

        with MondayClient(API_URL, "secret", transport=transport) as client:
            assert isinstance(client._client._transport, LoggingTransport)
            client.execute("{ me { id } }", {"a": 1})

        request = json.loads((log_env / "0001_request.json").read_text())
        response = json.loads((log_env / "0001_response.json").read_text())
        assert request["body"] == {"query": "{ me { id } }", "variables": {"a": 1}}
        assert request["headers"]["authorization"] == "[REDACTED]"
        assert response["body"] == {"data": {"ok": True}}

    def test_write_failure_does_not_break_request(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")
        env = {"BOARD_EXTRACT_LOG_API": "1", "BOARD_EXTRACT_LOG_API_DIR": str(blocker)}
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"data": {}}))

        with patch.dict(os.environ, env):
            with MondayClient(API_URL, "secret", transport=transport) as client:
                assert client.execute("{ me { id } }") == {"data": {}}


class TestCreateLoggingClient:
    def test_plain_client_when_disabled(self):
        with patch.dict(os.environ, {"BOARD_EXTRACT_LOG_API": "0"}):
            client = create_logging_client()
            assert not isinstance(client._transport, LoggingTransport)
            client.close()

    def test_logging_client_when_enabled(self):
        with patch.dict(os.environ, {"BOARD_EXTRACT_LOG_API": "1"}):
            client = create_logging_client()
            assert isinstance(client._transport, LoggingTransport)
            client.close()

    def test_passes_headers(self):
        with patch.dict(os.environ, {"BOARD_EXTRACT_LOG_API": "0"}):
            client = create_logging_client(headers={"Authorization": "abc"})
            assert client.headers.get("Authorization") == "abc"
            client.close()


class TestClearLogs:
    def test_clears_all_json_files(self, tmp_path):
        for name in ("0001_request.json", "0001_response.json", "0002_request.json"):
            (tmp_path / name).write_text("{}")

        with patch.dict(os.environ, {"BOARD_EXTRACT_LOG_API_DIR": str(tmp_path)}):
            assert clear_logs() == 3

        assert list(tmp_path.glob("*.json")) == []

    def test_returns_zero_for_missing_dir(self, tmp_path):
        with patch.dict(os.environ, {"BOARD_EXTRACT_LOG_API_DIR": str(tmp_path / "missing")}):
            assert clear_logs() == 0

"""Tests for the duo-http CLI."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from duo_http import __version__
from duo_http.cli.main import app
from duo_http.core.config import reset_settings
from duo_http.core.exceptions import APIConnectionError, ProtocolError

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Run every CLI test without DUO_* variables or a .env file."""
    for name in ("DUO_HOST", "DUO_IKEY", "DUO_SKEY", "DUO_DEBUG", "DUO_SIG_VERSION"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield monkeypatch
    reset_settings()


@pytest.fixture
def configured(clean_env: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    clean_env.setenv("DUO_HOST", "api-test.duosecurity.com")
    clean_env.setenv("DUO_IKEY", "DITESTIKEY0000000000")
    clean_env.setenv("DUO_SKEY", "top-secret-skey")
    return clean_env


class TestGlobalOptions:
    """Tests for the main callback."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_debug_flag(self) -> None:
        result = runner.invoke(app, ["--debug", "info"])

        assert result.exit_code == 0
        assert "Debug mode: True" in result.output

    def test_info_without_credentials(self) -> None:
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "Credentials not configured" in result.output

    def test_info_hides_secret(self, configured: pytest.MonkeyPatch) -> None:
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "api-test.duosecurity.com" in result.output
        assert "DITESTIK..." in result.output
        assert "top-secret-skey" not in result.output


class TestConfigShow:
    """Tests for `config show`."""

    def test_show_configured(self, configured: pytest.MonkeyPatch) -> None:
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "Duo credentials configured" in result.output
        assert "top-secret-skey" not in result.output

    def test_show_unconfigured(self) -> None:
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "export DUO_HOST" in result.output


class TestApiCanon:
    """Tests for `api canon`."""

    def test_canonical_string(self) -> None:
        result = runner.invoke(
            app,
            [
                "api", "canon", "get", "/auth/v2/check",
                "--host", "API-Test.duosecurity.com",
                "--date", "D",
                "-p", "b=2", "-p", "a=x y",
            ],
        )

        assert result.exit_code == 0
        assert "D\nGET\napi-test.duosecurity.com\n/auth/v2/check\na=x%20y&b=2" in result.output

    def test_version_1_has_no_date(self) -> None:
        result = runner.invoke(
            app,
            ["api", "canon", "POST", "/p", "--host", "h", "--date", "SOMEDATE", "--sig-version", "1"],
        )

        assert result.exit_code == 0
        assert "SOMEDATE" not in result.output
        assert "POST\nh\n/p\n" in result.output

    def test_host_from_settings(self, configured: pytest.MonkeyPatch) -> None:
        result = runner.invoke(app, ["api", "canon", "GET", "/p", "--date", "D"])

        assert result.exit_code == 0
        assert "api-test.duosecurity.com" in result.output

    def test_missing_host(self) -> None:
        result = runner.invoke(app, ["api", "canon", "GET", "/p"])

        assert result.exit_code == 1

    def test_invalid_param(self) -> None:
        result = runner.invoke(app, ["api", "canon", "GET", "/p", "--host", "h", "-p", "novalue"])

        assert result.exit_code == 1
        assert "expected name=value" in result.output


class TestApiCall:
    """Tests for `api call`."""

    def test_requires_credentials(self) -> None:
        result = runner.invoke(app, ["api", "call", "GET", "/auth/v2/check"])

        assert result.exit_code == 1
        assert "not configured" in result.output

    def test_prints_response(self) -> None:
        client = MagicMock()
        client.new_request.return_value.execute_request.return_value = {"time": 1357020061}

        with patch("duo_http.cli.commands.api.get_client", return_value=client):
            result = runner.invoke(app, ["api", "call", "GET", "/auth/v2/check", "-p", "a=1"])

        assert result.exit_code == 0
        assert '"time": 1357020061' in result.output
        client.new_request.assert_called_once_with("GET", "/auth/v2/check", {"a": "1"})
        client.close.assert_called_once()

    def test_raw_prints_envelope(self) -> None:
        client = MagicMock()
        client.new_request.return_value.execute_json_request.return_value = {"stat": "OK", "response": 1}

        with patch("duo_http.cli.commands.api.get_client", return_value=client):
            result = runner.invoke(app, ["api", "call", "GET", "/auth/v2/check", "--raw"])

        assert result.exit_code == 0
        assert '"stat": "OK"' in result.output

    def test_protocol_error(self) -> None:
        client = MagicMock()
        client.new_request.return_value.execute_request.side_effect = ProtocolError(40002, "bad")

        with patch("duo_http.cli.commands.api.get_client", return_value=client):
            result = runner.invoke(app, ["api", "call", "GET", "/p"])

        assert result.exit_code == 1
        assert "Duo error code (40002): bad" in result.output

    def test_transport_error(self) -> None:
        client = MagicMock()
        client.new_request.return_value.execute_request.side_effect = APIConnectionError("refused")

        with patch("duo_http.cli.commands.api.get_client", return_value=client):
            result = runner.invoke(app, ["api", "call", "GET", "/p"])

        assert result.exit_code == 1
        assert "Request failed" in result.output

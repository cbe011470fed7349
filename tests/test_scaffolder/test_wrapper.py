"""Tests for the Gradle wrapper jar helpers (composables.scaffolder.wrapper)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from composables.errors import WrapperDownloadError
from composables.scaffolder.wrapper import WRAPPER_JAR, fetch_wrapper_jar, unbundled_name

URL = "https://example.invalid/gradle-wrapper.jar"
JAR_BYTES = b"PK\x03\x04wrapper-classes"


def _client(get: AsyncMock) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.get = get
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


def _response(content: bytes) -> MagicMock:
    mock_response = MagicMock()
    mock_response.content = content
    mock_response.raise_for_status = MagicMock()
    return mock_response


class TestUnbundledName:
    @pytest.mark.unit
    def test_bundled_jar_renamed(self):
        assert unbundled_name("gradle-wrapper.jarX") == "gradle-wrapper.jar"

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["gradle-wrapper.jar", "gradlew", "Main.kt", "jarX"])
    def test_other_names_unchanged(self, name: str):
        assert unbundled_name(name) == name


class TestFetchWrapperJar:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success_writes_jar(self, tmp_path: Path):
        mock_client = _client(AsyncMock(return_value=_response(JAR_BYTES)))
        destination = tmp_path / WRAPPER_JAR

        with patch("httpx.AsyncClient", return_value=mock_client) as client_cls:
            written = await fetch_wrapper_jar(URL, destination)

        assert written == destination
        assert destination.read_bytes() == JAR_BYTES
        mock_client.get.assert_awaited_once_with(URL)
        assert client_cls.call_args.kwargs["follow_redirects"] is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_html_payload_rejected(self, tmp_path: Path):
        mock_client = _client(AsyncMock(return_value=_response(b"<html>moved</html>")))
        destination = tmp_path / WRAPPER_JAR

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(WrapperDownloadError, match="did not return a jar"):
                await fetch_wrapper_jar(URL, destination)
        assert not destination.exists()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self, tmp_path: Path):
        mock_client = _client(AsyncMock(side_effect=httpx.TimeoutException("timed out")))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(WrapperDownloadError, match="timed out"):
                await fetch_wrapper_jar(URL, tmp_path / WRAPPER_JAR, timeout=5.0)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_http_error_status(self, tmp_path: Path):
        mock_resp = MagicMock()
        mock_resp.status_code = 404
        mock_response = MagicMock()
        mock_response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError("Not Found", request=MagicMock(), response=mock_resp)
        )
        mock_client = _client(AsyncMock(return_value=mock_response))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(WrapperDownloadError, match="HTTP 404"):
                await fetch_wrapper_jar(URL, tmp_path / WRAPPER_JAR)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connection_error(self, tmp_path: Path):
        mock_client = _client(AsyncMock(side_effect=httpx.ConnectError("Connection refused")))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(WrapperDownloadError, match="Cannot download"):
                await fetch_wrapper_jar(URL, tmp_path / WRAPPER_JAR)

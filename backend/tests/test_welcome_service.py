"""
CivicMap Backend — Welcome Service Unit Tests
==============================================

What:  Tests for reading the welcome text file.
How:   Real files in pytest's tmp_path.
"""

import pytest

from civicmap.exceptions import FileStorageError, NotFoundError
from civicmap.services.welcome_service import WelcomeService


class TestGetWelcomeText:

    @pytest.mark.asyncio
    async def test_returns_contents_verbatim(self, tmp_path):
        path = tmp_path / "welcome.txt"
        path.write_text("  歡迎使用停車地圖\nline two\n", encoding="utf-8")

        text = await WelcomeService(str(path)).get_welcome_text()

        assert text == "  歡迎使用停車地圖\nline two\n"

    @pytest.mark.asyncio
    async def test_crlf_line_endings_preserved(self, tmp_path):
        path = tmp_path / "welcome.txt"
        path.write_bytes(b"line one\r\nline two\r\n")

        text = await WelcomeService(str(path)).get_welcome_text()

        assert text == "line one\r\nline two\r\n"

    @pytest.mark.asyncio
    async def test_reads_current_contents_each_call(self, tmp_path):
        path = tmp_path / "welcome.txt"
        path.write_text("first", encoding="utf-8")
        service = WelcomeService(str(path))

        assert await service.get_welcome_text() == "first"
        path.write_text("second", encoding="utf-8")
        assert await service.get_welcome_text() == "second"

    @pytest.mark.asyncio
    async def test_missing_file_raises_not_found(self, tmp_path):
        with pytest.raises(NotFoundError):
            await WelcomeService(str(tmp_path / "missing.txt")).get_welcome_text()

    @pytest.mark.asyncio
    async def test_directory_raises_file_storage_error(self, tmp_path):
        with pytest.raises(FileStorageError):
            await WelcomeService(str(tmp_path)).get_welcome_text()

    @pytest.mark.asyncio
    async def test_invalid_utf8_raises_file_storage_error(self, tmp_path):
        path = tmp_path / "welcome.txt"
        path.write_bytes(b"\xff\xfe\xfa broken")

        with pytest.raises(FileStorageError) as exc_info:
            await WelcomeService(str(path)).get_welcome_text()

        assert exc_info.value.context["error_type"] == "UnicodeDecodeError"

    @pytest.mark.asyncio
    async def test_defaults_to_configured_path(self, welcome_file):
        text = await WelcomeService().get_welcome_text()

        assert text == "Welcome to the parking map!\n"

"""
CivicMap Backend — Welcome Message Reader
==========================================

What:  Reads the welcome text file for GET /welcome.
How:   Async read (aiofiles) of the whole file, UTF-8, on every call. The
       contents are returned verbatim, CRLF line endings included
       (newline=""), and never cached.
Who:   Called by the /welcome route handler.

Path resolution:
    WELCOME_FILE_PATH (default "welcome.txt"). Relative paths resolve against
    the process working directory at call time.

Error mapping:
    file does not exist            → NotFoundError     (404)
    any other OS or decode failure → FileStorageError  (500)
"""

import logging
from pathlib import Path
from typing import Optional

import aiofiles

from civicmap.config import settings
from civicmap.exceptions import FileStorageError, NotFoundError

logger = logging.getLogger(__name__)


class WelcomeService:
    """Static resource reader for the welcome message."""

    def __init__(self, file_path: Optional[str] = None):
        # None → follow settings at call time
        self._file_path = file_path

    @property
    def file_path(self) -> Path:
        return Path(self._file_path or settings.welcome_file_path)

    async def get_welcome_text(self) -> str:
        """
        Return the full contents of the welcome file.

        Raises:
            NotFoundError: The file does not exist.
            FileStorageError: The file exists but could not be read.
        """
        path = self.file_path
        try:
            async with aiofiles.open(path, "r", encoding="utf-8", newline="") as f:
                text = await f.read()
        except FileNotFoundError:
            logger.warning("Welcome file not found: %s", path)
            raise NotFoundError(resource="welcome message file")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read welcome file %s: %s", path, str(e))
            raise FileStorageError(
                message="An error occurred while reading the welcome message",
                context={"error_type": type(e).__name__, "error": str(e)},
            ) from e

        logger.debug("Read welcome file %s (%d chars)", path, len(text))
        return text


# ── Singleton Instance ────────────────────────────────────────────────────
welcome_service = WelcomeService()

"""Storage abstraction for wiki pages."""

import asyncio
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from flatwiki.core.models import FRONT_PAGE, Page

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """A page could not be written or removed."""


class PageNotFoundError(StorageError):
    """The page has no backing file."""


class FrontPageProtectedError(StorageError):
    """The front page cannot be deleted."""


class InvalidTitleError(StorageError):
    """The title would map to a path outside the store root."""


class Storage(ABC):
    """Abstract base class for page storage."""

    @abstractmethod
    async def get_page(self, title: str) -> Page | None:
        """Get a page by title. Returns None if it cannot be read."""
        ...

    @abstractmethod
    async def save_page(self, title: str, body: bytes) -> Page:
        """Replace the page body, creating the page if needed."""
        ...

    @abstractmethod
    async def delete_page(self, title: str) -> None:
        """Delete a page. The front page is refused."""
        ...

    @abstractmethod
    async def list_titles(self) -> list[str]:
        """List all page titles. Never raises."""
        ...

    @abstractmethod
    async def page_exists(self, title: str) -> bool:
        """Check if a page exists."""
        ...


class FileStorage(Storage):
    """File-based storage implementation.

    Each page is one file, ``<base_path>/<title>.txt``, holding the raw body
    bytes and nothing else. Writes go to a temporary file in the same
    directory which is then renamed over the target, so readers see either
    the old body or the new one.
    """

    SUFFIX = ".txt"
    FILE_MODE = 0o600

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _title_to_filename(self, title: str) -> str:
        return title + self.SUFFIX

    def _filename_to_title(self, filename: str) -> str:
        return filename.removesuffix(self.SUFFIX)

    def _get_path(self, title: str) -> Path:
        """Get full path for a page, refusing titles that name another directory."""
        if not title or title in (".", "..") or any(c in title for c in "/\\\0"):
            raise InvalidTitleError(f"Invalid page title: {title!r}")
        return self.base_path / self._title_to_filename(title)

    # Helpers below touch the disk and run in worker threads.

    def _check_contained(self, path: Path) -> None:
        if path.resolve().parent != self.base_path.resolve():
            raise InvalidTitleError(f"Page file escapes the store: {path.name!r}")

    def _read(self, path: Path) -> bytes | None:
        try:
            self._check_contained(path)
            return path.read_bytes()
        except (OSError, InvalidTitleError):
            return None

    def _write(self, path: Path, body: bytes) -> None:
        self._check_contained(path)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.base_path, prefix=".", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(body)
            os.chmod(tmp_name, self.FILE_MODE)
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    def _unlink(self, path: Path) -> None:
        self._check_contained(path)
        path.unlink()

    def _is_file(self, path: Path) -> bool:
        try:
            self._check_contained(path)
        except InvalidTitleError:
            return False
        return path.is_file()

    def _scan(self) -> list[str]:
        try:
            names = os.listdir(self.base_path)
        except OSError as e:
            logger.warning("Cannot list pages in %s: %s", self.base_path, e)
            return []
        return sorted(
            self._filename_to_title(name)
            for name in names
            if name.endswith(self.SUFFIX) and not name.startswith(".")
        )

    async def get_page(self, title: str) -> Page | None:
        """Get a page by title."""
        try:
            path = self._get_path(title)
        except InvalidTitleError:
            return None

        body = await asyncio.to_thread(self._read, path)
        if body is None:
            return None
        return Page(title=title, body=body)

    async def save_page(self, title: str, body: bytes) -> Page:
        """Save a page."""
        path = self._get_path(title)
        try:
            await asyncio.to_thread(self._write, path, body)
        except OSError as e:
            raise StorageError(f"Cannot save page {title!r}: {e}") from e

        logger.info("Saved page %s (%d bytes)", title, len(body))
        return Page(title=title, body=body)

    async def delete_page(self, title: str) -> None:
        """Delete a page."""
        if title == FRONT_PAGE:
            raise FrontPageProtectedError("You cannot delete the front page")

        path = self._get_path(title)
        try:
            await asyncio.to_thread(self._unlink, path)
        except FileNotFoundError as e:
            raise PageNotFoundError(f"Page {title!r} does not exist") from e
        except OSError as e:
            raise StorageError(f"Cannot delete page {title!r}: {e}") from e

        logger.info("Deleted page %s", title)

    async def list_titles(self) -> list[str]:
        """List all page titles."""
        return await asyncio.to_thread(self._scan)

    async def page_exists(self, title: str) -> bool:
        """Check if a page exists."""
        try:
            path = self._get_path(title)
        except InvalidTitleError:
            return False
        return await asyncio.to_thread(self._is_file, path)

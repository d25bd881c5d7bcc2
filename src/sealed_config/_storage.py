"""Where configuration text is read from and written to."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from ._types import ConfigReadError, ConfigWriteError

logger = logging.getLogger(__name__)


@runtime_checkable
class ConfigStorage(Protocol):
    """Abstraction over raw text persistence.

    Implementations raise ``ConfigReadError`` / ``ConfigWriteError``.
    Atomicity and locking are up to the implementation.
    """

    def read_text(self, path: str) -> str:
        ...

    def write_text(self, path: str, text: str) -> None:
        ...

    async def aread_text(self, path: str) -> str:
        ...

    async def awrite_text(self, path: str, text: str) -> None:
        ...


class FileConfigStorage:
    """Reads and writes whole files on the local filesystem."""

    def __init__(self, encoding: str = "utf-8", create_parents: bool = True) -> None:
        self.encoding = encoding
        self.create_parents = create_parents

    def read_text(self, path: str) -> str:
        file_path = Path(path)
        if not file_path.is_file():
            raise ConfigReadError(path, "File does not exist")
        try:
            text = file_path.read_text(encoding=self.encoding)
        except PermissionError as exc:
            raise ConfigReadError(path, "Access denied") from exc
        except (OSError, UnicodeError) as exc:
            raise ConfigReadError(path, f"Could not read file: {exc}") from exc

        if not text.strip():
            raise ConfigReadError(path, "File is empty or contains only whitespace")
        logger.debug("Read %d characters from %s", len(text), path)
        return text

    def write_text(self, path: str, text: str) -> None:
        file_path = Path(path)
        try:
            if self.create_parents:
                file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(text, encoding=self.encoding)
        except PermissionError as exc:
            raise ConfigWriteError(path, "Access denied while writing file") from exc
        except FileNotFoundError as exc:
            raise ConfigWriteError(path, "Directory not found") from exc
        except OSError as exc:
            raise ConfigWriteError(path, f"Could not write file: {exc}") from exc
        logger.debug("Wrote %d characters to %s", len(text), path)

    async def aread_text(self, path: str) -> str:
        return await asyncio.to_thread(self.read_text, path)

    async def awrite_text(self, path: str, text: str) -> None:
        await asyncio.to_thread(self.write_text, path, text)


class FakeConfigStorage:
    """Dict-backed storage for tests.

    >>> storage = FakeConfigStorage({"app.json": "{}"})
    >>> storage.read_text("app.json")
    '{}'
    """

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files: dict[str, str] = dict(files or {})

    def read_text(self, path: str) -> str:
        if path not in self.files:
            raise ConfigReadError(path, "File does not exist")
        text = self.files[path]
        if not text.strip():
            raise ConfigReadError(path, "File is empty or contains only whitespace")
        return text

    def write_text(self, path: str, text: str) -> None:
        self.files[path] = text

    async def aread_text(self, path: str) -> str:
        return self.read_text(path)

    async def awrite_text(self, path: str, text: str) -> None:
        self.write_text(path, text)

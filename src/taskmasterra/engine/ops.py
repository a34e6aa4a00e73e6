# src/taskmasterra/engine/ops.py

"""
Filesystem-level operations.

This module contains:
- the document store (whole-file read / write of the task list),
- the history store (journal and archive files next to the task list),
- path expansion and history timestamps.

No parsing is performed here.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Final, Iterable, Optional


log = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------

DEFAULT_JOURNAL_SUFFIX: Final[str] = ".xjournal.md"
DEFAULT_ARCHIVE_SUFFIX: Final[str] = ".xarchive.md"
DEFAULT_FILE_MODE: Final[int] = 0o644
DEFAULT_DIR_MODE: Final[int] = 0o755
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024

TIMESTAMP_FORMAT: Final[str] = "[%Y-%m-%d %H:%M:%S UTC]"


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class StoreError(Exception):
    """
    Base class for file store failures.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(frozen=True, slots=True)
class DocumentError(StoreError):
    """
    Raised when the task list cannot be read (missing, too large, unreadable).

    Nothing has been written when this is raised.
    """


@dataclass(frozen=True, slots=True)
class HistoryWriteError(StoreError):
    """
    Raised when a journal or archive file cannot be updated.

    The task list itself is left untouched.
    """


@dataclass(frozen=True, slots=True)
class SourceWriteError(StoreError):
    """
    Raised when the task list could not be overwritten after the journal
    and archive were already updated.
    """


# ---------------------------------------------------------------------
# Paths / timestamps
# ---------------------------------------------------------------------

def expand_path(raw: str) -> Path:
    """
    Expand "~" and environment variables ($HOME, ...) in a user path.
    """
    s = (raw or "").strip()
    if not s:
        raise DocumentError(raw or "", "path cannot be empty")

    return Path(os.path.expandvars(os.path.expanduser(s)))


def format_timestamp(now: Optional[datetime] = None) -> str:
    """
    Return "[YYYY-MM-DD HH:MM:SS UTC]" for `now` (defaults to the current time).
    """
    current = now if now is not None else datetime.now(timezone.utc)
    if current.tzinfo is not None:
        current = current.astimezone(timezone.utc)
    return current.strftime(TIMESTAMP_FORMAT)


def history_paths(
    path: str | Path,
    *,
    journal_suffix: str = DEFAULT_JOURNAL_SUFFIX,
    archive_suffix: str = DEFAULT_ARCHIVE_SUFFIX,
) -> tuple[Path, Path]:
    """
    Derive (journal, archive) paths: same directory, extension replaced.

        todo.md -> todo.xjournal.md, todo.xarchive.md
    """
    p = Path(path)
    return (
        p.with_name(p.stem + journal_suffix),
        p.with_name(p.stem + archive_suffix),
    )


# ---------------------------------------------------------------------
# Document store
# ---------------------------------------------------------------------

def read_document(path: str | Path) -> str:
    """
    Read a whole text file.

    Raises DocumentError for an empty path, a missing file, a path that is
    not a regular file, a file larger than MAX_FILE_SIZE, or an I/O failure.
    """
    if not str(path).strip():
        raise DocumentError("", "file path cannot be empty")

    p = Path(path)
    if not p.exists():
        raise DocumentError(str(p), "file does not exist")
    if not p.is_file():
        raise DocumentError(str(p), "path is not a file")

    try:
        size = p.stat().st_size
    except OSError as e:
        raise DocumentError(str(p), f"cannot access file: {e}") from e

    if size > MAX_FILE_SIZE:
        raise DocumentError(
            str(p),
            f"file is too large ({size} bytes, max {MAX_FILE_SIZE} bytes)",
        )

    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(str(p), f"cannot read file: {e}") from e


def write_document(path: str | Path, text: str, *, mode: int = DEFAULT_FILE_MODE) -> None:
    """
    Overwrite a whole text file, creating parent directories as needed.

    `mode` is applied only when the file is newly created; existing
    permissions are left alone. Raises OSError on failure.
    """
    p = Path(path)
    p.parent.mkdir(mode=DEFAULT_DIR_MODE, parents=True, exist_ok=True)

    created = not p.exists()
    p.write_text(text, encoding="utf-8")
    if created:
        p.chmod(mode)


# ---------------------------------------------------------------------
# History store
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class HistoryStore:
    """
    Journal / archive pair belonging to one task list.

    Both files are newest-first logs: every write puts the new batch above
    the existing content. Entries are never reordered or truncated.
    """

    journal_path: Path
    archive_path: Path
    mode: int = DEFAULT_FILE_MODE

    @classmethod
    def for_document(
        cls,
        path: str | Path,
        *,
        journal_suffix: str = DEFAULT_JOURNAL_SUFFIX,
        archive_suffix: str = DEFAULT_ARCHIVE_SUFFIX,
        mode: int = DEFAULT_FILE_MODE,
    ) -> "HistoryStore":
        journal, archive = history_paths(
            path,
            journal_suffix=journal_suffix,
            archive_suffix=archive_suffix,
        )
        return cls(journal_path=journal, archive_path=archive, mode=mode)

    def write_journal(self, entries: Iterable[str]) -> bool:
        return prepend_entries(self.journal_path, entries, mode=self.mode)

    def write_archive(self, entries: Iterable[str]) -> bool:
        return prepend_entries(self.archive_path, entries, mode=self.mode)


def prepend_entries(path: Path, entries: Iterable[str], *, mode: int = DEFAULT_FILE_MODE) -> bool:
    """
    Write `entries` above the existing content of `path`.

    Result is "\\n".join(entries) + "\\n" + existing. An empty batch performs
    no write at all (a missing file stays missing). Returns True when the
    file was written. Raises HistoryWriteError on failure.
    """
    batch = list(entries)
    if not batch:
        return False

    existing = ""
    if path.exists():
        try:
            existing = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise HistoryWriteError(str(path), f"cannot read existing history: {e}") from e

    content = "\n".join(batch) + "\n" + existing

    try:
        write_document(path, content, mode=mode)
    except OSError as e:
        raise HistoryWriteError(str(path), f"cannot write history: {e}") from e

    log.debug("wrote %d entries to %s", len(batch), path)
    return True

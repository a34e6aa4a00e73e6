# src/taskmasterra/engine/recordkeep.py

"""
Record keeping: journal touched work, archive finished work.

One pass over the task list routes every top-level line to one of three
groups:

- kept      : written back to the task list (touched statuses settled),
- journal   : prepended to <name>.xjournal.md,
- archive   : prepended to <name>.xarchive.md.

A task owns the indented detail lines directly below it; they follow the
task's fate and are never classified on their own.

Routing:

    touched or active, open       -> journal + kept (settled)
    touched or active, completed  -> journal + archive (details: journal only)
    completed                     -> archive (details too, timestamped)
    anything else                 -> kept verbatim
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from .actions import convert_active_to_touched
from .ops import (
    DEFAULT_ARCHIVE_SUFFIX,
    DEFAULT_FILE_MODE,
    DEFAULT_JOURNAL_SUFFIX,
    HistoryStore,
    SourceWriteError,
    format_timestamp,
    read_document,
    write_document,
)
from .parse import is_active, is_completed, is_task_detail, is_touched


log = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Result objects
# ---------------------------------------------------------------------

@dataclass(slots=True)
class RecordKeepBatch:
    """
    Output of a single pass over a document.
    """

    kept: list[str] = field(default_factory=list)
    journal: list[str] = field(default_factory=list)
    archive: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class RecordKeepResult:
    """
    Summary of a record-keeping run on disk.
    """

    path: Path
    journal_path: Path
    archive_path: Path
    journaled: int
    archived: int
    kept: int


# ---------------------------------------------------------------------
# Pass
# ---------------------------------------------------------------------

def process_lines(lines: Sequence[str], timestamp: str) -> RecordKeepBatch:
    """
    Partition `lines` into kept / journal / archive groups.

    Pure: no I/O. `timestamp` is prefixed (with one space) to every
    timestamped history entry.
    """
    batch = RecordKeepBatch()
    index = 0
    while index < len(lines):
        index = _step(lines, index, timestamp, batch)
    return batch


def _step(lines: Sequence[str], index: int, timestamp: str, batch: RecordKeepBatch) -> int:
    """
    Route the item starting at `index`; return the index to resume at.
    """
    line = lines[index]

    if is_touched(line) or is_active(line):
        return _journal_item(lines, index, timestamp, batch)

    if is_completed(line):
        return _archive_item(lines, index, timestamp, batch)

    batch.kept.append(line)
    return index + 1


def _detail_end(lines: Sequence[str], start: int) -> int:
    """Index of the first line at or after `start` that is not a detail line."""
    end = start
    while end < len(lines) and is_task_detail(lines[end]):
        end += 1
    return end


def _journal_item(lines: Sequence[str], index: int, timestamp: str, batch: RecordKeepBatch) -> int:
    line = lines[index]
    completed = is_completed(line)

    batch.journal.append(f"{timestamp} {line}")
    if completed:
        batch.archive.append(f"{timestamp} {line}")
    else:
        batch.kept.append(convert_active_to_touched(line))

    end = _detail_end(lines, index + 1)
    for detail in lines[index + 1:end]:
        # Details of a completed task go to the journal only, not the archive.
        batch.journal.append(detail)
        if not completed:
            batch.kept.append(detail)

    return end


def _archive_item(lines: Sequence[str], index: int, timestamp: str, batch: RecordKeepBatch) -> int:
    batch.archive.append(f"{timestamp} {lines[index]}")

    end = _detail_end(lines, index + 1)
    for detail in lines[index + 1:end]:
        batch.archive.append(f"{timestamp} {detail}")

    return end


# ---------------------------------------------------------------------
# File workflow
# ---------------------------------------------------------------------

def record_keep(
    path: str | Path,
    *,
    journal_suffix: str = DEFAULT_JOURNAL_SUFFIX,
    archive_suffix: str = DEFAULT_ARCHIVE_SUFFIX,
    mode: int = DEFAULT_FILE_MODE,
    now: Optional[datetime] = None,
) -> RecordKeepResult:
    """
    Run the record-keeping pass on a task list file.

    Write order:
    1. journal, 2. archive, 3. the task list itself.

    - DocumentError: the task list could not be read; nothing was written.
    - HistoryWriteError: journal or archive failed; the task list is unchanged.
    - SourceWriteError: history is updated but the task list was not rewritten.
    """
    p = Path(path)
    content = read_document(p)

    lines = content.split("\n")
    batch = process_lines(lines, format_timestamp(now))

    store = HistoryStore.for_document(
        p,
        journal_suffix=journal_suffix,
        archive_suffix=archive_suffix,
        mode=mode,
    )

    store.write_journal(batch.journal)
    store.write_archive(batch.archive)

    try:
        write_document(p, "\n".join(batch.kept), mode=mode)
    except OSError as e:
        raise SourceWriteError(
            str(p),
            f"journal and archive were updated but the task list was not rewritten: {e}",
        ) from e

    log.debug(
        "record-keep %s: %d journal, %d archive, %d kept",
        p,
        len(batch.journal),
        len(batch.archive),
        len(batch.kept),
    )

    return RecordKeepResult(
        path=p,
        journal_path=store.journal_path,
        archive_path=store.archive_path,
        journaled=len(batch.journal),
        archived=len(batch.archive),
        kept=len(batch.kept),
    )

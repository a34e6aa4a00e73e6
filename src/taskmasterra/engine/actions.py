# src/taskmasterra/engine/actions.py

"""
Status-marker rewrites.

A touched status (uppercase B / W / X) is settled back to its lowercase
counterpart once the record-keeping pass has journaled it. Only the status
character changes; the active marker and the rest of the line are kept.
"""

from typing import Final

from .parse import scan_task_prefix


SETTLE_PAIRS: Final[tuple[tuple[str, str], ...]] = (
    ("B", "b"),
    ("W", "w"),
    ("X", "x"),
)


def replace_status(line: str, old: str, new: str) -> str:
    """
    Replace the line's status character with `new` when it equals `old`.

    Only the leading "- [<c>]" bracket is considered; bracket-like text in
    the title is never rewritten. Returns the line unchanged otherwise.
    """
    prefix = scan_task_prefix(line)
    if prefix is None or not prefix.is_single or prefix.status != old:
        return line

    pos = prefix.end - 2
    return line[:pos] + new + line[pos + 1:]


def convert_active_to_touched(line: str) -> str:
    """Settle B/W/X to b/w/x. Lowercase lines pass through untouched."""
    for old, new in SETTLE_PAIRS:
        line = replace_status(line, old, new)
    return line

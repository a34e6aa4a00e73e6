# src/taskmasterra/cli.py

"""
Command-line interface for taskmasterra.

This module:
- defines argument parsing and subcommands,
- delegates filesystem and domain logic to engine modules,
- keeps user-facing output (print) here.

KISS rule: keep commands small and predictable.
"""

import argparse
import difflib
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from taskmasterra.config import Config, ConfigError, default_config_path, dump_config, load_config, save_config
from taskmasterra.engine.ops import SourceWriteError, StoreError, expand_path, read_document, write_document
from taskmasterra.engine.recordkeep import record_keep
from taskmasterra.engine.reminder import ReminderError, ReminderService, update_reminders
from taskmasterra.engine.render import render_stats_report, render_validation
from taskmasterra.engine.stats import analyze_file
from taskmasterra.engine.validate import validate_content


log = logging.getLogger(__name__)

PROG = "taskmasterra"
COMMANDS = ("recordkeep", "updatereminders", "updatecal", "stats", "validate", "config", "version", "help")


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def _add_input(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-i",
        "--input",
        type=str,
        required=True,
        help="Path to the markdown task list",
    )


def _add_config(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to the configuration file (default: ~/.taskmasterra/config.yml)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Markdown-based task management with journaling and Reminders integration",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # ------------------------------------------------------------------
    # Write commands
    # ------------------------------------------------------------------

    p_keep = sub.add_parser(
        "recordkeep",
        help="Archive completed tasks, journal touched tasks",
    )
    _add_input(p_keep)
    _add_config(p_keep)
    p_keep.set_defaults(func=cmd_recordkeep)

    p_rem = sub.add_parser(
        "updatereminders",
        aliases=["updatecal"],
        help="Sync active tasks (marked with !!) to macOS Reminders.app",
    )
    _add_input(p_rem)
    _add_config(p_rem)
    p_rem.set_defaults(func=cmd_updatereminders)

    # ------------------------------------------------------------------
    # Read-only commands
    # ------------------------------------------------------------------

    p_stats = sub.add_parser(
        "stats",
        help="Generate a task statistics report",
    )
    _add_input(p_stats)
    p_stats.add_argument(
        "-o",
        "--output",
        type=str,
        default="",
        help="Write the report to this file (default: stdout)",
    )
    p_stats.set_defaults(func=cmd_stats)

    p_validate = sub.add_parser(
        "validate",
        help="Check task list format and get improvement suggestions",
    )
    _add_input(p_validate)
    p_validate.set_defaults(func=cmd_validate)

    # ------------------------------------------------------------------
    # Misc
    # ------------------------------------------------------------------

    p_config = sub.add_parser(
        "config",
        help="Initialise or show the configuration",
    )
    _add_config(p_config)
    p_config.add_argument("--init", action="store_true", help="Write a default configuration file")
    p_config.add_argument("--show", action="store_true", help="Show the current configuration")
    p_config.set_defaults(func=cmd_config)

    p_version = sub.add_parser("version", help="Show version information")
    p_version.set_defaults(func=cmd_version)

    p_help = sub.add_parser("help", help="Show this help message")
    p_help.set_defaults(func=lambda args: _print_help(parser))

    return parser


def _print_help(parser: argparse.ArgumentParser) -> int:
    parser.print_help()
    return 0


# ---------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------

def _report_validation(content: str, path: Path, command: str) -> None:
    """Print validation warnings/errors to stderr; never stops the command."""
    result = validate_content(content)
    if not (result.has_errors or result.has_warnings):
        return

    print(f"⚠️  Validation issues found in {path}:", file=sys.stderr)
    print(render_validation(result), end="", file=sys.stderr)
    if result.has_errors:
        print(f"⚠️  Continuing with {command} despite validation errors", file=sys.stderr)


def _load_valid_config(path: str | None) -> Config:
    config = load_config(path)
    config.validate()
    return config


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

def cmd_recordkeep(args: argparse.Namespace) -> int:
    try:
        path = expand_path(args.input)
        config = _load_valid_config(args.config)
        _report_validation(read_document(path), path, "recordkeep")

        res = record_keep(
            path,
            journal_suffix=config.journal_suffix,
            archive_suffix=config.archive_suffix,
            mode=config.default_file_permissions,
        )
    except SourceWriteError as e:
        print(f"Error: history was updated but the task list was not: {e}")
        return 1
    except (StoreError, ConfigError) as e:
        print(f"Error: {e}")
        return 1

    print(
        f"✅ Successfully processed tasks in {res.path} "
        f"({res.journaled} journaled, {res.archived} archived)"
    )
    return 0


def cmd_updatereminders(args: argparse.Namespace) -> int:
    try:
        path = expand_path(args.input)
        content = read_document(path)
        _report_validation(content, path, "updatereminders")

        config = _load_valid_config(args.config)
        service = ReminderService(
            config.reminder_list_name,
            due_hour=config.default_due_hour,
            due_minute=config.default_due_minute,
        )
        res = update_reminders(content.split("\n"), service)
    except (StoreError, ConfigError, ReminderError) as e:
        print(f"Error: {e}")
        return 1

    for failure in res.failures:
        print(f"Error: line {failure.line} ({failure.title}): {failure.error}", file=sys.stderr)

    if res.active == 0:
        print(f"ℹ️  No active tasks found in {path}")
    elif res.added:
        print(f"✅ Successfully added {res.added} active tasks to reminder list '{config.reminder_list_name}'")

    return 0 if res.ok else 1


def cmd_stats(args: argparse.Namespace) -> int:
    try:
        stats = analyze_file(expand_path(args.input))
    except StoreError as e:
        print(f"Error: {e}")
        return 1

    report = render_stats_report(stats)

    if not args.output:
        print(report, end="")
        return 0

    try:
        out = expand_path(args.output)
        write_document(out, report)
    except StoreError as e:
        print(f"Error: {e}")
        return 1
    except OSError as e:
        print(f"Error: cannot write report to {out}: {e}")
        return 1

    print(f"✅ Statistics report generated and saved to: {out}")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    try:
        content = read_document(expand_path(args.input))
    except StoreError as e:
        print(f"Error: {e}")
        return 1

    result = validate_content(content)
    print(render_validation(result), end="")

    if result.has_errors:
        print(f"Error: validation failed with {len(result.errors)} errors")
        return 1
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    if args.init and args.show:
        print("Error: cannot use both --init and --show")
        return 1

    if not (args.init or args.show):
        print("Error: no action specified for config command (use --init or --show)")
        return 1

    try:
        if args.init:
            path = expand_path(args.config) if args.config else default_config_path()
            config = Config()
            config.validate()
            save_config(config, path)
            print(f"✅ Configuration file created at: {path}")
            return 0

        config = _load_valid_config(args.config)
    except (StoreError, ConfigError) as e:
        print(f"Error: {e}")
        return 1

    print(dump_config(config), end="")
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    try:
        v = version(PROG)
    except PackageNotFoundError:
        v = "dev"
    print(f"{PROG} {v}")
    return 0


# ---------------------------------------------------------------------
# Command suggestions
# ---------------------------------------------------------------------

def suggest_command(name: str) -> str:
    """Return the closest known command, or "" if nothing is close."""
    matches = difflib.get_close_matches(name.lower(), COMMANDS, n=1, cutoff=0.6)
    return matches[0] if matches else ""


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()

    if not argv:
        parser.print_help()
        return 0

    command = next((a for a in argv if not a.startswith("-")), "")
    if command and command not in COMMANDS:
        print(f"Error: Unknown command '{command}'.", file=sys.stderr)
        suggestion = suggest_command(command)
        if suggestion:
            print(f"Did you mean '{suggestion}'?", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 2

    log.debug("running %s", args.command)

    return func(args)


if __name__ == "__main__":
    raise SystemExit(main())

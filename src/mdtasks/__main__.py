"""CLI entry point for mdtasks."""

import argparse
import sys
from pathlib import Path

import yaml

from . import __version__
from .cli.output import error, info, success
from .config import Settings
from .logging import setup_logging
from .models.mdtasks_config import MdtasksConfig
from .services.config_service import ConfigService

STDIN_FILE_PATH = "stdin.md"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="mdtasks",
        description="Parse and sort tasks in markdown documents",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Path to project root containing mdtasks.yml (default: current directory)",
    )
    parser.add_argument(
        "--format",
        choices=MdtasksConfig.VALID_FORMATS,
        default=None,
        help="Preferred metadata format (overrides mdtasks.yml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    document_args = argparse.ArgumentParser(add_help=False)
    document_args.add_argument(
        "file",
        nargs="?",
        type=Path,
        default=None,
        help="Markdown file to read (default: stdin)",
    )
    document_args.add_argument(
        "--file-path",
        default=None,
        help="Path recorded in task IDs (default: the file argument)",
    )

    subparsers.add_parser(
        "parse",
        parents=[document_args],
        help="Print the tasks of a document as JSON",
    )

    sort_parser = subparsers.add_parser(
        "sort",
        parents=[document_args],
        help="Print the document with its tasks sorted",
    )
    sort_parser.add_argument(
        "--cursor-line",
        type=int,
        default=None,
        help="Zero-based line selecting the heading section to sort",
    )
    sort_parser.add_argument(
        "--full",
        action="store_true",
        help="Sort the whole document even when a cursor line is given",
    )

    generate_parser = subparsers.add_parser(
        "generate-config",
        help="Print a default mdtasks.yml",
    )
    generate_parser.add_argument(
        "--write",
        action="store_true",
        help="Write mdtasks.yml to the project root instead of printing it",
    )

    return parser.parse_args(argv)


def _read_document(args: argparse.Namespace) -> tuple[str, str]:
    """Return (file_path, content) from the file argument or stdin."""
    if args.file is not None:
        content = args.file.read_text(encoding="utf-8")
        default_path = args.file.as_posix()
    else:
        content = sys.stdin.read()
        default_path = STDIN_FILE_PATH
    return args.file_path or default_path, content


def _load_config(settings: Settings) -> MdtasksConfig:
    service = ConfigService(settings.project_root)
    config = service.get_config()
    if service.has_config_error:
        error(f"{service.config_error} (using defaults)")
    if settings.metadata_format is not None:
        config = config.model_copy(update={"metadata_format": settings.metadata_format})
    return config


def run_parse(args: argparse.Namespace, config: MdtasksConfig) -> int:
    from .indexer.worker import process_file
    from .models.messages import IndexerSettings

    file_path, content = _read_document(args)
    indexer_settings = IndexerSettings.from_config(
        config.metadata_format,
        config.statuses.completed_markers,
        config.daily_notes,
    )
    try:
        result = process_file(file_path, content, indexer_settings)
    except yaml.YAMLError as e:
        error(f"Failed to parse {file_path}: {e}")
        return 1

    print(result.model_dump_json(indent=2))
    info(f"{result.stats.total_tasks} tasks ({result.stats.completed_tasks} completed)")
    return 0


def run_sort(args: argparse.Namespace, config: MdtasksConfig) -> int:
    from .services.document_sort import TaskSortError, sort_tasks_in_text

    file_path, content = _read_document(args)
    try:
        outcome = sort_tasks_in_text(
            content,
            file_path,
            config,
            cursor_line=args.cursor_line,
            full_document=args.full,
        )
    except TaskSortError as e:
        error(str(e))
        return 1

    if outcome.changed:
        print(outcome.document, end="")
        success(outcome.message)
    else:
        print(content, end="")
        info(outcome.message)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    # Build settings from CLI args
    settings_kwargs: dict = {}
    if args.root:
        settings_kwargs["project_root"] = args.root
    if args.format:
        settings_kwargs["metadata_format"] = args.format
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file

    settings = Settings(**settings_kwargs)
    setup_logging(settings.verbose, settings.log_file)

    if args.command == "generate-config":
        from .cli.generate import run_generate

        raise SystemExit(run_generate(settings.project_root, write=args.write))

    config = _load_config(settings)
    if args.command == "parse":
        exit_code = run_parse(args, config)
    else:
        exit_code = run_sort(args, config)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()

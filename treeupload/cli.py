"""Command line interface for treeupload."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.logging import RichHandler

from .cli_progress import (
    BatchProgressDisplay,
    console,
    render_address,
    render_configuration_summary,
    render_error,
    render_start,
)
from .errors import (
    BatchUploadError,
    DirectoryReadError,
    PortalUnreachableError,
    UploadError,
)
from .models import DEFAULT_PORTAL, UploaderConfig
from .orchestrator import DirectoryUploadOrchestrator

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_DIRECTORY = 3
EXIT_UPLOAD = 4
EXIT_PORTAL = 5
EXIT_CANCELLED = 130


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""

    def __init__(self, message: str, exit_code: int = EXIT_USAGE):
        super().__init__(message)
        self.exit_code = exit_code


def _setup_logging(debug: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default behavior is silent unless --debug or --log-level is provided.
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    if not debug and not log_level:
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, log_level.upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return logging.getLevelName(level)


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _load_env_file(path: Path, override: bool = False) -> None:
    if not path.exists():
        raise CLIError(f"env file not found: {path}")
    if not path.is_file():
        raise CLIError(f"env path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None


def _validate_directory(directory: Path) -> Path:
    if not directory.exists():
        raise CLIError(f'Failed to find directory "{directory}"', EXIT_DIRECTORY)
    if not directory.is_dir():
        raise CLIError(f"The given path is not a directory: {directory}", EXIT_DIRECTORY)
    return directory


async def _run_upload(directory: Path, config: UploaderConfig) -> int:
    display = BatchProgressDisplay(verbose=config.verbose)
    render_start(directory.resolve(), config.portal)

    async with DirectoryUploadOrchestrator(config) as orchestrator:
        display.attach(orchestrator.events)
        try:
            result = await orchestrator.run(directory)
        except BatchUploadError as exc:
            display.end_marker_line()
            render_error(f"Upload failed ({display.summary}), error: {exc}")
            return EXIT_UPLOAD
        except UploadError as exc:
            render_error(f"{exc}. Something went wrong... perhaps try a different portal")
            return EXIT_UPLOAD

    console.print("[green]Upload complete[/green]\n")
    render_address(result.address)
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treeupload",
        description="Upload a directory to a content-addressed portal and publish an HTML index.",
    )
    parser.add_argument("--version", action="version", version="treeupload 0.1.0")
    subparsers = parser.add_subparsers(dest="command")

    upload = subparsers.add_parser("upload", help="Upload a directory and its index page")
    upload.add_argument("directory", type=Path, help="Directory to upload")
    upload.add_argument(
        "-p",
        "--portal",
        default=None,
        help=f"Portal URL (default from TREEUPLOAD_PORTAL or {DEFAULT_PORTAL})",
    )
    upload.add_argument("--mock", action="store_true", help="Skip the network and use random identifiers")
    upload.add_argument("--verbose", action="store_true", help="Print one line per uploaded file")
    upload.add_argument(
        "-j",
        "--concurrency",
        type=int,
        default=None,
        help="Maximum simultaneous uploads (default from TREEUPLOAD_MAX_CONCURRENCY or 8)",
    )
    upload.add_argument("--fail-fast", action="store_true", help="Stop remaining uploads after the first failure")
    upload.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds")
    upload.add_argument(
        "--strict-preflight",
        action="store_true",
        help="Abort when the portal does not answer the reachability check",
    )
    upload.add_argument("--env-file", type=Path, default=None, help="Load environment variables from this .env file")
    upload.add_argument("--debug", action="store_true", help="Enable debug logs")
    upload.add_argument("--log-level", default=None, help="Explicit log level (DEBUG/INFO/WARNING/ERROR)")
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_USAGE

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            render_error(str(exc))
            return exc.exit_code

    effective_log_mode = _setup_logging(debug=args.debug, log_level=args.log_level)

    try:
        directory = _validate_directory(Path(args.directory).expanduser())
        config = UploaderConfig.from_env(
            os.environ,
            portal=args.portal,
            mock_uploads=args.mock,
            verbose=args.verbose,
            max_concurrency=args.concurrency,
            fail_fast=args.fail_fast,
            timeout=args.timeout,
            strict_preflight=args.strict_preflight,
        )
    except CLIError as exc:
        render_error(str(exc))
        return exc.exit_code
    except ValueError as exc:
        render_error(str(exc))
        return EXIT_USAGE

    render_configuration_summary(
        {
            "Directory": str(directory),
            "Portal": config.portal,
            "Mock Uploads": "yes" if config.mock_uploads else "no",
            "Concurrency": config.max_concurrency,
            "Fail Fast": "yes" if config.fail_fast else "no",
            "Env File": str(used_env_file) if used_env_file else "-",
            "Logging": effective_log_mode,
        }
    )

    try:
        return asyncio.run(_run_upload(directory, config))
    except DirectoryReadError as exc:
        render_error(str(exc))
        return EXIT_DIRECTORY
    except PortalUnreachableError as exc:
        render_error(str(exc))
        return EXIT_PORTAL
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return EXIT_CANCELLED


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()

"""CLI entrypoints for genfix commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .config import ConfigError, GenFixConfig, load_config
from .logging import configure_logging
from .orchestrator import Pipeline, PipelineResult
from .workspace import load_project, remove_files, write_project


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_escalation_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--escalate",
        action="store_true",
        default=None,
        help="Send files that still have findings to the remote LLM fixer.",
    )
    parser.add_argument(
        "--strict-scope",
        nargs="+",
        metavar="PATH",
        default=None,
        help="Only allow the fixer to touch these paths.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="genfix",
        description="Repair LLM-generated React/Vite projects into buildable file sets.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract files from LLM output and run the repair pipeline.",
    )
    _add_verbose_option(extract_parser, suppress_default=True)
    _add_escalation_options(extract_parser)
    extract_parser.add_argument(
        "input",
        help="File containing the LLM response, or '-' to read stdin.",
    )
    extract_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Directory to write the repaired project into.",
    )

    fix_parser = subparsers.add_parser(
        "fix",
        help="Repair a project directory in place.",
    )
    _add_verbose_option(fix_parser, suppress_default=True)
    _add_escalation_options(fix_parser)
    fix_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    fix_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report repairs without writing files.",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Report findings for a project directory without changing it.",
    )
    _add_verbose_option(validate_parser, suppress_default=True)
    validate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for genfix commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    config_root = Path(args.path) if args.command in ("fix", "validate") else Path.cwd()
    try:
        config = load_config(config_root)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "extract":
        _run_extract(parser, args, config)
    elif args.command == "fix":
        _run_fix(parser, args, config)
    elif args.command == "validate":
        _run_validate(parser, args, config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_extract(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: GenFixConfig
) -> None:
    try:
        if args.input == "-":
            text = sys.stdin.read()
        else:
            text = Path(args.input).read_text(encoding="utf-8")
    except OSError as exc:
        parser.exit(1, f"Cannot read {args.input}: {exc}\n")

    pipeline = Pipeline(config)
    result = pipeline.run_text(
        text,
        escalate=args.escalate,
        strict_scope=True if args.strict_scope else None,
        allowed_paths=args.strict_scope,
    )
    _print_summary(result)
    if args.output:
        try:
            written = write_project(Path(args.output), result.files)
        except RuntimeError as exc:
            parser.exit(1, f"genfix extract failed: {exc}\n")
        print(f"Wrote {len(written)} file(s) to {_relativize(Path(args.output))}")


def _run_fix(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: GenFixConfig
) -> None:
    root = Path(args.path)
    try:
        files = load_project(root, config.exclude_paths)
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")

    pipeline = Pipeline(config)
    result = pipeline.run_files(
        files,
        escalate=args.escalate,
        strict_scope=True if args.strict_scope else None,
        allowed_paths=args.strict_scope,
    )
    _print_summary(result)
    for original, target in result.moved.items():
        print(f"Moved {original} -> {target}")
    if args.dry_run:
        print("Dry run: no files written")
        return
    # Originals that the pipeline relocated are stale once the new paths are written.
    kept = {file.path for file in result.files}
    stale = [original for original in result.moved if original not in kept]
    try:
        written = write_project(root, result.files)
        removed = remove_files(root, stale)
    except RuntimeError as exc:
        parser.exit(1, f"genfix fix failed: {exc}\nRun with --verbose for more details.\n")
    print(f"Updated {len(written)} file(s) in {_relativize(root.resolve())}")
    if removed:
        print(f"Removed {len(removed)} relocated original(s)")


def _run_validate(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: GenFixConfig
) -> None:
    try:
        files = load_project(Path(args.path), config.exclude_paths)
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")

    findings = Pipeline(config).validate(files)
    if not findings:
        print(f"No findings in {len(files)} file(s)")
        return
    lines: List[str] = []
    for finding in findings:
        lines.append(f"{finding.path}:")
        lines.extend(f"  - {message}" for message in finding.messages)
    parser.exit(1, "\n".join(lines) + "\n")


def _print_summary(result: PipelineResult) -> None:
    print(json.dumps(result.summary(), indent=2))


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])

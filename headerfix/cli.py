"""CLI entrypoint for headerfix."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import load_config
from .errors import ConfigError, RepositoryError
from .logging import configure_logging, get_logger
from .runner import HeaderFixer


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="headerfix",
        description="Find source files without a license header and optionally add one.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path inside the git repository to scan (defaults to current directory).",
    )
    parser.add_argument(
        "--tmpl",
        default=None,
        help="License header to use: apache2.0 (default) or bsd.",
    )
    parser.add_argument(
        "--fix",
        action="store_true",
        help="Write headers into files that lack one (default: report only).",
    )
    parser.add_argument(
        "--copyright-holder",
        default=None,
        help="Name of the copyright holder (default: ACME).",
    )
    parser.add_argument(
        "--concurrency",
        type=_positive_int,
        default=None,
        help="How many files may be processed at once (default: 6).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .headerfix.yml file (defaults to the repository root).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for headerfix."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")

    try:
        config = load_config(args.config) if args.config is not None else None
        HeaderFixer().run(
            args.path,
            fix=bool(args.fix),
            holder=args.copyright_holder,
            template=args.tmpl,
            concurrency=args.concurrency,
            config=config,
        )
    except (RepositoryError, ConfigError) as exc:
        logger.error("%s", exc)
        parser.exit(1, f"headerfix failed: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])

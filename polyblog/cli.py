from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from .builder import SiteBuilder
from .config import SiteConfig
from .errors import SiteError
from .validation import FileValidator, ValidationSummary

logger = logging.getLogger("polyblog")

DEFAULT_CONFIG = "app.toml"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


def build_site(args: argparse.Namespace, config: SiteConfig) -> list[str]:
    builder = SiteBuilder(
        config,
        output_dir=Path(args.output),
        contents_dir=Path(args.contents),
        languages=args.lang,
    )
    return builder.build()


def validate_site(args: argparse.Namespace, config: SiteConfig) -> bool:
    validator = FileValidator()
    summary = ValidationSummary()
    for directory in (Path(args.contents), config.path("public_dir")):
        if directory.is_dir():
            summary.merge(validator.validate_directory(directory))
    summary.log()
    return not summary.has_errors


def make_parser(config: SiteConfig, config_path: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="polyblog", description="Multi-language static site generator.")
    parser.add_argument("--config", default=config_path, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    commands = parser.add_subparsers(dest="command", required=True)

    build = commands.add_parser("build", help="Generate the site.")
    build.add_argument(
        "--output",
        default=str(config.path("build_dir")),
        help="Output directory for the site.",
    )
    build.add_argument(
        "--contents",
        default=str(config.path("contents_dir")),
        help="Directory containing manifests, page metadata and posts.",
    )
    build.add_argument(
        "--lang",
        action="append",
        metavar="CODE",
        help="Only build this language (repeatable). Defaults to every installed language.",
    )

    validate = commands.add_parser("validate", help="Check post filenames without building.")
    validate.add_argument(
        "--contents",
        default=str(config.path("contents_dir")),
        help="Directory containing manifests, page metadata and posts.",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default=DEFAULT_CONFIG)
    pre_parser.add_argument("-v", "--verbose", action="store_true")
    pre_args, _ = pre_parser.parse_known_args(argv)
    configure_logging(pre_args.verbose)

    try:
        config = SiteConfig.from_file(Path(pre_args.config))
    except SiteError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    parser = make_parser(config, pre_args.config)
    args = parser.parse_args(argv)

    start = time.perf_counter()
    try:
        if args.command == "validate":
            ok = validate_site(args, config)
            logger.info("Validation completed in %.2fs.", time.perf_counter() - start)
            if not ok:
                sys.exit(1)
            return
        written = build_site(args, config)
    except (SiteError, OSError) as exc:
        logger.error("Build failed: %s", exc)
        sys.exit(1)
    logger.info("Build completed in %.2fs.", time.perf_counter() - start)
    logger.info("Site generated in: %s (%d files)", args.output, len(written))


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ContentError

logger = logging.getLogger(__name__)

POST_FILENAME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-[a-z0-9]+(-[a-z0-9]+)*$")
FORBIDDEN_CHARS = ("<", ">", ":", '"', "|", "?", "*", " ")
YEAR_RANGE = range(2020, 2031)
SLUG_LENGTH_LIMIT = 80


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)


@dataclass
class ValidationSummary:
    total_files: int = 0
    valid_files: int = 0
    files_with_errors: int = 0
    files_with_warnings: int = 0
    results: list[tuple[Path, ValidationResult]] = field(default_factory=list)

    def add(self, path: Path, result: ValidationResult) -> None:
        self.total_files += 1
        if result.is_valid and not result.warnings:
            self.valid_files += 1
        if result.errors:
            self.files_with_errors += 1
        if result.warnings:
            self.files_with_warnings += 1
        self.results.append((path, result))

    def merge(self, other: "ValidationSummary") -> None:
        for path, result in other.results:
            self.add(path, result)

    @property
    def has_errors(self) -> bool:
        return self.files_with_errors > 0

    def log(self) -> None:
        logger.info(
            "Markdown filename validation: %d files, %d valid, %d with warnings, %d with errors",
            self.total_files,
            self.valid_files,
            self.files_with_warnings,
            self.files_with_errors,
        )
        for path, result in self.results:
            for message in result.errors:
                logger.warning("%s: %s", path, message)
        for path, result in self.results:
            if result.errors:
                continue
            for message in result.warnings:
                logger.info("%s: %s", path, message)


def is_markdown_file(path: Path) -> bool:
    return path.suffix.lower() == ".md"


def is_valid_date(text: str) -> bool:
    """Loose ``YYYY-MM-DD`` check; years outside 2020-2030 count as suspicious."""
    parts = text.split("-")
    if len(parts) != 3 or [len(part) for part in parts] != [4, 2, 2]:
        return False
    if not all(part.isdigit() for part in parts):
        return False
    year, month, day = (int(part) for part in parts)
    return year in YEAR_RANGE and 1 <= month <= 12 and 1 <= day <= 31


class FileValidator:
    """Checks that markdown post filenames follow ``YYYY-MM-DD-kebab-case.md``."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def validate_file(self, path: Path) -> ValidationResult:
        result = ValidationResult()
        if not self.enabled:
            return result
        if not path.exists():
            result.add_error(f"File does not exist: {path}")
            return result
        if is_markdown_file(path):
            self._check_post_filename(path.name, result)
        return result

    def _check_post_filename(self, filename: str, result: ValidationResult) -> None:
        name = filename[:-3] if filename.lower().endswith(".md") else filename
        if not POST_FILENAME_RE.match(name):
            result.add_error(
                f"Invalid markdown filename format: '{filename}'. "
                "Expected format: 'YYYY-MM-DD-kebab-case.md' (e.g., '2025-04-26-what-is-seo.md')"
            )
            return
        date_part, slug = name[:10], name[11:]
        if not is_valid_date(date_part):
            result.add_warning(f"Date in filename may be invalid: '{date_part}' in file: {filename}")
        for char in FORBIDDEN_CHARS:
            if char in slug:
                result.add_error(f"Filename contains forbidden character '{char}' in slug part: {filename}")
        if len(slug) > SLUG_LENGTH_LIMIT:
            result.add_warning(
                f"Filename slug is quite long ({len(slug)} chars): {filename}. "
                "Consider shortening for better readability."
            )
        if "--" in slug:
            result.add_warning(f"Filename contains consecutive hyphens: {filename}. Use single hyphens in kebab-case")

    def validate_directory(self, directory: Path) -> ValidationSummary:
        if not directory.is_dir():
            raise ContentError("Directory does not exist", directory)
        summary = ValidationSummary()
        pending = [directory]
        while pending:
            current = pending.pop()
            for entry in sorted(current.iterdir()):
                if entry.is_dir():
                    pending.append(entry)
                elif is_markdown_file(entry):
                    summary.add(entry, self.validate_file(entry))
        return summary

"""Tests for markdown filename validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from polyblog.errors import ContentError
from polyblog.validation import (
    POST_FILENAME_RE,
    FileValidator,
    ValidationResult,
    ValidationSummary,
    is_markdown_file,
    is_valid_date,
)

from conftest import write


class TestFilenamePattern:
    @pytest.mark.parametrize(
        "name",
        ["2025-04-26-what-is-seo-beginners-guide", "2023-01-15-test123", "2025-01-01-a", "2025-01-01-123"],
    )
    def test_accepts(self, name):
        assert POST_FILENAME_RE.match(name)

    @pytest.mark.parametrize(
        "name",
        [
            "2025-04-26-What-Is-SEO",
            "2025-04-26-post_title",
            "2025-04-26",
            "what-is-seo-guide",
            "2025-4-26-post",
            "2025-04-26-Post Title",
            "2025-04-26--double-dash",
            "2025-01-01-a.b",
        ],
    )
    def test_rejects(self, name):
        assert not POST_FILENAME_RE.match(name)


class TestDateCheck:
    def test_valid_dates(self):
        assert is_valid_date("2025-04-26")
        assert is_valid_date("2020-01-01")

    @pytest.mark.parametrize("text", ["2025-13-26", "2025-04-32", "2019-04-26", "2031-04-26", "25-04-26"])
    def test_suspicious_dates(self, text):
        assert not is_valid_date(text)


class TestFileValidator:
    def test_markdown_detection(self):
        assert is_markdown_file(Path("post.md"))
        assert is_markdown_file(Path("POST.MD"))
        assert not is_markdown_file(Path("index.yml"))

    def test_valid_file(self, tmp_path):
        result = FileValidator().validate_file(write(tmp_path / "2025-04-26-hello-world.md", "x"))
        assert result.is_valid
        assert result.warnings == []

    def test_bad_format_is_an_error(self, tmp_path):
        result = FileValidator().validate_file(write(tmp_path / "Hello World.md", "x"))
        assert not result.is_valid
        assert "Invalid markdown filename format" in result.errors[0]

    def test_old_year_is_a_warning(self, tmp_path):
        result = FileValidator().validate_file(write(tmp_path / "2015-04-26-old.md", "x"))
        assert result.is_valid
        assert "may be invalid" in result.warnings[0]

    def test_long_slug_is_a_warning(self, tmp_path):
        slug = "-".join(["word"] * 20)
        result = FileValidator().validate_file(write(tmp_path / f"2025-04-26-{slug}.md", "x"))
        assert result.is_valid
        assert "quite long" in result.warnings[0]

    def test_missing_file(self, tmp_path):
        result = FileValidator().validate_file(tmp_path / "2025-04-26-gone.md")
        assert "does not exist" in result.errors[0]

    def test_disabled(self, tmp_path):
        assert FileValidator(enabled=False).validate_file(tmp_path / "anything.md").is_valid

    def test_directory_walk(self, tmp_path):
        write(tmp_path / "2025-04-26-good.md", "x")
        write(tmp_path / "nested" / "bad_name.md", "x")
        write(tmp_path / "nested" / "index.yml", "title: x")
        summary = FileValidator().validate_directory(tmp_path)
        assert summary.total_files == 2
        assert summary.valid_files == 1
        assert summary.files_with_errors == 1
        assert summary.has_errors

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ContentError):
            FileValidator().validate_directory(tmp_path / "missing")


class TestValidationSummary:
    def test_counts(self):
        summary = ValidationSummary()
        summary.add(Path("valid.md"), ValidationResult())
        summary.add(Path("warning.md"), ValidationResult(warnings=["w"]))
        summary.add(Path("error.md"), ValidationResult(errors=["e"], warnings=["w"]))
        assert summary.total_files == 3
        assert summary.valid_files == 1
        assert summary.files_with_warnings == 2
        assert summary.files_with_errors == 1

    def test_log_reports_errors(self, caplog):
        summary = ValidationSummary()
        summary.add(Path("error.md"), ValidationResult(errors=["broken name"]))
        summary.log()
        assert "broken name" in caplog.text

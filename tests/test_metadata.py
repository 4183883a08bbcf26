"""Tests for page metadata naming and scanning."""

from __future__ import annotations

from polyblog.metadata import page_name_for, scan_page_metadata

from conftest import write


class TestPageNameFor:
    def test_top_level_file(self, tmp_path):
        assert page_name_for(tmp_path / "about.yml", tmp_path) == ("about", None)

    def test_nested_index(self, tmp_path):
        assert page_name_for(tmp_path / "blog" / "index.yml", tmp_path) == ("blog", None)

    def test_language_folder_is_detected(self, tmp_path):
        assert page_name_for(tmp_path / "th" / "blog" / "index.yml", tmp_path) == ("blog", "th")
        assert page_name_for(tmp_path / "th" / "about.yml", tmp_path) == ("about", "th")

    def test_nested_non_index(self, tmp_path):
        assert page_name_for(tmp_path / "docs" / "intro.yml", tmp_path) == ("docs/intro", None)


class TestScanPageMetadata:
    def test_collects_pages(self, tmp_path):
        write(tmp_path / "index.yml", "title: Home\ndescription: Welcome\nkeywords: [a, b]\n")
        write(tmp_path / "th" / "about.yml", "title: About\ndescription: Thai about\n")
        write(tmp_path / "2025-01-01-post.md", "---\ntitle: x\n---\n")
        pages = {page.page_name: page for page in scan_page_metadata(tmp_path)}
        assert set(pages) == {"index", "about"}
        assert pages["index"].keywords == ["a", "b"]
        assert pages["about"].lang == "th"

    def test_hidden_directories_are_skipped(self, tmp_path):
        write(tmp_path / ".cache" / "index.yml", "title: Hidden\n")
        assert scan_page_metadata(tmp_path) == []

    def test_invalid_yaml_is_skipped(self, tmp_path, caplog):
        write(tmp_path / "broken.yml", "title: [unclosed\n")
        write(tmp_path / "ok.yml", "title: Ok\n")
        pages = scan_page_metadata(tmp_path)
        assert [page.page_name for page in pages] == ["ok"]
        assert "broken.yml" in caplog.text

    def test_template_name_prefers_layout(self, tmp_path):
        write(tmp_path / "team.yml", "title: Team\nlayout: about\n")
        (page,) = scan_page_metadata(tmp_path)
        assert page.template_name == "about"

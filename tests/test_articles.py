"""Tests for article assembly: ordering, show_year, updated de-duplication and discovery."""

from __future__ import annotations

import pytest

from polyblog.articles import article_prefix, discover_articles, load_article, process_posts
from polyblog.errors import ContentError
from polyblog.posts import Post, post_url

from conftest import post_text, write


def make_post(year, month, day, title, draft=False) -> Post:
    stamp = f"{year:04d}-{month:02d}-{day:02d}T00:00:00+00:00"
    slug = title.lower().replace(" ", "-")
    return Post(
        filename=slug,
        title=title,
        year=year,
        month=month,
        day=day,
        url=post_url(slug, ""),
        published=stamp,
        updated=stamp,
        draft=draft,
    )


class TestProcessPosts:
    def test_sorted_newest_first_with_title_tiebreak(self):
        posts = [
            make_post(2024, 1, 1, "a"),
            make_post(2025, 3, 1, "b"),
            make_post(2025, 3, 1, "c"),
            make_post(2024, 12, 31, "d"),
        ]
        keys = [post.date_key for post in process_posts(posts)]
        assert keys == sorted(keys, reverse=True)
        assert [key[3] for key in keys] == ["c", "b", "d", "a"]

    def test_show_year_marks_year_changes(self):
        posts = process_posts(
            [
                make_post(2025, 5, 1, "a"),
                make_post(2025, 4, 1, "b"),
                make_post(2024, 9, 1, "c"),
                make_post(2024, 1, 1, "d"),
                make_post(2023, 1, 1, "e"),
            ]
        )
        assert [post.show_year for post in posts] == [True, False, True, False, True]

    def test_updated_values_are_made_unique(self):
        posts = process_posts(
            [
                make_post(2025, 4, 26, "a"),
                make_post(2025, 4, 26, "b"),
                make_post(2025, 4, 26, "c"),
                make_post(2025, 4, 20, "d"),
                make_post(2025, 4, 20, "e"),
            ]
        )
        assert len({post.updated for post in posts}) == 5

    def test_updated_offsets_follow_baseline(self):
        posts = process_posts(
            [
                make_post(2025, 4, 26, "c"),
                make_post(2025, 4, 26, "b"),
                make_post(2025, 4, 26, "a"),
                make_post(2025, 4, 20, "z"),
                make_post(2025, 4, 20, "y"),
            ]
        )
        assert [post.title for post in posts] == ["c", "b", "a", "z", "y"]
        assert [post.updated for post in posts] == [
            "2025-04-26T00:00:00+00:00",
            "2025-04-26T00:00:01+00:00",
            "2025-04-26T00:00:02+00:00",
            "2025-04-20T00:00:00+00:00",
            "2025-04-20T00:00:01+00:00",
        ]

    def test_published_dates_are_untouched(self):
        posts = process_posts([make_post(2025, 4, 26, "a"), make_post(2025, 4, 26, "b")])
        assert {post.published for post in posts} == {"2025-04-26T00:00:00+00:00"}

    def test_drafts_are_dropped(self, caplog):
        posts = process_posts(
            [
                make_post(2025, 1, 1, "a"),
                make_post(2025, 1, 2, "b", draft=True),
                make_post(2025, 1, 3, "c"),
            ]
        )
        assert [post.title for post in posts] == ["c", "a"]


class TestLoadArticle:
    def test_manifest_defaults(self, tmp_path, config):
        write(tmp_path / "index.yml", "title: Root\n")
        article = load_article("", tmp_path, config)
        assert article.layout == "articles"
        assert article.lang == "en"
        assert article.draft is False
        assert article.title == "Root"

    def test_three_released_one_draft(self, tmp_path, config):
        write(tmp_path / "index.yml", "title: Root\n")
        write(tmp_path / "2025-01-01-one.md", post_text("One"))
        write(tmp_path / "2025-01-02-two.md", post_text("Two"))
        write(tmp_path / "2025-01-03-three.md", post_text("Three"))
        write(tmp_path / "2025-01-04-draft.md", post_text("Draft", draft="true"))
        article = load_article("", tmp_path, config)
        assert [post.title for post in article.posts] == ["Three", "Two", "One"]

    def test_unknown_manifest_fields_are_ignored(self, tmp_path, config, caplog):
        write(tmp_path / "index.yml", "title: Root\ncolour: blue\n")
        article = load_article("", tmp_path, config)
        assert article.title == "Root"
        assert "colour" in caplog.text

    def test_bad_post_aborts_article(self, tmp_path, config):
        write(tmp_path / "index.yml", "title: Root\n")
        write(tmp_path / "2025-01-01-bad.md", "---\ntitle: Bad\n")
        with pytest.raises(ContentError):
            load_article("", tmp_path, config)

    def test_invalid_month_falls_back(self, tmp_path, config):
        write(tmp_path / "index.yml", "title: Root\n")
        write(tmp_path / "2025-13-01-odd.md", post_text("Odd"))
        article = load_article("", tmp_path, config)
        assert article.posts[0].month == 13
        assert article.posts[0].published.endswith("T00:00:00+00:00")


class TestDiscovery:
    def test_language_segment_is_stripped(self, tmp_path):
        assert article_prefix(tmp_path / "en" / "docs", tmp_path) == "docs"
        assert article_prefix(tmp_path / "blog" / "tech", tmp_path) == "blog/tech"
        assert article_prefix(tmp_path, tmp_path) == ""

    def test_finds_every_manifest(self, tmp_path, config):
        write(tmp_path / "index.yml", "title: Root\n")
        write(tmp_path / "en" / "docs" / "index.yml", "title: Docs\n")
        write(tmp_path / "th" / "news" / "index.yml", "title: News\nlang: th\n")
        write(tmp_path / "notes" / "readme.yml", "title: Not a manifest\n")
        articles = discover_articles(tmp_path, config)
        prefixes = sorted(article.prefix for article in articles)
        assert prefixes == ["", "docs", "news"]

    def test_missing_contents_directory(self, tmp_path, config):
        with pytest.raises(ContentError):
            discover_articles(tmp_path / "missing", config)

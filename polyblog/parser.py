from __future__ import annotations

import logging
from typing import Iterable

from .articles import Article
from .config import SiteConfig
from .errors import DuplicateUrlError, PageValidationError
from .metadata import PageMetadata
from .utils import as_text

logger = logging.getLogger(__name__)

DEFAULT_CHANGEFREQ = "weekly"
DEFAULT_PRIORITY = "0.8"
TITLE_LIMIT = 60
DESCRIPTION_LIMIT = 160
FORBIDDEN_PAGE_NAME_CHARS = (" ", "_")


class ContentParser:
    """Pure queries over the loaded Articles: language filtering, URLs and feeds."""

    def __init__(self, config: SiteConfig):
        self.config = config

    def filter_by_language(self, articles: Iterable[Article], lang: str) -> list[Article]:
        return [
            article
            for article in articles
            if article.lang == lang or (not article.lang and lang == self.config.default_language)
        ]

    def url_for(self, article: Article, lang: str) -> str:
        if self.config.is_default(lang):
            return f"/{article.prefix}" if article.prefix else "/"
        if article.prefix:
            return f"/{lang}/{article.prefix}"
        return f"/{lang}"

    def validate_urls(self, articles: list[Article]) -> None:
        seen = set()
        duplicates = []
        for lang in self.config.installed_languages:
            for article in self.filter_by_language(articles, lang):
                url = self.url_for(article, lang)
                if url in seen:
                    duplicates.append(url)
                else:
                    seen.add(url)
        if duplicates:
            raise DuplicateUrlError(duplicates)

    def listing_view(self, articles: list[Article], lang: str) -> list[dict]:
        return [
            {
                "title": article.title,
                "description": article.description,
                "url": self.url_for(article, lang),
                "path": article.prefix,
                "link_text": article.link_text or article.title,
                "post_count": len(article.posts),
                "date": article.date_published,
                "lang": article.lang,
            }
            for article in self.filter_by_language(articles, lang)
        ]

    def _absolute(self, relative_url: str) -> str:
        if relative_url == "/":
            return self.config.app_domain
        return f"{self.config.app_domain}{relative_url}"

    def lastmod_for(self, article: Article) -> str:
        if article.posts:
            return article.posts[0].published
        return article.date_published

    def sitemap_entries(self, articles: Iterable[Article], lang: str) -> list[dict]:
        """One entry per already language-filtered Article."""
        seo = self.config.section("seo")
        changefreq = as_text(seo.get("sitemap_changefreq")).strip() or DEFAULT_CHANGEFREQ
        priority = as_text(seo.get("sitemap_priority")).strip() or DEFAULT_PRIORITY
        return [
            {
                "url": self._absolute(self.url_for(article, lang)),
                "lastmod": self.lastmod_for(article),
                "changefreq": changefreq,
                "priority": priority,
                "lang": lang,
            }
            for article in articles
        ]

    def all_sitemap_entries(self, articles: list[Article]) -> list[dict]:
        entries = []
        for lang in self.config.installed_languages:
            entries.extend(self.sitemap_entries(self.filter_by_language(articles, lang), lang))
        return entries

    def robots_txt(self) -> str:
        domain = self.config.app_domain
        lines = ["User-agent: *", "Allow: /", ""]
        for lang in self.config.installed_languages:
            if self.config.is_default(lang):
                lines.append(f"Sitemap: {domain}/sitemap.xml")
            else:
                lines.append(f"Sitemap: {domain}/{lang}/sitemap.xml")
        return "\n".join(lines) + "\n"

    def validate_page_metadata(self, meta: PageMetadata) -> list[str]:
        """Check a page's metadata before rendering.

        An empty page name raises PageValidationError. Everything else is
        returned as warnings (and logged) so the page still renders.
        """
        if not meta.page_name:
            raise PageValidationError("Page name is required")
        problems = []
        if not meta.title:
            problems.append("Title is required")
        if not meta.description:
            problems.append("Description is required")
        if len(meta.title) > TITLE_LIMIT:
            problems.append(
                f"Title is longer than {TITLE_LIMIT} characters ({len(meta.title)}), "
                "may be truncated in search results"
            )
        if len(meta.description) > DESCRIPTION_LIMIT:
            problems.append(
                f"Description is longer than {DESCRIPTION_LIMIT} characters ({len(meta.description)}), "
                "may be truncated in search results"
            )
        if any(char in meta.page_name for char in FORBIDDEN_PAGE_NAME_CHARS):
            problems.append(
                f"Page name '{meta.page_name}' contains spaces or underscores, consider using hyphens instead"
            )
        for problem in problems:
            logger.warning("Page %s: %s", meta.page_name, problem)
        return problems

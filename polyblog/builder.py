from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .articles import DEFAULT_ARTICLE_LAYOUT, Article, discover_articles
from .assets import DEFAULT_CSS_OUTPUT, bundle_css, copy_static, prepare_output_dir
from .config import SiteConfig, load_translations
from .content import read_yaml_mapping
from .errors import ContentError, PageValidationError, TemplateRenderError
from .metadata import PageMetadata, scan_page_metadata
from .output import OutputWriter
from .pages import INDEX_PAGE, PageProcessor, find_article
from .parser import ContentParser
from .posts import Post
from .render import TemplateEngine
from .utils import as_list, as_text, iso_date, utc_now
from .validation import FileValidator, ValidationSummary

logger = logging.getLogger(__name__)

LISTING_PAGE = "articles"
LISTING_MANIFEST = "articles.yml"
DOCS_PAGE = "docs"
SITEMAP_FILE = "sitemap.json"
RELEASES_FILE = "releases.json"
ROBOTS_FILE = "robots.txt"

LISTING_DEFAULTS = {
    "en": ("Articles", "Collection of interesting articles and content", ["Articles", "Blog", "Content"]),
}
LISTING_FALLBACK = ("บทความ", "รวมบทความและเนื้อหาที่น่าสนใจ", ["บทความ", "บล็อก", "เนื้อหา"])


@dataclass
class BuildSession:
    """State for one language's pass: translations, its Articles and the posts already written."""

    lang: str
    translations: dict[str, str]
    articles: list[Article]
    generated: set[tuple[str, str]] = field(default_factory=set)

    def is_generated(self, post: Post) -> bool:
        return (self.lang, post.filename) in self.generated

    def claim(self, post: Post) -> bool:
        """Mark a post as generated; False when it was already written in this language."""
        key = (self.lang, post.filename)
        if key in self.generated:
            return False
        self.generated.add(key)
        return True


def lang_prefix(config: SiteConfig, lang: str, relative_path: str) -> str:
    if config.is_default(lang):
        return relative_path
    return f"{lang}/{relative_path}"


def page_output_path(config: SiteConfig, lang: str, page_name: str) -> str:
    if page_name == INDEX_PAGE:
        relative = "index.html"
    elif config.use_directory_structure:
        relative = f"{page_name}/index.html"
    else:
        relative = f"{page_name}.html"
    return lang_prefix(config, lang, relative)


def post_output_path(config: SiteConfig, lang: str, post: Post, article: Article) -> str:
    filename = f"{post.filename}.html"
    prefix = article.prefix
    if config.is_default(lang):
        return f"{prefix}/{filename}" if prefix else filename
    # A section named like the language collapses into the language folder.
    if not prefix or prefix == lang:
        return f"{lang}/{filename}"
    return f"{lang}/{prefix}/{filename}"


def releases_feed(config: SiteConfig, articles: Iterable[Article]) -> dict:
    posts = [
        {"title": post.title, "url": post.url}
        for article in articles
        for post in article.posts
        if not post.draft
    ]
    return {
        "version": config.app_version,
        "posts": posts,
        "feed_updated": iso_date(utc_now()),
    }


class SiteBuilder:
    """Runs one full build: validation, assets, then every page of every language."""

    def __init__(
        self,
        config: SiteConfig,
        project_root: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        contents_dir: Optional[Path] = None,
        languages: Optional[list[str]] = None,
    ):
        self.config = config
        self.project_root = Path(project_root or config.root)
        self.output_dir = Path(output_dir) if output_dir else config.path("build_dir")
        self.contents_dir = Path(contents_dir) if contents_dir else config.path("contents_dir")
        self.public_dir = config.path("public_dir")
        self.languages = languages or list(config.installed_languages)
        unknown = [lang for lang in self.languages if lang not in config.installed_languages]
        if unknown:
            logger.warning("Skipping languages not installed: %s", ", ".join(unknown))
            self.languages = [lang for lang in self.languages if lang in config.installed_languages]

        self.engine = TemplateEngine(
            [config.path("source_layouts"), config.path("source_pages"), config.path("source_templates")]
        )
        self.parser = ContentParser(config)
        self.writer = OutputWriter(self.output_dir)
        self.articles: list[Article] = []
        self.pages: list[PageMetadata] = []

    def run_validation(self) -> ValidationSummary:
        validator = FileValidator()
        summary = ValidationSummary()
        for directory in (self.contents_dir, self.public_dir):
            if not directory.is_dir():
                logger.debug("Skipping validation of missing directory %s", directory)
                continue
            summary.merge(validator.validate_directory(directory))
        summary.log()
        if summary.has_errors:
            logger.warning("File validation found errors; continuing with the build")
        return summary

    def prepare_output(self) -> None:
        prepare_output_dir(self.output_dir, self.project_root)
        copy_static(self.public_dir, self.output_dir)
        css = self.config.section("css")
        files = [self.config.root / name for name in as_list(css.get("files"))]
        if files:
            output = as_text(css.get("output_path")).strip() or DEFAULT_CSS_OUTPUT
            bundle_css(files, self.output_dir / output)

    def load_content(self) -> None:
        self.articles = discover_articles(self.contents_dir, self.config)
        self.pages = scan_page_metadata(self.contents_dir)
        self.parser.validate_urls(self.articles)

    def build(self) -> list[str]:
        logger.info("Starting site generation into %s", self.output_dir)
        self.run_validation()
        self.prepare_output()
        self.load_content()
        processor = PageProcessor(self.engine, self.config, self.articles)

        for lang in self.languages:
            session = BuildSession(
                lang=lang,
                translations=load_translations(self.config.path("translations_dir"), lang),
                articles=self.parser.filter_by_language(self.articles, lang),
            )
            self.build_language(session, processor)

        self.writer.write_json(SITEMAP_FILE, self.parser.all_sitemap_entries(self.articles))
        self.writer.write_text(ROBOTS_FILE, self.parser.robots_txt())
        logger.info("Site generation completed: %d files", len(self.writer.written))
        return self.writer.written

    def build_language(self, session: BuildSession, processor: PageProcessor) -> None:
        logger.info("Generating pages for language: %s", session.lang)
        for meta in self.pages:
            if meta.page_name == LISTING_PAGE:
                continue
            if meta.lang and meta.lang != session.lang:
                continue
            self.build_page(session, processor, meta)

        for article in session.articles:
            self.build_posts(session, processor, article)

        if session.articles:
            self.build_listing(session, processor)

        self.writer.write_json(
            lang_prefix(self.config, session.lang, SITEMAP_FILE),
            self.parser.sitemap_entries(session.articles, session.lang),
        )
        self.writer.write_json(
            lang_prefix(self.config, session.lang, RELEASES_FILE),
            releases_feed(self.config, session.articles),
        )

    def build_page(self, session: BuildSession, processor: PageProcessor, meta: PageMetadata) -> None:
        try:
            self.parser.validate_page_metadata(meta)
        except PageValidationError as exc:
            logger.warning("Skipping page %r: %s", meta.page_name, exc)
            return
        article = find_article(session.articles, meta.page_name)
        if article is None:
            logger.warning("Skipping page %r: no articles for language %s", meta.page_name, session.lang)
            return

        translations = session.translations
        if meta.page_name == DOCS_PAGE:
            links = self.docs_links_html(session)
            if links:
                translations = {**translations, "docs_links_html": links}

        try:
            if meta.page_name == INDEX_PAGE:
                content = processor.render_index_page(
                    article,
                    meta,
                    session.lang,
                    translations,
                    self.parser.listing_view(self.articles, session.lang),
                    session.articles,
                )
            else:
                content = processor.render_article_page(article, meta, session.lang, translations)
        except TemplateRenderError as exc:
            logger.error("Skipping page %r (%s): %s", meta.page_name, session.lang, exc)
            return
        self.writer.write_html(page_output_path(self.config, session.lang, meta.page_name), content)

    def build_posts(self, session: BuildSession, processor: PageProcessor, article: Article) -> None:
        for post in article.posts:
            if post.draft:
                logger.info("Draft: %s (%s)", post.title, post.url)
                continue
            if session.is_generated(post):
                continue
            try:
                content = processor.render_post_page(article, post, session.lang, session.translations)
            except TemplateRenderError as exc:
                logger.error("Skipping post %s (%s): %s", post.url, session.lang, exc)
                continue
            self.writer.write_html(post_output_path(self.config, session.lang, post, article), content)
            session.claim(post)

    def listing_metadata(self, session: BuildSession) -> PageMetadata:
        default_title, default_description, keywords = LISTING_DEFAULTS.get(session.lang, LISTING_FALLBACK)
        title = session.translations.get("articles_title") or default_title
        description = session.translations.get("articles_subtitle") or default_description

        manifest_path = self.contents_dir / LISTING_MANIFEST
        if manifest_path.is_file():
            try:
                manifest = read_yaml_mapping(manifest_path)
            except ContentError as exc:
                logger.warning("Ignoring listing manifest: %s", exc)
                manifest = {}
            title = as_text(manifest.get("title")).strip() or title
            description = as_text(manifest.get("description")).strip() or description

        first = session.articles[0]
        date_published = first.date_published or iso_date(utc_now())
        return PageMetadata(
            page_name=LISTING_PAGE,
            title=title,
            description=description,
            keywords=list(keywords),
            date_published=date_published,
            date_modified=date_published,
            lang=session.lang,
            layout=DEFAULT_ARTICLE_LAYOUT,
        )

    def build_listing(self, session: BuildSession, processor: PageProcessor) -> None:
        meta = self.listing_metadata(session)
        try:
            content = processor.render_article_page(session.articles[0], meta, session.lang, session.translations)
        except TemplateRenderError as exc:
            logger.error("Skipping articles listing (%s): %s", session.lang, exc)
            return
        self.writer.write_html(lang_prefix(self.config, session.lang, f"{LISTING_PAGE}/index.html"), content)

    def docs_links_html(self, session: BuildSession) -> str:
        items = []
        for article in session.articles:
            if article.prefix != DOCS_PAGE:
                continue
            for post in article.posts:
                url = post.url if self.config.is_default(session.lang) else f"/{session.lang}{post.url}"
                items.append(f'<li><a href="{url}">{html.escape(post.title)}</a></li>')
        if not items:
            return ""
        return "<ul>{}</ul>".format("\n".join(items))

from __future__ import annotations

import dataclasses
from typing import Iterable, Optional

from .articles import DEFAULT_ARTICLE_LAYOUT, Article
from .config import SiteConfig
from .metadata import PageMetadata
from .parser import ContentParser
from .posts import Post
from .render import TemplateEngine
from .utils import join_keywords, resolve_with_fallback

INDEX_PAGE = "index"
BLOG_POSTING = "BlogPosting"

DEFAULT_FAVICON_ICO = "/favicon/favicon.ico"
DEFAULT_APPLE_TOUCH_ICON = "/favicon/apple-touch-icon.png"
DEFAULT_FAVICON_16 = "/favicon/favicon-16x16.png"
DEFAULT_FAVICON_32 = "/favicon/favicon-32x32.png"
DEFAULT_FAVICON_SVG = "/favicon/favicon.svg"
DEFAULT_MASK_ICON = "/favicon/mask-icon.svg"
DEFAULT_WEB_MANIFEST = "/site.webmanifest"
DEFAULT_ROBOTS_CONTENT = "follow, index"
DEFAULT_OG_TYPE = "website"
DEFAULT_TWITTER_CARD = "summary_large_image"
DEFAULT_TWITTER_LABEL = "Written by"

# (context key, config section, config key, default)
PRESENTATION_FIELDS = [
    ("app_author", "app_info", "app_author", ""),
    ("app_email", "app_info", "app_email", ""),
    ("app_description", "app_info", "app_description", ""),
    ("app_facebook_link", "app_info", "app_facebook_link", ""),
    ("app_instagram_link", "app_info", "app_instagram_link", ""),
    ("app_x_link", "app_info", "app_x_link", ""),
    ("app_youtube_link", "app_info", "app_youtube_link", ""),
    ("app_line_link", "app_info", "app_line_link", ""),
    ("app_github_link", "app_info", "app_github_link", ""),
    ("app_phone", "app_info", "app_phone", ""),
    ("favicon_ico", "favicon", "ico", DEFAULT_FAVICON_ICO),
    ("apple_touch_icon", "favicon", "apple_touch_icon", DEFAULT_APPLE_TOUCH_ICON),
    ("favicon_ico_16", "favicon", "ico_16", DEFAULT_FAVICON_16),
    ("favicon_ico_32", "favicon", "ico_32", DEFAULT_FAVICON_32),
    ("favicon_svg", "favicon", "svg", DEFAULT_FAVICON_SVG),
    ("mask_icon", "favicon", "mask_icon", DEFAULT_MASK_ICON),
    ("web_manifest", "favicon", "web_manifest", DEFAULT_WEB_MANIFEST),
    ("twitter_site", "twitter", "twitter_site", ""),
    ("twitter_creator", "twitter", "twitter_creator", ""),
    ("robots_content", "seo", "robots_content", DEFAULT_ROBOTS_CONTENT),
    ("google_adsense_client", "seo", "google_adsense_client", ""),
    ("og_type", "social_meta", "og_type", DEFAULT_OG_TYPE),
    ("twitter_card", "social_meta", "twitter_card", DEFAULT_TWITTER_CARD),
    ("twitter_label1", "social_meta", "twitter_label1", DEFAULT_TWITTER_LABEL),
]

# page name -> (seo override key, schema.org type)
PAGE_TYPES = {
    "index": ("type_page_home", "WebSite"),
    "about": ("type_page_about", "AboutPage"),
    "contact": ("type_page_contact", "ContactPage"),
    "articles": ("type_page_blog", BLOG_POSTING),
    "blog": ("type_page_blog", BLOG_POSTING),
}
DEFAULT_PAGE_TYPE = ("type_page_default", "WebPage")


def newest_first(posts: Iterable[Post]) -> list[Post]:
    return sorted(posts, key=lambda post: post.published, reverse=True)


def serialize_article(article: Article) -> dict:
    data = dataclasses.asdict(article)
    data["prefix"] = f"{article.prefix}/" if article.prefix else ""
    data["name"] = article.name
    return data


class PageProcessor:
    """Builds render contexts and renders pages for one set of Articles."""

    def __init__(self, engine: TemplateEngine, config: SiteConfig, articles: list[Article]):
        self.engine = engine
        self.config = config
        self.articles = articles
        self.parser = ContentParser(config)

    def type_page_for(self, name: str) -> str:
        key, default = PAGE_TYPES.get(name, DEFAULT_PAGE_TYPE)
        return resolve_with_fallback(self.config.sections(), [("type_page", "seo", key, default)])["type_page"]

    def page_path(self, page_name: str, lang: str) -> str:
        default = self.config.is_default(lang)
        if page_name == INDEX_PAGE:
            return "/" if default else f"/{lang}"
        return f"/{page_name}" if default else f"/{lang}/{page_name}"

    def page_context(
        self, article: Article, meta: PageMetadata, lang: str, translations: dict[str, str]
    ) -> dict:
        keywords = join_keywords(meta.keywords)
        if self.config.is_default(lang):
            title, description = meta.title, meta.description
        else:
            title = translations.get("title") or meta.title
            description = translations.get("description") or meta.description
            if meta.page_name == INDEX_PAGE:
                keywords = translations.get("keywords") or keywords

        path = self.page_path(meta.page_name, lang)
        context = {
            "lang": lang,
            "locale": self.config.locale_for(lang),
            "locale_alternate": self.config.alternate_locale_for(lang),
            "link_video": None,
            "title": title,
            "description": description,
            "keywords": keywords,
            "path": path,
            "url": f"{self.config.app_domain}{path}",
            "image": meta.image or "",
            "root": "" if self.config.is_default(lang) else f"/{lang}",
            "site_root": self.config.app_domain,
            "article": serialize_article(article),
            "articles": None,
            "post": None,
            "posts": list(article.posts),
            "main_posts": None,
            "date_published": meta.date_published,
            "date_modified": meta.date_modified,
            "category": meta.category,
            "translations": dict(translations),
            "app_name": self.config.app_name,
            "app_version": self.config.app_version,
            "app_domain": self.config.app_domain,
            "type_page": self.type_page_for(meta.page_name),
        }
        context.update(resolve_with_fallback(self.config.sections(), PRESENTATION_FIELDS))
        return context

    def main_posts(self, lang: str) -> list[Post]:
        posts = []
        for article in self.parser.filter_by_language(self.articles, lang):
            if not article.prefix:
                posts.extend(article.posts)
        return newest_first(posts)

    def render_article_page(
        self, article: Article, meta: PageMetadata, lang: str, translations: dict[str, str]
    ) -> str:
        context = self.page_context(article, meta, lang, translations)
        template = meta.template_name
        if template == DEFAULT_ARTICLE_LAYOUT:
            context["articles"] = self.parser.listing_view(self.articles, lang)
        context["main_posts"] = self.main_posts(lang)
        return self.engine.render(template, context)

    def render_index_page(
        self,
        article: Article,
        meta: PageMetadata,
        lang: str,
        translations: dict[str, str],
        listing: list[dict],
        articles: Iterable[Article],
    ) -> str:
        context = self.page_context(article, meta, lang, translations)
        context["articles"] = listing
        context["posts"] = newest_first(post for item in articles for post in item.posts)
        context["type_page"] = self.type_page_for(INDEX_PAGE)
        return self.engine.render(INDEX_PAGE, context)

    def post_metadata(self, post: Post, lang: str) -> PageMetadata:
        return PageMetadata(
            page_name=post.filename,
            title=post.title,
            description=post.description,
            keywords=[post.keywords] if post.keywords else [],
            image=post.image,
            draft=post.draft,
            date_published=post.published,
            date_modified=post.updated,
            lang=lang,
            layout=post.layout,
            category=post.category,
            link_text=post.title,
            author=post.author,
            author_url=post.author_url,
            author_email=post.author_email,
        )

    def post_path(self, article: Article, post: Post, lang: str) -> str:
        if self.config.is_default(lang):
            return post.url
        # A section named like the language collapses into the language folder.
        if article.prefix == lang:
            return f"/{lang}/{post.filename}.html"
        return f"/{lang}{post.url}"

    def render_post_page(
        self, article: Article, post: Post, lang: str, translations: dict[str, str]
    ) -> str:
        meta = self.post_metadata(post, lang)
        context = self.page_context(article, meta, lang, translations)
        # Posts carry their own language, so keep their title and description.
        context["title"] = post.title
        context["description"] = post.description
        context["post"] = post
        context["link_video"] = post.link_video
        context["type_page"] = BLOG_POSTING
        path = self.post_path(article, post, lang)
        context["path"] = path
        context["url"] = f"{self.config.app_domain}{path}"
        return self.engine.render(post.layout, context)


def find_article(articles: list[Article], page_name: str) -> Optional[Article]:
    """Match a page to the Article whose last prefix segment equals its name, else the first."""
    for article in articles:
        if article.name == page_name:
            return article
    return articles[0] if articles else None

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import SiteConfig
from .content import read_yaml_mapping
from .errors import ContentError
from .posts import POST_EXTENSION, Post, build_post
from .utils import as_list, as_text, parse_bool, split_language_segment

logger = logging.getLogger(__name__)

MANIFEST_FILE = "index.yml"
DEFAULT_ARTICLE_LAYOUT = "articles"
MANIFEST_FIELDS = {
    "layout",
    "lang",
    "title",
    "description",
    "image",
    "link_text",
    "keywords",
    "author",
    "author_url",
    "author_email",
    "draft",
    "date_modified",
    "date_published",
    "category",
}


@dataclass
class Article:
    prefix: str
    layout: str = DEFAULT_ARTICLE_LAYOUT
    lang: str = ""
    title: str = ""
    description: str = ""
    image: str = ""
    link_text: str = ""
    keywords: list[str] = field(default_factory=list)
    author: str = ""
    author_url: str = ""
    author_email: str = ""
    draft: bool = False
    date_published: str = ""
    date_modified: str = ""
    category: str = ""
    app_domain: str = ""
    posts: list[Post] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Last prefix segment; pages are matched to Articles by it."""
        return self.prefix.rsplit("/", 1)[-1] if self.prefix else ""


def article_prefix(directory: Path, contents_dir: Path) -> str:
    try:
        relative = directory.relative_to(contents_dir)
    except ValueError:
        return ""
    _, parts = split_language_segment(relative.parts)
    return "/".join(parts)


def process_posts(posts: list[Post]) -> list[Post]:
    """Order posts newest first, stamp show_year and unique ``updated`` values.

    Returns only released posts; drafts are logged and dropped.
    """
    posts.sort(key=lambda post: post.date_key, reverse=True)

    for index, post in enumerate(posts):
        post.show_year = index == 0 or posts[index - 1].year != post.year

    baseline = 0
    for index in range(1, len(posts)):
        if posts[index].updated == posts[baseline].updated:
            posts[index].set_updated(index - baseline)
        else:
            baseline = index

    released = []
    for post in posts:
        if post.draft:
            logger.info("Draft: %s (%s)", post.title, post.url)
            continue
        released.append(post)
    return released


def load_article(prefix: str, directory: Path, config: SiteConfig) -> Article:
    manifest_path = directory / MANIFEST_FILE
    manifest = read_yaml_mapping(manifest_path)
    unknown = sorted(set(manifest) - MANIFEST_FIELDS)
    if unknown:
        logger.warning("Ignoring unknown manifest fields %s in %s", ", ".join(unknown), manifest_path)

    post_files = sorted(
        path for path in directory.iterdir() if path.is_file() and path.suffix == POST_EXTENSION
    )
    posts = [build_post(path, config, prefix) for path in post_files]

    lang = manifest.get("lang")
    return Article(
        prefix=prefix,
        layout=as_text(manifest.get("layout")).strip() or DEFAULT_ARTICLE_LAYOUT,
        lang=config.default_language if lang is None else as_text(lang).strip(),
        title=as_text(manifest.get("title")),
        description=as_text(manifest.get("description")),
        image=as_text(manifest.get("image")),
        link_text=as_text(manifest.get("link_text")),
        keywords=as_list(manifest.get("keywords")),
        author=as_text(manifest.get("author")),
        author_url=as_text(manifest.get("author_url")),
        author_email=as_text(manifest.get("author_email")),
        draft=parse_bool(manifest.get("draft")),
        date_published=as_text(manifest.get("date_published")),
        date_modified=as_text(manifest.get("date_modified")),
        category=as_text(manifest.get("category")),
        app_domain=config.app_domain,
        posts=process_posts(posts),
    )


def discover_articles(contents_dir: Path, config: SiteConfig) -> list[Article]:
    """Find every manifest below ``contents_dir`` and load its Article.

    Walks with an explicit stack; the resulting order is not meaningful.
    """
    if not contents_dir.is_dir():
        raise ContentError("Contents directory not found", contents_dir)
    articles = []
    pending = [contents_dir]
    while pending:
        current = pending.pop()
        for entry in sorted(current.iterdir()):
            if entry.is_dir():
                pending.append(entry)
            elif entry.is_file() and entry.name == MANIFEST_FILE:
                prefix = article_prefix(entry.parent, contents_dir)
                logger.debug("Loading article %r from %s", prefix, entry.parent)
                articles.append(load_article(prefix, entry.parent, config))
    logger.info("Loaded %d articles", len(articles))
    return articles

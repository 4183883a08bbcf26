from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import SiteConfig
from .content import build_timestamp, parse_post_filename, resolve_image, split_front_matter
from .errors import ContentError
from .render import render_markdown
from .utils import as_list, as_text, join_keywords, parse_bool

logger = logging.getLogger(__name__)

POST_EXTENSION = ".md"
DEFAULT_POST_LAYOUT = "post"
DEFAULT_IMAGE_WIDTH = "1200"
DEFAULT_IMAGE_HEIGHT = "650"
DEFAULT_IMAGE_TYPE = "image/*"


@dataclass
class Post:
    filename: str
    title: str
    year: int
    month: int
    day: int
    url: str
    published: str
    updated: str
    contents: str = ""
    layout: str = DEFAULT_POST_LAYOUT
    draft: bool = False
    show_year: bool = False
    author: str = ""
    author_url: str = ""
    author_email: str = ""
    description: str = ""
    keywords: str = ""
    tags: list[str] = field(default_factory=list)
    category: Optional[str] = None
    image: str = ""
    image_secure_url: str = ""
    image_type: str = DEFAULT_IMAGE_TYPE
    image_width: str = DEFAULT_IMAGE_WIDTH
    image_height: str = DEFAULT_IMAGE_HEIGHT
    image_alt: str = ""
    is_image: bool = False
    locale: str = ""
    locale_alternate: str = ""
    app_domain: str = ""
    link: Optional[str] = None
    link_name: Optional[str] = None
    html_code: Optional[str] = None
    link_video: Optional[str] = None
    date_published: Optional[str] = None
    date_modified: Optional[str] = None

    @property
    def slug(self) -> str:
        return self.filename

    @property
    def date_key(self) -> tuple[int, int, int, str]:
        return (self.year, self.month, self.day, self.title)

    def set_updated(self, seconds: int) -> None:
        self.updated = build_timestamp(self.year, self.month, self.day, seconds)


def _optional(meta: dict, key: str) -> Optional[str]:
    value = meta.get(key)
    if value is None:
        return None
    return as_text(value)


def post_url(slug: str, prefix: str) -> str:
    if not prefix:
        return f"/{slug}.html"
    return f"/{prefix}/{slug}.html"


def build_post(path: Path, config: SiteConfig, prefix: str) -> Post:
    """Parse one dated markdown file into a Post.

    Raises ContentError on a malformed filename, missing front matter
    delimiters or invalid YAML.
    """
    year, month, day, slug = parse_post_filename(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ContentError(f"File is not valid UTF-8: {exc}", path) from exc
    meta, body = split_front_matter(text, path)

    title = as_text(meta.get("title"))
    image_value = as_text(meta.get("image")).strip()
    images = config.section("images")
    image = resolve_image(image_value, title, as_list(images.get("defaults")))
    image_url = f"{config.app_domain}/{image.lstrip('/')}"

    published = build_timestamp(year, month, day, 0)
    logger.debug("Parsed post %s (%s)", path.name, published)
    default_locale = config.locale_for(config.default_language)
    keywords = meta.get("keywords")
    if isinstance(keywords, (list, tuple)):
        keywords = join_keywords(as_list(keywords))

    return Post(
        filename=slug,
        title=title,
        year=year,
        month=month,
        day=day,
        url=post_url(slug, prefix),
        published=published,
        updated=published,
        contents=render_markdown(body),
        layout=as_text(meta.get("layout")).strip() or DEFAULT_POST_LAYOUT,
        draft=parse_bool(meta.get("draft")),
        author=as_text(meta.get("author")),
        author_url=as_text(meta.get("author_url")),
        author_email=as_text(meta.get("author_email")),
        description=as_text(meta.get("description")),
        keywords=as_text(keywords),
        tags=as_list(meta.get("tags")),
        category=_optional(meta, "category"),
        image=image,
        image_secure_url=as_text(meta.get("image_secure_url")).strip() or image_url,
        image_type=as_text(meta.get("image_type")).strip() or DEFAULT_IMAGE_TYPE,
        image_width=as_text(meta.get("image_width")).strip() or DEFAULT_IMAGE_WIDTH,
        image_height=as_text(meta.get("image_height")).strip() or DEFAULT_IMAGE_HEIGHT,
        image_alt=as_text(meta.get("image_alt")).strip() or title,
        is_image=bool(image_value),
        locale=as_text(meta.get("locale")).strip() or default_locale,
        locale_alternate=as_text(meta.get("locale_alternate")).strip() or default_locale,
        app_domain=config.app_domain,
        link=_optional(meta, "link"),
        link_name=_optional(meta, "link_name"),
        html_code=_optional(meta, "html_code"),
        link_video=_optional(meta, "link_video"),
        date_published=_optional(meta, "date_published"),
        date_modified=_optional(meta, "date_modified"),
    )

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .content import read_yaml_mapping
from .errors import ContentError
from .utils import as_list, as_text, parse_bool, split_language_segment

logger = logging.getLogger(__name__)

METADATA_EXTENSION = ".yml"
INDEX_STEM = "index"


@dataclass
class PageMetadata:
    page_name: str
    title: str = ""
    description: str = ""
    keywords: list[str] = field(default_factory=list)
    image: Optional[str] = None
    draft: bool = False
    date_published: Optional[str] = None
    date_modified: Optional[str] = None
    lang: Optional[str] = None
    layout: Optional[str] = None
    category: Optional[str] = None
    link_text: Optional[str] = None
    author: Optional[str] = None
    author_url: Optional[str] = None
    author_email: Optional[str] = None

    @property
    def template_name(self) -> str:
        return self.layout or self.page_name


def _optional(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    return as_text(value)


def metadata_from_mapping(page_name: str, data: dict) -> PageMetadata:
    return PageMetadata(
        page_name=page_name,
        title=as_text(data.get("title")),
        description=as_text(data.get("description")),
        keywords=as_list(data.get("keywords")),
        image=_optional(data, "image"),
        draft=parse_bool(data.get("draft")),
        date_published=_optional(data, "date_published"),
        date_modified=_optional(data, "date_modified"),
        lang=_optional(data, "lang"),
        layout=_optional(data, "layout"),
        category=_optional(data, "category"),
        link_text=_optional(data, "link_text"),
        author=_optional(data, "author"),
        author_url=_optional(data, "author_url"),
        author_email=_optional(data, "author_email"),
    )


def page_name_for(path: Path, contents_dir: Path) -> tuple[str, Optional[str]]:
    """Derive ``(page_name, detected_lang)`` for a metadata file.

    ``about.yml`` -> ``about``; ``blog/index.yml`` -> ``blog``;
    ``th/blog/index.yml`` -> ``blog`` in ``th``; ``docs/intro.yml`` -> ``docs/intro``.
    """
    relative = path.relative_to(contents_dir)
    directories = relative.parts[:-1]
    stem = path.stem
    if not directories:
        return stem, None
    lang, remainder = split_language_segment(directories)
    if not remainder:
        return stem, lang
    directory = "/".join(remainder)
    if stem == INDEX_STEM:
        return directory, lang
    return f"{directory}/{stem}", lang


def scan_page_metadata(contents_dir: Path) -> list[PageMetadata]:
    """Collect PageMetadata for every ``*.yml`` below ``contents_dir``.

    Files that cannot be read or parsed are logged and skipped.
    """
    if not contents_dir.is_dir():
        logger.error("Unable to read directory: %s", contents_dir)
        return []
    pages = []
    pending = [contents_dir]
    while pending:
        current = pending.pop()
        for entry in sorted(current.iterdir()):
            if entry.is_dir():
                if not entry.name.startswith("."):
                    pending.append(entry)
                continue
            if entry.suffix != METADATA_EXTENSION:
                continue
            try:
                data = read_yaml_mapping(entry)
            except (OSError, UnicodeDecodeError, ContentError) as exc:
                logger.error("Unable to read page metadata %s: %s", entry, exc)
                continue
            page_name, detected_lang = page_name_for(entry, contents_dir)
            meta = metadata_from_mapping(page_name, data)
            if detected_lang:
                meta.lang = detected_lang
            pages.append(meta)
    return pages

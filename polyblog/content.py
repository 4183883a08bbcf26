from __future__ import annotations

import datetime as dt
import hashlib
import logging
import re
from pathlib import Path
from typing import NamedTuple, Optional, Sequence

import yaml

from .errors import ContentError

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"
IMAGE_FORMATS = {"webp", "avif", "jpg", "jpeg", "png", "gif", "svg", "bmp"}
DEFAULT_POST_IMAGE = "/favicon/favicon.svg"
CLOSING_RE = re.compile(r"^---[ \t]*$", re.MULTILINE)
EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)


class PostFilename(NamedTuple):
    year: int
    month: int
    day: int
    slug: str


def parse_post_filename(path: Path) -> PostFilename:
    """Split ``YYYY-M-D-slug.ext`` into its date parts and slug."""
    name = path.name
    parts = name.split("-", 3)
    labels = ("year", "month", "day")
    numbers = []
    for index, label in enumerate(labels):
        if index >= len(parts) or not parts[index]:
            raise ContentError(f"Missing {label} in filename: {name}", path)
        if not parts[index].isdecimal():
            raise ContentError(f"Invalid {label} in filename: {name}", path)
        numbers.append(int(parts[index]))
    if len(parts) < 4:
        raise ContentError(f"Missing title in filename: {name}", path)
    slug = Path(parts[3]).stem
    if not slug:
        raise ContentError(f"Missing title in filename: {name}", path)
    return PostFilename(numbers[0], numbers[1], numbers[2], slug)


def split_front_matter(text: str, path: Path) -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff")
    if len(clean_text.encode("utf-8")) < 5:
        raise ContentError("File is empty, or too short to have valid front matter", path)
    if not clean_text.startswith(FRONT_MATTER_DELIMITER):
        raise ContentError("Missing opening '---' in front matter", path)
    first_break = clean_text.find("\n")
    closing = CLOSING_RE.search(clean_text, first_break + 1) if first_break != -1 else None
    if closing is None:
        raise ContentError("Missing closing '---' in front matter", path)
    try:
        meta = yaml.safe_load(clean_text[len(FRONT_MATTER_DELIMITER) : closing.start()])
    except yaml.YAMLError as exc:
        raise ContentError(f"Invalid YAML front matter: {exc}", path) from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise ContentError("Front matter must be a YAML mapping", path)
    body = clean_text[closing.end() :].lstrip("\r\n")
    return meta, body


def read_yaml_mapping(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ContentError(f"Invalid YAML: {exc}", path) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ContentError("YAML document must be a mapping", path)
    return data


def build_timestamp(year: int, month: int, day: int, seconds: int = 0) -> str:
    """RFC 3339 timestamp for midnight (plus ``seconds``) of the given UTC date.

    Invalid input degrades step by step instead of failing the build.
    """
    try:
        date = dt.date(year, month, day)
    except (ValueError, OverflowError):
        logger.warning("Invalid date %s-%s-%s, using current date", year, month, day)
        date = dt.datetime.now(dt.timezone.utc).date()

    stamp = None
    try:
        stamp = dt.datetime.combine(date, dt.time(0, 0, seconds), tzinfo=dt.timezone.utc)
    except (ValueError, OverflowError):
        logger.warning("Invalid time with %s seconds, trying 0 seconds", seconds)
    if stamp is None:
        try:
            stamp = dt.datetime.combine(date, dt.time(0, 0, 0), tzinfo=dt.timezone.utc)
        except (ValueError, OverflowError):
            logger.error("Failed to create a valid time for %s, using epoch 1970-01-01 00:00:00", date)
            stamp = EPOCH
    return stamp.isoformat()


def is_image_file(url: str) -> bool:
    cleaned = re.split(r"[?#]", url, maxsplit=1)[0]
    suffix = Path(cleaned).suffix.lstrip(".").lower()
    return suffix in IMAGE_FORMATS


def default_post_image(title: str, candidates: Optional[Sequence[str]] = None) -> str:
    """Pick a stable fallback image for a post title."""
    if not candidates:
        return DEFAULT_POST_IMAGE
    digest = hashlib.sha256(title.encode("utf-8")).hexdigest()
    return candidates[int(digest, 16) % len(candidates)]


def resolve_image(image: str, title: str, candidates: Optional[Sequence[str]] = None) -> str:
    if image and is_image_file(image):
        return image
    return default_post_image(title, candidates)

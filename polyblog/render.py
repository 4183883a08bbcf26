from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import markdown
from jinja2 import (
    Environment,
    FileSystemLoader,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from .errors import TemplateRenderError

logger = logging.getLogger(__name__)

LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")

MARKDOWN_EXTENSIONS = [
    "tables",
    "footnotes",
    "fenced_code",
    "codehilite",
    "toc",
    "pymdownx.tilde",
]
MARKDOWN_EXTENSION_CONFIGS = {
    "codehilite": {"guess_lang": False, "css_class": "highlight"},
    "pymdownx.tilde": {"subscript": False},
}

MONTHS_EN = ["Jan.", "Feb.", "Mar.", "Apr.", "May", "June", "July", "Aug.", "Sept.", "Oct.", "Nov.", "Dec."]
MONTHS_TH = [
    "มกราคม",
    "กุมภาพันธ์",
    "มีนาคม",
    "เมษายน",
    "พฤษภาคม",
    "มิถุนายน",
    "กรกฎาคม",
    "สิงหาคม",
    "กันยายน",
    "ตุลาคม",
    "พฤศจิกายน",
    "ธันวาคม",
]
MONTHS_TH_SHORT = ["ม.ค.", "ก.พ.", "มี.ค.", "เม.ย.", "พ.ค.", "มิ.ย.", "ก.ค.", "ส.ค.", "ก.ย.", "ต.ค.", "พ.ย.", "ธ.ค."]


def normalize_list_spacing(text: str) -> str:
    """Insert the blank line Python-Markdown needs before a top-level list."""
    lines = text.splitlines()
    out: list[str] = []
    in_fence = False
    fence_marker = ""
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(2)
            if not in_fence:
                in_fence = True
                fence_marker = marker
            elif marker == fence_marker:
                in_fence = False
                fence_marker = ""
            out.append(line)
            continue
        if in_fence:
            out.append(line)
            continue
        list_match = LIST_MARKER_RE.match(line)
        if list_match and not list_match.group("indent"):
            if out and out[-1].strip() and not LIST_MARKER_RE.match(out[-1]):
                out.append("")
        out.append(line)
    return "\n".join(out)


def render_markdown(body: str) -> str:
    """Render a post body. Raw HTML passes through untouched."""
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
    )
    return md.convert(normalize_list_spacing(body))


def _month_name(names: list[str], fallback: str):
    def lookup(value: object) -> str:
        try:
            index = int(value)
        except (TypeError, ValueError):
            return fallback
        if 1 <= index <= 12:
            return names[index - 1]
        return fallback

    return lookup


def limit(items: object, count: int) -> list:
    if not isinstance(items, (list, tuple)):
        return []
    return list(items[: max(0, int(count))])


def thai_year(year: object) -> int:
    return int(year) + 543


class TemplateEngine:
    """Jinja2 environment over the layout, page and shared template folders.

    A template named ``post`` resolves to ``post.html`` in the first folder
    that has it.
    """

    def __init__(self, directories: Iterable[Path]):
        search_path = [str(path) for path in directories if Path(path).is_dir()]
        if not search_path:
            logger.warning("No template directories found")
        self.env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["limit"] = limit
        self.env.filters["month_name_en"] = _month_name(MONTHS_EN, "Error!")
        self.env.filters["month_name_th"] = _month_name(MONTHS_TH, "ข้อผิดพลาด!")
        self.env.filters["month_short_th"] = _month_name(MONTHS_TH_SHORT, "ข้อผิดพลาด!")
        self.env.filters["thai_year"] = thai_year

    def render(self, name: str, context: dict) -> str:
        try:
            template = self.env.get_template(f"{name}.html")
            return template.render(**context)
        except TemplateNotFound as exc:
            raise TemplateRenderError(name, f"template not found: {exc.name}") from exc
        except TemplateError as exc:
            raise TemplateRenderError(name, str(exc)) from exc

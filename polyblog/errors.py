from __future__ import annotations

from pathlib import Path
from typing import Optional


class SiteError(Exception):
    """Base class for every error raised while building a site."""


class ConfigError(SiteError):
    pass


class ContentError(SiteError):
    """A content file could not be parsed. Fatal for the owning Article."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


class PageValidationError(SiteError):
    pass


class DuplicateUrlError(SiteError):
    def __init__(self, urls: list[str]):
        self.urls = list(urls)
        super().__init__(f"Duplicate URLs found: {', '.join(self.urls)}")


class TemplateRenderError(SiteError):
    def __init__(self, template: str, message: str):
        self.template = template
        super().__init__(f"Template error in {template}: {message}")

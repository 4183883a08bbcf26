from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError
from .utils import as_text, parse_bool

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
DEFAULT_LOCALE = "en_US"

DEFAULT_PATHS = {
    "contents_dir": "contents",
    "public_dir": "public",
    "build_dir": "build",
    "source_layouts": "source/layouts",
    "source_pages": "source/pages",
    "source_templates": "source",
    "translations_dir": "source/translations",
}


def load_config(path: Path) -> dict:
    if not path.exists():
        logger.warning("No config file found at %s, using defaults", path)
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
        return data
    if suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"YAML config must be a mapping: {path}")
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"JSON config must be a mapping: {path}")
    return data


class SiteConfig:
    """Typed view over the raw ``app.toml`` mapping.

    Optional sections (``seo``, ``favicon``, ``social_meta`` ...) stay as plain
    dicts and are resolved field by field where they are used.
    """

    def __init__(self, data: Optional[dict] = None, root: Optional[Path] = None):
        self.data = data or {}
        self.root = root or Path.cwd()

        languages = self.section("languages")
        default = as_text(languages.get("default_language")).strip() or DEFAULT_LANGUAGE
        installed = [as_text(code).strip() for code in languages.get("installed_languages") or []]
        installed = [code for code in installed if code]
        if not installed:
            installed = [default]
        if default not in installed:
            raise ConfigError(f"Default language '{default}' is not in installed_languages {installed}")
        self.default_language = default
        self.installed_languages = installed

        app_info = self.section("app_info")
        self.app_name = as_text(app_info.get("app_name"))
        self.app_version = as_text(app_info.get("app_version"))
        self.app_domain = as_text(app_info.get("app_domain")).rstrip("/")

    @classmethod
    def from_file(cls, path: Path) -> "SiteConfig":
        return cls(load_config(path), root=path.resolve().parent)

    def section(self, name: str) -> dict:
        value = self.data.get(name)
        return value if isinstance(value, dict) else {}

    def sections(self) -> dict[str, dict]:
        return {name: value for name, value in self.data.items() if isinstance(value, dict)}

    def path(self, key: str) -> Path:
        value = as_text(self.section("paths").get(key)).strip() or DEFAULT_PATHS[key]
        path = Path(value)
        if not path.is_absolute():
            path = self.root / path
        return path

    @property
    def use_directory_structure(self) -> bool:
        value = self.section("paths").get("use_directory_structure")
        return True if value is None else parse_bool(value)

    def is_default(self, lang: str) -> bool:
        return lang == self.default_language

    def locale_for(self, lang: str) -> str:
        locale = as_text(self.section("locales").get(lang)).strip()
        return locale or DEFAULT_LOCALE

    def alternate_locale_for(self, lang: str) -> str:
        if not self.is_default(lang):
            return self.locale_for(self.default_language)
        for code in self.installed_languages:
            if code != lang:
                return self.locale_for(code)
        return DEFAULT_LOCALE


def load_translations(directory: Path, lang: str) -> dict[str, str]:
    path = directory / f"{lang}.toml"
    if not path.exists():
        logger.warning("Translation file not found: %s, using defaults", path)
        return {}
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Failed to load translation file %s: %s", path, exc)
        return {}
    translations = {key: as_text(value) for key, value in data.items() if not isinstance(value, dict)}
    logger.info("Loaded %d translations for %s", len(translations), lang)
    return translations

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable

from .errors import ConfigError
from .output import write_text

logger = logging.getLogger(__name__)

DEFAULT_CSS_OUTPUT = "_system_/styles/app.css"


def clean_output_dir(output_dir: Path, project_root: Path) -> None:
    if not output_dir.exists():
        return
    output_resolved = output_dir.resolve()
    root_resolved = project_root.resolve()
    if output_resolved == root_resolved:
        raise ConfigError("Refusing to clean project root.")
    if not output_resolved.is_relative_to(root_resolved):
        raise ConfigError(f"Refusing to clean output directory outside project root: {output_dir}")
    logger.info("Cleaning previous build in %s", output_dir)
    shutil.rmtree(output_dir)


def prepare_output_dir(output_dir: Path, project_root: Path) -> None:
    clean_output_dir(output_dir, project_root)
    output_dir.mkdir(parents=True, exist_ok=True)


def copy_static(static_dir: Path, output_dir: Path) -> None:
    if not static_dir.is_dir():
        logger.info("No static directory at %s, skipping copy", static_dir)
        return
    logger.info("Copying static assets from %s", static_dir)
    for item in static_dir.iterdir():
        dest = output_dir / item.name
        if item.is_dir():
            if dest.exists():
                shutil.rmtree(dest)
            shutil.copytree(item, dest)
        else:
            shutil.copy2(item, dest)


def bundle_css(files: Iterable[Path], output_path: Path) -> str:
    """Concatenate the configured stylesheets into one bundle.

    Missing files are logged and left out.
    """
    parts = []
    for path in files:
        if not path.is_file():
            logger.warning("CSS file not found: %s", path)
            continue
        parts.append(f"/* {path.name} */\n{path.read_text(encoding='utf-8').strip()}\n")
    bundle = "\n".join(parts)
    if parts:
        write_text(output_path, bundle)
        logger.info("Wrote CSS bundle %s (%d files)", output_path, len(parts))
    return bundle

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class OutputWriter:
    """Writes generated files below the build directory, overwriting in place."""

    def __init__(self, out_directory: Path):
        self.out_directory = Path(out_directory)
        self.written: list[str] = []

    def path_for(self, relative_path: str) -> Path:
        return self.out_directory / relative_path

    def write_text(self, relative_path: str, content: str) -> Path:
        path = self.path_for(relative_path)
        write_text(path, content)
        self.written.append(relative_path)
        logger.info("Generated: %s", relative_path)
        return path

    def write_html(self, relative_path: str, content: str) -> Path:
        return self.write_text(relative_path, content)

    def write_json(self, relative_path: str, value: object) -> Path:
        return self.write_text(relative_path, json.dumps(value, indent=2, ensure_ascii=False))

from __future__ import annotations

import os
import tarfile
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATE_DIR = Path("~/.mkrepo/templates")
ARCHIVE_SUFFIX = ".tar.gz"


class TemplateError(RuntimeError):
    pass


class TemplateNotFound(TemplateError):
    def __init__(self, name: str, archive: Path) -> None:
        super().__init__(f"Template '{name}' not found at {archive}")
        self.name = name
        self.archive = archive


class TemplateStore:
    """Project templates stored as ``<template_dir>/<name>.tar.gz``."""

    def __init__(self, template_dir: Path | None = None) -> None:
        self.template_dir = (template_dir or DEFAULT_TEMPLATE_DIR).expanduser()

    def archive_path(self, name: str) -> Path:
        if not name or os.sep in name or (os.altsep and os.altsep in name):
            raise TemplateError(f"Invalid template name: {name!r}")
        if name in {".", ".."}:
            raise TemplateError(f"Invalid template name: {name!r}")
        return self.template_dir / f"{name}{ARCHIVE_SUFFIX}"

    def extract(self, name: str, destination: Path) -> None:
        archive = self.archive_path(name)
        if not archive.is_file():
            raise TemplateNotFound(name, archive)
        try:
            with tarfile.open(archive, "r:gz") as tar:
                # The data filter rejects absolute paths, links and members
                # that would land outside the destination.
                tar.extractall(destination, filter="data")
        except (tarfile.TarError, OSError) as exc:
            raise TemplateError(f"Failed to extract {archive}: {exc}") from exc
        logger.debug("extracted template", template=name, destination=str(destination))

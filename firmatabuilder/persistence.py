"""Sketch persistence — writes generated sketches to disk."""

from __future__ import annotations

import logging
from pathlib import Path

from firmatabuilder.config import settings
from firmatabuilder.errors import PersistenceError


log = logging.getLogger("firmatabuilder.persistence")


def sketch_path(name: str, output_dir: Path | None = None) -> Path:
    """Where ``write_sketch`` puts the sketch called *name*."""
    return (output_dir or settings.output_dir) / f"{name}{settings.sketch_extension}"


def write_sketch(name: str, content: str, output_dir: Path | None = None) -> Path:
    """Write *content* as ``<output_dir>/<name>.ino`` and return the path.

    Any OS failure is re-raised as PersistenceError chained to the original.
    """
    path = sketch_path(name, output_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(path, exc.strerror or str(exc)) from exc
    log.info("Generated sketch written to %s", path)
    return path

"""Orchestrator — resolve once, emit every block once, hand the text off."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Mapping

from firmatabuilder.catalog.models import FeatureDescriptor
from firmatabuilder.config import settings
from firmatabuilder.persistence import write_sketch
from firmatabuilder.selection import UserSelection

from .context import resolve
from .emitter import (
    emit_header, emit_includes, emit_post_dependencies,
    emit_reset_callback, emit_setup, emit_loop,
)


log = logging.getLogger("firmatabuilder.generator")

SketchWriter = Callable[[str, str, Path | None], Path]


def sketch_filename(selection: UserSelection) -> str:
    return f"{selection.filename}{settings.sketch_extension}"


def generate_sketch(
    catalog: Mapping[str, FeatureDescriptor],
    selection: UserSelection,
    *,
    now: datetime | None = None,
) -> str:
    """Return the complete sketch text for *selection*.

    Raises UnknownFeatureError / DuplicateFeatureError before any text is
    produced.  Apart from the timestamp line the output depends only on
    (catalog, selection).
    """
    ctx = resolve(catalog, selection.selected_features)

    return "".join([
        emit_header(selection.filename, now),
        emit_includes(ctx),
        emit_post_dependencies(ctx),
        emit_reset_callback(ctx),
        emit_setup(ctx, selection.connection),
        emit_loop(ctx),
    ])


def generate(
    catalog: Mapping[str, FeatureDescriptor],
    selection: UserSelection,
    *,
    output_dir: Path | None = None,
    writer: SketchWriter = write_sketch,
    now: datetime | None = None,
) -> Path:
    """Generate the sketch and hand it to *writer*; returns the written path."""
    text = generate_sketch(catalog, selection, now=now)
    log.info(
        "Generated %s (%d features, %d bytes)",
        sketch_filename(selection), len(selection.selected_features), len(text),
    )
    return writer(selection.filename, text, output_dir)

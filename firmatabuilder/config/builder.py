"""
Builder configuration — defaults for sketch names, serial speed and output.

Loads configs/builder.json once and exposes typed accessors.
"""

from __future__ import annotations
import json
import os
from pathlib import Path
from functools import lru_cache


ROOT = Path(__file__).resolve().parents[2]
_CONFIG_PATH = ROOT / "configs" / "builder.json"

OUTPUT_DIR_ENV = "FIRMATABUILDER_OUTPUT_DIR"


@lru_cache(maxsize=1)
def _load() -> dict:
    return json.loads(_CONFIG_PATH.read_text(encoding="utf-8"))


class _Settings:
    """Typed accessor for builder config."""

    # ── raw section accessors ───────────────────────────────────────
    @property
    def sketch(self) -> dict:
        return _load()["sketch"]

    @property
    def serial(self) -> dict:
        return _load()["serial"]

    # ── sketch ──────────────────────────────────────────────────────
    @property
    def default_filename(self) -> str:
        return _load()["sketch"]["default_filename"]

    @property
    def sketch_extension(self) -> str:
        return _load()["sketch"]["extension"]

    @property
    def output_dir(self) -> Path:
        override = os.environ.get(OUTPUT_DIR_ENV)
        if override:
            return Path(override)
        return ROOT / _load()["sketch"]["output_dir"]

    # ── serial ──────────────────────────────────────────────────────
    @property
    def default_baud(self) -> int:
        return _load()["serial"]["default_baud"]

    @property
    def allowed_baud_rates(self) -> tuple[int, ...]:
        return tuple(_load()["serial"]["allowed_baud_rates"])

    # ── selection ───────────────────────────────────────────────────
    @property
    def default_features(self) -> list[str]:
        return list(_load()["default_features"])


settings = _Settings()

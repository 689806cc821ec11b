"""Builder configuration (configs/builder.json)."""

from .builder import settings, ROOT, OUTPUT_DIR_ENV

__all__ = ["settings", "ROOT", "OUTPUT_DIR_ENV"]

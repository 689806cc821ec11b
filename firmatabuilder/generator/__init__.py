"""Sketch generator — turns a feature selection into a ConfiguredFirmata sketch.

Submodules:
  context       BuildContext and the selection resolver.
  emitter       One function per sketch block (header … loop).
  orchestrator  Runs resolve + emitters in order and hands off the text.
"""

from .context import BuildContext, resolve
from .emitter import (
    emit_header, emit_includes, emit_post_dependencies,
    emit_reset_callback, emit_setup, emit_loop,
)
from .orchestrator import generate, generate_sketch, sketch_filename

__all__ = [
    # Context
    "BuildContext", "resolve",
    # Emitters
    "emit_header", "emit_includes", "emit_post_dependencies",
    "emit_reset_callback", "emit_setup", "emit_loop",
    # Orchestrator
    "generate", "generate_sketch", "sketch_filename",
]

"""Catalog dataclasses — typed representations of catalog/*.json entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Capability(str, Enum):
    """Board capability a feature switches on in the generated sketch.

    These gate code that cannot be derived from the generic
    reporting/update metadata (pin modes in the reset callback, the
    analogWrite handler, the scheduler's task hook in the loop).
    """

    ANALOG_INPUT = "analog_input"
    ANALOG_OUTPUT = "analog_output"
    DIGITAL_INPUT = "digital_input"
    DIGITAL_OUTPUT = "digital_output"
    SERVO = "servo"
    SCHEDULER = "scheduler"


@dataclass(frozen=True)
class SystemDependency:
    """An Arduino library header a feature needs included before its own."""

    path: str                           # include prefix, "" for core libraries
    class_name: str

    @property
    def include_path(self) -> str:
        return f"{self.path}{self.class_name}.h"


@dataclass(frozen=True)
class FeatureDescriptor:
    name: str
    path: str                           # e.g. "utility/"
    class_name: str
    instance_name: str
    reporting: bool = False             # has report(), called when the sampling timer fires
    update: bool = False                # has update(), called every loop pass
    capability: Capability | None = None
    system_dependencies: tuple[SystemDependency, ...] = ()
    description: str = ""
    source_file: str = ""               # path of the JSON file (for error reporting)

    @property
    def include_path(self) -> str:
        return f"{self.path}{self.class_name}.h"


@dataclass
class ValidationError:
    feature_name: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.feature_name}] {self.field}: {self.message}"


@dataclass
class CatalogResult:
    """Result of loading the catalog — features + any validation errors."""
    features: list[FeatureDescriptor]
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0

    def by_name(self) -> dict[str, FeatureDescriptor]:
        """Mapping of feature name to descriptor, in catalog order."""
        return {f.name: f for f in self.features}

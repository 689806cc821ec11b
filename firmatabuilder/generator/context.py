"""Selection resolver — turns an ordered feature selection into a BuildContext."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from firmatabuilder.catalog.models import Capability, FeatureDescriptor
from firmatabuilder.errors import DuplicateFeatureError, UnknownFeatureError


log = logging.getLogger("firmatabuilder.generator")


@dataclass
class BuildContext:
    """Everything the emitters need to know about one generation run.

    Built fresh by ``resolve`` for every run and never shared.
    """

    features: list[FeatureDescriptor]            # selection order
    capabilities: frozenset[Capability] = frozenset()
    reporting_features: list[FeatureDescriptor] = field(default_factory=list)
    update_features: list[FeatureDescriptor] = field(default_factory=list)
    emitted_dependencies: set[str] = field(default_factory=set)  # dedup set for dependency includes

    # ── capability flags ───────────────────────────────────────────

    @property
    def analog_input(self) -> bool:
        return Capability.ANALOG_INPUT in self.capabilities

    @property
    def analog_output(self) -> bool:
        return Capability.ANALOG_OUTPUT in self.capabilities

    @property
    def digital_input(self) -> bool:
        return Capability.DIGITAL_INPUT in self.capabilities

    @property
    def digital_output(self) -> bool:
        return Capability.DIGITAL_OUTPUT in self.capabilities

    @property
    def servo(self) -> bool:
        return Capability.SERVO in self.capabilities

    @property
    def scheduler(self) -> bool:
        return Capability.SCHEDULER in self.capabilities

    @property
    def analog_write(self) -> bool:
        """analogWrite handler is needed for PWM output or servos."""
        return self.analog_output or self.servo

    # ── derived ────────────────────────────────────────────────────

    @property
    def reporting_enabled(self) -> bool:
        return len(self.reporting_features) > 0

    @property
    def update_enabled(self) -> bool:
        return len(self.update_features) > 0

    def feature_for(self, capability: Capability) -> FeatureDescriptor | None:
        """The selected feature providing *capability*, if any."""
        for feat in self.features:
            if feat.capability is capability:
                return feat
        return None


def resolve(
    catalog: Mapping[str, FeatureDescriptor],
    selected_features: Iterable[str],
) -> BuildContext:
    """Resolve *selected_features* against *catalog*.

    Raises UnknownFeatureError for a name missing from the catalog and
    DuplicateFeatureError for a name selected twice.  Nothing is emitted
    before this succeeds.
    """
    features: list[FeatureDescriptor] = []
    capabilities: set[Capability] = set()
    reporting: list[FeatureDescriptor] = []
    update: list[FeatureDescriptor] = []
    seen: set[str] = set()

    for name in selected_features:
        if name in seen:
            raise DuplicateFeatureError(name)
        seen.add(name)

        feature = catalog.get(name)
        if feature is None:
            raise UnknownFeatureError(name)
        features.append(feature)

        if feature.capability is not None:
            capabilities.add(feature.capability)
        if feature.reporting:
            reporting.append(feature)
        if feature.update:
            update.append(feature)

    ctx = BuildContext(
        features=features,
        capabilities=frozenset(capabilities),
        reporting_features=reporting,
        update_features=update,
    )
    log.debug(
        "Resolved %d features: capabilities=%s reporting=%s update=%s",
        len(features),
        sorted(c.value for c in ctx.capabilities),
        [f.instance_name for f in reporting],
        [f.instance_name for f in update],
    )
    return ctx

"""Catalog loader — reads catalog/*.json files, parses and validates them."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Mapping

from firmatabuilder.errors import CatalogError

from .models import (
    Capability, SystemDependency, FeatureDescriptor,
    ValidationError, CatalogResult,
)


log = logging.getLogger("firmatabuilder.catalog")

CATALOG_DIR = Path(__file__).resolve().parent.parent.parent / "catalog"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


# ── Validation ─────────────────────────────────────────────────────

def _validate_feature(feat: FeatureDescriptor) -> list[ValidationError]:
    """Run all validation checks on a single feature."""
    errs: list[ValidationError] = []
    name = feat.name

    if not feat.class_name:
        errs.append(ValidationError(name, "class_name", "Must not be empty"))
    elif not _IDENTIFIER.match(feat.class_name):
        errs.append(ValidationError(name, "class_name", f"'{feat.class_name}' is not a valid C++ identifier"))

    if not feat.instance_name:
        errs.append(ValidationError(name, "instance_name", "Must not be empty"))
    elif not _IDENTIFIER.match(feat.instance_name):
        errs.append(ValidationError(name, "instance_name", f"'{feat.instance_name}' is not a valid C++ identifier"))

    if feat.path and not feat.path.endswith("/"):
        errs.append(ValidationError(name, "path", f"Include prefix '{feat.path}' must end with '/'"))

    for i, dep in enumerate(feat.system_dependencies):
        if not dep.class_name:
            errs.append(ValidationError(name, f"system_dependencies[{i}].class_name", "Must not be empty"))

    return errs


def _validate_catalog(features: list[FeatureDescriptor]) -> list[ValidationError]:
    """Checks that span files: unique names, instances and capabilities."""
    errs: list[ValidationError] = []

    name_counts: dict[str, int] = {}
    for feat in features:
        name_counts[feat.name] = name_counts.get(feat.name, 0) + 1
    for name, count in name_counts.items():
        if count > 1:
            errs.append(ValidationError(name, "name", f"Duplicate feature name (appears {count} times)"))

    instances: dict[str, str] = {}
    capabilities: dict[Capability, str] = {}
    for feat in features:
        owner = instances.setdefault(feat.instance_name, feat.name)
        if owner != feat.name:
            errs.append(ValidationError(feat.name, "instance_name",
                                        f"Instance '{feat.instance_name}' already used by {owner}"))
        if feat.capability is not None:
            owner = capabilities.setdefault(feat.capability, feat.name)
            if owner != feat.name:
                errs.append(ValidationError(feat.name, "capability",
                                            f"Capability '{feat.capability.value}' already claimed by {owner}"))

    return errs


# ── Parsing ────────────────────────────────────────────────────────

def _parse_dependency(data: dict) -> SystemDependency:
    return SystemDependency(
        path=data.get("path", ""),
        class_name=data["class_name"],
    )


def _parse_capability(value: str | None) -> Capability | None:
    if value is None:
        return None
    return Capability(value)


def parse_feature(data: dict, source_file: str = "") -> FeatureDescriptor:
    return FeatureDescriptor(
        name=data["name"],
        path=data.get("path", ""),
        class_name=data["class_name"],
        instance_name=data["instance_name"],
        reporting=bool(data.get("reporting", False)),
        update=bool(data.get("update", False)),
        capability=_parse_capability(data.get("capability")),
        system_dependencies=tuple(_parse_dependency(d) for d in data.get("system_dependencies", [])),
        description=data.get("description", ""),
        source_file=source_file,
    )


# ── Public API ─────────────────────────────────────────────────────

def load_catalog(catalog_dir: Path | None = None) -> CatalogResult:
    """Load all catalog/*.json files, parse and validate.

    Returns a CatalogResult with features and any validation errors.
    Features that fail to parse are skipped (error recorded).
    Features that parse but have validation issues are still included.
    Raises CatalogError when the directory holds no feature files.
    """
    d = catalog_dir or CATALOG_DIR
    features: list[FeatureDescriptor] = []
    errors: list[ValidationError] = []

    json_files = sorted(d.glob("*.json"))
    if not json_files:
        err = ValidationError("_catalog", "files", f"No .json files found in {d}")
        raise CatalogError(str(err), [err])

    for path in json_files:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            errors.append(ValidationError(
                path.stem, "json", f"Parse error: {exc}"))
            continue
        except OSError as exc:
            errors.append(ValidationError(
                path.stem, "file", f"Read error: {exc}"))
            continue

        try:
            feat = parse_feature(raw, source_file=str(path))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            name = raw.get("name", path.stem) if isinstance(raw, dict) else path.stem
            errors.append(ValidationError(
                name, "parse", f"Missing/invalid field: {exc}"))
            continue

        errors.extend(_validate_feature(feat))
        features.append(feat)

    errors.extend(_validate_catalog(features))

    for err in errors:
        log.warning("Catalog problem: %s", err)

    return CatalogResult(features=features, errors=errors)


def get_feature(
    catalog: Mapping[str, FeatureDescriptor] | CatalogResult, name: str,
) -> FeatureDescriptor | None:
    """Look up a feature by name. Returns None if not found."""
    feats = catalog.by_name() if isinstance(catalog, CatalogResult) else catalog
    return feats.get(name)

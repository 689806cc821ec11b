"""Catalog serialization — convert dataclasses to JSON-safe dicts."""

from __future__ import annotations

from typing import Any

from .models import FeatureDescriptor, CatalogResult


def catalog_to_dict(result: CatalogResult) -> dict:
    """Serialize a CatalogResult to a JSON-safe dict for the web API."""
    return {
        "ok": result.ok,
        "feature_count": len(result.features),
        "features": [feature_to_dict(f) for f in result.features],
        "errors": [{"feature_name": e.feature_name, "field": e.field, "message": e.message}
                   for e in result.errors],
    }


def feature_to_dict(f: FeatureDescriptor) -> dict:
    """Serialize a FeatureDescriptor to a JSON-safe dict."""
    d: dict[str, Any] = {
        "name": f.name,
        "path": f.path,
        "class_name": f.class_name,
        "instance_name": f.instance_name,
        "reporting": f.reporting,
        "update": f.update,
        "capability": f.capability.value if f.capability else None,
        "system_dependencies": [
            {"path": dep.path, "class_name": dep.class_name}
            for dep in f.system_dependencies
        ],
    }

    if f.description:
        d["description"] = f.description

    return d

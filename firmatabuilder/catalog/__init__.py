"""Feature catalog — load, validate, query, and serialize catalog/*.json."""

from .models import (
    Capability, SystemDependency, FeatureDescriptor,
    ValidationError, CatalogResult,
)
from .loader import load_catalog, get_feature, parse_feature, CATALOG_DIR
from .serialization import catalog_to_dict, feature_to_dict

__all__ = [
    # Models
    "Capability", "SystemDependency", "FeatureDescriptor",
    "ValidationError", "CatalogResult",
    # Loader
    "load_catalog", "get_feature", "parse_feature", "CATALOG_DIR",
    # Serialization
    "catalog_to_dict", "feature_to_dict",
]

"""Exception types raised by the sketch builder."""

from __future__ import annotations


class FirmataBuilderError(Exception):
    """Base class for every error the builder raises on purpose."""


class UnknownFeatureError(FirmataBuilderError, LookupError):
    """Raised when a selected feature name is not in the catalog."""

    def __init__(self, feature_name: str) -> None:
        self.feature_name = feature_name
        super().__init__(f"Unknown feature '{feature_name}': not found in the feature catalog")


class DuplicateFeatureError(FirmataBuilderError, ValueError):
    """Raised when the same feature is selected more than once."""

    def __init__(self, feature_name: str) -> None:
        self.feature_name = feature_name
        super().__init__(f"Feature '{feature_name}' is selected more than once")


class SelectionError(FirmataBuilderError, ValueError):
    """Raised when a user selection is malformed."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class CatalogError(FirmataBuilderError):
    """Raised when the feature catalog cannot be loaded at all."""

    def __init__(self, message: str, errors: list | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class PersistenceError(FirmataBuilderError, OSError):
    """Raised when a generated sketch cannot be written."""

    def __init__(self, path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write sketch to {path}: {reason}")

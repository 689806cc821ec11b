"""
User selection — the sketch name, connection and ordered feature list that
drive one generation run.

The JSON shape accepted by ``parse_selection`` is the one the builder UI
posts::

    {
        "filename": "ConfiguredFirmata",
        "connectionType": {"serial": {"baud": 57600}},
        "selectedFeatures": ["DigitalInputFirmata", "ServoFirmata"]
    }
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from firmatabuilder.config import settings
from firmatabuilder.errors import SelectionError


_SKETCH_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class SerialConnection:
    """Firmata over the board's hardware serial port."""
    baud: int


@dataclass(frozen=True)
class UserSelection:
    filename: str
    connection: SerialConnection
    selected_features: tuple[str, ...] = field(default_factory=tuple)


def validate_filename(filename: Any) -> str:
    if not isinstance(filename, str) or not _SKETCH_NAME.match(filename):
        raise SelectionError(
            "filename",
            f"{filename!r} is not a valid sketch name (letters, digits and '_', not starting with a digit)",
        )
    return filename


def validate_baud(baud: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(baud, bool) or not isinstance(baud, int) or baud <= 0:
        raise SelectionError("baud", f"{baud!r} is not a positive integer")
    if baud not in settings.allowed_baud_rates:
        raise SelectionError(
            "baud", f"{baud} is not a supported rate {list(settings.allowed_baud_rates)}")
    return baud


def make_selection(
    features: list[str] | tuple[str, ...],
    filename: str | None = None,
    baud: int | None = None,
) -> UserSelection:
    """Build a validated UserSelection, filling gaps from the builder config."""
    if isinstance(features, str) or not all(isinstance(f, str) for f in features):
        raise SelectionError("selectedFeatures", "Must be a list of feature names")
    return UserSelection(
        filename=validate_filename(filename if filename is not None else settings.default_filename),
        connection=SerialConnection(baud=validate_baud(baud if baud is not None else settings.default_baud)),
        selected_features=tuple(features),
    )


def parse_selection(data: dict) -> UserSelection:
    """Parse the builder's JSON selection payload into a UserSelection."""
    if not isinstance(data, dict):
        raise SelectionError("selection", "Must be a JSON object")

    baud = None
    connection = data.get("connectionType")
    if connection is not None:
        if not isinstance(connection, dict) or set(connection) != {"serial"}:
            raise SelectionError("connectionType", "Only a serial connection is supported")
        serial = connection["serial"] or {}
        if not isinstance(serial, dict):
            raise SelectionError("connectionType.serial", "Must be an object")
        baud = serial.get("baud")

    features = data.get("selectedFeatures", [])
    if not isinstance(features, list):
        raise SelectionError("selectedFeatures", "Must be a list of feature names")

    return make_selection(features, filename=data.get("filename"), baud=baud)


def selection_to_dict(selection: UserSelection) -> dict:
    """Inverse of parse_selection."""
    return {
        "filename": selection.filename,
        "connectionType": {"serial": {"baud": selection.connection.baud}},
        "selectedFeatures": list(selection.selected_features),
    }

"""FirmataBuilder — generate ConfiguredFirmata sketches from selected features."""

__version__ = "0.3.0"

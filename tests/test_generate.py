"""
End-to-end tests for sketch generation and persistence.

Run: python -m pytest tests/test_generate.py -v
"""

from __future__ import annotations

import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from firmatabuilder.catalog import load_catalog
from firmatabuilder.errors import PersistenceError, UnknownFeatureError
from firmatabuilder.generator import generate, generate_sketch, sketch_filename
from firmatabuilder.persistence import write_sketch
from tests.firmata_fixture import FIXED_NOW, make_catalog, make_selection


GOLDEN = Path(__file__).parent / "data" / "ConfiguredFirmata.ino"


def _without_timestamp(text: str) -> list[str]:
    lines = text.splitlines()
    return lines[:2] + lines[3:]


class TestReferenceSketch(unittest.TestCase):
    """The reference selection reproduces the golden sketch exactly."""

    def test_matches_golden_with_fixture_catalog(self):
        text = generate_sketch(make_catalog(), make_selection(), now=FIXED_NOW)
        self.assertEqual(text, GOLDEN.read_text(encoding="utf-8"))

    def test_matches_golden_with_shipped_catalog(self):
        catalog = load_catalog()
        self.assertTrue(catalog.ok, [str(e) for e in catalog.errors])
        text = generate_sketch(catalog.by_name(), make_selection(), now=FIXED_NOW)
        self.assertEqual(text, GOLDEN.read_text(encoding="utf-8"))

    def test_block_order(self):
        text = generate_sketch(make_catalog(), make_selection(), now=FIXED_NOW)
        markers = [
            "generated by FirmataBuilder",
            "#include <Firmata.h>",
            "DigitalInputFirmata digitalInput;",
            "FirmataExt firmataExt;",
            "#include <utility/AnalogWrite.h>",
            "FirmataReporting reporting;",
            "void systemResetCallback()",
            "void setup()",
            "void loop()",
        ]
        positions = [text.index(m) for m in markers]
        self.assertEqual(positions, sorted(positions))


class TestDeterminism(unittest.TestCase):

    def test_regeneration_is_identical_apart_from_timestamp(self):
        catalog = make_catalog()
        a = generate_sketch(catalog, make_selection(), now=datetime(2024, 1, 1, 8, 30))
        b = generate_sketch(catalog, make_selection(), now=datetime(2025, 6, 15, 23, 59, 59))
        self.assertNotEqual(a, b)
        self.assertEqual(_without_timestamp(a), _without_timestamp(b))

    def test_earlier_run_does_not_leak_into_later(self):
        catalog = make_catalog()
        generate_sketch(catalog, make_selection(), now=FIXED_NOW)
        text = generate_sketch(catalog, make_selection(["OneWireFirmata"]), now=FIXED_NOW)
        self.assertNotIn("reporting", text)
        self.assertNotIn("runTasks", text)
        self.assertNotIn("update()", text)


class TestEmptySelection(unittest.TestCase):

    def setUp(self):
        self.text = generate_sketch(make_catalog(), make_selection([]), now=FIXED_NOW)

    def test_no_reporting_or_update(self):
        self.assertNotIn("reporting", self.text)
        self.assertNotIn(".update();", self.text)

    def test_reset_handler_and_transport(self):
        self.assertIn("  Firmata.attach(SYSTEM_RESET, systemResetCallback);\n", self.text)
        self.assertIn("  Firmata.begin(57600);\n", self.text)


class TestScenarioDigitalInputAnalogOutput(unittest.TestCase):
    """Selection ["DigitalInputFirmata", "AnalogOutputFirmata"]."""

    def setUp(self):
        selection = make_selection(["DigitalInputFirmata", "AnalogOutputFirmata"], baud=115200)
        self.text = generate_sketch(make_catalog(), selection, now=FIXED_NOW)

    def test_analog_write_registered(self):
        self.assertIn("Firmata.attach(ANALOG_MESSAGE, analogWriteCallback);", self.text)

    def test_reset_callback_has_no_pin_modes(self):
        self.assertNotIn("setPinMode(i, OUTPUT)", self.text)
        self.assertNotIn("setPinMode(i, ANALOG)", self.text)

    def test_digital_input_reported_before_drain(self):
        loop = self.text[self.text.index("void loop()"):]
        self.assertLess(loop.index("digitalInput.report();"), loop.index("while(Firmata.available())"))

    def test_baud(self):
        self.assertIn("Firmata.begin(115200);", self.text)


class TestGenerateAndWrite(unittest.TestCase):

    def test_writer_receives_name_and_text(self):
        calls = []

        def writer(name, content, output_dir):
            calls.append((name, content, output_dir))
            return Path("/virtual") / f"{name}.ino"

        selection = make_selection(["ServoFirmata"], filename="ServoOnly")
        path = generate(make_catalog(), selection, writer=writer, now=FIXED_NOW)
        self.assertEqual(path, Path("/virtual/ServoOnly.ino"))
        self.assertEqual(len(calls), 1)
        name, content, output_dir = calls[0]
        self.assertEqual(name, "ServoOnly")
        self.assertEqual(content, generate_sketch(make_catalog(), selection, now=FIXED_NOW))
        self.assertIsNone(output_dir)

    def test_unknown_feature_writes_nothing(self):
        calls = []
        with self.assertRaises(UnknownFeatureError):
            generate(
                make_catalog(), make_selection(["ServoFirmata", "LaserFirmata"]),
                writer=lambda *a: calls.append(a), now=FIXED_NOW,
            )
        self.assertEqual(calls, [])

    def test_writes_file_to_output_dir(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "sketches"
            path = generate(make_catalog(), make_selection(), output_dir=out, now=FIXED_NOW)
            self.assertEqual(path, out / "ConfiguredFirmata.ino")
            self.assertEqual(path.read_text(encoding="utf-8"), GOLDEN.read_text(encoding="utf-8"))

    def test_sketch_filename(self):
        self.assertEqual(sketch_filename(make_selection(filename="Board_1")), "Board_1.ino")


class TestPersistence(unittest.TestCase):

    def test_write_failure_raises_persistence_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "not_a_dir"
            blocker.write_text("x", encoding="utf-8")
            with self.assertRaises(PersistenceError) as cm:
                write_sketch("Sketch", "void loop() {}\n", output_dir=blocker)
            self.assertIsInstance(cm.exception, OSError)
            self.assertIsInstance(cm.exception.__cause__, OSError)

    def test_write_overwrites_existing(self):
        with tempfile.TemporaryDirectory() as tmp:
            write_sketch("Sketch", "old", output_dir=Path(tmp))
            path = write_sketch("Sketch", "new", output_dir=Path(tmp))
            self.assertEqual(path.read_text(encoding="utf-8"), "new")


if __name__ == "__main__":
    unittest.main()

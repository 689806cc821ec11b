"""
Sketch emitters — each function returns one block of the generated .ino.

Blocks are emitted in this order and concatenated verbatim:

    header → includes/instances → post-dependencies → systemResetCallback()
    → setup() → loop()

Every block ends with exactly one blank line, except loop() which ends the
file with a single newline.  All functions read the BuildContext only;
the include pass additionally dedups system dependencies through
``ctx.emitted_dependencies``, so it runs once per context.
"""

from __future__ import annotations

from datetime import datetime

from firmatabuilder.catalog.models import Capability
from firmatabuilder.config import settings
from firmatabuilder.selection import SerialConnection

from .context import BuildContext


PROTOCOL_INCLUDE = "Firmata.h"

# Extension registry every feature registers itself with
REGISTRY_INCLUDE = "utility/FirmataExt.h"
REGISTRY_CLASS = "FirmataExt"
REGISTRY_INSTANCE = "firmataExt"

ANALOG_WRITE_INCLUDE = "utility/AnalogWrite.h"

REPORTING_INCLUDE = "utility/FirmataReporting.h"
REPORTING_CLASS = "FirmataReporting"
REPORTING_INSTANCE = "reporting"

RESET_CALLBACK = "systemResetCallback"


def _block(lines: list[str]) -> str:
    """Join lines and terminate the block with one blank line."""
    return "\n".join(lines) + "\n\n"


def emit_header(filename: str, now: datetime | None = None) -> str:
    """Banner comment plus the core protocol include.

    A naive *now* is taken as local time.
    """
    if now is None:
        now = datetime.now().astimezone()
    elif now.tzinfo is None:
        now = now.astimezone()
    stamp = now.strftime("%a %b %d %Y %H:%M:%S GMT%z (%Z)")
    return _block([
        "/*",
        f" * {filename}{settings.sketch_extension} generated by FirmataBuilder",
        f" * {stamp}",
        " */",
        "",
        f"#include <{PROTOCOL_INCLUDE}>",
    ])


def emit_includes(ctx: BuildContext) -> str:
    """Per-feature includes and global instances, in selection order.

    A system dependency shared by several features is included once, just
    before the first feature that needs it.
    """
    out = ""
    emitted = ctx.emitted_dependencies

    for feature in ctx.features:
        lines: list[str] = []
        for dep in feature.system_dependencies:
            if dep.class_name in emitted:
                continue
            emitted.add(dep.class_name)
            lines.append(f"#include <{dep.include_path}>")
        lines.append(f"#include <{feature.include_path}>")
        lines.append(f"{feature.class_name} {feature.instance_name};")
        out += _block(lines)

    out += _block([
        f"#include <{REGISTRY_INCLUDE}>",
        f"{REGISTRY_CLASS} {REGISTRY_INSTANCE};",
    ])
    return out


def emit_post_dependencies(ctx: BuildContext) -> str:
    """Shared utilities that must follow the feature includes."""
    out = ""
    if ctx.analog_write:
        out += _block([f"#include <{ANALOG_WRITE_INCLUDE}>"])
    if ctx.reporting_enabled:
        out += _block([
            f"#include <{REPORTING_INCLUDE}>",
            f"{REPORTING_CLASS} {REPORTING_INSTANCE};",
        ])
    return out


def emit_reset_callback(ctx: BuildContext) -> str:
    """systemResetCallback(): restore default pin modes, then reset features."""
    lines = [
        f"void {RESET_CALLBACK}()",
        "{",
        "  for (byte i = 0; i < TOTAL_PINS; i++) {",
        "    if (IS_PIN_ANALOG(i)) {",
    ]
    if ctx.analog_input:
        lines.append("      Firmata.setPinMode(i, ANALOG);")
    lines.append("    } else if (IS_PIN_DIGITAL(i)) {")
    if ctx.digital_output:
        lines.append("      Firmata.setPinMode(i, OUTPUT);")
    lines += [
        "    }",
        "  }",
        f"  {REGISTRY_INSTANCE}.reset();",
        "}",
    ]
    return _block(lines)


def emit_setup(ctx: BuildContext, connection: SerialConnection | None) -> str:
    lines = [
        "void setup()",
        "{",
        "  Firmata.setFirmwareVersion(FIRMATA_MAJOR_VERSION, FIRMATA_MINOR_VERSION);",
        "",
    ]

    if ctx.analog_write:
        lines += ["  Firmata.attach(ANALOG_MESSAGE, analogWriteCallback);", ""]

    lines += [f"  {REGISTRY_INSTANCE}.addFeature({f.instance_name});" for f in ctx.features]
    # blank line only after the reporting registration
    if ctx.reporting_enabled:
        lines += [f"  {REGISTRY_INSTANCE}.addFeature({REPORTING_INSTANCE});", ""]

    lines += [f"  Firmata.attach(SYSTEM_RESET, {RESET_CALLBACK});", ""]

    if isinstance(connection, SerialConnection):
        lines += [f"  Firmata.begin({connection.baud});", ""]

    lines += [f"  {RESET_CALLBACK}();", "}"]
    return _block(lines)


def _drain_lines(ctx: BuildContext) -> list[str]:
    """Process all pending input, yielding to the scheduler at message boundaries.

    With a scheduler the drain stops as soon as a complete message has been
    handled; stored tasks then run once, but only when the parser is not
    part-way through a message.
    """
    if not ctx.scheduler:
        return [
            "  while(Firmata.available()) {",
            "    Firmata.processInput();",
            "  }",
        ]

    scheduler = ctx.feature_for(Capability.SCHEDULER)
    return [
        "  while(Firmata.available()) {",
        "    Firmata.processInput();",
        "    if (!Firmata.isParsingMessage()) {",
        "      break;",
        "    }",
        "  }",
        "  if (!Firmata.isParsingMessage()) {",
        f"    {scheduler.instance_name}.runTasks();",
        "  }",
    ]


def emit_loop(ctx: BuildContext) -> str:
    lines = ["void loop()", "{"]

    digital_input = ctx.feature_for(Capability.DIGITAL_INPUT)
    if digital_input is not None:
        lines += [f"  {digital_input.instance_name}.report();", ""]

    lines += _drain_lines(ctx) + [""]

    if ctx.reporting_enabled:
        lines.append(f"  if ({REPORTING_INSTANCE}.elapsed()) {{")
        lines += [f"    {f.instance_name}.report();" for f in ctx.reporting_features]
        lines += ["  }", ""]

    lines += [f"  {f.instance_name}.update();" for f in ctx.update_features]

    lines.append("}")
    return "\n".join(lines) + "\n"

#!/usr/bin/env python3
"""
Form validation example.

Loads a form specification and a set of values, feeds the values to a
FormEngine field by field and prints the validation result.

Usage:
    python examples/validate_form.py

    # Other files, with traces logged to the console
    python examples/validate_form.py --form my_form.json --values my_values.json --trace
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add src to path for local development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from spec_forms import FieldType, FormEngine, FormSpecification
from spec_forms.config import FormEngineConfig

EXAMPLES_DIR = Path(__file__).parent

TAKEN_USERNAMES = {"admin", "root"}


async def is_username_available(value, values):
    """Pretend lookup against a user directory."""
    await asyncio.sleep(0.05)
    return value.lower() not in TAKEN_USERNAMES


async def fill_form(engine: FormEngine, values: dict) -> None:
    """Set every value through the engine, the way a UI would."""
    for field in engine.runtime_fields:
        if field.name not in values:
            continue
        value = values[field.name]

        if field.type == FieldType.GROUP:
            for instance_values in value:
                members = engine.add_group_instance(field.name)
                for member in members:
                    if member.name in instance_values:
                        await engine.set_field_value(member, instance_values[member.name])
        elif field.type == FieldType.CHECKBOX_GROUP:
            # Checkbox groups toggle one option per change
            for option in value:
                await engine.set_field_value(field, option)
        else:
            await engine.set_field_value(field, value)


async def run(form_path: Path, values_path: Path, trace: bool) -> int:
    specification = FormSpecification.from_file(form_path)
    values = json.loads(values_path.read_text(encoding="utf-8"))

    config = FormEngineConfig(
        log_level="INFO" if trace else "WARNING",
        enable_tracing=trace,
        trace_to_console=trace,
        trace_verbose=trace,
    )
    engine = FormEngine(
        specification,
        functions={"isUsernameAvailable": is_username_available},
        config=config,
    )

    await fill_form(engine, values)
    result = await engine.validate()

    print("=" * 60)
    print(f"Form: {specification.title or specification.name}")
    print("=" * 60)
    for view in engine.fields:
        required = "*" if view.constraints.get("required") else " "
        status = "ok" if not result.errors.get(view.name) else ", ".join(result.errors[view.name])
        print(f" {required} {view.label or view.name:<16} {status}")
        for index, instance in enumerate(result.group_errors.get(view.name, [])):
            for name, errors in instance.items():
                print(f"     [{index}] {name:<12} {', '.join(errors) or 'ok'}")

    print("-" * 60)
    print(f"Valid: {result.validity} ({result.error_count} errors)")
    print(json.dumps(engine.get_field_values(), indent=2))
    return 0 if result.validity else 1


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Validate form values against a form specification")
    parser.add_argument(
        "--form",
        type=Path,
        default=EXAMPLES_DIR / "registration_form.json",
        help="Form specification JSON file",
    )
    parser.add_argument(
        "--values",
        type=Path,
        default=EXAMPLES_DIR / "registration_values.json",
        help="Form values JSON file",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Log engine traces to the console",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s %(message)s")
    sys.exit(asyncio.run(run(args.form, args.values, args.trace)))


if __name__ == "__main__":
    main()

"""
Pickflow CLI - Command-line interface for the selection engine.

Usage:
    pickflow validate <metadata_file>                      Validate action metadata
    pickflow inspect <metadata_file> <action> [--args J]   Show the next selection

Metadata files hold a JSON object of {action name: action metadata} in
the server's wire format.
"""

import argparse
import json
import sys

from pydantic import ValidationError

from .logging_config import setup_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Pickflow - Action selection engine",
        prog="pickflow",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate action metadata")
    validate_parser.add_argument("metadata_file", help="Path to metadata JSON file")

    # Inspect command
    inspect_parser = subparsers.add_parser("inspect", help="Show the next selection of an action")
    inspect_parser.add_argument("metadata_file", help="Path to metadata JSON file")
    inspect_parser.add_argument("action", help="Action name")
    inspect_parser.add_argument("--args", default="{}", help="Arguments answered so far, as JSON")
    inspect_parser.add_argument("--no-auto-fill", action="store_true", help="Disable skip-if-only-one")

    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)

    if args.command == "validate":
        return cmd_validate(args)
    elif args.command == "inspect":
        return cmd_inspect(args)
    else:
        parser.print_help()
        return 1


def _load_actions(path):
    from .api.schemas import parse_action_metadata

    with open(path, encoding="utf-8") as fh:
        raw = json.load(fh)
    return parse_action_metadata(raw)


def cmd_validate(args):
    """Validate action metadata."""
    from .spec_schema import validate_actions

    print(f"Validating: {args.metadata_file}")
    try:
        actions = _load_actions(args.metadata_file)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        print(f"Could not load metadata: {exc}")
        return 1

    result = validate_actions(list(actions.values()))
    print(f"Actions: {len(actions)}")

    if result.warnings:
        print("\nWarnings:")
        for w in result.warnings:
            print(f"  - {w}")

    if result.errors:
        print("\nErrors:")
        for e in result.errors:
            print(f"  - {e}")
        return 1

    print("OK")
    return 0


def cmd_inspect(args):
    """Show the next selection for an action given some answers."""
    from .engine_core import ArgumentStore, SelectionCursor, available_choices

    try:
        actions = _load_actions(args.metadata_file)
        answers = json.loads(args.args)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        print(f"Could not load input: {exc}")
        return 1
    if not isinstance(answers, dict):
        print("Could not load input: --args must be a JSON object")
        return 1

    action = actions.get(args.action)
    if action is None:
        print(f'Unknown action "{args.action}"')
        return 1

    store = ArgumentStore(answers)
    cursor = SelectionCursor(
        action=action,
        choices_for=lambda selection: available_choices(selection, action, store),
        auto_fill=not args.no_auto_fill,
    )
    selection = cursor.next(
        store,
        on_auto_fill=lambda fill: print(f"Auto-filled {fill.selection_name}: {fill.display}"),
    )

    if selection is None:
        print(f"{action.name}: ready to submit")
        print(json.dumps(store.resolved_values(), indent=2, default=str))
        return 0

    optional = " (optional)" if selection.optional else ""
    print(f"{action.name}: next selection is {selection.name} [{selection.kind.value}]{optional}")
    if selection.prompt:
        print(f"  {selection.prompt}")
    for choice in available_choices(selection, action, store):
        disabled = f"  (disabled: {choice.disabled})" if choice.disabled else ""
        print(f"  - {choice.display}: {json.dumps(choice.value, default=str)}{disabled}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Request Validator CLI Main Module
=================================

Validate JSON documents against JSON rule settings from the shell.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Mapping, Optional

from request_validator import __version__
from request_validator.utils.logger import configure_logging
from request_validator.validation.exceptions import ConfigurationError, ValidationError
from request_validator.validation.form import ValidationForm
from request_validator.validation.reporter import flatten_messages
from request_validator.validation.rules import default_registry


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="request-validator",
        description="Declarative request validation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  request-validator check rules.json payload.json             Validate a payload
  request-validator check rules.json payload.json --json      Machine-readable result
  request-validator check rules.json payload.json --resource User
  request-validator rules                                     List built-in rules
        """,
    )

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"request-validator {__version__}",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser(
        "check",
        help="Validate a JSON document",
    )
    check_parser.add_argument(
        "rules",
        type=Path,
        help="JSON file with the rule settings",
    )
    check_parser.add_argument(
        "data",
        type=Path,
        help="JSON file with the document to validate",
    )
    check_parser.add_argument(
        "--resource",
        default=None,
        help="Resource name prefixed to failing fields",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    subparsers.add_parser(
        "rules",
        help="List built-in rule names",
    )

    return parser


def resource_error_handler(field: str, errors: Mapping[Any, Any], extra: Optional[Mapping[str, Any]]) -> None:
    """Raise a failure naming the resource, e.g. ``[User.name]: Name is required``."""
    resource = (extra or {}).get("resourceName", "")
    location = f"{resource}.{field}" if resource else field
    lines = [f"[{location}]: {message}" for message in flatten_messages(errors)]
    raise ValidationError("\n".join(lines), errors={field: errors})


def _load_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def handle_check(args: argparse.Namespace) -> int:
    settings = _load_json(args.rules)
    data = _load_json(args.data)

    if args.resource:
        form = ValidationForm(settings, {"resourceName": args.resource}, resource_error_handler)
    else:
        form = ValidationForm(settings)

    try:
        form.execute(data)
    except ValidationError as e:
        if args.json:
            print(json.dumps({"valid": False, **e.to_dict()}, ensure_ascii=False, default=str))
        else:
            print(e.message)
        return 1

    if args.json:
        print(json.dumps({"valid": True}))
    else:
        print("OK")
    return 0


def handle_rules(args: argparse.Namespace) -> int:
    print("require")
    for name in default_registry().names():
        print(name)
    return 0


def cli(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code: 0 valid, 1 invalid or failed, 2 bad rule settings
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.log_level:
        configure_logging(level=parsed.log_level)

    if not parsed.command:
        parser.print_help()
        return 0

    handlers = {
        "check": handle_check,
        "rules": handle_rules,
    }

    handler = handlers[parsed.command]
    try:
        return handler(parsed)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except (OSError, json.JSONDecodeError, TypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    """Main entry point."""
    sys.exit(cli())


if __name__ == "__main__":
    main()

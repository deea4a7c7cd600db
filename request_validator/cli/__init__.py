"""
Request Validator CLI
=====================

Command-line interface.

Commands:
- check: Validate a JSON document against JSON rule settings
- rules: List built-in rule names
"""

from request_validator.cli.main import cli, main

__all__ = ["main", "cli"]

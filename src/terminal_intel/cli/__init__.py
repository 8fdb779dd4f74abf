"""
CLI module for terminal-intel.

Argument parsing and command handlers.
"""

from .commands import create_parser, parse_args
from .handlers import handle_cli_command, has_action

__all__ = ["create_parser", "parse_args", "handle_cli_command", "has_action"]

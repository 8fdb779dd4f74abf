"""
Command-line argument parser for terminal-intel.
"""

import argparse

from .. import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="terminal-intel",
        description="terminal-intel - command suggestions, translation and secret redaction for the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  terminal-intel --suggest "git s"          # Suggest commands for a partial input
  terminal-intel --translate "show status"  # Natural language to command
  terminal-intel --redact build.log         # Mask secrets in a file
  some-command | terminal-intel --redact    # Mask secrets on stdin
  terminal-intel --workflows docker         # Search saved workflows
  terminal-intel --check-llm                # Check inference providers
        """
    )

    # Basic options
    parser.add_argument(
        "--version",
        action="version",
        version=f"terminal-intel {__version__}"
    )

    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    actions = parser.add_mutually_exclusive_group()

    actions.add_argument(
        "--redact",
        nargs="?",
        const="-",
        metavar="PATH",
        help="Redact secrets from a file, or from stdin when PATH is omitted or '-'"
    )

    actions.add_argument(
        "--suggest",
        type=str,
        metavar="TEXT",
        help="Print ranked command suggestions for TEXT"
    )

    actions.add_argument(
        "--translate",
        type=str,
        metavar="TEXT",
        help="Translate a natural-language request into a command"
    )

    actions.add_argument(
        "--workflows",
        nargs="?",
        const="",
        metavar="QUERY",
        help="List workflows, optionally filtered by QUERY"
    )

    actions.add_argument(
        "--check-llm",
        action="store_true",
        help="Check local and cloud inference availability and exit"
    )

    return parser


def parse_args(args=None):
    """Parse command line arguments."""
    parser = create_parser()
    return parser.parse_args(args)

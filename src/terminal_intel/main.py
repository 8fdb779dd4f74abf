"""
Main entry point for the terminal-intel console script.
"""

import sys

from .cli import parse_args, handle_cli_command, has_action, create_parser


def main(argv=None) -> int:
    """Entry point for the `terminal-intel` console script."""
    try:
        args = parse_args(argv)
        if not has_action(args):
            create_parser().print_help()
            return 0
        return handle_cli_command(args)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
        return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
terminal-intel - command suggestions, translation and secret redaction for the terminal

Entry point for running from a source checkout.
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from terminal_intel.main import main


if __name__ == "__main__":
    sys.exit(main())

"""
terminal-intel: the intelligence layer of an embedded terminal.

Tracks executed commands, redacts secrets from their output, suggests
commands as the user types and translates natural-language requests into
shell commands, falling back from a local model to a cloud model to a
static table.
"""

__version__ = "0.1.0"
__author__ = "terminal-intel contributors"

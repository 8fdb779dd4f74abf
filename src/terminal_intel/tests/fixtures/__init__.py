"""Shared test doubles for terminal-intel tests."""

"""
reqcli.

A small httpie-style HTTP client for the terminal.
"""

__version__ = "1.0.0"

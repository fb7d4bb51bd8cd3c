"""
Core.

Logging, configuration and the exception hierarchy shared by the CLI.
"""

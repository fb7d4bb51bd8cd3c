"""
CLI Module.

Thin command-line HTTP client built with Typer, httpx and Rich.

Architecture:
- command.py parses argv into a validated RequestIntent
- client.py sends it with httpx and returns a RenderedResponse
- render.py prints the response, highlighting JSON bodies
- app.py wires them together and maps errors to exit codes

Usage:
    reqcli get https://httpbin.org/get
    reqcli post https://httpbin.org/post name=alice
"""

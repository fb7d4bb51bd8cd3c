#!/usr/bin/env python3
"""
reqcli.

Run the client straight from a checkout without installing it.

Usage:
    python cli.py --help
    python cli.py get https://httpbin.org/get
    python cli.py post https://httpbin.org/post name=alice role=admin
    python cli.py --timeout 5 --debug get https://httpbin.org/delay/1
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from reqcli.cli.app import main

if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
isocodec CLI launcher for running from a source checkout.

Usage:
    python run_cli.py decode <data> --config parse.json
    python run_cli.py encode message.json
    python run_cli.py bitmap <data>
"""

import sys
from pathlib import Path

# Add src to path for direct execution
sys.path.insert(0, str(Path(__file__).parent / "src"))

from isocodec.cli import main

if __name__ == "__main__":
    sys.exit(main())

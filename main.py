#!/usr/bin/env python3
"""
Ruby LSP Bundle Updater - Entry Point
"""

import sys
from pathlib import Path

# Add src to path
src_dir = Path(__file__).parent / "src"
sys.path.insert(0, str(src_dir))

from update_server import main

if __name__ == "__main__":
    sys.exit(main())

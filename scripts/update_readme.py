#!/usr/bin/env python3
"""Rebuild the README "## Papers" section from the exported CSVs.

Usage: python scripts/update_readme.py [README] [ASSETS_DIR]
"""

import sys
from pathlib import Path

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from labpubs.pipeline import readme_main

if __name__ == "__main__":
    readme_main()

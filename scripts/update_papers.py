#!/usr/bin/env python3
"""Fetch the lab's Zotero papers and export them to an assets directory.

Usage: python scripts/update_papers.py [OUTPUT_DIR]
"""

import sys
from pathlib import Path

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from labpubs.pipeline import main

if __name__ == "__main__":
    main()

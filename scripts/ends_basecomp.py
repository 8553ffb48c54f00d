#!/usr/bin/env python3
"""Convenience wrapper.

Run:
  python scripts/ends_basecomp.py --help

This simply calls `flankcomp.cli.main` (also installed as `flankcomp`).
"""

import sys

from flankcomp.cli import main

if __name__ == "__main__":
    sys.exit(main())

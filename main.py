#!/usr/bin/env python3
"""Cadence entry point.

Run with:
    python main.py 2.5
    python -m cadence 0.5 --repeat --count 3
"""

import sys

from cadence.__main__ import main


if __name__ == "__main__":
    sys.exit(main())

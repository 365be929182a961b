#!/usr/bin/env python3
"""Run the downscale similarity comparison.

Usage:
    python3 scripts/compare_downscaled.py testdata "[100, 200]"
    python3 scripts/compare_downscaled.py testdata "[64, 128]" --oracle pixel
"""

import sys

from downscale_bench.cli import main

if __name__ == "__main__":
    sys.exit(main())

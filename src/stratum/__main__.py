"""Stratum CLI entry point (``python -m stratum`` / ``stratum``)."""

from __future__ import annotations

import sys

from stratum.cli import main

if __name__ == "__main__":
    sys.exit(main())

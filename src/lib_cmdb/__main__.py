"""``python -m lib_cmdb`` entry point; runs the CLI with shared exit handling."""

from __future__ import annotations

import sys

from .cli import main

if __name__ == "__main__":  # pragma: no cover - exercised via python -m
    raise SystemExit(main(sys.argv[1:]))

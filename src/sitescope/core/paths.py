"""Bundled data directory resolution."""

from __future__ import annotations

from pathlib import Path

# src/sitescope/core/paths.py → src/sitescope/data/
DATA_DIR = Path(__file__).resolve().parent.parent / "data"

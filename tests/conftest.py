"""Pytest configuration.

``pytest`` may run without the package installed (no ``pip install -e .``),
so make sure the repository root is importable.
"""

from __future__ import annotations

import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

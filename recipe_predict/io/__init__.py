"""recipe_predict.io

Filesystem helpers shared by the CLI (recipe input files, result output).
"""

from __future__ import annotations

from .fs import read_json, write_json_atomic

__all__ = [
    "read_json",
    "write_json_atomic",
]

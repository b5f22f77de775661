"""CLI argument builder modules.

The top-level :mod:`recipe_cli` is kept thin; groups of flags are registered
by small "arg builder" functions housed here:

- :func:`cli.args.base.add_base_args`
- :func:`cli.args.predict.add_predict_args`
"""

from __future__ import annotations

__all__ = [
    "base",
    "predict",
]

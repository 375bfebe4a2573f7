"""Bundled sketches, runnable as ``python -m sketchkit.examples.<name>``."""

from __future__ import annotations

import runpy
import sys
from typing import Dict, List, Optional, Sequence

# name -> one-line description shown by ``sketchkit --list``
EXAMPLES: Dict[str, str] = {
    "flow_field": "particles advected through a curl-noise flow field",
    "noise_field": "animated slice through 3D simplex noise",
}


def list_examples() -> List[str]:
    return sorted(EXAMPLES)


def example_module(name: str) -> str:
    """Dotted module path of a bundled sketch; ValueError for unknown names."""
    if name not in EXAMPLES:
        known = ", ".join(list_examples())
        raise ValueError(f"Unknown example '{name}' (available: {known})")
    return f"{__name__}.{name}"


def run_example(name: str, args: Optional[Sequence[str]] = None) -> None:
    """Execute a sketch as ``__main__`` with ``args`` as its command line."""
    module = example_module(name)
    sys.argv = [module, *(args or ())]
    runpy.run_module(module, run_name="__main__")

"""
Services — Stateful coordination around the stateless engine

- HatTokenMap: previous-allocation owner, debounced refresh, renderer hand-off
"""

from .hat_map import HatTokenMap, HatRenderer

__all__ = ["HatTokenMap", "HatRenderer"]

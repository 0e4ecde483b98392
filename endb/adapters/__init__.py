"""
Storage adapters.

Only the base class and the dependency-free memory adapter are imported
here; the others load on demand through endb.core.registry.
"""

from endb.adapters.base import Adapter
from endb.adapters.memory import MemoryAdapter

__all__ = ["Adapter", "MemoryAdapter"]

"""
Exception hierarchy for the benchmark catalog

Structural errors (unknown identifier, broken oracle wiring) are raised to the
caller. Per-candidate evaluation faults are NOT exceptions: the evaluation
bridge recovers them and records them in a FaultTracker instead.
"""

from typing import Iterable, Optional, Tuple


class EnoptError(Exception):
    """Base class for all catalog errors"""


class UnknownProblem(EnoptError, KeyError):
    """Requested identifier is not registered in the catalog"""

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available: Tuple[str, ...] = tuple(available)
        super().__init__(name)

    def __str__(self) -> str:
        return f"Problem '{self.name}' not registered. Available problems: {list(self.available)}"


class CatalogConstructionError(EnoptError, RuntimeError):
    """The oracle could not supply usable metadata for a catalog entry"""

    def __init__(self, name: str, reason: str, backend: Optional[str] = None):
        self.name = name
        self.reason = reason
        self.backend = backend
        where = f" ({backend} backend)" if backend else ""
        super().__init__(f"Cannot build descriptor for '{name}'{where}: {reason}")

"""
Benchmark problem catalog and oracle backends
"""

from .catalog import ProblemCatalog, ProblemDescriptor, enoppy_catalog, native_catalog
from .enoppy_oracle import EnoppyOracle
from .rwco2020 import RWCOProblem

__all__ = [
    'ProblemCatalog',
    'ProblemDescriptor',
    'EnoppyOracle',
    'RWCOProblem',
    'enoppy_catalog',
    'native_catalog',
]

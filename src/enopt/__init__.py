"""
enopt - Engineering Optimization Benchmark Catalog

Catalog of constrained engineering-design benchmark problems and an
evaluation bridge that turns candidate vectors into scalar fitness values
for metaheuristic search.
"""

import logging

from enopt.benchmarks.catalog import (
    ProblemCatalog, ProblemDescriptor, dimension, domain, get_catalog, resolve,
)
from enopt.core.evaluator import SENTINEL_OBJECTIVE, EvaluationBridge
from enopt.core.oracle import EvaluationOracle, FunctionOracle
from enopt.errors import CatalogConstructionError, EnoptError, UnknownProblem
from enopt.utils.fault_tracker import EvaluationFault, FaultTracker

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'ProblemCatalog',
    'ProblemDescriptor',
    'EvaluationBridge',
    'EvaluationOracle',
    'FunctionOracle',
    'EvaluationFault',
    'FaultTracker',
    'EnoptError',
    'UnknownProblem',
    'CatalogConstructionError',
    'SENTINEL_OBJECTIVE',
    'get_catalog',
    'resolve',
    'dimension',
    'domain',
]

__version__ = '0.1.0'

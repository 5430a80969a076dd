"""
Problem Catalog
Immutable registry mapping problem identifiers to their metadata

Two backends are available:
    "enoppy": the 23 RWCO 2020 problems of enoppy.paper_based.rwco_2020
    "native": the numpy mechanical-design subset in enopt.benchmarks.rwco2020
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional, Tuple

import numpy as np

from enopt.benchmarks import enoppy_oracle, rwco2020
from enopt.core.evaluator import EvaluationBridge
from enopt.core.oracle import EvaluationOracle
from enopt.errors import CatalogConstructionError, UnknownProblem
from enopt.utils.fault_tracker import FaultTracker

logger = logging.getLogger(__name__)

OracleFactory = Callable[[], EvaluationOracle]


@dataclass(frozen=True)
class ProblemDescriptor:
    """
    One named benchmark instance

    Attributes:
        name: Stable identifier, unique within the catalog
        dimension: Number of decision variables
        domain: One (lower, upper) pair per decision variable
    """
    name: str
    dimension: int
    domain: Tuple[Tuple[float, float], ...]

    @property
    def lower_bounds(self) -> np.ndarray:
        return np.array([lo for lo, _ in self.domain], dtype=float)

    @property
    def upper_bounds(self) -> np.ndarray:
        return np.array([hi for _, hi in self.domain], dtype=float)

    def midpoint(self) -> np.ndarray:
        """
        Center of the search box

        Bounds may be infinite; the matching entries are then inf or nan and
        callers sampling the box must handle them.
        """
        return self.lower_bounds + (self.upper_bounds - self.lower_bounds) / 2.0


def _build_descriptor(name: str, oracle: EvaluationOracle) -> ProblemDescriptor:
    """
    Read and validate the oracle's declared metadata

    Raises:
        ValueError / TypeError: If dimension or bounds are malformed
    """
    dim = oracle.dimension
    if isinstance(dim, (bool, np.bool_)) or not isinstance(dim, (int, np.integer)):
        raise TypeError(f"dimension must be an integer, got {dim!r}")
    dim = int(dim)
    if dim <= 0:
        raise ValueError(f"dimension must be positive, got {dim}")

    bounds = np.array(oracle.bounds, dtype=float)
    if bounds.shape != (dim, 2):
        raise ValueError(f"expected {dim} [lower, upper] pairs, got bounds of shape {bounds.shape}")
    if np.any(np.isnan(bounds)):
        raise ValueError("bounds contain NaN")
    inverted = np.flatnonzero(bounds[:, 0] > bounds[:, 1])
    if len(inverted) > 0:
        raise ValueError(f"lower bound exceeds upper bound in dimensions {inverted.tolist()}")

    domain = tuple((float(lo), float(hi)) for lo, hi in bounds)
    return ProblemDescriptor(name=name, dimension=dim, domain=domain)


class ProblemCatalog:
    """
    Registry of benchmark problems

    Each identifier maps to a zero-argument oracle factory. A descriptor is
    built on first resolve() by querying a fresh oracle once, then memoized
    for the lifetime of the catalog.
    """

    def __init__(self, registry: Dict[str, OracleFactory], backend: str = "custom"):
        """
        Args:
            registry: Mapping identifier -> oracle factory
            backend: Backend label used in error messages and logs
        """
        self.backend = backend
        self._registry = dict(registry)
        self._descriptors: Dict[str, ProblemDescriptor] = {}
        self._lock = threading.Lock()

    def names(self) -> Tuple[str, ...]:
        """Sorted tuple of registered identifiers"""
        return tuple(sorted(self._registry))

    def __contains__(self, name) -> bool:
        return name in self._registry

    def __len__(self) -> int:
        return len(self._registry)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def _factory(self, name: str) -> OracleFactory:
        if not isinstance(name, str) or name not in self._registry:
            raise UnknownProblem(name, self.names())
        return self._registry[name]

    def create_oracle(self, name: str) -> EvaluationOracle:
        """
        Create a fresh oracle handle for `name`

        Raises:
            UnknownProblem: If name is not registered
            CatalogConstructionError: If the oracle cannot be created
        """
        factory = self._factory(name)
        try:
            return factory()
        except Exception as e:
            raise CatalogConstructionError(
                name, f"oracle unavailable ({type(e).__name__}: {e})", self.backend) from e

    def resolve(self, name: str) -> ProblemDescriptor:
        """
        Look up a problem's descriptor

        Raises:
            UnknownProblem: If name is not registered
            CatalogConstructionError: If the oracle fails to supply metadata
        """
        self._factory(name)
        with self._lock:
            descriptor = self._descriptors.get(name)
            if descriptor is None:
                oracle = self.create_oracle(name)
                try:
                    descriptor = _build_descriptor(name, oracle)
                except Exception as e:
                    raise CatalogConstructionError(
                        name, f"malformed metadata ({type(e).__name__}: {e})", self.backend) from e
                self._descriptors[name] = descriptor
                logger.info(f"Resolved {name} [{self.backend}]: dim={descriptor.dimension}")
        return descriptor

    def open(self, name: str,
             tracker: Optional[FaultTracker] = None,
             **bridge_kwargs) -> EvaluationBridge:
        """Resolve `name` and bind a new oracle handle to an EvaluationBridge"""
        descriptor = self.resolve(name)
        return EvaluationBridge(descriptor, self.create_oracle(name), tracker=tracker, **bridge_kwargs)

    def __repr__(self) -> str:
        return f"ProblemCatalog(backend={self.backend!r}, problems={len(self)})"


def dimension(descriptor: ProblemDescriptor) -> int:
    return descriptor.dimension


def domain(descriptor: ProblemDescriptor) -> Tuple[Tuple[float, float], ...]:
    return descriptor.domain


def enoppy_catalog(module: str = enoppy_oracle.ENOPPY_MODULE) -> ProblemCatalog:
    registry = {name: enoppy_oracle.enoppy_factory(name, module)
                for name in enoppy_oracle.PROBLEM_NAMES}
    return ProblemCatalog(registry, backend="enoppy")


def native_catalog(penalty_weight: Optional[float] = None) -> ProblemCatalog:
    if penalty_weight is None:
        registry = dict(rwco2020.PROBLEM_REGISTRY)
    else:
        registry = {name: (lambda cls=cls: cls(penalty_weight))
                    for name, cls in rwco2020.PROBLEM_REGISTRY.items()}
    return ProblemCatalog(registry, backend="native")


BACKENDS = {
    "enoppy": enoppy_catalog,
    "native": native_catalog,
}

_catalogs: Dict[str, ProblemCatalog] = {}
_catalogs_lock = threading.Lock()


def get_catalog(backend: str = "enoppy") -> ProblemCatalog:
    """
    Shared catalog for a backend

    Raises:
        ValueError: If backend is unknown
    """
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend '{backend}'. Available backends: {sorted(BACKENDS)}")
    with _catalogs_lock:
        if backend not in _catalogs:
            _catalogs[backend] = BACKENDS[backend]()
        return _catalogs[backend]


def resolve(name: str, backend: str = "enoppy") -> ProblemDescriptor:
    return get_catalog(backend).resolve(name)

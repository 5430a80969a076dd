"""
Evaluation oracle interface

An oracle is the computational unit behind one benchmark problem. The catalog
only reads its declared metadata; the evaluation bridge only calls score().
"""

from typing import List, Sequence

import numpy as np


class EvaluationOracle:
    """
    Base class for problem oracles

    Subclasses declare:
        name: stable problem identifier
        dimension: number of decision variables
        bounds: one [lower, upper] pair per decision variable

    and implement score(x), which maps a dimension-length vector to a real
    scalar (lower is better, constraints already folded in). Invalid or
    undefined evaluations must raise rather than return an arbitrary number.
    """

    name: str = None
    dimension: int = None
    bounds: Sequence[Sequence[float]] = None

    def score(self, x: np.ndarray) -> float:
        """Scalar objective (with constraint handling) of solution x"""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class FunctionOracle(EvaluationOracle):
    """
    Oracle assembled from plain metadata and a scoring callable

    Useful for ad-hoc problems and for wiring a formula into the catalog
    without writing a subclass.
    """

    def __init__(self, name: str, bounds: Sequence[Sequence[float]], func):
        self.name = name
        self._bounds: List[List[float]] = [list(pair) for pair in bounds]
        self._func = func

    @property
    def dimension(self) -> int:
        return len(self._bounds)

    @property
    def bounds(self) -> List[List[float]]:
        return [list(pair) for pair in self._bounds]

    def score(self, x: np.ndarray) -> float:
        return self._func(x)

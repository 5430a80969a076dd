"""
Evaluation Bridge
Scores candidate solution vectors against one benchmark problem

Robustness contract: a candidate that cannot be scored (malformed vector,
wrong length, oracle error, non-numeric or non-finite result) receives the
sentinel worst-case objective instead of raising, so a single bad candidate
never aborts a generation of the calling search loop. Faults are classified
and counted in a FaultTracker.

The bridge does NOT clip or repair candidates against the problem domain;
see BoundaryHandler for caller-side repair.
"""

import logging
import numbers
import threading
from typing import Iterable, Optional, Sequence

import numpy as np

from enopt.core.oracle import EvaluationOracle
from enopt.utils.fault_tracker import (
    FAULT_DIMENSION_MISMATCH, FAULT_INVALID_RESULT, FAULT_MALFORMED_CANDIDATE,
    FAULT_NON_FINITE_RESULT, FAULT_ORACLE_ERROR, EvaluationFault, FaultTracker,
)

logger = logging.getLogger(__name__)

# Worst-case objective under minimization
SENTINEL_OBJECTIVE = np.inf


def _as_real(value) -> Optional[float]:
    """Convert an oracle result to float, or None if it is not a real scalar"""
    if isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, np.ndarray):
        if value.size != 1 or value.dtype.kind not in 'iuf':
            return None
        value = value.reshape(())[()]
    if not isinstance(value, (numbers.Real, np.integer, np.floating)):
        return None
    try:
        return float(value)
    except OverflowError:
        # Integer too large for a double
        return np.inf


class EvaluationBridge:
    """
    Scores candidates for one problem through a live oracle handle

    Evaluation is synchronous and sequential. Every oracle call is made while
    holding the bridge's lock, so a bridge shared between threads serializes
    access to its oracle; open one bridge per thread for parallel use.
    """

    def __init__(self,
                 descriptor,
                 oracle: EvaluationOracle,
                 sentinel: float = SENTINEL_OBJECTIVE,
                 tracker: Optional[FaultTracker] = None):
        """
        Args:
            descriptor: Resolved problem metadata
            oracle: Oracle handle for the same problem
            sentinel: Objective assigned to candidates that cannot be scored
            tracker: Fault tracker to record into (a private one by default)
        """
        if np.isnan(sentinel):
            raise ValueError("Sentinel objective must not be NaN")
        self.descriptor = descriptor
        self.oracle = oracle
        self.sentinel = float(sentinel)
        self.tracker = tracker if tracker is not None else FaultTracker()
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def dimension(self) -> int:
        return self.descriptor.dimension

    @property
    def domain(self):
        return self.descriptor.domain

    def evaluate(self, candidate: Sequence[float]) -> float:
        """Score a single candidate"""
        return self._score(candidate, 0)

    def evaluate_batch(self, candidates: Iterable[Sequence[float]]) -> np.ndarray:
        """
        Score candidates in order

        Args:
            candidates: 2-D array (one candidate per row) or any iterable of
                candidate vectors; ragged input is allowed

        Returns:
            Array of len(candidates) objective values, in input order
        """
        scores = [self._score(candidate, i) for i, candidate in enumerate(candidates)]
        return np.array(scores, dtype=float)

    def _score(self, candidate, index: int) -> float:
        self.tracker.record_evaluation()

        try:
            raw_candidate = np.asarray(candidate)
        except (TypeError, ValueError, OverflowError) as e:
            return self._fault(index, FAULT_MALFORMED_CANDIDATE, str(e))
        # Object/string/complex entries must not be coerced (None would become nan)
        if raw_candidate.dtype.kind not in 'biuf':
            return self._fault(index, FAULT_MALFORMED_CANDIDATE,
                               f"non-real entries of dtype {raw_candidate.dtype}")

        # Private copy: the oracle may not alter the caller's vector
        x = np.array(raw_candidate, dtype=float)

        if x.ndim != 1 or x.shape[0] != self.dimension:
            return self._fault(index, FAULT_DIMENSION_MISMATCH,
                               f"expected shape ({self.dimension},), got {x.shape}")

        with self._lock:
            try:
                raw = self.oracle.score(x)
            except Exception as e:
                return self._fault(index, FAULT_ORACLE_ERROR, f"{type(e).__name__}: {e}")

        value = _as_real(raw)
        if value is None:
            return self._fault(index, FAULT_INVALID_RESULT,
                               f"non-numeric result of type {type(raw).__name__}")
        if not np.isfinite(value):
            return self._fault(index, FAULT_NON_FINITE_RESULT, f"result {value}")
        return value

    def _fault(self, index: int, kind: str, message: str) -> float:
        self.tracker.record(EvaluationFault(self.name, index, kind, message))
        logger.debug(f"{self.name}: candidate {index} scored {self.sentinel} ({kind}: {message})")
        return self.sentinel

    def __repr__(self) -> str:
        return f"EvaluationBridge(name={self.name!r}, dimension={self.dimension})"

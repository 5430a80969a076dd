"""
Evaluation fault tracking
Counts and classifies candidates that could not be scored, so that callers
can assert on fault frequency rather than only on the resulting sentinel
"""

import json
import threading
from collections import Counter, deque
from pathlib import Path
from typing import Dict, List, Optional

# Fault kinds
FAULT_MALFORMED_CANDIDATE = "malformed_candidate"  # not convertible to a real vector
FAULT_DIMENSION_MISMATCH = "dimension_mismatch"  # rejected before reaching the oracle
FAULT_ORACLE_ERROR = "oracle_error"  # oracle raised
FAULT_INVALID_RESULT = "invalid_result"  # oracle returned a non-numeric value
FAULT_NON_FINITE_RESULT = "non_finite_result"  # oracle returned NaN or +/-inf

FAULT_KINDS = (
    FAULT_MALFORMED_CANDIDATE,
    FAULT_DIMENSION_MISMATCH,
    FAULT_ORACLE_ERROR,
    FAULT_INVALID_RESULT,
    FAULT_NON_FINITE_RESULT,
)


class EvaluationFault:
    """A single recovered evaluation failure"""

    def __init__(self, problem: str, index: int, kind: str, message: str = ""):
        if kind not in FAULT_KINDS:
            raise ValueError(f"Unknown fault kind: {kind}")
        self.problem = problem
        self.index = index
        self.kind = kind
        self.message = message

    def to_dict(self) -> Dict:
        return {
            'problem': str(self.problem),
            'index': int(self.index),
            'kind': self.kind,
            'message': self.message,
        }

    def __repr__(self) -> str:
        return f"EvaluationFault({self.problem!r}, index={self.index}, kind={self.kind!r})"


class FaultTracker:
    """
    Tracks evaluation faults across one or more batches

    Keeps per-kind counters for the lifetime of the tracker and the most
    recent faults (bounded by max_history) for diagnostics.
    """

    def __init__(self, max_history: Optional[int] = 1000):
        """
        Args:
            max_history: Number of recent faults kept; None keeps all of them
        """
        self.max_history = max_history
        self.evaluations = 0
        self._counts = Counter()
        self.history = deque(maxlen=max_history)
        # Shared between bridges running in different threads
        self._lock = threading.RLock()

    def record_evaluation(self, n: int = 1):
        with self._lock:
            self.evaluations += n

    def record(self, fault: EvaluationFault):
        with self._lock:
            self._counts[fault.kind] += 1
            self.history.append(fault)

    def count(self, kind: Optional[str] = None) -> int:
        """Number of faults of `kind`, or of all kinds if omitted"""
        with self._lock:
            if kind is None:
                return sum(self._counts.values())
            return self._counts[kind]

    def counts(self) -> Dict[str, int]:
        with self._lock:
            return {kind: self._counts[kind] for kind in FAULT_KINDS}

    @property
    def fault_rate(self) -> float:
        with self._lock:
            if self.evaluations == 0:
                return 0.0
            return self.count() / self.evaluations

    def faults(self, kind: Optional[str] = None) -> List[EvaluationFault]:
        with self._lock:
            if kind is None:
                return list(self.history)
            return [f for f in self.history if f.kind == kind]

    def reset(self):
        with self._lock:
            self.evaluations = 0
            self._counts.clear()
            self.history.clear()

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization"""
        with self._lock:
            return {
                'evaluations': int(self.evaluations),
                'total_faults': int(self.count()),
                'fault_rate': float(self.fault_rate),
                'counts': self.counts(),
                'recent_faults': [f.to_dict() for f in self.history],
            }

    def save_json(self, output_path: Path):
        """
        Save fault statistics to JSON file

        Args:
            output_path: Path to output JSON file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

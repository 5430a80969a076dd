"""
Constraint Violation and Penalty Handling
Folds inequality/equality constraints into a single scalar objective
"""

from typing import Dict

import numpy as np

# Default tolerances (g_j(x) <= 0 and h_k(x) = 0)
TOLERANCE_INEQUALITY = 1e-8
TOLERANCE_EQUALITY = 1e-4

DEFAULT_PENALTY_WEIGHT = 1e6


def constraint_violation(inequality: np.ndarray,
                         equality: np.ndarray,
                         tolerance_inequality: float = TOLERANCE_INEQUALITY,
                         tolerance_equality: float = TOLERANCE_EQUALITY) -> float:
    """
    Compute total constraint violation

    CV = sum(max(0, g_j - tolerance_inequality))
         + sum(max(0, |h_k| - tolerance_equality))

    Args:
        inequality: Values g_j(x), satisfied when g_j(x) <= 0
        equality: Values h_k(x), satisfied when h_k(x) = 0
        tolerance_inequality: Slack allowed on inequality constraints
        tolerance_equality: Slack allowed on equality constraints

    Returns:
        Total constraint violation (0 if fully feasible)
    """
    ineq = np.asarray(inequality, dtype=float)
    eq = np.asarray(equality, dtype=float)

    ineq_violations = np.maximum(0, ineq - tolerance_inequality)
    eq_violations = np.maximum(0, np.abs(eq) - tolerance_equality)

    return float(np.sum(ineq_violations) + np.sum(eq_violations))


def violation_from_dict(constraints: Dict[str, np.ndarray],
                        tolerance_inequality: float = TOLERANCE_INEQUALITY,
                        tolerance_equality: float = TOLERANCE_EQUALITY) -> float:
    """CV of a {'inequality': g, 'equality': h} constraint dictionary"""
    return constraint_violation(
        constraints.get('inequality', np.array([])),
        constraints.get('equality', np.array([])),
        tolerance_inequality,
        tolerance_equality,
    )


class StaticPenalty:
    """
    Static penalty: penalized = fitness + weight * CV

    A feasible solution (CV == 0) keeps its raw fitness, so penalized and raw
    objective agree wherever the constraints hold.
    """

    def __init__(self, weight: float = DEFAULT_PENALTY_WEIGHT):
        if weight < 0:
            raise ValueError(f"Penalty weight must be non-negative, got {weight}")
        self.weight = float(weight)

    def apply(self, fitness: float, cv: float) -> float:
        if cv <= 0:
            return float(fitness)
        return float(fitness + self.weight * cv)

    def __repr__(self) -> str:
        return f"StaticPenalty(weight={self.weight:g})"

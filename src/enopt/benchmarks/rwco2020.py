"""
Real-World Constrained Optimization (RWCO 2020) Mechanical Design Problems

Native numpy implementation of the classic mechanical-design members of the
CEC 2020 real-world constrained suite. Each problem defines its objective,
its inequality (g_j(x) <= 0) and equality (h_k(x) = 0) constraints, and
folds the constraint violation into score() with a static penalty.
"""
from typing import Dict, Tuple

import numpy as np

from enopt.core.constraint_handler import (
    DEFAULT_PENALTY_WEIGHT, TOLERANCE_EQUALITY, TOLERANCE_INEQUALITY,
    StaticPenalty, violation_from_dict,
)
from enopt.core.oracle import EvaluationOracle


class RWCOProblem(EvaluationOracle):
    """
    Base class for native RWCO 2020 problems

    Constraint Tolerance Specification:
    - Inequality constraints: g_j(x) <= 0, violated if g_j(x) > tolerance_inequality
    - Equality constraints: h_k(x) = 0, violated if |h_k(x)| > tolerance_equality

    score(x) = objective(x) + penalty_weight * CV(x)
    """

    def __init__(self, penalty_weight: float = DEFAULT_PENALTY_WEIGHT):
        self.dimension = None
        self.lower_bounds = None
        self.upper_bounds = None
        self.known_optimum = None
        self.optimum_position = None
        self.num_inequality_constraints = 0
        self.num_equality_constraints = 0

        self.tolerance_equality = TOLERANCE_EQUALITY
        self.tolerance_inequality = TOLERANCE_INEQUALITY
        self.penalty = StaticPenalty(penalty_weight)

    @property
    def bounds(self):
        return [[float(lo), float(hi)] for lo, hi in zip(self.lower_bounds, self.upper_bounds)]

    def objective(self, x: np.ndarray) -> float:
        """Objective function to minimize"""
        raise NotImplementedError

    def constraints(self, x: np.ndarray) -> Dict[str, np.ndarray]:
        """Returns {'inequality': g_j(x), 'equality': h_k(x)}"""
        raise NotImplementedError

    def compute_cv(self, x: np.ndarray) -> float:
        return violation_from_dict(self.constraints(x),
                                   self.tolerance_inequality,
                                   self.tolerance_equality)

    def evaluate(self, x: np.ndarray) -> Tuple[float, float, bool]:
        """
        Evaluate solution

        Returns:
            fitness: objective function value
            cv: total constraint violation
            is_feasible: True if CV is zero
        """
        fitness = self.objective(x)
        cv = self.compute_cv(x)
        return fitness, cv, cv <= 0

    def score(self, x: np.ndarray) -> float:
        fitness, cv, _ = self.evaluate(x)
        return self.penalty.apply(fitness, cv)


class TensionCompressionSpringDesignProblem(RWCOProblem):
    """Minimize spring weight (N + 2) * D * d^2, x = [d, D, N]"""

    name = "TensionCompressionSpringDesignProblem"

    def __init__(self, penalty_weight: float = DEFAULT_PENALTY_WEIGHT):
        super().__init__(penalty_weight)
        self.dimension = 3
        self.lower_bounds = np.array([0.05, 0.25, 2.0])
        self.upper_bounds = np.array([2.0, 1.3, 15.0])
        self.known_optimum = 0.012665232788
        self.num_inequality_constraints = 4
        self.optimum_position = np.array([0.051689061, 0.356717736, 11.28896595])

    def objective(self, x: np.ndarray) -> float:
        return (x[2] + 2) * x[1] * x[0] ** 2

    def constraints(self, x: np.ndarray) -> Dict[str, np.ndarray]:
        g1 = 1 - (x[1] ** 3 * x[2]) / (71785 * x[0] ** 4)
        g2 = ((4 * x[1] ** 2 - x[0] * x[1]) / (12566 * (x[1] * x[0] ** 3 - x[0] ** 4))
              + 1 / (5108 * x[0] ** 2) - 1)
        g3 = 1 - 140.45 * x[0] / (x[1] ** 2 * x[2])
        g4 = (x[0] + x[1]) / 1.5 - 1
        return {'inequality': np.array([g1, g2, g3, g4]), 'equality': np.array([])}


class PressureVesselDesignProblem(RWCOProblem):
    """Minimize material, forming and welding cost of a cylindrical vessel, x = [Ts, Th, R, L]"""

    name = "PressureVesselDesignProblem"

    def __init__(self, penalty_weight: float = DEFAULT_PENALTY_WEIGHT):
        super().__init__(penalty_weight)
        self.dimension = 4
        self.lower_bounds = np.array([0.0, 0.0, 10.0, 10.0])
        self.upper_bounds = np.array([99.0, 99.0, 200.0, 200.0])
        self.known_optimum = 6059.714335
        self.num_inequality_constraints = 4
        self.optimum_position = np.array([0.8125, 0.4375, 42.0984456, 176.6365958])

    def objective(self, x: np.ndarray) -> float:
        return (0.6224 * x[0] * x[2] * x[3] + 1.7781 * x[1] * x[2] ** 2 +
                3.1661 * x[0] ** 2 * x[3] + 19.84 * x[0] ** 2 * x[2])

    def constraints(self, x: np.ndarray) -> Dict[str, np.ndarray]:
        g1 = -x[0] + 0.0193 * x[2]
        g2 = -x[1] + 0.00954 * x[2]
        g3 = -np.pi * x[2] ** 2 * x[3] - 4.0 / 3.0 * np.pi * x[2] ** 3 + 1296000
        g4 = x[3] - 240
        return {'inequality': np.array([g1, g2, g3, g4]), 'equality': np.array([])}


class WeldedBeamDesignProblem(RWCOProblem):
    """Minimize fabrication cost of a welded beam, x = [h, l, t, b]"""

    name = "WeldedBeamDesignProblem"

    # Load, beam length, moduli and allowable stress/deflection
    P = 6000.0
    L = 14.0
    E = 30e6
    G = 12e6
    TAU_MAX = 13600.0
    SIGMA_MAX = 30000.0
    DELTA_MAX = 0.25

    def __init__(self, penalty_weight: float = DEFAULT_PENALTY_WEIGHT):
        super().__init__(penalty_weight)
        self.dimension = 4
        self.lower_bounds = np.array([0.1, 0.1, 0.1, 0.1])
        self.upper_bounds = np.array([2.0, 3.5, 10.0, 2.0])
        self.known_optimum = 1.724852
        self.num_inequality_constraints = 7
        self.optimum_position = np.array([0.205730, 3.470489, 9.036624, 0.205730])

    def objective(self, x: np.ndarray) -> float:
        return 1.10471 * x[0] ** 2 * x[1] + 0.04811 * x[2] * x[3] * (14.0 + x[1])

    def _shear_stress(self, x: np.ndarray) -> float:
        tau1 = self.P / (np.sqrt(2) * x[0] * x[1])
        m = self.P * (self.L + x[1] / 2)
        r = np.sqrt(x[1] ** 2 / 4 + ((x[0] + x[2]) / 2) ** 2)
        j = 2 * (np.sqrt(2) * x[0] * x[1] * (x[1] ** 2 / 12 + ((x[0] + x[2]) / 2) ** 2))
        tau2 = m * r / j
        return np.sqrt(tau1 ** 2 + 2 * tau1 * tau2 * x[1] / (2 * r) + tau2 ** 2)

    def _buckling_load(self, x: np.ndarray) -> float:
        return (4.013 * self.E * np.sqrt(x[2] ** 2 * x[3] ** 6 / 36) / self.L ** 2 *
                (1 - x[2] / (2 * self.L) * np.sqrt(self.E / (4 * self.G))))

    def constraints(self, x: np.ndarray) -> Dict[str, np.ndarray]:
        sigma = 6 * self.P * self.L / (x[3] * x[2] ** 2)
        delta = 4 * self.P * self.L ** 3 / (self.E * x[2] ** 3 * x[3])

        g = np.zeros(7)
        g[0] = self._shear_stress(x) - self.TAU_MAX
        g[1] = sigma - self.SIGMA_MAX
        g[2] = x[0] - x[3]
        g[3] = 0.10471 * x[0] ** 2 + 0.04811 * x[2] * x[3] * (14.0 + x[1]) - 5.0
        g[4] = 0.125 - x[0]
        g[5] = delta - self.DELTA_MAX
        g[6] = self.P - self._buckling_load(x)
        return {'inequality': g, 'equality': np.array([])}


class ThreeBarTrussDesignProblem(RWCOProblem):
    """Minimize volume of a statically loaded three-bar truss, x = [A1, A2]"""

    name = "ThreeBarTrussDesignProblem"

    BAR_LENGTH = 100.0
    LOAD = 2.0
    STRESS = 2.0

    def __init__(self, penalty_weight: float = DEFAULT_PENALTY_WEIGHT):
        super().__init__(penalty_weight)
        self.dimension = 2
        self.lower_bounds = np.array([0.0, 0.0])
        self.upper_bounds = np.array([1.0, 1.0])
        self.known_optimum = 263.8958434
        self.num_inequality_constraints = 3
        self.optimum_position = np.array([0.78867513, 0.40824828])

    def objective(self, x: np.ndarray) -> float:
        return (2 * np.sqrt(2) * x[0] + x[1]) * self.BAR_LENGTH

    def constraints(self, x: np.ndarray) -> Dict[str, np.ndarray]:
        denom = np.sqrt(2) * x[0] ** 2 + 2 * x[0] * x[1]
        g1 = (np.sqrt(2) * x[0] + x[1]) / denom * self.LOAD - self.STRESS
        g2 = x[1] / denom * self.LOAD - self.STRESS
        g3 = 1 / (np.sqrt(2) * x[1] + x[0]) * self.LOAD - self.STRESS
        return {'inequality': np.array([g1, g2, g3]), 'equality': np.array([])}


class WeightMinimizationSpeedReducerProblem(RWCOProblem):
    """Minimize speed reducer weight (gear face, module, teeth, shaft lengths/diameters)"""

    name = "WeightMinimizationSpeedReducerProblem"

    def __init__(self, penalty_weight: float = DEFAULT_PENALTY_WEIGHT):
        super().__init__(penalty_weight)
        self.dimension = 7
        self.lower_bounds = np.array([2.6, 0.7, 17.0, 7.3, 7.3, 2.9, 5.0])
        self.upper_bounds = np.array([3.6, 0.8, 28.0, 8.3, 8.3, 3.9, 5.5])
        self.known_optimum = 2994.424466
        self.num_inequality_constraints = 11
        self.optimum_position = np.array([3.5, 0.7, 17.0, 7.3, 7.715319911,
                                          3.350214666, 5.286654465])

    def objective(self, x: np.ndarray) -> float:
        return (0.7854 * x[0] * x[1] ** 2 * (3.3333 * x[2] ** 2 + 14.9334 * x[2] - 43.0934)
                - 1.508 * x[0] * (x[5] ** 2 + x[6] ** 2)
                + 7.477 * (x[5] ** 3 + x[6] ** 3)
                + 0.7854 * (x[3] * x[5] ** 2 + x[4] * x[6] ** 2))

    def constraints(self, x: np.ndarray) -> Dict[str, np.ndarray]:
        g = np.zeros(11)
        g[0] = -x[0] * x[1] ** 2 * x[2] + 27
        g[1] = -x[0] * x[1] ** 2 * x[2] ** 2 + 397.5
        g[2] = -x[1] * x[5] ** 4 * x[2] / x[3] ** 3 + 1.93
        g[3] = -x[1] * x[6] ** 4 * x[2] / x[4] ** 3 + 1.93
        g[4] = 10 / x[5] ** 3 * np.sqrt(16.91e6 + (745 * x[3] / (x[1] * x[2])) ** 2) - 1100
        g[5] = 10 / x[6] ** 3 * np.sqrt(157.5e6 + (745 * x[4] / (x[1] * x[2])) ** 2) - 850
        g[6] = x[1] * x[2] - 40
        g[7] = -x[0] / x[1] + 5
        g[8] = x[0] / x[1] - 12
        g[9] = 1.5 * x[5] - x[3] + 1.9
        g[10] = 1.1 * x[6] - x[4] + 1.9
        return {'inequality': g, 'equality': np.array([])}


# Problem registry - native subset of the RWCO 2020 suite
PROBLEM_REGISTRY = {
    cls.name: cls for cls in (
        TensionCompressionSpringDesignProblem,
        PressureVesselDesignProblem,
        WeldedBeamDesignProblem,
        ThreeBarTrussDesignProblem,
        WeightMinimizationSpeedReducerProblem,
    )
}


def get_problem(name: str) -> RWCOProblem:
    """
    Factory function to get a native RWCO 2020 problem instance

    Args:
        name: Problem class name, e.g. "WeldedBeamDesignProblem"

    Returns:
        Instance of the requested problem

    Raises:
        ValueError: If the problem has no native implementation
    """
    if name not in PROBLEM_REGISTRY:
        available = sorted(PROBLEM_REGISTRY.keys())
        raise ValueError(f"Problem {name} not implemented natively. Available problems: {available}")
    return PROBLEM_REGISTRY[name]()

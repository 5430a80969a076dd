"""
Oracle adapter for the enoppy RWCO 2020 problem classes

Each identifier is the class name of a problem in
enoppy.paper_based.rwco_2020. The enoppy problem exposes n_dims, bounds and
evaluate(x); the adapter maps them onto the EvaluationOracle interface.
"""

import importlib
import logging
from typing import List

import numpy as np

from enopt.core.oracle import EvaluationOracle

logger = logging.getLogger(__name__)

ENOPPY_MODULE = "enoppy.paper_based.rwco_2020"

# Closed set of identifiers served by the enoppy backend
PROBLEM_NAMES = (
    "HeatExchangerNetworkDesignCase1Problem",
    "HeatExchangerNetworkDesignCase2Problem",
    "HaverlyPoolingProblem",
    "BlendingPoolingSeparationProblem",
    "PropaneIsobutaneNButaneNonsharpSeparationProblem",
    "OptimalOperationAlkylationUnitProblem",
    "ReactorNetworkDesignProblem",
    "ProcessSynthesis01Problem",
    "ProcessSynthesis02Problem",
    "ProcessDesignProblem",
    "ProcessSynthesisAndDesignProblem",
    "ProcessFlowSheetingProblem",
    "TwoReactorProblem",
    "MultiProductBatchPlantProblem",
    "WeightMinimizationSpeedReducerProblem",
    "OptimalDesignIndustrialRefrigerationSystemProblem",
    "TensionCompressionSpringDesignProblem",
    "PressureVesselDesignProblem",
    "WeldedBeamDesignProblem",
    "ThreeBarTrussDesignProblem",
    "MultipleDiskClutchBrakeDesignProblem",
    "PlanetaryGearTrainDesignOptimizationProblem",
    "StepConePulleyProblem",
)


class EnoppyOracle(EvaluationOracle):
    """
    Live handle on one enoppy problem instance

    The enoppy module is imported and the problem class instantiated when the
    handle is created, so a missing library or class fails here and not at
    the first evaluation.
    """

    def __init__(self, name: str, module: str = ENOPPY_MODULE):
        self.name = name
        problems = importlib.import_module(module)
        problem_class = getattr(problems, name)
        self.inner = problem_class()
        logger.debug(f"Instantiated {module}.{name}")

    @property
    def dimension(self) -> int:
        return self.inner.n_dims

    @property
    def bounds(self) -> List[List[float]]:
        return [list(bound) for bound in self.inner.bounds]

    def score(self, x: np.ndarray) -> float:
        return self.inner.evaluate(x)


def enoppy_factory(name: str, module: str = ENOPPY_MODULE):
    """Zero-argument factory creating a fresh EnoppyOracle for `name`"""
    def factory() -> EnoppyOracle:
        return EnoppyOracle(name, module)
    return factory

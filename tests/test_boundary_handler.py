"""
Test caller-side boundary repair methods
"""

import numpy as np
import pytest

from enopt import FunctionOracle, ProblemCatalog
from enopt.core.boundary_handler import (
    METHOD_MIDPOINT_TARGET, METHOD_MIRROR, METHOD_NAMES, METHOD_SATURATION,
    METHOD_TOROIDAL, METHOD_UNIF, BoundaryHandler, get_method_name,
)

LOWER = np.array([0.0, 0.0])
UPPER = np.array([10.0, 5.0])


@pytest.fixture
def handler():
    return BoundaryHandler(LOWER, UPPER)


def test_check_bounds(handler):
    has_violations, violations = handler.check_bounds(np.array([-1.0, 6.0]))
    assert has_violations
    np.testing.assert_array_equal(violations, [-1, 1])

    has_violations, violations = handler.check_bounds(np.array([10.0, 0.0]))
    assert not has_violations
    np.testing.assert_array_equal(violations, [0, 0])


def test_feasible_position_returned_as_copy(handler):
    position = np.array([1.0, 2.0])
    for method_id in METHOD_NAMES:
        corrected = handler.apply_method(position, method_id)
        np.testing.assert_array_equal(corrected, position)
        assert corrected is not position


def test_saturation(handler):
    corrected = handler.apply_method(np.array([-3.0, 7.0]), METHOD_SATURATION)
    np.testing.assert_array_equal(corrected, [0.0, 5.0])


def test_midpoint_target(handler):
    corrected = handler.apply_method(np.array([-3.0, 7.0]), METHOD_MIDPOINT_TARGET,
                                     target=np.array([4.0, 3.0]))
    np.testing.assert_array_equal(corrected, [2.0, 4.0])


def test_uniform(handler):
    np.random.seed(11)
    for _ in range(50):
        corrected = handler.apply_method(np.array([-3.0, 70.0]), METHOD_UNIF)
        assert np.all(corrected >= LOWER) and np.all(corrected <= UPPER)


def test_mirror(handler):
    corrected = handler.apply_method(np.array([-1.0, 6.0]), METHOD_MIRROR)
    np.testing.assert_allclose(corrected, [1.0, 4.0])

    # Overshoot larger than the box width
    corrected = handler.apply_method(np.array([-25.0, 12.0]), METHOD_MIRROR)
    np.testing.assert_allclose(corrected, [5.0, 2.0])


def test_toroidal(handler):
    corrected = handler.apply_method(np.array([-1.0, 6.0]), METHOD_TOROIDAL)
    np.testing.assert_allclose(corrected, [9.0, 1.0])

    corrected = handler.apply_method(np.array([-31.0, 17.0]), METHOD_TOROIDAL)
    np.testing.assert_allclose(corrected, [9.0, 2.0])


@pytest.mark.parametrize("method_id", [METHOD_MIRROR, METHOD_TOROIDAL])
def test_degenerate_interval(method_id):
    handler = BoundaryHandler([2.0], [2.0])
    np.testing.assert_array_equal(handler.apply_method(np.array([5.0]), method_id), [2.0])


def test_unknown_method(handler):
    with pytest.raises(ValueError):
        handler.apply_method(np.array([-1.0, 1.0]), 99)
    assert get_method_name(99) == "Unknown(99)"
    assert get_method_name(METHOD_MIRROR) == "Reflection"


def test_wrong_length(handler):
    with pytest.raises(ValueError):
        handler.apply_method(np.array([1.0, 2.0, 3.0]), METHOD_SATURATION)


def test_invalid_bounds():
    with pytest.raises(ValueError):
        BoundaryHandler([1.0, 0.0], [0.0, 1.0])
    with pytest.raises(ValueError):
        BoundaryHandler([0.0], [1.0, 2.0])


def test_repair_then_evaluate():
    """Repaired candidates score like in-domain ones; the bridge itself never clips"""
    catalog = ProblemCatalog({
        "Box": lambda: FunctionOracle("Box", [[0.0, 10.0], [0.0, 5.0]], lambda x: float(np.sum(x)))
    })
    bridge = catalog.open("Box")
    handler = BoundaryHandler.from_descriptor(bridge.descriptor)

    candidate = np.array([12.0, -1.0])
    assert bridge.evaluate(candidate) == 11.0

    repaired = handler.apply_method(candidate, METHOD_SATURATION)
    assert bridge.evaluate(repaired) == 10.0

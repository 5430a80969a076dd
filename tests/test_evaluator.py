"""
Test Evaluation Bridge: ordering, fault containment and sentinel policy
"""

import threading
import time

import numpy as np
import pytest

from enopt import EvaluationBridge, FunctionOracle, ProblemCatalog, SENTINEL_OBJECTIVE
from enopt.utils.fault_tracker import (
    FAULT_DIMENSION_MISMATCH, FAULT_INVALID_RESULT, FAULT_MALFORMED_CANDIDATE,
    FAULT_NON_FINITE_RESULT, FAULT_ORACLE_ERROR, FaultTracker,
)

BOUNDS = [[0.0, 10.0], [0.0, 5.0]]


def quadratic(x):
    return (x[0] - 1.0) ** 2 + 3.0 * x[1]


class CountingOracle(FunctionOracle):
    """FunctionOracle that records every vector it scores"""

    def __init__(self, func, bounds=BOUNDS):
        super().__init__("Stub", bounds, func)
        self.calls = []

    def score(self, x):
        self.calls.append(x.copy())
        return super().score(x)


def make_bridge(func=quadratic, bounds=BOUNDS, **kwargs):
    oracle = CountingOracle(func, bounds)
    catalog = ProblemCatalog({"Stub": lambda: oracle})
    return catalog.open("Stub", **kwargs), oracle


def test_midpoint_matches_direct_computation():
    """dimension 2, domain [[0,10],[0,5]]: midpoint score equals the oracle's own value"""
    bridge, oracle = make_bridge()
    assert bridge.dimension == 2
    assert bridge.domain == ((0.0, 10.0), (0.0, 5.0))

    midpoint = bridge.descriptor.midpoint()
    np.testing.assert_array_equal(midpoint, [5.0, 2.5])

    scores = bridge.evaluate_batch([midpoint])
    assert len(scores) == 1
    assert np.isfinite(scores[0])
    assert scores[0] == quadratic(np.array([5.0, 2.5])) == 23.5


def test_order_preserved():
    bridge, _ = make_bridge()
    candidates = [[1.0, 0.0], [5.0, 2.5], [0.0, 1.0]]
    scores = bridge.evaluate_batch(candidates)
    np.testing.assert_array_equal(scores, [quadratic(np.array(c)) for c in candidates])


def test_two_dimensional_array_input():
    bridge, _ = make_bridge()
    candidates = np.array([[1.0, 0.0], [5.0, 2.5], [0.0, 1.0]])
    scores = bridge.evaluate_batch(candidates)
    assert scores.shape == (3,)
    assert scores.dtype == np.float64
    np.testing.assert_array_equal(scores, [0.0, 23.5, 4.0])


def test_repeated_batches_identical():
    bridge, _ = make_bridge()
    candidates = np.random.default_rng(7).uniform([0, 0], [10, 5], size=(20, 2))
    first = bridge.evaluate_batch(candidates)
    second = bridge.evaluate_batch(candidates)
    np.testing.assert_array_equal(first, second)


def test_oracle_fault_contained():
    """A faulting middle candidate yields the sentinel; neighbours are unaffected"""
    def fragile(x):
        if x[0] == 2.0:
            raise ZeroDivisionError("singular design")
        return quadratic(x)

    bridge, _ = make_bridge(fragile)
    scores = bridge.evaluate_batch([[1.0, 1.0], [2.0, 1.0], [3.0, 1.0]])

    assert len(scores) == 3
    assert scores[0] == quadratic(np.array([1.0, 1.0]))
    assert scores[1] == SENTINEL_OBJECTIVE == np.inf
    assert scores[2] == quadratic(np.array([3.0, 1.0]))
    assert bridge.tracker.count(FAULT_ORACLE_ERROR) == 1
    assert bridge.tracker.count() == 1


def test_wrong_length_rejected_before_oracle():
    bridge, oracle = make_bridge()
    scores = bridge.evaluate_batch([[1.0, 2.0, 3.0], [1.0]])

    np.testing.assert_array_equal(scores, [np.inf, np.inf])
    assert oracle.calls == []
    assert bridge.tracker.count(FAULT_DIMENSION_MISMATCH) == 2


def test_wrong_length_policy_is_consistent():
    bridge, _ = make_bridge()
    for _ in range(3):
        assert bridge.evaluate([5.0, 2.5, 0.0]) == np.inf
    assert bridge.tracker.count(FAULT_DIMENSION_MISMATCH) == 3


def test_nested_candidate_is_dimension_mismatch():
    bridge, oracle = make_bridge()
    assert bridge.evaluate([[5.0, 2.5]]) == np.inf
    assert oracle.calls == []
    assert bridge.tracker.count(FAULT_DIMENSION_MISMATCH) == 1


def test_malformed_candidates():
    bridge, oracle = make_bridge()
    scores = bridge.evaluate_batch([["a", "b"], [None, 1.0], [1.0 + 2.0j, 0.0], [1.0, 1.0]])

    np.testing.assert_array_equal(scores[:3], [np.inf, np.inf, np.inf])
    assert scores[3] == quadratic(np.array([1.0, 1.0]))
    assert bridge.tracker.count(FAULT_MALFORMED_CANDIDATE) == 3
    assert len(oracle.calls) == 1


def test_ragged_batch():
    bridge, _ = make_bridge()
    scores = bridge.evaluate_batch([[1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0]])
    np.testing.assert_array_equal(scores, [0.0, np.inf, 4.0])


def test_empty_batch():
    bridge, _ = make_bridge()
    scores = bridge.evaluate_batch([])
    assert len(scores) == 0


@pytest.mark.parametrize("result", [np.nan, np.inf, -np.inf])
def test_non_finite_result(result):
    bridge, _ = make_bridge(lambda x: result)
    assert bridge.evaluate([1.0, 1.0]) == np.inf
    assert bridge.tracker.count(FAULT_NON_FINITE_RESULT) == 1


@pytest.mark.parametrize("result", [None, "1.5", True, [1.0, 2.0], np.array([1.0, 2.0]), 1 + 2j])
def test_non_numeric_result(result):
    bridge, _ = make_bridge(lambda x: result)
    assert bridge.evaluate([1.0, 1.0]) == np.inf
    assert bridge.tracker.count(FAULT_INVALID_RESULT) == 1


@pytest.mark.parametrize("result, expected", [
    (3, 3.0),
    (np.float32(0.5), 0.5),
    (np.int64(-4), -4.0),
    (np.array(2.5), 2.5),
    (np.array([7.0]), 7.0),
])
def test_numeric_results_accepted(result, expected):
    bridge, _ = make_bridge(lambda x: result)
    assert bridge.evaluate([1.0, 1.0]) == expected
    assert bridge.tracker.count() == 0


def test_oracle_error_and_invalid_result_distinguished():
    def oracle_func(x):
        if x[0] < 1:
            raise ValueError("math domain error")
        if x[0] < 2:
            return np.nan
        return "undefined"

    bridge, _ = make_bridge(oracle_func)
    scores = bridge.evaluate_batch([[0.5, 0.0], [1.5, 0.0], [2.5, 0.0]])

    np.testing.assert_array_equal(scores, [np.inf, np.inf, np.inf])
    assert bridge.tracker.counts() == {
        FAULT_MALFORMED_CANDIDATE: 0,
        FAULT_DIMENSION_MISMATCH: 0,
        FAULT_ORACLE_ERROR: 1,
        FAULT_INVALID_RESULT: 1,
        FAULT_NON_FINITE_RESULT: 1,
    }
    assert [f.index for f in bridge.tracker.faults()] == [0, 1, 2]


def test_out_of_domain_candidate_not_clipped():
    bridge, oracle = make_bridge()
    score = bridge.evaluate([-3.0, 9.0])
    assert score == quadratic(np.array([-3.0, 9.0]))
    np.testing.assert_array_equal(oracle.calls[0], [-3.0, 9.0])


def test_non_finite_candidate_values_reach_oracle():
    bridge, oracle = make_bridge(lambda x: 1.0)
    assert bridge.evaluate([np.nan, np.inf]) == 1.0
    assert len(oracle.calls) == 1


def test_oracle_cannot_mutate_caller_vector():
    def mutating(x):
        x[0] = 999.0
        return 0.0

    bridge, _ = make_bridge(mutating)
    candidate = np.array([1.0, 2.0])
    bridge.evaluate_batch([candidate])
    np.testing.assert_array_equal(candidate, [1.0, 2.0])


def test_custom_sentinel():
    bridge, _ = make_bridge(lambda x: np.nan, sentinel=1e10)
    assert bridge.evaluate([1.0, 1.0]) == 1e10


def test_nan_sentinel_rejected():
    oracle = FunctionOracle("Stub", BOUNDS, quadratic)
    descriptor = ProblemCatalog({"Stub": lambda: oracle}).resolve("Stub")
    with pytest.raises(ValueError):
        EvaluationBridge(descriptor, oracle, sentinel=np.nan)


def test_shared_tracker_counts_evaluations():
    tracker = FaultTracker()
    bridge, _ = make_bridge(tracker=tracker)
    bridge.evaluate_batch([[1.0, 1.0], [1.0], [2.0, 2.0], [3.0]])

    assert bridge.tracker is tracker
    assert tracker.evaluations == 4
    assert tracker.count() == 2
    assert tracker.fault_rate == pytest.approx(0.5)


def test_shared_bridge_serializes_oracle_calls():
    """Threads sharing one bridge never enter the oracle concurrently"""
    active = []
    overlaps = []

    def slow(x):
        active.append(1)
        if len(active) > 1:
            overlaps.append(len(active))
        time.sleep(0.001)
        active.pop()
        return float(x[0])

    bridge, _ = make_bridge(slow)
    results = {}

    def worker(k):
        results[k] = bridge.evaluate_batch([[float(k), 0.0]] * 5)

    threads = [threading.Thread(target=worker, args=(k,)) for k in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert overlaps == []
    for k in range(4):
        np.testing.assert_array_equal(results[k], [float(k)] * 5)


def test_native_problem_through_bridge():
    from enopt import get_catalog

    catalog = get_catalog("native")
    bridge = catalog.open("ThreeBarTrussDesignProblem")
    x = np.array([0.78867513, 0.40824828])

    score = bridge.evaluate(x)
    assert score == pytest.approx(bridge.oracle.score(x))
    assert np.isfinite(score)


def test_none_entry_never_reaches_oracle():
    """None must not be coerced to nan and scored"""
    bridge, oracle = make_bridge(lambda x: 1.0)
    assert bridge.evaluate([None, 1.0]) == np.inf
    assert oracle.calls == []
    assert bridge.tracker.count(FAULT_MALFORMED_CANDIDATE) == 1


def test_integer_and_bool_candidates_accepted():
    bridge, oracle = make_bridge(lambda x: float(np.sum(x)))
    assert bridge.evaluate(np.array([1, 2])) == 3.0
    assert bridge.evaluate([True, False]) == 1.0
    assert oracle.calls[0].dtype == np.float64
    assert bridge.tracker.count() == 0


def test_shared_tracker_across_threads_counts_exactly():
    """Per-thread bridges recording into one tracker lose no updates"""
    tracker = FaultTracker(max_history=None)
    catalog = ProblemCatalog({"Stub": lambda: FunctionOracle("Stub", BOUNDS, quadratic)})
    bridges = [catalog.open("Stub", tracker=tracker) for _ in range(8)]
    batch = [[1.0, 1.0], [1.0], ["a", "b"], [2.0, 2.0]] * 250

    threads = [threading.Thread(target=b.evaluate_batch, args=(batch,)) for b in bridges]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert tracker.evaluations == 8 * 1000
    assert tracker.count(FAULT_DIMENSION_MISMATCH) == 8 * 250
    assert tracker.count(FAULT_MALFORMED_CANDIDATE) == 8 * 250
    assert len(tracker.faults()) == 8 * 500
    assert tracker.fault_rate == pytest.approx(0.5)

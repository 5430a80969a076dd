"""
Boundary Constraint-Handling Methods (BCHMs)
Caller-side repair of candidates that leave the problem domain

The evaluation bridge scores candidates as given; search loops that want
candidates inside the box repair them here before evaluation.
"""

from typing import Optional, Tuple

import numpy as np

# Method constants
METHOD_SATURATION = 0  # Boundary
METHOD_MIDPOINT_TARGET = 1
METHOD_UNIF = 3  # Random/Uniform
METHOD_MIRROR = 5  # Reflection
METHOD_TOROIDAL = 6  # Wrapping


class BoundaryHandler:
    """
    Component-wise boundary constraint-handling methods
    """

    def __init__(self, lower_bounds: np.ndarray, upper_bounds: np.ndarray):
        """
        Initialize boundary handler

        Args:
            lower_bounds: Lower bounds for each dimension
            upper_bounds: Upper bounds for each dimension
        """
        self.lower = np.array(lower_bounds, dtype=float)
        self.upper = np.array(upper_bounds, dtype=float)
        if self.lower.shape != self.upper.shape:
            raise ValueError("Lower and upper bounds must have the same length")
        if np.any(self.lower > self.upper):
            raise ValueError("Lower bounds must not exceed upper bounds")
        self.dimension = len(self.lower)

    @classmethod
    def from_descriptor(cls, descriptor) -> "BoundaryHandler":
        return cls(descriptor.lower_bounds, descriptor.upper_bounds)

    def check_bounds(self, position: np.ndarray) -> Tuple[bool, np.ndarray]:
        """
        Check if position violates bounds

        Returns:
            (has_violations, violations_mask) where violations_mask[i] indicates:
                -1: component i is below lower bound
                0: component i is within bounds
                1: component i is above upper bound
        """
        violations = np.zeros(self.dimension, dtype=int)
        violations[position < self.lower] = -1
        violations[position > self.upper] = 1
        has_violations = np.any(violations != 0)
        return has_violations, violations

    def apply_method(self, position: np.ndarray, method_id: int,
                     target: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Apply boundary handling method to position

        Args:
            position: Current position (may have violations)
            method_id: Method constant
            target: Target/old position (for Midpoint_Target)

        Returns:
            Corrected position (a new array)
        """
        if method_id not in METHOD_NAMES:
            raise ValueError(f"Unknown method ID: {method_id}")

        position = np.asarray(position, dtype=float)
        if position.shape != (self.dimension,):
            raise ValueError(f"Expected position of length {self.dimension}, got shape {position.shape}")

        has_violations, violations = self.check_bounds(position)
        if not has_violations:
            return position.copy()

        corrected = position.copy()
        for i in np.flatnonzero(violations):
            corrected[i] = self._apply_component_method(
                position[i], i, violations[i], method_id,
                target[i] if target is not None else None
            )
        return corrected

    def _apply_component_method(self, component: float, dim: int, violation: int,
                                method_id: int, target_comp: Optional[float]) -> float:
        """Apply boundary handling to a single component"""

        lower = self.lower[dim]
        upper = self.upper[dim]
        width = upper - lower

        if method_id == METHOD_SATURATION:
            return lower if violation == -1 else upper

        elif method_id == METHOD_MIDPOINT_TARGET:
            if target_comp is None:
                target_comp = component
            # Target outside the box would leave the midpoint outside as well
            target_comp = min(max(target_comp, lower), upper)
            return (lower + target_comp) / 2 if violation == -1 else (upper + target_comp) / 2

        elif method_id == METHOD_UNIF:
            return np.random.uniform(lower, upper)

        elif method_id == METHOD_MIRROR:
            if width == 0:
                return lower
            # Reflect back and forth until inside: period is twice the width
            offset = (component - lower) % (2 * width)
            return lower + offset if offset <= width else upper - (offset - width)

        elif method_id == METHOD_TOROIDAL:
            if width == 0:
                return lower
            return lower + (component - lower) % width

        raise ValueError(f"Unknown method ID: {method_id}")


# Method name mappings
METHOD_NAMES = {
    METHOD_SATURATION: "Boundary",
    METHOD_MIDPOINT_TARGET: "Midpoint_Target",
    METHOD_UNIF: "Random",
    METHOD_MIRROR: "Reflection",
    METHOD_TOROIDAL: "Wrapping",
}


def get_method_name(method_id: int) -> str:
    """Get human-readable method name"""
    return METHOD_NAMES.get(method_id, f"Unknown({method_id})")

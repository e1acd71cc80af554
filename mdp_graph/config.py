"""Validation settings for MDP construction."""

from dataclasses import dataclass

from .Models.errors import InvalidArgumentError


@dataclass(frozen=True)
class ValidationConfig:
    """Tunable checks applied when an MDP is built."""

    # Absolute slack allowed between the final cumulative key and 1.0.
    # 0.0 demands exact equality.
    probability_tolerance: float = 1e-9

    # When set, an outcome table may name each successor state only once.
    reject_duplicate_targets: bool = False

    def __post_init__(self):
        if self.probability_tolerance is None or self.probability_tolerance < 0.0:
            raise InvalidArgumentError(
                f"probability_tolerance must be >= 0, got {self.probability_tolerance!r}"
            )

    def terminates(self, last_key: float) -> bool:
        """Return True if `last_key` counts as a total probability of 1.0."""
        if self.probability_tolerance == 0.0:
            return last_key == 1.0
        return abs(last_key - 1.0) <= self.probability_tolerance


DEFAULT_CONFIG = ValidationConfig()

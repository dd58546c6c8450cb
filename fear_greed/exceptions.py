"""
Fear & Greed Engine - Exceptions.

============================================================
EXCEPTION HIERARCHY
============================================================
FearGreedError (base)
├── InvalidScoreRangeError     - collaborator produced an out-of-scale value
├── MissingWeightError         - consumed indicator has no configured weight
├── DuplicateSubScoreError     - same indicator name supplied twice in one run
└── InvalidConfigurationError  - weight tree / position ceiling invalid

All of these are FATAL to the run that raised them.
An unused weight is NOT an exception: it is recorded as an
UnusedWeightNotice on the result (see models.py).

============================================================
"""

from typing import Any, Dict, Optional


class FearGreedError(Exception):
    """Base exception for the Fear & Greed engine."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class InvalidScoreRangeError(FearGreedError):
    """
    Raised when a sub-score lies outside its declared canonical scale.

    Indicates a bug in the upstream collaborator. The value is never
    silently clamped beyond the epsilon tolerance.
    """

    def __init__(
        self,
        name: str,
        value: float,
        lower: Optional[float] = None,
        upper: Optional[float] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.name = name
        self.value = value
        self.lower = lower
        self.upper = upper
        if reason is None:
            reason = f"value {value!r} outside [{lower}, {upper}]"
        super().__init__(
            f"Invalid score for '{name}': {reason}",
            details={"name": name, "value": value, "lower": lower, "upper": upper},
        )


class MissingWeightError(FearGreedError):
    """Raised when a consumed indicator has no weight in its bucket."""

    def __init__(self, name: str, group: str) -> None:
        self.name = name
        self.group = group
        super().__init__(
            f"No weight configured for '{name}' in the {group} bucket",
            details={"name": name, "group": group},
        )


class DuplicateSubScoreError(FearGreedError):
    """Raised when an indicator name appears more than once in a run."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Duplicate sub-score name: {name}",
            details={"name": name},
        )


class InvalidConfigurationError(FearGreedError):
    """Raised at construction time when configuration is invalid."""
    pass

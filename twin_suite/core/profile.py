"""Financial profile: the immutable starting point of every projection."""

import math
from dataclasses import dataclass
from numbers import Integral
from typing import Optional

from twin_suite.core.config import risk_preset


def check_finite(name: str, value) -> float:
    """Raise ValueError unless value is a finite number."""
    try:
        finite = math.isfinite(value)
    except TypeError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not finite:
        raise ValueError(f"{name} must be finite, got {value!r}")
    return value


@dataclass(frozen=True)
class Profile:
    """A user's current position and baseline growth assumptions."""

    current_age: int
    initial_net_worth: float
    annual_return_rate: float      # decimal, e.g. 0.07
    annual_contribution: float     # per year, negative = net outflow
    risk_tolerance: Optional[str] = None

    def __post_init__(self):
        """Validate profile."""
        if isinstance(self.current_age, bool) or not isinstance(self.current_age, Integral):
            raise ValueError("current_age must be an integer")
        if self.current_age < 0:
            raise ValueError("current_age must be non-negative")

        for name in ("initial_net_worth", "annual_return_rate", "annual_contribution"):
            check_finite(name, getattr(self, name))

        if self.risk_tolerance is not None:
            if not isinstance(self.risk_tolerance, str):
                raise ValueError(f"risk_tolerance must be a string, got {self.risk_tolerance!r}")
            risk_preset(self.risk_tolerance)
            object.__setattr__(self, "risk_tolerance", self.risk_tolerance.strip().lower())

    def years_until(self, age: int) -> int:
        """Number of simulated years between current_age and age (never negative)."""
        return max(0, int(age) - self.current_age)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "current_age": self.current_age,
            "initial_net_worth": self.initial_net_worth,
            "annual_return_rate": self.annual_return_rate,
            "annual_contribution": self.annual_contribution,
            "risk_tolerance": self.risk_tolerance,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Profile":
        """Create from dictionary."""
        return cls(
            current_age=int(data["current_age"]),
            initial_net_worth=float(data["initial_net_worth"]),
            annual_return_rate=float(data["annual_return_rate"]),
            annual_contribution=float(data.get("annual_contribution", 0.0)),
            risk_tolerance=data.get("risk_tolerance"),
        )

    @classmethod
    def from_risk_tolerance(
        cls,
        current_age: int,
        initial_net_worth: float,
        annual_contribution: float,
        risk_tolerance: str = "moderate",
    ) -> "Profile":
        """Build a profile whose return rate comes from a risk preset."""
        expected_return, _ = risk_preset(risk_tolerance)
        return cls(
            current_age=current_age,
            initial_net_worth=initial_net_worth,
            annual_return_rate=expected_return,
            annual_contribution=annual_contribution,
            risk_tolerance=risk_tolerance,
        )

"""Retirement age search.

Finds the first age at which projected net worth meets a target. The search is
a plain forward scan: injected events can make net worth dip and recover, so
the path is not monotonic and bisection over age would be unsound.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np

from twin_suite.core.config import DEFAULT_SETTINGS
from twin_suite.core.events import EventLedger
from twin_suite.core.profile import Profile, check_finite
from twin_suite.core.projector import project_trajectory

logger = logging.getLogger(__name__)


class Variant(Enum):
    """Which trajectory the search runs against."""

    BASELINE = "baseline"      # ledger ignored
    SIMULATED = "simulated"    # ledger applied


@dataclass(frozen=True)
class RetirementImpact:
    """Baseline vs. simulated retirement age for one target."""

    baseline_age: int
    simulated_age: int
    target_net_worth: float
    baseline_reached: bool = True
    simulated_reached: bool = True

    @property
    def delay(self) -> int:
        """Years the injected events push retirement out (negative = earlier)."""
        return self.simulated_age - self.baseline_age

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "baseline_age": self.baseline_age,
            "simulated_age": self.simulated_age,
            "delay": self.delay,
            "target_net_worth": round(self.target_net_worth),
            "baseline_reached": self.baseline_reached,
            "simulated_reached": self.simulated_reached,
        }


def _search(profile, ledger, target_net_worth, max_age):
    """Return (age, reached)."""
    horizon = max(int(max_age), profile.current_age)
    trajectory = project_trajectory(profile, ledger, horizon)

    hits = np.nonzero(trajectory.net_worth >= target_net_worth)[0]
    if len(hits):
        return int(trajectory.ages[hits[0]]), True
    return horizon, False


def find_retirement_age(
    profile: Profile,
    ledger: Optional[EventLedger],
    target_net_worth: float,
    variant: Union[Variant, str] = Variant.SIMULATED,
    max_age: Optional[int] = None,
) -> int:
    """First age whose projected net worth is >= target_net_worth.

    Scans from current_age up to max_age (settings horizon, 100 by default).
    When the target is never met the bound itself is returned; callers decide
    how to present "not reachable within the horizon".
    """
    age, _ = _find(profile, ledger, target_net_worth, variant, max_age)
    return age


def _find(profile, ledger, target_net_worth, variant, max_age):
    check_finite("target_net_worth", target_net_worth)
    variant = Variant(variant)
    if max_age is None:
        max_age = DEFAULT_SETTINGS.horizon_age

    search_ledger = ledger if variant is Variant.SIMULATED else None
    age, reached = _search(profile, search_ledger, target_net_worth, max_age)
    logger.debug(
        "Retirement search (%s): target=%.0f age=%d reached=%s",
        variant.value, target_net_worth, age, reached,
    )
    return age, reached


def calculate_retirement_impact(
    profile: Profile,
    ledger: Optional[EventLedger],
    target_net_worth: float,
    max_age: Optional[int] = None,
) -> RetirementImpact:
    """Run the search for baseline and simulated trajectories and compare."""
    baseline_age, baseline_reached = _find(
        profile, ledger, target_net_worth, Variant.BASELINE, max_age
    )
    simulated_age, simulated_reached = _find(
        profile, ledger, target_net_worth, Variant.SIMULATED, max_age
    )
    return RetirementImpact(
        baseline_age=baseline_age,
        simulated_age=simulated_age,
        target_net_worth=float(target_net_worth),
        baseline_reached=baseline_reached,
        simulated_reached=simulated_reached,
    )

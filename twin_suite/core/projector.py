# twin_suite/core/projector.py
"""
Deterministic net-worth projector.

Walks year by year from the profile's current age to a target age:

    opening     = initial_net_worth + impacts landing at year 0
    year k >= 1 = advance(previous, rate_k, contribution_k) + impacts landing at year k

An event injected at year offset y therefore shows up in the net worth reported
at age current_age + y and starts earning return the following year. Ongoing
impacts change the contribution from the year after the event lands.

Baseline and simulated trajectories come from two independent walks (empty
ledger vs. real ledger); nothing is shared between calls. Values are never
rounded inside the walk, only by Trajectory.to_frame(rounded=True).
"""

import logging
import math
from dataclasses import dataclass
from numbers import Integral
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from twin_suite.core.events import EventLedger
from twin_suite.core.growth import advance
from twin_suite.core.profile import Profile

logger = logging.getLogger(__name__)

_EMPTY_LEDGER = EventLedger()


@dataclass(frozen=True, eq=False)
class Trajectory:
    """Net worth per age for one run. Arrays are read-only."""

    ages: np.ndarray        # (n,) int
    net_worth: np.ndarray   # (n,) float

    def __post_init__(self):
        ages = np.array(self.ages, dtype=int)
        values = np.array(self.net_worth, dtype=float)
        if ages.shape != values.shape:
            raise ValueError("ages and net_worth must have the same length")
        ages.flags.writeable = False
        values.flags.writeable = False
        object.__setattr__(self, "ages", ages)
        object.__setattr__(self, "net_worth", values)

    def __len__(self) -> int:
        return len(self.ages)

    @property
    def final(self) -> Optional[float]:
        """Net worth at the last age, or None for an empty trajectory."""
        if len(self.ages) == 0:
            return None
        return float(self.net_worth[-1])

    def at(self, age: int) -> float:
        idx = np.nonzero(self.ages == age)[0]
        if len(idx) == 0:
            raise ValueError(f"Age {age} is outside the trajectory")
        return float(self.net_worth[idx[0]])

    def to_frame(self, rounded: bool = True) -> pd.DataFrame:
        """Export as a DataFrame; rounding to whole currency units happens here only."""
        values = np.round(self.net_worth) if rounded else self.net_worth.copy()
        return pd.DataFrame({"age": self.ages.copy(), "net_worth": values})


def check_target_age(target_age) -> int:
    """Accept ints and integral floats (60.0); reject anything else."""
    if isinstance(target_age, bool) or not isinstance(target_age, Integral):
        if isinstance(target_age, float) and math.isfinite(target_age) and target_age.is_integer():
            return int(target_age)
        raise ValueError(f"target_age must be a whole number, got {target_age!r}")
    return int(target_age)


def _check_rates(rates, years: int) -> np.ndarray:
    arr = np.asarray(rates, dtype=float)
    if arr.shape[-1:] != (years,):
        raise ValueError(f"Expected {years} per-year rates, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError("rates must be finite")
    return arr


def walk_paths(
    profile: Profile,
    ledger: Optional[EventLedger],
    rates: np.ndarray,
) -> np.ndarray:
    """Vectorised walk over many runs.

    rates: (runs, years) per-year return rates, one row per run.
    Returns values of shape (runs, years + 1); column 0 is the opening balance.
    """
    ledger = ledger if ledger is not None else _EMPTY_LEDGER
    rates = np.atleast_2d(np.asarray(rates, dtype=float))
    n, T = rates.shape

    impacts = ledger.impact_schedule(T)
    contributions = profile.annual_contribution + ledger.ongoing_schedule(T)

    V = np.empty((n, T + 1), dtype=float)
    V[:, 0] = profile.initial_net_worth + impacts[0]
    for k in range(1, T + 1):
        V[:, k] = advance(V[:, k - 1], rates[:, k - 1], contributions[k]) + impacts[k]

    if not np.all(np.isfinite(V)):
        raise ValueError("Projection overflowed to a non-finite net worth; inputs are out of range")
    return V


def project_trajectory(
    profile: Profile,
    ledger: Optional[EventLedger],
    target_age: int,
    rates: Optional[Sequence[float]] = None,
) -> Trajectory:
    """Full trajectory from current_age to target_age inclusive.

    target_age < current_age gives an empty trajectory. ``rates`` optionally
    replaces the profile's constant return rate with one rate per simulated year.
    """
    target_age = check_target_age(target_age)
    if target_age < profile.current_age:
        return Trajectory(ages=np.array([], dtype=int), net_worth=np.array([], dtype=float))

    years = target_age - profile.current_age
    if rates is None:
        path_rates = np.full(years, profile.annual_return_rate, dtype=float)
    else:
        path_rates = _check_rates(rates, years)

    if ledger is not None:
        late = ledger.beyond(years)
        if late:
            logger.warning("%d event(s) land after age %d and are not applied", len(late), target_age)

    values = walk_paths(profile, ledger, path_rates[np.newaxis, :])[0]
    ages = np.arange(profile.current_age, target_age + 1)
    return Trajectory(ages=ages, net_worth=values)


def project(
    profile: Profile,
    ledger: Optional[EventLedger],
    target_age: int,
    rates: Optional[Sequence[float]] = None,
) -> float:
    """Projected net worth at target_age (initial_net_worth if target_age < current_age)."""
    trajectory = project_trajectory(profile, ledger, target_age, rates=rates)
    if trajectory.final is None:
        return profile.initial_net_worth
    return trajectory.final


def project_pair(
    profile: Profile,
    ledger: Optional[EventLedger],
    target_age: int,
) -> Tuple[Trajectory, Trajectory]:
    """(baseline, simulated) from two independent walks."""
    baseline = project_trajectory(profile, None, target_age)
    simulated = project_trajectory(profile, ledger, target_age)
    logger.debug(
        "Projected to age %d: baseline=%s simulated=%s",
        target_age, baseline.final, simulated.final,
    )
    return baseline, simulated

"""DigitalTwin: one simulation session (a profile plus its event ledger).

Holds no computed state. Every read recomputes from the profile and ledger,
so trajectories are never patched incrementally.
"""

import dataclasses
import logging
from typing import List, Optional

from twin_suite.core.compare import PathComparison, compare_paths
from twin_suite.core.config import DEFAULT_SETTINGS, EngineSettings, risk_preset
from twin_suite.core.events import EventLedger, InjectedEvent, LifeEvent, get_life_event
from twin_suite.core.monte_carlo import MonteCarloResult, simulate
from twin_suite.core.profile import Profile
from twin_suite.core.projector import Trajectory, project, project_trajectory
from twin_suite.core.retirement import RetirementImpact, calculate_retirement_impact

logger = logging.getLogger(__name__)


class DigitalTwin:
    """Projection session over an immutable profile and a mutable ledger."""

    def __init__(
        self,
        profile: Profile,
        ledger: Optional[EventLedger] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self.profile = profile
        self.ledger = ledger if ledger is not None else EventLedger()
        self.settings = settings or DEFAULT_SETTINGS

    # ---------- events ----------

    def add_event(self, event, year: int) -> InjectedEvent:
        """Inject a LifeEvent, or a built-in catalog id such as "house"."""
        if isinstance(event, str):
            event = get_life_event(event)
        if not isinstance(event, LifeEvent):
            raise ValueError(f"Expected a LifeEvent or catalog id, got {event!r}")
        return self.ledger.add_event(event, year)

    def add_event_at_age(self, event, age: int) -> InjectedEvent:
        return self.add_event(event, int(age) - self.profile.current_age)

    def remove_event(self, instance_id: str) -> bool:
        return self.ledger.remove_event(instance_id)

    def clear_events(self):
        self.ledger.clear_events()

    @property
    def events(self) -> List[InjectedEvent]:
        return self.ledger.events

    # ---------- projections ----------

    @property
    def horizon_age(self) -> int:
        return max(self.settings.horizon_age, self.profile.current_age)

    def baseline(self, target_age: Optional[int] = None) -> Trajectory:
        age = self.horizon_age if target_age is None else target_age
        return project_trajectory(self.profile, None, age)

    def simulated(self, target_age: Optional[int] = None) -> Trajectory:
        age = self.horizon_age if target_age is None else target_age
        return project_trajectory(self.profile, self.ledger, age)

    def net_worth_at(self, age: int, with_events: bool = True) -> float:
        return project(self.profile, self.ledger if with_events else None, age)

    def calculate_retirement_impact(self, target_net_worth: float) -> RetirementImpact:
        return calculate_retirement_impact(
            self.profile, self.ledger, target_net_worth,
            max_age=self.settings.horizon_age,
        )

    def run_monte_carlo(
        self,
        target_age: int,
        target_net_worth: float,
        rng,
        runs: Optional[int] = None,
        volatility: Optional[float] = None,
        cancel=None,
    ) -> MonteCarloResult:
        """Monte Carlo over the simulated path.

        Volatility falls back to the profile's risk preset, then to settings.
        """
        if volatility is None and self.profile.risk_tolerance:
            _, volatility = risk_preset(self.profile.risk_tolerance)
        return simulate(
            self.profile,
            self.ledger,
            target_age,
            target_net_worth,
            runs if runs is not None else self.settings.default_runs,
            rng,
            volatility=volatility,
            cancel=cancel,
            settings=self.settings,
        )

    def compare_with(self, other: EventLedger, target_age: Optional[int] = None) -> PathComparison:
        """This session's ledger as path A, ``other`` as path B."""
        age = self.horizon_age if target_age is None else target_age
        return compare_paths(self.profile, self.ledger, other, age)

    def with_profile(self, **changes) -> "DigitalTwin":
        """New session with an updated profile and a copy of the ledger."""
        profile = dataclasses.replace(self.profile, **changes)
        logger.debug("Profile updated: %s", sorted(changes))
        return DigitalTwin(profile, self.ledger.copy(), self.settings)

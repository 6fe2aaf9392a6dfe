"""
Digital Twin - net-worth projection and simulation engine

Projects a profile's net worth forward year by year, lets life events be
injected at future years, and reports how they move the retirement age.

Components:
- growth: the annual growth step shared by every path
- events: life events and the per-session event ledger
- projector: baseline / simulated trajectories
- retirement: linear retirement age search and impact
- monte_carlo: return-perturbed runs aggregated into percentile bands
- compare: two event paths side by side
- session: DigitalTwin facade over a profile and its ledger
"""

from .config import (
    EngineSettings,
    DEFAULT_SETTINGS,
    RISK_PRESETS,
    risk_preset,
    load_settings,
    save_settings,
)
from .growth import advance
from .profile import Profile
from .events import (
    LifeEvent,
    InjectedEvent,
    EventLedger,
    LIFE_EVENTS,
    get_life_event,
)
from .projector import Trajectory, project, project_trajectory, project_pair, walk_paths
from .retirement import (
    Variant,
    RetirementImpact,
    find_retirement_age,
    calculate_retirement_impact,
)
from .monte_carlo import MonteCarloResult, simulate
from .compare import PathComparison, compare_paths
from .session import DigitalTwin

__version__ = "0.1.0"
__all__ = [
    # Config
    "EngineSettings",
    "DEFAULT_SETTINGS",
    "RISK_PRESETS",
    "risk_preset",
    "load_settings",
    "save_settings",
    # Model
    "advance",
    "Profile",
    # Events
    "LifeEvent",
    "InjectedEvent",
    "EventLedger",
    "LIFE_EVENTS",
    "get_life_event",
    # Projection
    "Trajectory",
    "project",
    "project_trajectory",
    "project_pair",
    "walk_paths",
    # Retirement
    "Variant",
    "RetirementImpact",
    "find_retirement_age",
    "calculate_retirement_impact",
    # Monte Carlo
    "MonteCarloResult",
    "simulate",
    # Comparison
    "PathComparison",
    "compare_paths",
    # Session
    "DigitalTwin",
]

"""Side-by-side comparison of two event paths over the same profile."""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd

from twin_suite.core.events import EventLedger
from twin_suite.core.profile import Profile
from twin_suite.core.projector import project_trajectory


@dataclass(frozen=True, eq=False)
class PathComparison:
    """Path B minus path A, age by age."""

    ages: np.ndarray
    path_a: np.ndarray
    path_b: np.ndarray

    @property
    def diff(self) -> np.ndarray:
        return self.path_b - self.path_a

    @property
    def final_diff(self) -> float:
        return float(self.diff[-1]) if len(self.ages) else 0.0

    @property
    def peak_diff(self) -> float:
        """Largest absolute gap at any age."""
        return float(np.max(np.abs(self.diff))) if len(self.ages) else 0.0

    @property
    def crossovers(self) -> List[int]:
        """Ages at which the lead changes hands."""
        signs = np.sign(self.diff)
        flips = np.nonzero(signs[1:] != signs[:-1])[0] + 1
        return [int(self.ages[i]) for i in flips]

    @property
    def winner(self) -> str:
        if self.final_diff > 0:
            return "B"
        if self.final_diff < 0:
            return "A"
        return "Tie"

    def to_frame(self, rounded: bool = True) -> pd.DataFrame:
        df = pd.DataFrame({
            "age": self.ages,
            "path_a": self.path_a,
            "path_b": self.path_b,
            "diff": self.diff,
        })
        if rounded:
            df[["path_a", "path_b", "diff"]] = df[["path_a", "path_b", "diff"]].round()
        return df


def compare_paths(
    profile: Profile,
    ledger_a: Optional[EventLedger],
    ledger_b: Optional[EventLedger],
    target_age: int,
) -> PathComparison:
    a = project_trajectory(profile, ledger_a, target_age)
    b = project_trajectory(profile, ledger_b, target_age)
    return PathComparison(
        ages=a.ages.copy(),
        path_a=a.net_worth.copy(),
        path_b=b.net_worth.copy(),
    )

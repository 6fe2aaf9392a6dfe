# twin_suite/core/config.py
"""
Engine settings and risk presets.

Settings are plain dataclass values; they can be saved to / loaded from JSON
so a caller can pin the Monte Carlo defaults alongside a saved scenario.
"""

import json
import math
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Dict, Tuple

# risk tolerance -> (expected annual return, annual standard deviation)
RISK_PRESETS: Dict[str, Tuple[float, float]] = {
    "conservative": (0.05, 0.08),
    "moderate": (0.07, 0.12),
    "aggressive": (0.09, 0.18),
}


@dataclass
class EngineSettings:
    """Tunables for the projector, retirement search and Monte Carlo sampler."""

    horizon_age: int = 100          # retirement search upper bound
    default_runs: int = 1000
    max_runs: int = 100_000         # each run holds one path while aggregating
    chunk_size: int = 1000          # runs per Monte Carlo work unit
    default_volatility: float = 0.12
    percentiles: Tuple[int, ...] = field(default=(10, 25, 50, 75, 90))
    workers: int = 1

    def __post_init__(self):
        """Validate settings."""
        self.percentiles = tuple(int(q) for q in self.percentiles)

        if self.horizon_age < 0:
            raise ValueError("horizon_age must be non-negative")
        if self.default_runs <= 0 or self.max_runs <= 0:
            raise ValueError("run counts must be positive")
        if self.default_runs > self.max_runs:
            raise ValueError("default_runs cannot exceed max_runs")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if not math.isfinite(self.default_volatility) or self.default_volatility < 0:
            raise ValueError("default_volatility must be a finite, non-negative number")
        if not self.percentiles or any(q < 0 or q > 100 for q in self.percentiles):
            raise ValueError("percentiles must be between 0 and 100")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        data["percentiles"] = list(self.percentiles)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "EngineSettings":
        """Create from dictionary. Unknown keys are ignored."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


DEFAULT_SETTINGS = EngineSettings()


def risk_preset(name: str) -> Tuple[float, float]:
    """Return (expected_return, volatility) for a risk tolerance label."""
    key = (name or "").strip().lower()
    if key not in RISK_PRESETS:
        raise ValueError(
            f"Unknown risk tolerance '{name}'. Expected one of: {sorted(RISK_PRESETS)}"
        )
    return RISK_PRESETS[key]


def save_settings(settings: EngineSettings, path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(settings.to_dict(), f, indent=2)
    return p


def load_settings(path) -> EngineSettings:
    """Load settings from JSON; a missing file yields the defaults."""
    p = Path(path)
    if not p.exists():
        return EngineSettings()
    with open(p, "r", encoding="utf-8") as f:
        data = json.load(f)
    return EngineSettings.from_dict(data)

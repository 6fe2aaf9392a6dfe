# twin_suite/core/monte_carlo.py
"""
Vectorized Monte Carlo sampler over the deterministic projector.

Each run perturbs the profile's return rate independently every year:

    rate[run, k] = annual_return_rate + N(0, volatility)

and walks the same path as the deterministic projector (same growth step, same
event impacts). Runs are processed in fixed-size chunks. Noise for every chunk
is drawn from the caller's generator in chunk order before the chunk is
dispatched, so a given seed gives the same result whatever the worker count.

Inputs:
- profile, ledger: starting position and injected events
- target_age: last age simulated (inclusive)
- target_net_worth: success threshold on final net worth
- runs: number of paths (1 .. settings.max_runs)
- rng: numpy Generator (or int seed). No global RNG is used.
- volatility: annual standard deviation of the return perturbation (decimal)
- workers: thread count for chunk execution
- cancel: optional threading.Event; once set no further chunks are issued

Outputs (MonteCarloResult):
- ages: np.array [current_age .. target_age]
- percentiles: {q: path of shape (ages,)}
- mean_path, probability_by_age: shape (ages,)
- success_probability: fraction of completed runs whose final value >= target
- runs / runs_completed
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from numbers import Integral
from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd

from twin_suite.core.config import DEFAULT_SETTINGS, EngineSettings
from twin_suite.core.events import EventLedger
from twin_suite.core.profile import Profile, check_finite
from twin_suite.core.projector import check_target_age, walk_paths

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class MonteCarloResult:
    ages: np.ndarray
    percentiles: Dict[int, np.ndarray]
    mean_path: np.ndarray
    probability_by_age: np.ndarray
    success_probability: float
    runs: int
    runs_completed: int
    target_age: int
    target_net_worth: float
    volatility: float

    @property
    def cancelled(self) -> bool:
        return self.runs_completed < self.runs

    def band(self, q: int) -> np.ndarray:
        if q not in self.percentiles:
            raise ValueError(f"Percentile {q} was not computed; have {sorted(self.percentiles)}")
        return self.percentiles[q]

    @property
    def p10(self) -> np.ndarray:
        return self.band(10)

    @property
    def p50(self) -> np.ndarray:
        return self.band(50)

    @property
    def p90(self) -> np.ndarray:
        return self.band(90)

    @property
    def final_value_percentiles(self) -> Dict[int, float]:
        return {q: float(path[-1]) for q, path in self.percentiles.items()}

    def to_frame(self, rounded: bool = True) -> pd.DataFrame:
        """Per-age bands for charting, rounded to whole currency units by default."""
        df = pd.DataFrame({"age": self.ages})
        for q in sorted(self.percentiles):
            path = self.percentiles[q]
            df[f"p{q}"] = np.round(path) if rounded else path
        df["mean"] = np.round(self.mean_path) if rounded else self.mean_path
        df["probability"] = self.probability_by_age
        return df

    def to_dict(self) -> dict:
        """Plain structural summary (rounded) for whoever stores the scenario."""
        return {
            "monte_carlo_runs": self.runs_completed,
            "success_probability": self.success_probability,
            "target_age": self.target_age,
            "target_net_worth": round(self.target_net_worth),
            "final_value_percentiles": {
                q: round(v) for q, v in self.final_value_percentiles.items()
            },
            "ages": [int(a) for a in self.ages],
            "percentiles": {
                q: [round(float(v)) for v in path] for q, path in self.percentiles.items()
            },
        }


def _check_runs(runs, settings: EngineSettings) -> int:
    if isinstance(runs, bool) or not isinstance(runs, Integral):
        raise ValueError(f"runs must be a positive integer, got {runs!r}")
    if runs <= 0:
        raise ValueError("runs must be a positive integer")
    if runs > settings.max_runs:
        raise ValueError(f"runs={runs} exceeds the cap of {settings.max_runs}")
    return int(runs)


def _as_generator(rng) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    if isinstance(rng, Integral) and not isinstance(rng, bool):
        return np.random.default_rng(int(rng))
    raise ValueError("rng must be a numpy Generator or an integer seed")


def _chunk_sizes(runs: int, chunk_size: int):
    full, rest = divmod(runs, chunk_size)
    return [chunk_size] * full + ([rest] if rest else [])


def simulate(
    profile: Profile,
    ledger: Optional[EventLedger],
    target_age: int,
    target_net_worth: float,
    runs: int,
    rng,
    volatility: Optional[float] = None,
    percentiles: Optional[Sequence[int]] = None,
    workers: Optional[int] = None,
    cancel=None,
    settings: Optional[EngineSettings] = None,
) -> MonteCarloResult:
    settings = settings or DEFAULT_SETTINGS
    runs = _check_runs(runs, settings)
    rng = _as_generator(rng)

    vol = check_finite(
        "volatility", settings.default_volatility if volatility is None else volatility
    )
    if vol < 0:
        raise ValueError("volatility must be a finite, non-negative number")
    vol = float(vol)
    check_finite("target_net_worth", target_net_worth)
    target_age = check_target_age(target_age)
    if target_age < profile.current_age:
        raise ValueError("target_age must not be before current_age")

    qs = tuple(int(q) for q in (percentiles or settings.percentiles))
    if any(q < 0 or q > 100 for q in qs):
        raise ValueError("percentiles must be between 0 and 100")
    n_workers = settings.workers if workers is None else int(workers)
    if n_workers < 1:
        raise ValueError("workers must be at least 1")

    T = int(target_age) - profile.current_age
    # snapshot so callers editing the ledger mid-run cannot change the result
    events = ledger.copy() if ledger is not None else EventLedger()
    sizes = _chunk_sizes(runs, settings.chunk_size)

    logger.info(
        "Monte Carlo: %d runs x %d years (vol=%.4f, %d chunk(s), %d worker(s))",
        runs, T, vol, len(sizes), n_workers,
    )

    def run_chunk(rates):
        return walk_paths(profile, events, rates)

    blocks = []
    executor = ThreadPoolExecutor(max_workers=n_workers) if n_workers > 1 else None
    try:
        for start in range(0, len(sizes), n_workers):
            if blocks and cancel is not None and cancel.is_set():
                break
            wave = [
                profile.annual_return_rate + rng.normal(0.0, vol, size=(m, T))
                for m in sizes[start:start + n_workers]
            ]
            if executor is None:
                blocks.extend(run_chunk(r) for r in wave)
            else:
                blocks.extend(executor.map(run_chunk, wave))
    finally:
        if executor is not None:
            executor.shutdown(wait=True)

    V = np.concatenate(blocks, axis=0)
    completed = V.shape[0]
    if completed < runs:
        logger.warning("Monte Carlo cancelled after %d of %d runs", completed, runs)

    final_vals = V[:, -1]
    hits = V >= target_net_worth
    result = MonteCarloResult(
        ages=np.arange(profile.current_age, int(target_age) + 1),
        percentiles={q: np.percentile(V, q, axis=0) for q in qs},
        mean_path=V.mean(axis=0),
        probability_by_age=hits.mean(axis=0),
        success_probability=float((final_vals >= target_net_worth).mean()),
        runs=runs,
        runs_completed=completed,
        target_age=int(target_age),
        target_net_worth=float(target_net_worth),
        volatility=vol,
    )
    logger.info(
        "Monte Carlo done: success=%.3f median final=%.0f",
        result.success_probability, float(np.median(final_vals)),
    )
    return result

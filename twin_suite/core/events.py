"""Life events and the ledger of events injected into a simulation session.

A ledger is a multiset of impacts: the same LifeEvent can be injected at the
same year any number of times and each instance counts. Instances are told
apart by ``instance_id`` only.
"""

import logging
import math
import uuid
from dataclasses import dataclass, field
from numbers import Integral
from typing import Any, Dict, Iterable, Iterator, List, Optional

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LifeEvent:
    """A discrete life change. The projector only reads the two impact fields."""

    id: str
    impact: float                  # one-off change to net worth in the year it lands
    label: str = ""
    category: str = ""
    description: str = ""
    ongoing_impact: float = 0.0    # change to annual contribution from the following year
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        """Validate event amounts."""
        for name in ("impact", "ongoing_impact"):
            value = getattr(self, name)
            try:
                finite = math.isfinite(value)
            except TypeError:
                raise ValueError(f"{name} must be a number, got {value!r}") from None
            if not finite:
                raise ValueError(f"{name} must be finite, got {value!r}")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "impact": self.impact,
            "label": self.label,
            "category": self.category,
            "description": self.description,
            "ongoing_impact": self.ongoing_impact,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LifeEvent":
        """Create from dictionary."""
        return cls(
            id=str(data["id"]),
            impact=float(data["impact"]),
            label=data.get("label", ""),
            category=data.get("category", ""),
            description=data.get("description", ""),
            ongoing_impact=float(data.get("ongoing_impact", 0.0)),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass(frozen=True)
class InjectedEvent:
    """A LifeEvent bound to a year offset from the profile's current age."""

    instance_id: str
    event: LifeEvent
    year: int

    def __post_init__(self):
        """Validate year offset."""
        if isinstance(self.year, bool) or not isinstance(self.year, Integral):
            raise ValueError(f"year must be an integer offset, got {self.year!r}")
        if self.year < 0:
            raise ValueError("year must be non-negative (offset from current age)")

    @property
    def impact(self) -> float:
        return self.event.impact

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "instance_id": self.instance_id,
            "event": self.event.to_dict(),
            "year": self.year,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "InjectedEvent":
        """Create from dictionary."""
        return cls(
            instance_id=str(data["instance_id"]),
            event=LifeEvent.from_dict(data["event"]),
            year=int(data["year"]),
        )


class EventLedger:
    """Ordered collection of injected events for one simulation session."""

    def __init__(self, events: Optional[Iterable[InjectedEvent]] = None):
        self._events: List[InjectedEvent] = []
        for injected in events or ():
            self._append(injected)

    @classmethod
    def from_events(cls, events: Iterable[InjectedEvent]) -> "EventLedger":
        return cls(events)

    def _append(self, injected: InjectedEvent):
        if any(e.instance_id == injected.instance_id for e in self._events):
            raise ValueError(f"Duplicate instance id: {injected.instance_id}")
        self._events.append(injected)

    def add_event(self, event: LifeEvent, year: int) -> InjectedEvent:
        """Inject event at year. Never deduplicates."""
        injected = InjectedEvent(instance_id=str(uuid.uuid4()), event=event, year=year)
        self._append(injected)
        logger.debug("Injected %s at year %d (%s)", event.id, year, injected.instance_id)
        return injected

    def remove_event(self, instance_id: str) -> bool:
        """Remove one instance. Returns False (and does nothing) for an unknown id."""
        for i, injected in enumerate(self._events):
            if injected.instance_id == instance_id:
                del self._events[i]
                return True
        return False

    def clear_events(self):
        self._events.clear()

    def events_at(self, year: int) -> List[InjectedEvent]:
        """All events landing at year, in insertion order."""
        return [e for e in self._events if e.year == year]

    def impact_at(self, year: int) -> float:
        return sum(e.event.impact for e in self.events_at(year))

    def impact_schedule(self, years: int) -> np.ndarray:
        """One-off impacts indexed by year offset, shape (years + 1,)."""
        schedule = np.zeros(years + 1, dtype=float)
        for e in self._events:
            if e.year <= years:
                schedule[e.year] += e.event.impact
        return schedule

    def ongoing_schedule(self, years: int) -> np.ndarray:
        """Contribution change in force during each simulated year, shape (years + 1,).

        Entry k applies to the growth step that produces year k; an event's
        ongoing impact starts with the year after it lands.
        """
        deltas = np.zeros(years + 2, dtype=float)
        for e in self._events:
            if e.event.ongoing_impact and e.year + 1 <= years:
                deltas[e.year + 1] += e.event.ongoing_impact
        return np.cumsum(deltas)[: years + 1]

    def beyond(self, years: int) -> List[InjectedEvent]:
        """Events that would land after the given horizon."""
        return [e for e in self._events if e.year > years]

    def copy(self) -> "EventLedger":
        return EventLedger(self._events)

    @property
    def events(self) -> List[InjectedEvent]:
        return list(self._events)

    def __iter__(self) -> Iterator[InjectedEvent]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def __bool__(self) -> bool:
        return bool(self._events)

    def __repr__(self) -> str:
        return f"EventLedger({len(self._events)} events)"


# Built-in catalog (impact, ongoing_impact)
LIFE_EVENTS: Dict[str, LifeEvent] = {
    "house": LifeEvent(
        id="house", label="Buy House", category="housing",
        impact=-350_000, ongoing_impact=-2_000, description="Major purchase",
    ),
    "child": LifeEvent(
        id="child", label="Have Child", category="family",
        impact=-15_000, ongoing_impact=-12_000, description="Growing family",
    ),
    "raise": LifeEvent(
        id="raise", label="Get Raise", category="career",
        impact=0, ongoing_impact=15_000, description="Career growth",
    ),
    "business": LifeEvent(
        id="business", label="Start Business", category="career",
        impact=-50_000, ongoing_impact=25_000, description="Entrepreneurship",
    ),
    "wedding": LifeEvent(
        id="wedding", label="Get Married", category="family",
        impact=-30_000, description="Life milestone",
    ),
    "inheritance": LifeEvent(
        id="inheritance", label="Inheritance", category="windfall",
        impact=100_000, description="Windfall",
    ),
    "layoff": LifeEvent(
        id="layoff", label="Job Loss", category="career",
        impact=-20_000, ongoing_impact=-50_000, description="Career setback",
    ),
    "sidegig": LifeEvent(
        id="sidegig", label="Side Hustle", category="career",
        impact=-5_000, ongoing_impact=12_000, description="Extra income",
    ),
}


def get_life_event(event_id: str) -> LifeEvent:
    """Look up a built-in event by id."""
    if event_id not in LIFE_EVENTS:
        raise ValueError(f"Unknown life event '{event_id}'")
    return LIFE_EVENTS[event_id]

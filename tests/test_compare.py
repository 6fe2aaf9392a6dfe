"""
Tests for side-by-side path comparison.
"""
import numpy as np
import pytest

from twin_suite.core.compare import compare_paths
from twin_suite.core.events import LIFE_EVENTS, EventLedger, LifeEvent
from twin_suite.core.profile import Profile


@pytest.fixture
def saver():
    return Profile(current_age=30, initial_net_worth=0,
                   annual_return_rate=0.0, annual_contribution=10_000)


@pytest.mark.unit
class TestComparePaths:

    def test_identical_paths_tie(self, profile):
        cmp = compare_paths(profile, EventLedger(), None, 50)
        assert cmp.winner == "Tie"
        assert cmp.peak_diff == 0.0
        assert cmp.crossovers == []

    def test_windfall_path_wins(self, profile):
        b = EventLedger()
        b.add_event(LIFE_EVENTS["inheritance"], 10)
        cmp = compare_paths(profile, None, b, 50)
        assert cmp.winner == "B"
        assert cmp.final_diff > 100_000

    def test_crossover_detected(self, saver):
        b = EventLedger()
        b.add_event(LifeEvent(id="gift", impact=100_000), 0)
        b.add_event(LifeEvent(id="loss", impact=-300_000), 2)
        cmp = compare_paths(saver, None, b, 35)

        np.testing.assert_array_equal(cmp.diff[:3], [100_000, 100_000, -200_000])
        assert cmp.crossovers == [32]
        assert cmp.peak_diff == 200_000
        assert cmp.winner == "A"

    def test_to_frame(self, saver):
        df = compare_paths(saver, None, None, 33).to_frame()
        assert list(df.columns) == ["age", "path_a", "path_b", "diff"]
        assert len(df) == 4

    def test_empty_range(self, saver):
        cmp = compare_paths(saver, None, None, 20)
        assert cmp.final_diff == 0.0
        assert cmp.winner == "Tie"

"""
Tests for the retirement age search.
"""
import pytest

from twin_suite.core.events import EventLedger, LifeEvent
from twin_suite.core.profile import Profile
from twin_suite.core.projector import project_trajectory
from twin_suite.core.retirement import (
    Variant,
    calculate_retirement_impact,
    find_retirement_age,
)


def _shock(amount):
    return LifeEvent(id=f"shock{amount}", impact=amount)


@pytest.mark.unit
class TestFindRetirementAge:

    def test_first_age_meeting_target(self, profile):
        age = find_retirement_age(profile, None, 1_000_000, Variant.BASELINE)
        traj = project_trajectory(profile, None, 100)
        assert traj.at(age) >= 1_000_000
        assert traj.at(age - 1) < 1_000_000

    def test_already_met_returns_current_age(self, profile):
        assert find_retirement_age(profile, None, 10_000) == 30

    def test_unreachable_stops_at_bound(self, profile):
        assert find_retirement_age(profile, None, 10 ** 12) == 100

    def test_custom_bound(self, profile):
        assert find_retirement_age(profile, None, 10 ** 12, max_age=70) == 70

    def test_current_age_past_bound(self):
        p = Profile(current_age=104, initial_net_worth=0,
                    annual_return_rate=0.0, annual_contribution=0.0)
        assert find_retirement_age(p, None, 1) == 104

    def test_baseline_variant_ignores_ledger(self, flat_profile):
        ledger = EventLedger()
        ledger.add_event(_shock(400_000), 1)
        assert find_retirement_age(flat_profile, ledger, 500_000, "baseline") == 35
        assert find_retirement_age(flat_profile, ledger, 500_000, "simulated") == 31

    def test_first_crossing_wins_even_if_path_dips_later(self, flat_profile):
        ledger = EventLedger()
        ledger.add_event(_shock(400_000), 1)
        ledger.add_event(_shock(-1_000_000), 3)
        assert find_retirement_age(flat_profile, ledger, 500_000) == 31

    def test_bad_variant(self, profile):
        with pytest.raises(ValueError):
            find_retirement_age(profile, None, 1_000_000, "optimistic")

    def test_non_finite_target(self, profile):
        with pytest.raises(ValueError):
            find_retirement_age(profile, None, float("inf"))

    @pytest.mark.parametrize("target", ["lots", None, [1_000_000]])
    def test_non_numeric_target(self, profile, target):
        with pytest.raises(ValueError):
            find_retirement_age(profile, None, target)


@pytest.mark.unit
class TestRetirementImpact:

    def test_empty_ledger_no_delay(self, profile):
        impact = calculate_retirement_impact(profile, EventLedger(), 1_000_000)
        assert impact.delay == 0
        assert impact.baseline_age == impact.simulated_age

    def test_early_loss_delays_retirement(self, flat_profile):
        """Dip below zero at 32, then recover: 500k reached at 38 instead of 35."""
        ledger = EventLedger()
        ledger.add_event(_shock(-300_000), 2)
        impact = calculate_retirement_impact(flat_profile, ledger, 500_000)
        assert impact.baseline_age == 35
        assert impact.simulated_age == 38
        assert impact.delay == 3

    def test_windfall_accelerates_retirement(self, flat_profile):
        ledger = EventLedger()
        ledger.add_event(_shock(200_000), 1)
        impact = calculate_retirement_impact(flat_profile, ledger, 500_000)
        assert impact.simulated_age == 33
        assert impact.delay == -2

    def test_unreached_flags(self, profile):
        impact = calculate_retirement_impact(profile, None, 10 ** 12)
        assert impact.baseline_age == impact.simulated_age == 100
        assert not impact.baseline_reached
        assert not impact.simulated_reached

    def test_to_dict(self, flat_profile):
        ledger = EventLedger()
        ledger.add_event(_shock(-300_000), 2)
        data = calculate_retirement_impact(flat_profile, ledger, 500_000).to_dict()
        assert data["delay"] == 3
        assert data["target_net_worth"] == 500_000

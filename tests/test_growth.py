"""
Tests for the growth step and profile validation.
"""
import dataclasses
import math

import numpy as np
import pytest

from twin_suite.core.growth import advance
from twin_suite.core.profile import Profile


@pytest.mark.unit
class TestAdvance:
    """Tests for the annual growth step."""

    def test_return_then_contribution(self):
        """Return is applied to the balance before the contribution is added."""
        assert advance(50_000, 0.07, 20_000) == pytest.approx(73_500)

    def test_zero_rate_zero_contribution_is_identity(self):
        assert advance(12_345.67, 0.0, 0.0) == 12_345.67

    def test_total_loss_is_valid(self):
        """A -100% year wipes the balance but is not an error."""
        assert advance(100_000, -1.0, 0.0) == 0.0
        assert advance(100_000, -1.0, 5_000) == 5_000

    def test_negative_contribution(self):
        assert advance(10_000, 0.0, -2_500) == 7_500

    def test_elementwise_on_arrays(self):
        values = np.array([100.0, 200.0])
        rates = np.array([0.10, -0.50])
        np.testing.assert_allclose(advance(values, rates, 1.0), [111.0, 101.0])


@pytest.mark.unit
class TestProfile:
    """Tests for Profile validation."""

    def test_valid_profile(self, profile):
        assert profile.current_age == 30
        assert profile.years_until(35) == 5
        assert profile.years_until(20) == 0

    @pytest.mark.parametrize("field,value", [
        ("annual_return_rate", math.nan),
        ("annual_return_rate", math.inf),
        ("initial_net_worth", -math.inf),
        ("annual_contribution", math.nan),
        ("annual_return_rate", "7%"),
    ])
    def test_non_finite_numbers_rejected(self, field, value):
        kwargs = dict(current_age=30, initial_net_worth=1.0,
                      annual_return_rate=0.05, annual_contribution=0.0)
        kwargs[field] = value
        with pytest.raises(ValueError):
            Profile(**kwargs)

    @pytest.mark.parametrize("age", [-1, 30.5, True])
    def test_bad_age_rejected(self, age):
        with pytest.raises(ValueError):
            Profile(current_age=age, initial_net_worth=0.0,
                    annual_return_rate=0.05, annual_contribution=0.0)

    def test_total_loss_rate_allowed(self):
        p = Profile(current_age=40, initial_net_worth=1.0,
                    annual_return_rate=-1.0, annual_contribution=0.0)
        assert p.annual_return_rate == -1.0

    def test_profile_is_immutable(self, profile):
        with pytest.raises(dataclasses.FrozenInstanceError):
            profile.annual_return_rate = 0.5

    def test_dict_round_trip(self, profile):
        assert Profile.from_dict(profile.to_dict()) == profile

    def test_from_risk_tolerance(self):
        p = Profile.from_risk_tolerance(35, 10_000, 6_000, "Aggressive")
        assert p.annual_return_rate == 0.09
        assert p.risk_tolerance == "aggressive"

    def test_from_unknown_risk_tolerance(self):
        with pytest.raises(ValueError):
            Profile.from_risk_tolerance(35, 10_000, 6_000, "yolo")

    def test_unknown_risk_tolerance_rejected(self):
        with pytest.raises(ValueError):
            Profile(30, 50_000, 0.07, 20_000, risk_tolerance="high")

    def test_risk_tolerance_normalised(self):
        p = Profile(30, 50_000, 0.07, 20_000, risk_tolerance=" Moderate ")
        assert p.risk_tolerance == "moderate"

    def test_from_dict_unknown_risk_tolerance(self, profile):
        data = dict(profile.to_dict(), risk_tolerance="Balanced")
        with pytest.raises(ValueError):
            Profile.from_dict(data)

    def test_non_string_risk_tolerance_rejected(self):
        with pytest.raises(ValueError):
            Profile(30, 50_000, 0.07, 20_000, risk_tolerance=3)

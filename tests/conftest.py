import pytest

from twin_suite.core.profile import Profile


@pytest.fixture
def profile():
    """Typical accumulating saver: 30 years old, $50k, 7% return, $20k/yr."""
    return Profile(
        current_age=30,
        initial_net_worth=50_000,
        annual_return_rate=0.07,
        annual_contribution=20_000,
    )


@pytest.fixture
def flat_profile():
    """No return, so every value is an exact sum of contributions and impacts."""
    return Profile(
        current_age=30,
        initial_net_worth=0,
        annual_return_rate=0.0,
        annual_contribution=100_000,
    )

# twin_suite/core/growth.py
"""
Annual growth step shared by every projection.

    net_worth' = net_worth * (1 + annual_return_rate) + annual_contribution

Return is applied first, then the contribution. Baseline, simulated and Monte
Carlo paths all go through this one function so their numbers stay comparable.
Works on scalars and elementwise on numpy arrays.
"""


def advance(net_worth, annual_return_rate, annual_contribution):
    return net_worth * (1.0 + annual_return_rate) + annual_contribution

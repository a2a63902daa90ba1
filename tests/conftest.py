import matplotlib
matplotlib.use("Agg")

import pytest

from ahpTopsisPy.config import configure_parameters


@pytest.fixture(autouse=True)
def reset_configuration():
    """Every test starts from, and leaves behind, the default configuration."""
    configure_parameters.reset_to_defaults()
    yield
    configure_parameters.reset_to_defaults()

@pytest.fixture
def criteria_judgments():
    """Two criteria, the first moderately more important (3)."""
    return [["1", "3"], ["", "1"]]

@pytest.fixture
def alternative_judgments():
    """Per criterion: X is twice as good on criterion 1, half as good on criterion 2."""
    return [
        [["1", "2"], ["", "1"]],
        [["1", "1/2"], ["", "1"]],
    ]

@pytest.fixture
def consistent_3x3_judgments():
    """A perfectly consistent 3x3 matrix: a13 = a12 * a23."""
    return [["1", "2", "4"], ["", "1", "2"], ["", "", "1"]]

@pytest.fixture
def inconsistent_3x3_judgments():
    """A cyclic (A > B > C > A) and therefore strongly inconsistent matrix."""
    return [["1", "5", "1/5"], ["", "1", "5"], ["", "", "1"]]

@pytest.fixture
def performance_matrix():
    """Three alternatives rated on price (cost), quality and delivery (benefit)."""
    return [
        [250.0, 7.0, 8.0],
        [200.0, 6.0, 6.0],
        [300.0, 9.0, 9.0],
    ]

@pytest.fixture
def performance_criteria_types():
    return ["cost", "benefit", "benefit"]

import numpy as np
import pytest

from metapop_sir.actions import InterventionAction, reduce_beta
from metapop_sir.errors import InvalidParameter


def test_intervention_values_are_valid():
    """Tests that all intervention coefficients are between 0 and 1."""
    for action in InterventionAction:
        assert (
            0 < action.value <= 1.0
        ), f"Action {action.name} has invalid coefficient: {action.value}"


def test_apply_to_beta_returns_valid_beta():
    beta_0 = 0.5
    for action in InterventionAction:
        beta_modified = action.apply_to_beta(beta_0)
        assert beta_modified > 0, f"Modified beta for {action.name} should be positive"
        assert beta_modified <= beta_0, f"Modified beta for {action.name} should not exceed base beta"


def test_no_intervention_preserves_beta():
    assert InterventionAction.NO.apply_to_beta(0.5) == 0.5


def test_apply_to_beta_per_location():
    assert np.allclose(InterventionAction.MODERATE.apply_to_beta([0.4, 0.8]), [0.2, 0.4])


def test_beta_strictly_decreases_with_interventions():
    actions = [
        InterventionAction.NO,
        InterventionAction.MILD,
        InterventionAction.MODERATE,
        InterventionAction.SEVERE,
    ]

    beta_values = [action.apply_to_beta(0.5) for action in actions]

    for i in range(len(beta_values) - 1):
        assert beta_values[i] > beta_values[i + 1], (
            f"{actions[i].name} should allow more transmission than {actions[i + 1].name}"
        )


def test_reduction_percent():
    assert InterventionAction.NO.reduction_percent == 0.0
    assert InterventionAction.SEVERE.reduction_percent == pytest.approx(75.0)


class TestReduceBeta:
    def test_reduce_by_percentage(self):
        assert reduce_beta(0.5, 30) == pytest.approx(0.35)

    def test_zero_and_full_reduction(self):
        assert reduce_beta(0.5, 0) == pytest.approx(0.5)
        assert reduce_beta(0.5, 100) == pytest.approx(0.0)

    def test_per_location(self):
        assert np.allclose(reduce_beta([0.2, 0.4], 50), [0.1, 0.2])

    @pytest.mark.parametrize("percent", [-1, 101])
    def test_out_of_range_rejected(self, percent):
        with pytest.raises(InvalidParameter):
            reduce_beta(0.5, percent)

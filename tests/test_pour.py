"""Tests for the pour executor."""

import pytest

from foundry_sim.config.defaults import RESIDUAL_VOLUME
from foundry_sim.core.composition import melted_composition
from foundry_sim.core.pour import PourExecutor, PourRejection

from tests.helpers import liquid, solid


def volumes(portions):
    return [(p.material.id, p.volume, p.phase.value) for p in portions]


class TestValidation:
    """Rejected pours change nothing."""

    @pytest.mark.parametrize("selection, reason", [
        ({}, PourRejection.EMPTY_SELECTION),
        (None, PourRejection.EMPTY_SELECTION),
        ({"alpha": 0.0}, PourRejection.EMPTY_SELECTION),
        ({"alpha": -0.1, "beta": 1.1}, PourRejection.INVALID_ENTRY),
        ({"alpha": float("nan")}, PourRejection.INVALID_ENTRY),
        ({"alpha": "0.4", "beta": 0.6}, PourRejection.INVALID_ENTRY),
        ({None: 1.0}, PourRejection.UNKNOWN_MATERIAL),
        ({"alpha": 0.4, "beta": 0.5}, PourRejection.TARGET_MISMATCH),
        ({"alpha": 0.5, "beta": 0.5}, PourRejection.INSUFFICIENT_LIQUID),
    ])
    def test_rejections_leave_portions_untouched(self, alpha, beta, selection, reason):
        lookup = {"alpha": alpha, "beta": beta, None: None}
        if selection:
            selection = {lookup[k]: v for k, v in selection.items()}
        portions = [liquid(alpha, 0.4), liquid(beta, 0.6), solid(alpha, 0.3)]
        before = volumes(portions)

        report = PourExecutor().execute(portions, selection, target=1.0)

        assert not report
        assert report.reason is reason
        assert report.drained == {}
        assert volumes(portions) == before
        assert report.melted_after == report.melted_before == pytest.approx(1.0)

    def test_solid_volume_does_not_count(self, alpha):
        portions = [liquid(alpha, 0.5), solid(alpha, 2.0)]

        reason, _ = PourExecutor().validate(portions, {alpha: 1.0}, target=1.0)

        assert reason is PourRejection.INSUFFICIENT_LIQUID

    def test_tolerance_on_sum(self, alpha):
        portions = [liquid(alpha, 2.0)]
        executor = PourExecutor(epsilon=0.0005)

        assert executor.validate(portions, {alpha: 1.0004}, target=1.0)[0] is None
        assert executor.validate(portions, {alpha: 1.001}, target=1.0)[0] is PourRejection.TARGET_MISMATCH


class TestExecution:
    """Accepted pours drain exactly the selected volumes."""

    def test_basic_pour(self, alpha, beta):
        portions = [liquid(alpha, 0.4), liquid(beta, 0.6)]

        report = PourExecutor().execute(portions, {alpha: 0.4, beta: 0.6}, target=1.0)

        assert report
        assert report.reason is None
        assert report.drained == {alpha: pytest.approx(0.4), beta: pytest.approx(0.6)}
        assert report.drained_total == pytest.approx(1.0)
        # Both portions drained to nothing and removed
        assert portions == []
        assert report.melted_after == 0.0

    def test_conservation(self, alpha, beta):
        portions = [liquid(alpha, 1.0), liquid(beta, 1.5), solid(beta, 0.7)]
        before = melted_composition(portions)

        PourExecutor().execute(portions, {alpha: 0.3, beta: 0.7}, target=1.0)

        after = melted_composition(portions)
        assert after[alpha] == pytest.approx(before[alpha] - 0.3)
        assert after[beta] == pytest.approx(before[beta] - 0.7)
        # Solid portions never drained
        assert portions[-1].volume == 0.7

    def test_drains_in_container_order(self, alpha):
        first = liquid(alpha, 0.3)
        second = liquid(alpha, 0.5)
        third = liquid(alpha, 0.8)
        portions = [first, second, third]

        PourExecutor().execute(portions, {alpha: 1.0}, target=1.0)

        # first and second emptied and removed; third keeps 0.6
        assert portions == [third]
        assert third.volume == pytest.approx(0.6)

    def test_residual_portions_removed(self, alpha):
        keeper = liquid(alpha, 1.0 + RESIDUAL_VOLUME / 2)
        portions = [keeper]

        PourExecutor().execute(portions, {alpha: 1.0}, target=1.0)

        assert portions == []

    def test_tiny_solid_portions_kept(self, alpha):
        crumb = solid(alpha, RESIDUAL_VOLUME / 2)
        portions = [liquid(alpha, 1.0), crumb]

        PourExecutor().execute(portions, {alpha: 1.0}, target=1.0)

        assert portions == [crumb]

    def test_pour_within_epsilon_of_availability(self, alpha):
        portions = [liquid(alpha, 0.9996)]

        report = PourExecutor(epsilon=0.0005).execute(portions, {alpha: 1.0}, target=1.0)

        assert report
        assert report.drained[alpha] == pytest.approx(0.9996)
        assert portions == []

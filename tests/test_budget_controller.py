import pytest

from terrain_streamer.core.budget_controller import AdaptiveBudgetController, FrameTimeSmoother
from terrain_streamer.core.heightfield_builder import BudgetState
from terrain_streamer.host.config.world_config import BudgetConfig


@pytest.fixture
def controller():
    return AdaptiveBudgetController(BudgetConfig.from_defaults())


def test_slow_frames_lower_budget_to_floor_and_hold(controller):
    state = BudgetState(budget=10000)
    history = [controller.adjust(state, 1.0 / 30.0) for _ in range(10)]

    assert history[:7] == [9000, 8000, 7000, 6000, 5000, 4000, 3000]
    assert all(budget == 3000 for budget in history[7:])


def test_fast_frames_raise_budget_without_ceiling(controller):
    state = BudgetState(budget=10000)
    for _ in range(100):
        controller.adjust(state, 1.0 / 240.0)
    assert state.budget == 110000


def test_zero_frame_time_counts_as_fast(controller):
    state = BudgetState(budget=10000)
    controller.adjust(state, 0.0)
    assert state.budget == 11000
    assert controller.estimated_fps(0.0) == float("inf")


def test_budget_below_floor_is_clamped_up_on_decrease():
    controller = AdaptiveBudgetController(BudgetConfig.from_defaults(base_budget=2000))
    state = BudgetState(budget=2000)
    controller.adjust(state, 1.0)
    assert state.budget == 3000


def test_smoother_takes_first_sample_then_averages():
    smoother = FrameTimeSmoother(smoothing=0.2)
    assert smoother.smoothed is None
    assert smoother.add_sample(0.1) == pytest.approx(0.1)
    assert smoother.add_sample(0.2) == pytest.approx(0.12)
    smoother.reset()
    assert smoother.smoothed is None

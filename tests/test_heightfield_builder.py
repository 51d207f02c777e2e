import numpy as np
import pytest

from conftest import FlatNoise
from terrain_streamer.core.height_synthesizer import HeightSynthesizer
from terrain_streamer.core.heightfield_builder import BudgetedHeightfieldBuilder, BudgetState
from terrain_streamer.core.noise_iteration import IterationSet, NoiseIteration
from terrain_streamer.core.noise_source import SimplexNoiseSource
from terrain_streamer.host.config.value_default import ConfigurationError
from terrain_streamer.host.config.world_config import WorldConfig


def make_builder(world, iterations, noise):
    return BudgetedHeightfieldBuilder(HeightSynthesizer(world, iterations, noise))


def run_budgeted(task, budget_state):
    turns = 1
    while not task.step(budget_state):
        turns += 1
    return turns


def test_full_resolution_tile_spreads_over_seven_turns():
    world = WorldConfig.from_defaults()
    builder = make_builder(world, IterationSet([NoiseIteration(name="base")]), FlatNoise())
    budget_state = BudgetState(budget=10000)

    task = builder.start((0.0, 0.0, 0.0), 257)
    turns = run_budgeted(task, budget_state)

    assert turns == 7
    assert task.turns == 7
    assert budget_state.suspensions == 6
    assert task.finished
    np.testing.assert_allclose(task.result, 1.0)


def test_budgeted_result_equals_unbudgeted(small_world):
    iterations = IterationSet([NoiseIteration(name="a", depth=10, scale=2.0),
                               NoiseIteration(name="b", depth=5, scale=0.5, rarity=1.3)])
    builder = make_builder(small_world, iterations, SimplexNoiseSource(seed=9))
    position = (-300.0, 0.0, 200.0)

    reference = builder.build(position, 17)
    task = builder.start(position, 17)
    run_budgeted(task, BudgetState(budget=7))

    np.testing.assert_allclose(task.result, reference, rtol=1e-12, atol=1e-12)


def test_each_cell_is_evaluated_exactly_once(small_world):
    iterations = IterationSet([NoiseIteration(name="a", depth=10), NoiseIteration(name="b", depth=10)])
    noise = FlatNoise()
    builder = make_builder(small_world, iterations, noise)

    task = builder.start((0.0, 0.0, 0.0), 9)
    run_budgeted(task, BudgetState(budget=7))

    assert noise.calls == 2 * 9 * 9
    assert task.cells_evaluated == task.total_cells
    assert task.progress == 1.0


def test_budget_dividing_cell_count_needs_no_extra_turn(small_world, single_iteration):
    builder = make_builder(small_world, single_iteration, FlatNoise())
    budget_state = BudgetState(budget=50)

    task = builder.start((0.0, 0.0, 0.0), 10)
    turns = run_budgeted(task, budget_state)

    assert turns == 2
    assert budget_state.suspensions == 1
    assert budget_state.evaluated_this_turn == 50


def test_suspension_resets_counter(small_world, single_iteration):
    builder = make_builder(small_world, single_iteration, FlatNoise())
    budget_state = BudgetState(budget=20)

    task = builder.start((0.0, 0.0, 0.0), 9)
    assert task.step(budget_state) is False
    assert budget_state.evaluated_this_turn == 0
    assert budget_state.suspensions == 1
    assert task.cells_evaluated == 20
    assert (task.x, task.y) == (2, 2)


def test_unbudgeted_build_leaves_counter_untouched(small_world, single_iteration):
    builder = make_builder(small_world, single_iteration, FlatNoise())
    budget_state = BudgetState(budget=5)

    task = builder.start((0.0, 0.0, 0.0), 9, use_budget=False)
    assert task.step(budget_state) is True
    assert budget_state.evaluated_this_turn == 0
    assert budget_state.suspensions == 0


def test_on_complete_receives_result_once(small_world, single_iteration):
    builder = make_builder(small_world, single_iteration, FlatNoise())
    results = []

    task = builder.start((0.0, 0.0, 0.0), 5, on_complete=results.append)
    run_budgeted(task, BudgetState(budget=3))
    assert task.step(BudgetState(budget=3)) is True

    assert len(results) == 1
    assert results[0].shape == (5, 5)


def test_no_enabled_iterations_completes_with_zeros(small_world):
    iterations = IterationSet([NoiseIteration(name="off", enabled=False)])
    builder = make_builder(small_world, iterations, FlatNoise())

    task = builder.start((0.0, 0.0, 0.0), 5)
    assert task.step(BudgetState(budget=1)) is True
    np.testing.assert_array_equal(task.result, np.zeros((5, 5)))


@pytest.mark.parametrize("resolution", [0, 1])
def test_resolution_below_two_is_rejected(small_world, single_iteration, resolution):
    builder = make_builder(small_world, single_iteration, FlatNoise())
    with pytest.raises(ConfigurationError):
        builder.start((0.0, 0.0, 0.0), resolution)


def test_resolution_two_is_allowed(small_world, single_iteration):
    builder = make_builder(small_world, single_iteration, FlatNoise())
    assert builder.build((0.0, 0.0, 0.0), 2).shape == (2, 2)


def test_budget_state_helpers():
    state = BudgetState(budget=10)
    state.register_cells(4)
    assert state.remaining() == 6
    assert not state.exhausted()
    state.register_cells(6)
    assert state.exhausted()
    assert state.remaining() == 0


def test_toggling_iteration_mid_build_keeps_task_normalized(small_world):
    iterations = IterationSet([NoiseIteration(name=name, depth=20) for name in ("a", "b", "c")])
    builder = make_builder(small_world, iterations, FlatNoise())
    budget_state = BudgetState(budget=50)

    task = builder.start((0.0, 0.0, 0.0), 9)
    assert task.step(budget_state) is False

    iterations.set_enabled(2, False)
    run_budgeted(task, budget_state)

    assert task.total_depth == 60
    np.testing.assert_allclose(task.result, 1.0)

    # die nächste Task sieht die geänderte Liste
    follow_up = builder.build((0.0, 0.0, 0.0), 9)
    np.testing.assert_allclose(follow_up, 1.0)

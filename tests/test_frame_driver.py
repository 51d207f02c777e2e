import pytest

from conftest import Entity
from terrain_streamer.host.managers.frame_driver import DebounceTimer, FrameDriver


@pytest.fixture
def driver_setup(qapp, make_orchestrator):
    host_commits = []
    orchestrator = make_orchestrator(tracked=Entity((50.0, 0.0, 50.0)), committed=host_commits,
                                     base_budget=30, min_budget=10, adjust_step=10, adaptive=True)
    driver = FrameDriver(orchestrator, interval_ms=5)
    yield driver, orchestrator, host_commits
    driver.stop()


def test_default_interval_follows_target_fps(qapp, make_orchestrator):
    driver = FrameDriver(make_orchestrator())
    assert driver.interval_ms == 16


def test_start_generates_and_emits_commits(driver_setup):
    driver, orchestrator, host_commits = driver_setup
    emitted = []
    driver.tile_committed.connect(lambda index, resolution: emitted.append((index, resolution)))

    driver.start()

    assert driver.is_running()
    assert len(emitted) == 9
    assert (4, 9) in emitted
    assert len(host_commits) == 9


def test_step_emits_pass_and_budget_changes(driver_setup):
    driver, orchestrator, _ = driver_setup
    passes = []
    budgets = []
    driver.pass_completed.connect(passes.append)
    driver.budget_changed.connect(budgets.append)

    driver.start()
    driver.step(1.0 / 30.0)
    assert passes == [1]

    orchestrator.tracked.position = (102.0, 0.0, 50.0)
    driver.step(1.0 / 30.0)
    driver.step(1.0 / 30.0)

    assert budgets == [20]
    assert driver.frames == 3


def test_generate_all_now_emits_completion(driver_setup):
    driver, orchestrator, _ = driver_setup
    completed = []
    driver.regeneration_completed.connect(lambda: completed.append(True))

    driver.generate_all_now()

    assert completed == [True]
    assert orchestrator.full_regenerations == 1


def test_request_generate_all_is_debounced(driver_setup):
    driver, orchestrator, _ = driver_setup

    driver.request_generate_all()
    driver.request_generate_all()

    assert driver.regenerate_debounce.is_pending()
    assert orchestrator.full_regenerations == 0

    driver.stop()
    assert not driver.regenerate_debounce.is_pending()


def test_debounce_timer_restarts(qapp):
    timer = DebounceTimer(delay_ms=1000)
    timer.trigger()
    assert timer.is_pending()
    timer.stop()
    assert not timer.is_pending()

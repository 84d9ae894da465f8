import pytest

from wayfarer.state import (
    Active,
    Cancelled,
    Completed,
    Failed,
    Idle,
    JourneyStateMachine,
    Paused,
    plan_of,
)

from conftest import START_TIME


def test_start_only_from_idle(plan):
    machine = JourneyStateMachine()
    assert machine.start(plan)
    assert isinstance(machine.state, Active)
    assert machine.plan is plan
    assert not machine.start(plan)


def test_pause_and_resume(plan):
    machine = JourneyStateMachine()
    machine.start(plan)
    assert machine.pause(START_TIME + 30)
    assert isinstance(machine.state, Paused)
    assert machine.state.paused_at == START_TIME + 30
    assert not machine.pause(START_TIME + 31)
    assert machine.resume(START_TIME + 60)
    assert machine.active_elapsed(START_TIME + 90) == pytest.approx(60)


def test_evaluate_completes_at_full_progress(plan):
    machine = JourneyStateMachine()
    machine.start(plan)
    assert not machine.evaluate(START_TIME + 299)
    assert machine.evaluate(START_TIME + 300)
    assert isinstance(machine.state, Completed)
    # Frozen once finished
    assert machine.active_elapsed(START_TIME + 900) == pytest.approx(300)


def test_stop_resolves_to_cancelled_or_completed(plan):
    machine = JourneyStateMachine()
    machine.start(plan)
    assert machine.stop(START_TIME + 10)
    assert isinstance(machine.state, Cancelled)

    machine.reset()
    machine.start(plan)
    assert machine.stop(START_TIME + 500)
    assert isinstance(machine.state, Completed)


def test_fail_and_reset(plan):
    machine = JourneyStateMachine()
    assert not machine.reset()
    machine.start(plan)
    assert machine.fail("gps lost")
    assert machine.state == Failed("gps lost")
    assert not machine.fail("again")
    assert plan_of(machine.state) is None
    assert machine.reset()
    assert isinstance(machine.state, Idle)
    assert machine.position(START_TIME) is None


def test_terminal_flags():
    assert not Idle.terminal
    assert not Active.terminal
    assert not Paused.terminal
    assert Completed.terminal and Cancelled.terminal and Failed.terminal

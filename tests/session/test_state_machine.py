"""Tests for the session state machine: countdown, IME handling, completion."""

import pytest

from typing_arena.corpus.tagging import tag_passage
from typing_arena.session.state_machine import SessionState, SessionStateMachine

TARGET = "かきくけこ"


@pytest.fixture
def completions():
    return []


@pytest.fixture
def machine(scheduler, completions):
    m = SessionStateMachine(scheduler, clock=scheduler.now, on_complete=completions.append)
    m.set_target(tag_passage(TARGET))
    return m


@pytest.fixture
def active(machine, run_countdown):
    machine.start_countdown()
    run_countdown()
    assert machine.state == SessionState.ACTIVE
    return machine


def test_start_without_target_is_ignored(scheduler):
    m = SessionStateMachine(scheduler, clock=scheduler.now)
    m.start_countdown()
    assert m.state == SessionState.IDLE
    assert scheduler.pending == 0


def test_set_target_shows_unjudged_passage(machine):
    view = machine.view
    assert view.state == SessionState.IDLE
    assert not view.input_enabled
    assert view.judgment.pending == TARGET
    assert not view.judgment.judged


def test_countdown_shows_three_two_one_zero_then_activates(machine, scheduler):
    seen = []
    machine.on_change = lambda view: seen.append((view.state, view.countdown_value))

    machine.start_countdown()
    for _ in range(4):
        scheduler.advance(0.7)

    assert seen == [
        (SessionState.COUNTDOWN, 3),
        (SessionState.COUNTDOWN, 2),
        (SessionState.COUNTDOWN, 1),
        (SessionState.COUNTDOWN, 0),
        (SessionState.ACTIVE, None),
    ]
    assert machine.view.input_enabled
    assert scheduler.pending == 0


def test_input_is_disabled_during_countdown(machine):
    machine.start_countdown()
    assert not machine.view.input_enabled
    machine.key_down("か")
    assert machine.input_changed(TARGET) is None
    assert machine.keystroke_count == 0
    assert machine.state == SessionState.COUNTDOWN


def test_start_during_countdown_does_not_restart(machine, scheduler):
    machine.start_countdown()
    scheduler.advance(0.7)
    machine.start_countdown()
    assert machine.countdown_value == 2
    assert scheduler.pending == 1


def test_start_while_active_keeps_round(active, scheduler):
    active.key_down("k")
    active.input_changed("か")
    active.start_countdown()
    assert active.state == SessionState.ACTIVE
    assert active.keystroke_count == 1
    assert active.committed_value == "か"
    assert scheduler.pending == 0


def test_keystroke_counting_rules(active):
    for key in ("k", "a", " ", "Enter", "Backspace", "Delete"):
        active.key_down(key)
    for key in ("Shift", "ArrowLeft", "Control", ""):
        active.key_down(key)
    assert active.keystroke_count == 6


def test_judgment_follows_committed_input(active):
    active.input_changed("かきX")
    view = active.view
    assert view.judgment.correct == "かき"
    assert view.judgment.wrong == "く"
    assert view.judgment.pending == "けこ"


def test_no_judgment_or_completion_while_composing(active, completions):
    active.input_changed("かき")
    active.composition_start()
    assert not active.view.judgment.judged
    assert active.view.composing

    assert active.input_changed(TARGET) is None
    assert not active.view.judgment.judged
    assert completions == []

    measurement = active.composition_end(TARGET)
    assert measurement is not None
    assert active.state == SessionState.COMPLETED
    assert len(completions) == 1


def test_composition_keystrokes_count(active):
    active.composition_start()
    for key in ("k", "a", " ", "Enter"):
        active.key_down(key)
    assert active.keystroke_count == 4


def test_timer_starts_on_first_non_empty_input(active, scheduler):
    scheduler.advance(5.0)
    active.input_changed("")
    assert active.start_timestamp is None

    active.input_changed("か")
    started = scheduler.now()
    assert active.start_timestamp == started

    scheduler.advance(2.0)
    active.input_changed("かき")
    assert active.start_timestamp == started

    scheduler.advance(3.0)
    measurement = active.input_changed(TARGET)
    assert measurement.elapsed_seconds == pytest.approx(5.0)
    assert measurement.typed_length == len(TARGET)


def test_timer_starts_during_composition(active, scheduler):
    active.composition_start()
    active.input_changed("k")
    started = scheduler.now()
    scheduler.advance(1.5)
    measurement = active.composition_end(TARGET)
    assert active.start_timestamp == started
    assert measurement.elapsed_seconds == pytest.approx(1.5)


def test_instant_completion_uses_floors(active):
    measurement = active.input_changed(TARGET)
    assert measurement.elapsed_seconds == 0.001
    assert measurement.keystrokes == 1


def test_round_completes_exactly_once(active, completions):
    for key in TARGET:
        active.key_down(key)
    first = active.input_changed(TARGET)
    assert first is not None
    assert first.keystrokes == len(TARGET)

    assert active.input_changed(TARGET) is None
    assert active.composition_end(TARGET) is None
    assert len(completions) == 1


def test_skip_aborts_and_requests_passage(scheduler, completions):
    requests = []
    m = SessionStateMachine(
        scheduler,
        clock=scheduler.now,
        on_complete=completions.append,
        on_request_passage=lambda: requests.append(True),
    )
    m.set_target(tag_passage(TARGET))
    m.start_countdown()
    m.skip()

    assert m.state == SessionState.ABORTED
    assert requests == [True]
    assert completions == []
    assert scheduler.pending == 0


def test_set_target_cancels_pending_countdown(machine, scheduler):
    machine.start_countdown()
    scheduler.advance(0.7)
    machine.set_target(tag_passage("さしすせそ"))

    assert scheduler.pending == 0
    scheduler.advance(10.0)
    assert machine.state == SessionState.IDLE
    assert machine.view.judgment.pending == "さしすせそ"


def test_restart_after_completion(active, run_countdown):
    active.input_changed(TARGET)
    assert active.state == SessionState.COMPLETED

    active.start_countdown()
    assert active.state == SessionState.COUNTDOWN
    run_countdown()
    assert active.state == SessionState.ACTIVE
    assert active.keystroke_count == 0
    assert active.committed_value == ""


def test_negative_countdown_start_rejected(scheduler):
    with pytest.raises(ValueError):
        SessionStateMachine(scheduler, countdown_start=-1)

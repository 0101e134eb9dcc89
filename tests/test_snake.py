"""Tests for the toroidal Snake session."""

import json

from minigames.core.commands import SnakeCommand
from minigames.core.enums import SnakeAction
from minigames.core.models import Vector2
from minigames.engine.snake import is_blocked_turn
from tests.helpers.fakes import RecordingTransport, make_snake

UP, DOWN, LEFT, RIGHT = Vector2(0, -1), Vector2(0, 1), Vector2(-1, 0), Vector2(1, 0)


class TestTurnRule:

    def test_perpendicular_allowed(self):
        assert not is_blocked_turn(UP, LEFT)
        assert not is_blocked_turn(RIGHT, DOWN)

    def test_same_axis_blocked(self):
        assert is_blocked_turn(UP, DOWN)
        assert is_blocked_turn(UP, UP)
        assert is_blocked_turn(LEFT, RIGHT)


class TestMovement:

    def test_initial_state_is_idle(self):
        session, sched, _ = make_snake()
        snap = session.snapshot()
        assert snap.body == (Vector2(10, 10),)
        assert snap.food == Vector2(15, 15)
        assert snap.direction == UP
        assert not snap.running
        assert snap.alive
        sched.advance(1000)
        assert session.head == Vector2(10, 10)

    def test_one_frame(self):
        session, sched, _ = make_snake()
        session.start()
        sched.advance(200)
        assert session.body == (Vector2(10, 9),)
        assert session.alive
        assert session.score == 0

    def test_wraps_top_to_bottom(self):
        session, sched, _ = make_snake(snake_start=(10, 0))
        session.start()
        sched.advance(200)
        assert session.head == Vector2(10, 19)

    def test_wraps_left_to_right(self):
        session, sched, _ = make_snake(snake_start=(0, 4), snake_direction=(-1, 0))
        session.start()
        sched.advance(200)
        assert session.head == Vector2(19, 4)

    def test_reversal_rejected(self):
        session, sched, _ = make_snake()
        session.start()
        assert not session.set_direction(DOWN)
        assert session.set_direction(LEFT)
        sched.advance(200)
        assert session.head == Vector2(9, 10)

    def test_two_turns_in_one_frame_cannot_reverse(self):
        session, sched, _ = make_snake()
        session.start()
        assert session.set_direction(LEFT)
        assert not session.set_direction(DOWN)
        sched.advance(200)
        assert session.head == Vector2(9, 10)
        assert session.alive
        assert session.set_direction(DOWN)

    def test_turn_can_be_taken_back_within_frame(self):
        session, sched, _ = make_snake()
        session.start()
        session.set_direction(LEFT)
        assert session.set_direction(UP)
        sched.advance(200)
        assert session.head == Vector2(10, 9)

    def test_keys_only_while_running(self):
        session, sched, _ = make_snake()
        assert not session.handle_key("ArrowLeft")
        session.start()
        assert session.handle_key("ArrowLeft")
        assert session.direction == LEFT
        assert not session.handle_key("q")

    def test_dispatch(self):
        session, sched, _ = make_snake()
        snap = session.dispatch(SnakeCommand(SnakeAction.START))
        assert snap.running
        snap = session.dispatch(SnakeCommand(SnakeAction.TURN, RIGHT))
        assert snap.direction == RIGHT
        snap = session.dispatch(SnakeCommand(SnakeAction.STOP))
        assert not snap.running


class TestFood:

    def test_eating_grows_and_scores(self):
        session, sched, _ = make_snake(rolls=[3, 4], snake_food=(10, 9))
        session.start()
        sched.advance(200)
        assert session.score == 10
        assert session.body == (Vector2(10, 9), Vector2(10, 10))
        assert session.food == Vector2(3, 4)

    def test_food_never_lands_on_body(self):
        # First draw (10, 10) is under the body, second is free
        session, sched, _ = make_snake(rolls=[10, 10, 1, 1], snake_food=(10, 9))
        session.start()
        sched.advance(200)
        assert session.food == Vector2(1, 1)

    def test_full_board_ends_game(self):
        transport = RecordingTransport()
        session, sched, _ = make_snake(transport=transport, snake_board_size=2, snake_start=(0, 0))
        session.start()
        session._body = [Vector2(0, 0), Vector2(1, 0), Vector2(1, 1)]
        session._food = Vector2(0, 1)
        session._direction = DOWN
        sched.advance(200)

        assert not session.alive
        assert session.score == 10
        assert len(session.body) == 4
        assert json.loads(transport.messages[-1]) == {"event": "snake_game_over", "data": {"score": 10}}


class TestGameOver:

    def test_running_into_tail_is_fatal(self):
        transport = RecordingTransport()
        session, sched, _ = make_snake(transport=transport)
        session.start()
        session._body = [Vector2(5, 5), Vector2(5, 6), Vector2(6, 6), Vector2(6, 5)]
        session._direction = RIGHT
        sched.advance(200)

        assert not session.alive
        assert not session.running
        assert session.snapshot().game_over
        assert len(session.body) == 4
        assert json.loads(transport.messages[0]) == {"event": "snake_game_over", "data": {"score": 0}}

    def test_dead_snake_does_not_move(self):
        session, sched, _ = make_snake()
        session.start()
        session._body = [Vector2(5, 5), Vector2(5, 6), Vector2(6, 6), Vector2(6, 5)]
        session._direction = RIGHT
        sched.advance(1000)
        assert session.head == Vector2(5, 5)

    def test_restart_after_game_over(self):
        session, sched, _ = make_snake()
        session.start()
        session._body = [Vector2(5, 5), Vector2(5, 6), Vector2(6, 6), Vector2(6, 5)]
        session._direction = RIGHT
        sched.advance(200)
        session.start()
        assert session.alive
        assert session.body == (Vector2(10, 10),)
        assert session.score == 0


class TestStartStop:

    def test_stop_freezes_state(self):
        session, sched, _ = make_snake()
        session.start()
        sched.advance(400)
        session.stop()
        sched.advance(1000)
        assert session.head == Vector2(10, 8)
        assert not session.running

    def test_start_schedules_one_loop(self):
        session, sched, _ = make_snake()
        session.start()
        session.start()
        assert sched.pending == 1
        sched.advance(200)
        assert session.head == Vector2(10, 9)

    def test_shutdown_cancels_loop(self):
        session, sched, _ = make_snake()
        session.start()
        session.shutdown()
        assert sched.pending == 0
        assert not session.running

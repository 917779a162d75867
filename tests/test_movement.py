import dataclasses
import math

import pytest

from eternalmaze.config import Player
from eternalmaze.movement import (
    MOVE_SPEED,
    Action,
    apply_action,
    is_wall,
    move_backward,
    move_forward,
    move_left,
    move_right,
    rotate_left,
    rotate_right,
)

GRID = [
    "11111",
    "10001",
    "10001",
    "10001",
    "11111",
]


def north_player(x=2.5, y=2.5):
    return Player(x, y, 0.0, -1.0, 0.66, 0.0)


def east_player(x=2.5, y=2.5):
    return Player(x, y, 1.0, 0.0, 0.0, 0.66)


def test_is_wall():
    assert is_wall(GRID, 0.5, 0.5) is True
    assert is_wall(GRID, 2.5, 2.5) is False
    assert is_wall(GRID, 2.9, 4.2) is True


def test_move_forward_open_space():
    player = east_player()
    move_forward(GRID, player)
    assert player.pos_x == pytest.approx(2.5 + MOVE_SPEED)
    assert player.pos_y == 2.5


def test_move_forward_blocked_by_wall():
    player = east_player(x=3.9)
    move_forward(GRID, player)
    assert player.pos_x == 3.9
    assert player.pos_y == 2.5


def test_forward_then_backward_returns():
    player = east_player()
    move_forward(GRID, player)
    move_backward(GRID, player)
    assert player.pos_x == pytest.approx(2.5)
    assert player.pos_y == pytest.approx(2.5)


def test_move_left_facing_north_goes_west():
    player = north_player()
    move_left(GRID, player)
    assert player.pos_x < 2.5
    assert player.pos_y == pytest.approx(2.5)


def test_move_right_facing_north_goes_east():
    player = north_player()
    move_right(GRID, player)
    assert player.pos_x > 2.5
    assert player.pos_y == pytest.approx(2.5)


def test_left_then_right_returns():
    player = north_player()
    move_left(GRID, player)
    move_right(GRID, player)
    assert player.pos_x == pytest.approx(2.5)
    assert player.pos_y == pytest.approx(2.5)


def test_sliding_along_wall():
    player = Player(3.9, 2.5, math.sqrt(0.5), math.sqrt(0.5), 0.0, 0.0)
    move_forward(GRID, player)
    assert player.pos_x == 3.9
    assert player.pos_y > 2.5


def test_rotation_round_trip():
    player = north_player()
    rotate_left(player)
    assert player.dir_x != pytest.approx(0.0)
    rotate_right(player)
    assert player.dir_x == pytest.approx(0.0, abs=1e-12)
    assert player.dir_y == pytest.approx(-1.0)
    assert player.plane_x == pytest.approx(0.66)
    assert player.plane_y == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize("turn", [rotate_left, rotate_right])
def test_rotation_keeps_lengths_and_perpendicularity(turn):
    player = east_player()
    for _ in range(17):
        turn(player)
    assert math.hypot(player.dir_x, player.dir_y) == pytest.approx(1.0)
    assert math.hypot(player.plane_x, player.plane_y) == pytest.approx(0.66)
    dot = player.dir_x * player.plane_x + player.dir_y * player.plane_y
    assert dot == pytest.approx(0.0, abs=1e-12)


def test_rotation_does_not_move():
    player = east_player()
    rotate_left(player)
    assert (player.pos_x, player.pos_y) == (2.5, 2.5)


@pytest.mark.parametrize(
    "action, function",
    [
        (Action.FORWARD, lambda p: move_forward(GRID, p)),
        (Action.BACKWARD, lambda p: move_backward(GRID, p)),
        (Action.LEFT, lambda p: move_left(GRID, p)),
        (Action.RIGHT, lambda p: move_right(GRID, p)),
        (Action.ROTATE_LEFT, rotate_left),
        (Action.ROTATE_RIGHT, rotate_right),
    ],
)
def test_apply_action_dispatch(action, function):
    via_action = north_player()
    direct = dataclasses.replace(via_action)
    apply_action(GRID, via_action, action)
    function(direct)
    assert via_action == direct
    assert via_action != north_player()


def test_apply_quit_leaves_player():
    player = north_player()
    apply_action(GRID, player, Action.QUIT)
    assert player == north_player()
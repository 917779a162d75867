"""Player movement and rotation on the map grid.

Movement is checked one axis at a time, so the player slides along a
wall instead of stopping dead against it.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from enum import Enum, auto

from .config import Player

MOVE_SPEED = 0.2
ROT_SPEED = 0.1


class Action(Enum):
    """Something the player asks for from the keyboard."""

    QUIT = auto()
    FORWARD = auto()
    BACKWARD = auto()
    LEFT = auto()
    RIGHT = auto()
    ROTATE_LEFT = auto()
    ROTATE_RIGHT = auto()


def is_wall(grid: Sequence[str], y: float, x: float) -> bool:
    """Whether the cell containing the point (x, y) is a wall."""
    return grid[int(y)][int(x)] == "1"


def _step(grid: Sequence[str], player: Player, dx: float, dy: float) -> None:
    next_x = player.pos_x + dx * MOVE_SPEED
    next_y = player.pos_y + dy * MOVE_SPEED
    if not is_wall(grid, player.pos_y, next_x):
        player.pos_x = next_x
    if not is_wall(grid, next_y, player.pos_x):
        player.pos_y = next_y


def move_forward(grid: Sequence[str], player: Player) -> None:
    """Step along the viewing direction."""
    _step(grid, player, player.dir_x, player.dir_y)


def move_backward(grid: Sequence[str], player: Player) -> None:
    """Step against the viewing direction."""
    _step(grid, player, -player.dir_x, -player.dir_y)


def move_left(grid: Sequence[str], player: Player) -> None:
    """Strafe to the left of the viewing direction."""
    _step(grid, player, player.dir_y, -player.dir_x)


def move_right(grid: Sequence[str], player: Player) -> None:
    """Strafe to the right of the viewing direction."""
    _step(grid, player, -player.dir_y, player.dir_x)


def _rotate(player: Player, angle: float) -> None:
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    player.dir_x, player.dir_y = (
        player.dir_x * cos_a - player.dir_y * sin_a,
        player.dir_x * sin_a + player.dir_y * cos_a,
    )
    player.plane_x, player.plane_y = (
        player.plane_x * cos_a - player.plane_y * sin_a,
        player.plane_x * sin_a + player.plane_y * cos_a,
    )


def rotate_left(player: Player) -> None:
    """Turn the view and camera plane by +ROT_SPEED radians."""
    _rotate(player, ROT_SPEED)


def rotate_right(player: Player) -> None:
    """Turn the view and camera plane by -ROT_SPEED radians."""
    _rotate(player, -ROT_SPEED)


def apply_action(grid: Sequence[str], player: Player, action: Action) -> None:
    """Carry out a movement action; QUIT leaves the player untouched."""
    if action is Action.FORWARD:
        move_forward(grid, player)
    elif action is Action.BACKWARD:
        move_backward(grid, player)
    elif action is Action.LEFT:
        move_left(grid, player)
    elif action is Action.RIGHT:
        move_right(grid, player)
    elif action is Action.ROTATE_LEFT:
        rotate_left(player)
    elif action is Action.ROTATE_RIGHT:
        rotate_right(player)
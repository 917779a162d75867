"""Rendering the scene into a 32-bit frame buffer.

Walls are drawn by casting one ray per screen column through the map
grid (digital differential analysis), then sampling a texture column
scaled to the wall's distance. A top-down minimap is drawn over the
top-left corner.
"""

from __future__ import annotations

import math
import sys
from array import array
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from .config import MazeConfig, MazeMap, Player

NORTH, SOUTH, WEST, EAST = range(4)

MINIMAP_TILE = 8
MINIMAP_WALL = 0x333333
MINIMAP_FLOOR = 0x777777
MINIMAP_PLAYER = 0xFF0000

_MASK = 0xFFFFFFFF
_NO_STEP = 1e30
_TYPECODE = "I" if array("I").itemsize == 4 else "L"


class _Texture(Protocol):
    width: int
    height: int

    def pixel(self, x: int, y: int) -> int: ...


@dataclass
class FrameBuffer:
    """A width x height image of 32-bit 0xAARRGGBB pixels, row-major."""

    width: int
    height: int
    pixels: array = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"invalid frame size {self.width}x{self.height}")
        self.pixels = array(_TYPECODE, bytes(4 * self.width * self.height))

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Set a pixel; coordinates outside the frame are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y * self.width + x] = color & _MASK

    def get_pixel(self, x: int, y: int) -> int:
        """Return the pixel at (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        return self.pixels[y * self.width + x]

    def to_bytes(self) -> bytes:
        """Pixels as little-endian 32-bit words (B, G, R, A byte order)."""
        data = array(_TYPECODE, self.pixels)
        if sys.byteorder == "big":
            data.byteswap()
        return data.tobytes()

    def _fill_rows(self, first: int, last: int, color: int) -> None:
        count = (last - first) * self.width
        if count > 0:
            start = first * self.width
            self.pixels[start:start + count] = array(_TYPECODE, [color & _MASK]) * count


@dataclass(frozen=True)
class Hit:
    """Where a ray met a wall."""

    map_x: int
    map_y: int
    side: int
    distance: float
    ray: tuple[float, float]


@dataclass(frozen=True)
class WallSlice:
    """The vertical span one wall column occupies on screen."""

    height: int
    start: int
    end: int
    distance: float


def texture_pixel(texture: _Texture, x: int, y: int) -> int:
    """Sample a texture, clamping coordinates to its edges."""
    x = min(max(x, 0), texture.width - 1)
    y = min(max(y, 0), texture.height - 1)
    return texture.pixel(x, y)


def _is_wall_cell(grid: Sequence[str], map_x: int, map_y: int) -> bool:
    if not (0 <= map_y < len(grid) and 0 <= map_x < len(grid[map_y])):
        raise ValueError("ray left the map without hitting a wall")
    return grid[map_y][map_x] == "1"


def cast_ray(grid: Sequence[str], player: Player, camera_x: float) -> Hit:
    """Cast the ray at camera_x (-1 left edge, 1 right edge) to the first wall.

    The distance is measured perpendicular to the camera plane.
    """
    ray_x = player.dir_x + player.plane_x * camera_x
    ray_y = player.dir_y + player.plane_y * camera_x
    map_x = int(player.pos_x)
    map_y = int(player.pos_y)
    delta_x = _NO_STEP if ray_x == 0 else abs(1 / ray_x)
    delta_y = _NO_STEP if ray_y == 0 else abs(1 / ray_y)
    if ray_x < 0:
        step_x, side_x = -1, (player.pos_x - map_x) * delta_x
    else:
        step_x, side_x = 1, (map_x + 1.0 - player.pos_x) * delta_x
    if ray_y < 0:
        step_y, side_y = -1, (player.pos_y - map_y) * delta_y
    else:
        step_y, side_y = 1, (map_y + 1.0 - player.pos_y) * delta_y

    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        if _is_wall_cell(grid, map_x, map_y):
            break

    if side == 0:
        distance = (map_x - player.pos_x + (1 - step_x) // 2) / ray_x
    else:
        distance = (map_y - player.pos_y + (1 - step_y) // 2) / ray_y
    return Hit(map_x, map_y, side, distance, (ray_x, ray_y))


def wall_slice(win_h: int, distance: float) -> WallSlice:
    """Screen span of a wall at the given distance, clipped to the window."""
    height = int(win_h / distance)
    start = -(height // 2) + win_h // 2
    end = height // 2 + win_h // 2
    start = max(start, 0)
    end = min(end, win_h - 1)
    return WallSlice(height, start, end, distance)


def texture_id(ray: tuple[float, float], side: int) -> int:
    """Which wall texture faces a ray that hit a wall on the given side."""
    ray_x, ray_y = ray
    if side == 0 and ray_x > 0:
        return EAST
    if side == 0 and ray_x < 0:
        return WEST
    if side == 1 and ray_y > 0:
        return SOUTH
    return NORTH


def wall_x(player: Player, ray: tuple[float, float], side: int, distance: float) -> float:
    """Fractional position, in [0, 1), where the ray struck the wall."""
    if side == 0:
        value = player.pos_y + distance * ray[1]
    else:
        value = player.pos_x + distance * ray[0]
    return value - math.floor(value)


def _draw_textured_column(
    frame: FrameBuffer, x: int, span: WallSlice, texture: _Texture, tex_x: int
) -> None:
    win_h = frame.height
    step = texture.height / span.height if span.height > 0 else 0.0
    tex_pos = (span.start - win_h // 2 + span.height // 2) * step
    for y in range(span.start, span.end + 1):
        tex_y = int(tex_pos) & (texture.height - 1)
        tex_pos += step
        frame.put_pixel(x, y, texture_pixel(texture, tex_x, tex_y))


def draw_floor_ceiling(frame: FrameBuffer, ceiling: int, floor: int) -> None:
    """Paint the upper half with the ceiling colour, the lower with the floor."""
    half = frame.height // 2
    frame._fill_rows(0, half, ceiling)
    frame._fill_rows(half, frame.height, floor)


def render_walls(
    frame: FrameBuffer, maze_map: MazeMap, textures: Sequence[_Texture]
) -> None:
    """Draw one textured wall column per frame column.

    ``textures`` is indexed by NORTH, SOUTH, WEST and EAST.
    """
    player = maze_map.player
    for x in range(frame.width):
        camera_x = 2.0 * x / frame.width - 1.0
        hit = cast_ray(maze_map.grid, player, camera_x)
        span = wall_slice(frame.height, hit.distance)
        texture = textures[texture_id(hit.ray, hit.side)]
        tex_x = int(wall_x(player, hit.ray, hit.side, hit.distance) * texture.width)
        if (hit.side == 0 and hit.ray[0] > 0) or (hit.side == 1 and hit.ray[1] < 0):
            tex_x = texture.width - tex_x - 1
        _draw_textured_column(frame, x, span, texture, tex_x)


def _draw_square(frame: FrameBuffer, left: int, top: int, size: int, color: int) -> None:
    for y in range(top, top + size):
        for x in range(left, left + size):
            frame.put_pixel(x, y, color)


def draw_minimap(frame: FrameBuffer, maze_map: MazeMap) -> None:
    """Draw the grid as small squares and the player as a single red pixel."""
    tile = MINIMAP_TILE
    for y in range(maze_map.height):
        row = maze_map.grid[y]
        for x in range(maze_map.width):
            color = MINIMAP_WALL if row[x] == "1" else MINIMAP_FLOOR
            _draw_square(frame, x * tile, y * tile, tile, color)
    player = maze_map.player
    frame.put_pixel(int(player.pos_x * tile), int(player.pos_y * tile), MINIMAP_PLAYER)


def render_frame(
    frame: FrameBuffer, config: MazeConfig, textures: Sequence[_Texture]
) -> FrameBuffer:
    """Draw background, walls and minimap into the frame and return it."""
    draw_floor_ceiling(frame, config.env.ceiling, config.env.floor)
    render_walls(frame, config.maze_map, textures)
    draw_minimap(frame, config.maze_map)
    return frame
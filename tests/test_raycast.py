import pytest

from eternalmaze.config import Environment, MazeConfig, MazeMap, Player
from eternalmaze.raycast import (
    EAST,
    MINIMAP_FLOOR,
    MINIMAP_PLAYER,
    MINIMAP_TILE,
    MINIMAP_WALL,
    NORTH,
    SOUTH,
    WEST,
    FrameBuffer,
    cast_ray,
    draw_floor_ceiling,
    draw_minimap,
    render_frame,
    render_walls,
    texture_id,
    texture_pixel,
    wall_slice,
    wall_x,
)
from eternalmaze.xpm import XpmImage

GRID = [
    "11111",
    "10001",
    "10001",
    "10001",
    "11111",
]

COLORS = {NORTH: 0x000011, SOUTH: 0x000022, WEST: 0x000033, EAST: 0x000044}


def east_player():
    return Player(2.5, 2.5, 1.0, 0.0, 0.0, 0.66)


def west_player():
    return Player(2.5, 2.5, -1.0, 0.0, 0.0, -0.66)


def solid(color, size=4):
    return XpmImage(size, size, (color,) * (size * size))


def textures():
    return [solid(COLORS[i]) for i in (NORTH, SOUTH, WEST, EAST)]


def maze_map(player):
    return MazeMap(grid=list(GRID), width=5, height=5, player=player)


def test_framebuffer_put_get():
    frame = FrameBuffer(3, 2)
    frame.put_pixel(2, 1, 0x123456)
    assert frame.get_pixel(2, 1) == 0x123456
    assert frame.get_pixel(0, 0) == 0


def test_framebuffer_clips_out_of_range():
    frame = FrameBuffer(2, 2)
    frame.put_pixel(-1, 0, 0xFFFFFF)
    frame.put_pixel(2, 0, 0xFFFFFF)
    frame.put_pixel(0, 5, 0xFFFFFF)
    assert list(frame.pixels) == [0, 0, 0, 0]


def test_framebuffer_get_out_of_range_raises():
    frame = FrameBuffer(2, 2)
    with pytest.raises(IndexError):
        frame.get_pixel(2, 0)


def test_framebuffer_masks_negative_color():
    frame = FrameBuffer(1, 1)
    frame.put_pixel(0, 0, -1)
    assert frame.get_pixel(0, 0) == 0xFFFFFFFF


def test_framebuffer_to_bytes_little_endian():
    frame = FrameBuffer(2, 1)
    frame.put_pixel(0, 0, 0x00112233)
    data = frame.to_bytes()
    assert len(data) == 8
    assert data[:4] == b"\x33\x22\x11\x00"


def test_framebuffer_invalid_size():
    with pytest.raises(ValueError):
        FrameBuffer(0, 10)


def test_texture_pixel_clamps():
    tex = XpmImage(2, 2, (1, 2, 3, 4))
    assert texture_pixel(tex, -5, -5) == 1
    assert texture_pixel(tex, 9, 9) == 4
    assert texture_pixel(tex, 1, 0) == 2
    assert texture_pixel(tex, 0, 7) == 3


def test_cast_ray_straight_east():
    hit = cast_ray(GRID, east_player(), 0.0)
    assert (hit.map_x, hit.map_y, hit.side) == (4, 2, 0)
    assert hit.distance == pytest.approx(1.5)
    assert hit.ray == (1.0, 0.0)


def test_cast_ray_symmetry():
    east = cast_ray(GRID, east_player(), 0.0)
    west = cast_ray(GRID, west_player(), 0.0)
    assert west.map_x == 0
    assert west.distance == pytest.approx(east.distance)


@pytest.mark.parametrize("camera_x", [-1.0, -0.5, 0.3, 0.99])
def test_cast_ray_hits_wall(camera_x):
    hit = cast_ray(GRID, east_player(), camera_x)
    assert GRID[hit.map_y][hit.map_x] == "1"
    assert hit.distance > 0


def test_cast_ray_open_map_raises():
    grid = ["000", "000", "000"]
    with pytest.raises(ValueError):
        cast_ray(grid, Player(1.5, 1.5, 1.0, 0.0, 0.0, 0.66), 0.0)


def test_wall_slice_clipped_when_close():
    span = wall_slice(720, 1.0)
    assert span.height == 720
    assert span.start == 0
    assert span.end == 719


def test_wall_slice_centered():
    span = wall_slice(720, 2.0)
    assert span.height == 360
    assert span.start + span.end == 720
    assert span.end - span.start == span.height


@pytest.mark.parametrize("distance", [0.1, 0.7, 1.3, 5.0, 50.0, 1000.0])
def test_wall_slice_within_window(distance):
    span = wall_slice(720, distance)
    assert 0 <= span.start <= span.end <= 719


@pytest.mark.parametrize(
    "ray, side, expected",
    [
        ((1.0, 0.0), 0, EAST),
        ((-1.0, 0.0), 0, WEST),
        ((0.0, 1.0), 1, SOUTH),
        ((0.0, -1.0), 1, NORTH),
    ],
)
def test_texture_id(ray, side, expected):
    assert texture_id(ray, side) == expected


@pytest.mark.parametrize("camera_x", [-0.9, -0.2, 0.0, 0.4, 0.8])
def test_wall_x_in_unit_interval(camera_x):
    player = east_player()
    hit = cast_ray(GRID, player, camera_x)
    value = wall_x(player, hit.ray, hit.side, hit.distance)
    assert 0.0 <= value < 1.0


def test_draw_floor_ceiling():
    frame = FrameBuffer(4, 4)
    draw_floor_ceiling(frame, 0x0000FF, 0x00FF00)
    assert {frame.get_pixel(x, y) for x in range(4) for y in range(2)} == {0x0000FF}
    assert {frame.get_pixel(x, y) for x in range(4) for y in range(2, 4)} == {0x00FF00}


def test_draw_minimap():
    grid = ["111", "101", "111"]
    player = Player(1.5, 1.5, 1.0, 0.0, 0.0, 0.66)
    frame = FrameBuffer(40, 40)
    draw_minimap(frame, MazeMap(grid=grid, width=3, height=3, player=player))
    assert frame.get_pixel(0, 0) == MINIMAP_WALL
    assert frame.get_pixel(MINIMAP_TILE, MINIMAP_TILE) == MINIMAP_FLOOR
    red = [
        (x, y)
        for y in range(40)
        for x in range(40)
        if frame.get_pixel(x, y) == MINIMAP_PLAYER
    ]
    assert len(red) == 1
    x, y = red[0]
    assert MINIMAP_TILE <= x < 2 * MINIMAP_TILE
    assert MINIMAP_TILE <= y < 2 * MINIMAP_TILE
    assert frame.get_pixel(30, 30) == 0


def test_render_walls_centre_uses_east_texture():
    frame = FrameBuffer(8, 8)
    render_walls(frame, maze_map(east_player()), textures())
    assert frame.get_pixel(4, 4) == COLORS[EAST]


def test_render_walls_facing_west():
    frame = FrameBuffer(8, 8)
    render_walls(frame, maze_map(west_player()), textures())
    assert frame.get_pixel(4, 4) == COLORS[WEST]


def test_render_frame_layers():
    env = Environment(
        north="n.xpm", south="s.xpm", west="w.xpm", east="e.xpm",
        floor=0x00AA00, ceiling=0x0000AA,
    )
    config = MazeConfig(env=env, maze_map=maze_map(east_player()))
    frame = FrameBuffer(200, 100)
    result = render_frame(frame, config, textures())
    assert result is frame
    assert frame.get_pixel(0, 0) == MINIMAP_WALL
    assert frame.get_pixel(199, 0) == 0x0000AA
    assert frame.get_pixel(199, 99) == 0x00AA00
    assert frame.get_pixel(100, 50) == COLORS[EAST]
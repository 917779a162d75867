import math

import pygame
import pytest

from eternalmaze.app import Game, action_for_key, load_textures, main
from eternalmaze.config import USAGE, Environment, parse_config
from eternalmaze.movement import Action
from eternalmaze.xpm import XpmError, XpmImage

SCENE = "\n".join(
    [
        "NO ./n.xpm",
        "SO ./s.xpm",
        "WE ./w.xpm",
        "EA ./e.xpm",
        "F 10,20,30",
        "C 40,50,60",
        "",
        "111111",
        "100001",
        "10N001",
        "100001",
        "111111",
    ]
)

WALL = 0x123456


def _textures():
    return [XpmImage(2, 2, (WALL,) * 4) for _ in range(4)]


def _game(width=64, height=48):
    return Game(parse_config(SCENE), _textures(), width=width, height=height)


@pytest.mark.parametrize(
    "key, action",
    [
        (pygame.K_ESCAPE, Action.QUIT),
        (pygame.K_w, Action.FORWARD),
        (pygame.K_s, Action.BACKWARD),
        (pygame.K_a, Action.LEFT),
        (pygame.K_d, Action.RIGHT),
        (pygame.K_RIGHT, Action.ROTATE_LEFT),
        (pygame.K_LEFT, Action.ROTATE_RIGHT),
    ],
)
def test_action_for_key(key, action):
    assert action_for_key(key) is action


def test_unbound_key_has_no_action():
    assert action_for_key(pygame.K_q) is None


def test_forward_key_moves_player():
    game = _game()
    assert game.handle_key(pygame.K_w) is Action.FORWARD
    player = game.config.maze_map.player
    assert player.pos_x == pytest.approx(2.5)
    assert player.pos_y == pytest.approx(2.3)


def test_unbound_key_leaves_player():
    game = _game()
    assert game.handle_key(pygame.K_q) is None
    player = game.config.maze_map.player
    assert (player.pos_x, player.pos_y) == (2.5, 2.5)
    assert game.running


def test_escape_stops_game():
    game = _game()
    game.handle_key(pygame.K_ESCAPE)
    assert game.running is False


def test_rotations_cancel_out():
    game = _game()
    game.handle_key(pygame.K_RIGHT)
    player = game.config.maze_map.player
    assert math.hypot(player.dir_x, player.dir_y) == pytest.approx(1.0)
    game.handle_key(pygame.K_LEFT)
    assert player.dir_x == pytest.approx(0.0)
    assert player.dir_y == pytest.approx(-1.0)


def test_render_draws_background_walls_and_minimap():
    game = _game()
    frame = game.render()
    assert frame.get_pixel(63, 0) == (40 << 16) | (50 << 8) | 60
    assert frame.get_pixel(63, 47) == (10 << 16) | (20 << 8) | 30
    assert frame.get_pixel(63, 24) == WALL
    assert frame.get_pixel(20, 20) == 0xFF0000


def test_game_needs_four_textures():
    with pytest.raises(ValueError):
        Game(parse_config(SCENE), _textures()[:3])


def test_load_textures_reads_files(tmp_path):
    paths = []
    for name, color in zip("nswe", ("#FF0000", "#00FF00", "#0000FF", "#FFFFFF")):
        path = tmp_path / f"{name}.xpm"
        path.write_text(
            f'static char *x[] = {{\n"1 1 1 1",\n"a c {color}",\n"a"\n}};\n'
        )
        paths.append(str(path))
    env = Environment(north=paths[0], south=paths[1], west=paths[2], east=paths[3])
    textures = load_textures(env)
    assert [t.pixel(0, 0) for t in textures] == [0xFF0000, 0x00FF00, 0x0000FF, 0xFFFFFF]


def test_load_textures_missing_file(tmp_path):
    missing = str(tmp_path / "missing.xpm")
    env = Environment(north=missing, south=missing, west=missing, east=missing)
    with pytest.raises(XpmError, match="Failed to load XPM texture"):
        load_textures(env)


def test_load_textures_unset_path():
    with pytest.raises(XpmError):
        load_textures(Environment())


@pytest.mark.parametrize("argv", [[], ["map.txt"], ["a.cub", "b.cub"]])
def test_main_rejects_bad_arguments(argv, capsys):
    assert main(argv) == 1
    assert capsys.readouterr().err == USAGE


def test_main_reports_invalid_scene(tmp_path, capsys):
    scene = tmp_path / "bad.cub"
    scene.write_text("XX nothing\n")
    assert main([str(scene)]) == 1
    assert capsys.readouterr().err == "ETERNAL MAZE: Invalid line in .cub file\n"


def test_main_reports_missing_textures(tmp_path, capsys):
    scene = tmp_path / "scene.cub"
    scene.write_text(SCENE.replace("./", str(tmp_path) + "/"))
    assert main([str(scene)]) == 1
    assert capsys.readouterr().err == "ETERNAL MAZE: Error\nFailed to load XPM texture\n"
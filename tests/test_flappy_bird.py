import pygame
import pytest

from config import Settings
from flappy_bird import FlappyBirdGame
from game_state import GameState


@pytest.fixture()
def game(monkeypatch):
    for name in ('SUPABASE_ANON_KEY', 'SUPABASE_PUBLISHABLE_KEY', 'SUPABASE_KEY'):
        monkeypatch.delenv(name, raising=False)
    return FlappyBirdGame(Settings())


def finger(x, y):
    return pygame.event.Event(pygame.FINGERDOWN, x=x, y=y, dx=0.0, dy=0.0, touch_id=0, finger_id=0, pressure=1.0)


def click(pos, touch=False):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=pos, touch=touch)


def key(k):
    return pygame.event.Event(pygame.KEYDOWN, key=k, mod=0, unicode='', scancode=0)


def test_startup_sends_panel_viewport(game):
    rect = game.controls.panel_rect
    assert list(game.channel.drain()) == [
        {'type': 'init', 'width': rect.width, 'height': rect.height, 'pixelRatio': 1.0},
    ]
    assert game.host.storage is None


def test_finger_starts_run_and_touch_mouse_echo_is_ignored(game):
    game.handle_event(finger(0.5, 0.5))
    assert game.session.state is GameState.RUNNING
    assert game.session.actor.velocity == game.session.flap_strength

    game.driver.start()
    game._next_frame(1000)
    game._next_frame(1016)
    velocity = game.session.actor.velocity
    assert velocity > game.session.flap_strength

    game.handle_event(click((180, 320), touch=True))
    assert game.session.actor.velocity == velocity

    game.handle_event(click((180, 320)))
    assert game.session.actor.velocity == game.session.flap_strength


def test_frames_move_the_session_forward(game):
    game.handle_event(key(pygame.K_SPACE))
    y = game.session.actor.y
    game.driver.start()
    for t in (0, 16, 32, 48):
        game._next_frame(t)
    assert game.session.actor.y < y
    assert game.driver.frames == 4
    assert game._next_frame is not None


def test_request_frame_keeps_only_latest_callback(game):
    first, second = (lambda ts: None), (lambda ts: None)
    game.request_frame(first)
    game.request_frame(second)
    assert game._next_frame is second


def test_up_key_flaps_while_running(game):
    game.handle_event(key(pygame.K_UP))
    assert game.session.state is GameState.RUNNING
    game.session.actor.velocity = 100.0
    game.handle_event(key(pygame.K_UP))
    assert game.session.actor.velocity == game.session.flap_strength


@pytest.mark.parametrize('event', [pygame.event.Event(pygame.QUIT), key(pygame.K_ESCAPE)])
def test_quit_and_escape_stop_the_game(game, event):
    game.handle_event(event)
    assert not game.running


def test_click_on_ranking_button_opens_panel(game):
    list(game.channel.drain())
    game.handle_event(click(game.controls.ranking_button.center))
    assert game.session.ranking_visible
    assert game.session.state is GameState.READY
    assert list(game.channel.drain()) == [{'type': 'fetch', 'score': 0}]


def test_resize_rescales_input_and_resends_viewport(game):
    list(game.channel.drain())
    game.handle_event(pygame.event.Event(pygame.VIDEORESIZE, w=720, h=1280, size=(720, 1280)))

    assert game.scale == 2.0
    rect = game.controls.panel_rect
    assert list(game.channel.drain()) == [
        {'type': 'init', 'width': rect.width, 'height': rect.height, 'pixelRatio': 2.0},
    ]
    assert game.to_playfield((360, 640)) == (180, 320)

    cx, cy = game.controls.ranking_button.center
    game.handle_event(click((cx * 2, cy * 2)))
    assert game.session.ranking_visible
    game.render()


def test_run_returns_after_quit(game):
    pygame.event.clear()
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    game.run(quit_on_exit=False)
    assert not game.running
    assert game.driver.frames == 1

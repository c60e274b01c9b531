import os
import random
import sys

import pytest

# Run pygame without a real display or audio device
os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

# Ensure the project root (holding the game modules) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pygame  # noqa: E402

from game_state import Session  # noqa: E402


@pytest.fixture(scope='session', autouse=True)
def pygame_headless():
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def hooks():
    calls = {'game_over': [], 'ranking': []}
    return calls


@pytest.fixture()
def session(rng, hooks):
    return Session(
        360,
        640,
        difficulty_index=1,
        rng=rng,
        on_game_over=hooks['game_over'].append,
        on_ranking_opened=hooks['ranking'].append,
    )


@pytest.fixture()
def inline_spawn():
    """Run background work inline so tests stay deterministic."""
    def _spawn(worker):
        worker()
    return _spawn

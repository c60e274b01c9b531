import pytest

from config import Settings, load_settings

ENV_NAMES = (
    'FLAPPY_WIDTH', 'FLAPPY_HEIGHT', 'FLAPPY_PIXEL_RATIO', 'FLAPPY_FPS', 'FLAPPY_DIFFICULTY',
    'FLAPPY_MAX_FRAME_DT', 'FLAPPY_PLAYER_ID', 'FLAPPY_NICKNAME', 'FLAPPY_AVATAR_URL', 'FLAPPY_LOG_LEVEL',
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    assert load_settings() == Settings()
    assert Settings().max_frame_dt is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv('FLAPPY_WIDTH', '480')
    monkeypatch.setenv('FLAPPY_PIXEL_RATIO', '2')
    monkeypatch.setenv('FLAPPY_MAX_FRAME_DT', '0.05')
    monkeypatch.setenv('FLAPPY_PLAYER_ID', 'kim')
    settings = load_settings()
    assert settings.width == 480
    assert settings.pixel_ratio == 2.0
    assert settings.max_frame_dt == 0.05
    assert settings.player_id == 'kim'
    assert settings.nickname == 'kim'


def test_bad_numbers_fall_back(monkeypatch):
    monkeypatch.setenv('FLAPPY_HEIGHT', 'tall')
    monkeypatch.setenv('FLAPPY_MAX_FRAME_DT', 'soon')
    settings = load_settings()
    assert settings.height == 640
    assert settings.max_frame_dt is None

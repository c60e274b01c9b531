import logging
import random

from obstacles import OBSTACLE_WIDTH, Obstacle, ObstacleStream


class RecordingRandom(random.Random):
    def __init__(self, pick):
        super().__init__(0)
        self.pick = pick
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        return a if self.pick == 'low' else b


def test_spawn_enters_fully_off_screen():
    stream = ObstacleStream(360, 640, rng=random.Random(3))
    obstacle = stream.spawn(160)
    assert obstacle.x == 360 + OBSTACLE_WIDTH
    assert obstacle.passed is False
    assert list(stream) == [obstacle]


def test_spawn_gap_top_stays_in_range(rng):
    stream = ObstacleStream(360, 640, rng=rng)
    tops = {stream.spawn(160).gap_top for _ in range(2000)}
    assert min(tops) >= 80
    assert max(tops) <= 440


def test_spawn_range_is_inclusive():
    low = RecordingRandom('low')
    high = RecordingRandom('high')
    assert ObstacleStream(360, 640, rng=low).spawn(160).gap_top == 80
    assert ObstacleStream(360, 640, rng=high).spawn(160).gap_top == 440
    assert low.calls == [(80, 440)]


def test_spawn_pins_gap_when_it_does_not_fit(caplog):
    stream = ObstacleStream(360, 200, rng=RecordingRandom('high'))
    with caplog.at_level(logging.WARNING, logger='flappy.obstacles'):
        obstacle = stream.spawn(160)
    assert obstacle.gap_top == 80
    assert 'does not fit' in caplog.text


def test_advance_moves_every_obstacle_left():
    stream = ObstacleStream(360, 640)
    stream.items = [Obstacle(x=100.0, gap_top=200), Obstacle(x=300.0, gap_top=120)]
    stream.advance(0.5, 180)
    assert [o.x for o in stream] == [10.0, 210.0]


def test_retire_drops_only_far_left_and_keeps_order():
    stream = ObstacleStream(360, 640)
    gone = Obstacle(x=-70.0, gap_top=100)        # trailing -16
    edge = Obstacle(x=-64.0, gap_top=110)        # trailing exactly -10
    a = Obstacle(x=20.0, gap_top=120)
    b = Obstacle(x=200.0, gap_top=130)
    stream.items = [gone, a, edge, b]
    assert stream.retire() == 1
    assert stream.items == [a, edge, b]


def test_score_crossings_counts_each_obstacle_once():
    stream = ObstacleStream(360, 640)
    first = Obstacle(x=20.0, gap_top=200)   # trailing 74
    second = Obstacle(x=30.0, gap_top=200)  # trailing 84
    ahead = Obstacle(x=60.0, gap_top=200)   # trailing 114
    stream.items = [first, second, ahead]

    assert stream.score_crossings(90) == 2
    assert first.passed and second.passed and not ahead.passed
    assert stream.score_crossings(90) == 0


def test_score_crossing_needs_trailing_edge_strictly_left():
    stream = ObstacleStream(360, 640)
    stream.items = [Obstacle(x=36.0, gap_top=200)]  # trailing exactly 90
    assert stream.score_crossings(90) == 0

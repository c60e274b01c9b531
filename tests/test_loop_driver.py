from loop_driver import LoopDriver


class FakeHost:
    def __init__(self):
        self.pending = []
        self.deltas = []
        self.renders = 0

    def request_frame(self, callback):
        self.pending.append(callback)

    def update(self, dt):
        self.deltas.append(dt)

    def render(self):
        self.renders += 1

    def tick(self, timestamp):
        callback = self.pending.pop(0)
        callback(timestamp)


def make_driver(host, **kwargs):
    return LoopDriver(host.update, host.render, host.request_frame, **kwargs)


def test_start_only_schedules():
    host = FakeHost()
    make_driver(host).start()
    assert len(host.pending) == 1
    assert host.deltas == []


def test_first_frame_has_zero_dt_then_seconds_between_timestamps():
    host = FakeHost()
    make_driver(host).start()
    for ts in (1000, 1016, 1050, 2050):
        host.tick(ts)
    assert host.deltas == [0.0, 0.016, 0.034, 1.0]
    assert host.renders == 4


def test_every_frame_reschedules_itself():
    host = FakeHost()
    driver = make_driver(host)
    driver.start()
    for ts in range(0, 1000, 16):
        host.tick(ts)
        assert len(host.pending) == 1
    assert driver.frames == len(range(0, 1000, 16))


def test_large_gaps_are_not_clamped_by_default():
    host = FakeHost()
    make_driver(host).start()
    host.tick(0)
    host.tick(30000)
    assert host.deltas[-1] == 30.0


def test_optional_clamp():
    host = FakeHost()
    make_driver(host, max_dt=0.05).start()
    host.tick(0)
    host.tick(30000)
    host.tick(30010)
    assert host.deltas == [0.0, 0.05, 0.01]


def test_update_runs_before_render():
    order = []
    pending = []
    driver = LoopDriver(lambda dt: order.append('update'), lambda: order.append('render'), pending.append)
    driver.frame(5)
    assert order == ['update', 'render']
    assert pending == [driver.frame]

import unittest

from pomodoro_countdown.runtime.scheduler import TickScheduler


class _FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TickSchedulerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = _FakeClock()
        self.scheduler = TickScheduler(clock=self.clock)

    def test_nothing_due_before_start(self) -> None:
        self.clock.now = 500.0
        self.assertEqual(0, self.scheduler.pop_due())
        self.assertEqual(1.0, self.scheduler.seconds_until_next())

    def test_first_tick_is_due_one_interval_after_start(self) -> None:
        self.scheduler.start()

        self.clock.now = 100.4
        self.assertEqual(0, self.scheduler.pop_due())
        self.assertAlmostEqual(0.6, self.scheduler.seconds_until_next())

        self.clock.now = 101.0
        self.assertEqual(1, self.scheduler.pop_due())
        self.assertAlmostEqual(1.0, self.scheduler.seconds_until_next())

    def test_late_wakeup_fires_every_missed_tick(self) -> None:
        self.scheduler.start()
        self.clock.now = 103.5

        self.assertEqual(3, self.scheduler.pop_due())
        self.assertEqual(0, self.scheduler.pop_due())
        self.assertAlmostEqual(104.0, self.scheduler.next_deadline or 0.0)

    def test_deadlines_do_not_drift_with_jittery_wakeups(self) -> None:
        self.scheduler.start()
        fired = 0
        for now in (101.05, 102.2, 102.95, 103.01, 105.0):
            self.clock.now = now
            fired += self.scheduler.pop_due()
        self.assertEqual(5, fired)
        self.assertAlmostEqual(106.0, self.scheduler.next_deadline or 0.0)

    def test_large_backlog_is_capped(self) -> None:
        scheduler = TickScheduler(clock=self.clock, max_catch_up=5)
        scheduler.start()
        self.clock.now = 200.0

        with self.assertLogs("runtime.scheduler", level="WARNING"):
            self.assertEqual(5, scheduler.pop_due())
        self.assertAlmostEqual(201.0, scheduler.next_deadline or 0.0)

    def test_seconds_until_next_never_negative(self) -> None:
        self.scheduler.start()
        self.clock.now = 150.0
        self.assertEqual(0.0, self.scheduler.seconds_until_next())

    def test_custom_interval(self) -> None:
        scheduler = TickScheduler(interval_seconds=0.5, clock=self.clock)
        scheduler.start(now=10.0)
        self.assertEqual(2, scheduler.pop_due(now=11.0))

    def test_invalid_arguments_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TickScheduler(interval_seconds=0)
        with self.assertRaises(ValueError):
            TickScheduler(max_catch_up=0)


if __name__ == "__main__":
    unittest.main()

import asyncio
import unittest
from unittest.mock import AsyncMock, patch

from domain_finder.config import Config, ConfigurationError
from domain_finder.models import Failed, NotFound, Outcome, Resolved
from domain_finder.orchestrator import BatchRunner

from fakes import FakeEngine, results_page


def make_runner(engine, concurrency=2, delay_ms=0):
    return BatchRunner(concurrency, delay_ms, engine_factory=lambda: engine)


class TestBatchRunner(unittest.IsolatedAsyncioTestCase):
    """Tests for the throttled batch runner."""

    async def test_end_to_end_scenario(self):
        engine = FakeEngine({"Acme Inc": results_page("https://acme.com/about")})
        outcomes = await make_runner(engine).run(["Acme Inc", "Beta LLC"])
        self.assertEqual(outcomes, [
            Outcome("Acme Inc", Resolved("acme.com")),
            Outcome("Beta LLC", NotFound()),
        ])
        self.assertTrue(engine.entered)
        self.assertTrue(engine.exited)

    async def test_order_preserved(self):
        """Outcomes follow input order whatever order lookups finish in."""
        names = [f"Company {i}" for i in range(7)]
        pages = {n: results_page(f"https://company{i}.com") for i, n in enumerate(names)}
        delays = {n: 0.001 * (len(names) - i) for i, n in enumerate(names)}
        engine = FakeEngine(pages, delays=delays)
        for concurrency in (1, 3, 7, 10):
            outcomes = await make_runner(engine, concurrency).run(names)
            self.assertEqual([o.name for o in outcomes], names)
            self.assertEqual(
                [o.domain for o in outcomes],
                [f"company{i}.com" for i in range(len(names))],
            )

    async def test_empty_input(self):
        engine = FakeEngine()
        self.assertEqual(await make_runner(engine).run([]), [])
        self.assertEqual(engine.sessions, [])
        self.assertTrue(engine.exited)

    async def test_failure_isolated(self):
        """One failing lookup does not affect the rest of its batch."""
        pages = {
            "a": results_page("https://a.com"),
            "b": RuntimeError("net::ERR_CONNECTION_RESET"),
            "c": results_page("https://c.com"),
        }
        engine = FakeEngine(pages)
        outcomes = await make_runner(engine, concurrency=3).run(["a", "b", "c"])
        self.assertEqual(len(outcomes), 3)
        self.assertEqual([o.failed for o in outcomes], [False, True, False])
        self.assertEqual(outcomes[0].resolution, Resolved("a.com"))
        self.assertEqual(outcomes[2].resolution, Resolved("c.com"))

    async def test_sessions_closed_per_batch(self):
        pages = {"b": RuntimeError("boom")}
        engine = FakeEngine(pages)
        await make_runner(engine, concurrency=2).run(["a", "b", "c"])
        self.assertEqual(len(engine.sessions), 3)
        self.assertTrue(all(s.closed for s in engine.sessions))
        self.assertEqual([len(s.visited) for s in engine.sessions], [1, 1, 1])

    async def test_session_open_failure_isolated(self):
        engine = FakeEngine({"a": results_page("https://a.com")}, fail_sessions={1})
        outcomes = await make_runner(engine, concurrency=2).run(["a", "b"])
        self.assertEqual(outcomes[0], Outcome("a", Resolved("a.com")))
        self.assertEqual(outcomes[1], Outcome("b", Failed()))
        self.assertTrue(engine.sessions[0].closed)

    async def test_session_close_failure_ignored(self):
        engine = FakeEngine({"a": results_page("https://a.com")})
        original = engine.new_session

        async def new_session():
            session = await original()

            async def close():
                raise RuntimeError("Target closed")

            session.close = close
            return session

        engine.new_session = new_session
        with self.assertLogs("domain_finder.orchestrator", level="WARNING"):
            outcomes = await make_runner(engine).run(["a"])
        self.assertEqual(outcomes, [Outcome("a", Resolved("a.com"))])

    async def test_throttle_between_batches_only(self):
        engine = FakeEngine()
        runner = make_runner(engine, concurrency=1, delay_ms=250)
        with patch("domain_finder.orchestrator.asyncio.sleep", new_callable=AsyncMock) as sleep:
            outcomes = await runner.run(["a", "b", "c"])
        self.assertEqual(len(outcomes), 3)
        self.assertEqual(sleep.await_count, 2)
        for call in sleep.await_args_list:
            self.assertEqual(call.args, (0.25,))

    async def test_no_throttle_within_single_batch(self):
        engine = FakeEngine()
        runner = make_runner(engine, concurrency=5, delay_ms=1000)
        with patch("domain_finder.orchestrator.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await runner.run(["a", "b", "c"])
        sleep.assert_not_awaited()

    async def test_engine_launch_failure_propagates(self):
        engine = FakeEngine(fail_on_enter=RuntimeError("Executable doesn't exist"))
        with self.assertRaises(RuntimeError):
            await make_runner(engine).run(["a"])
        self.assertEqual(engine.sessions, [])

    async def test_engine_close_failure_propagates(self):
        engine = FakeEngine(fail_on_exit=RuntimeError("Browser has been closed"))
        with self.assertRaises(RuntimeError):
            await make_runner(engine).run(["a"])

    async def test_stats(self):
        pages = {"a": results_page("https://a.com"), "c": asyncio.TimeoutError()}
        runner = make_runner(FakeEngine(pages), concurrency=2)
        await runner.run(["a", "b", "c"])
        self.assertEqual(runner.stats["names"], 3)
        self.assertEqual(runner.stats["batches"], 2)
        self.assertEqual(runner.stats["resolved"], 1)
        self.assertEqual(runner.stats["not_found"], 1)
        self.assertEqual(runner.stats["failed"], 1)


class TestBatchRunnerConfig(unittest.TestCase):
    """Tests for runner construction."""

    def test_invalid_settings(self):
        with self.assertRaises(ConfigurationError):
            BatchRunner(0, 0)
        with self.assertRaises(ConfigurationError):
            BatchRunner(1, -5)

    @patch.dict("os.environ", {"CONCURRENCY": "3", "DELAY": "500", "HEADLESS": "false"}, clear=True)
    def test_from_config(self):
        runner = BatchRunner.from_config(Config())
        self.assertEqual(runner.concurrency, 3)
        self.assertEqual(runner.delay_ms, 500)
        engine = runner.engine_factory()
        self.assertFalse(engine.headless)
        self.assertEqual(engine.nav_timeout_ms, 30_000)


if __name__ == "__main__":
    unittest.main()

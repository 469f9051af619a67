import asyncio

from panel_interview.interview.prompts import PanelPrompts
from panel_interview.interview.testing import ScriptedRandom
from panel_interview.interview.turn_clock import InterruptionPolicy, TurnClock

LONG_ENOUGH = "I started by mapping out"  # 24 chars


class TestInterruptionPolicy:

    def test_fires_above_threshold_with_enough_speech(self):
        policy = InterruptionPolicy(ScriptedRandom([0.81]), threshold=0.8, min_chars=20)
        assert policy.should_interrupt(LONG_ENOUGH)

    def test_threshold_is_strict(self):
        policy = InterruptionPolicy(ScriptedRandom([0.8]), threshold=0.8, min_chars=20)
        assert not policy.should_interrupt(LONG_ENOUGH)

    def test_near_silence_guard(self):
        policy = InterruptionPolicy(ScriptedRandom([0.99, 0.99]), threshold=0.8, min_chars=20)
        assert not policy.should_interrupt("x" * 20)
        assert not policy.should_interrupt("   um     ")

    def test_pick_message_from_catalog(self):
        catalog = PanelPrompts.fallback_messages()["interruptions"]
        policy = InterruptionPolicy(ScriptedRandom(choice_index=2))
        assert policy.pick_message() == catalog[2]

    def test_custom_catalog(self):
        policy = InterruptionPolicy(ScriptedRandom(), catalog=["Really?"])
        assert policy.pick_message() == "Really?"


class TestTurnClock:

    def test_tick_calls_handler(self):
        calls = []

        async def on_tick():
            calls.append(1)

        clock = TurnClock(on_tick, interval=60)
        asyncio.run(clock.tick())
        assert calls == [1]
        assert clock.ticks == 1

    def test_runs_until_stopped(self):
        calls = []

        async def on_tick():
            calls.append(1)

        async def scenario():
            clock = TurnClock(on_tick, interval=0.01)
            clock.start()
            assert clock.is_running
            await asyncio.sleep(0.1)
            clock.stop()
            assert not clock.is_running
            stopped_at = len(calls)
            await asyncio.sleep(0.05)
            return stopped_at

        stopped_at = asyncio.run(scenario())
        assert stopped_at >= 1
        assert len(calls) == stopped_at

    def test_failing_tick_does_not_stop_clock(self):
        async def on_tick():
            raise RuntimeError("boom")

        async def scenario():
            clock = TurnClock(on_tick, interval=0.01)
            clock.start()
            await asyncio.sleep(0.1)
            running = clock.is_running
            clock.stop()
            return clock.ticks, running

        ticks, running = asyncio.run(scenario())
        assert running
        assert ticks >= 2

import asyncio

import pytest

from fakes import FakeHandle, FakeMicrophone, FakePermission
from speakwell.core.errors import CaptureIncomplete, PermissionDenied, RecordingFailed
from speakwell.core.models import CapturedAudio
from speakwell.core.recorder import RecorderSession
from speakwell.core.state_machine import RecorderState, StopOutcome


def _recorder(handles=None, permission=None, microphone=None, **kwargs):
    kwargs.setdefault("tick_seconds", 3600)
    microphone = microphone or FakeMicrophone(handles)
    return RecorderSession(microphone, permission or FakePermission(), **kwargs), microphone


def test_start_acquires_microphone():
    async def scenario():
        recorder, microphone = _recorder()
        await recorder.start()

        assert recorder.state is RecorderState.ACTIVE
        assert recorder.is_active
        assert recorder.elapsed_seconds == 0
        assert len(microphone.opened) == 1
        await recorder.abort()

    asyncio.run(scenario())


def test_start_requests_permission_when_not_granted():
    async def scenario():
        permission = FakePermission(granted=False, grant_on_request=True)
        recorder, _ = _recorder(permission=permission)
        await recorder.start()

        assert permission.requests == 1
        assert recorder.is_active
        await recorder.abort()

    asyncio.run(scenario())


def test_start_denied_leaves_recorder_idle():
    async def scenario():
        permission = FakePermission(granted=False, grant_on_request=False)
        recorder, microphone = _recorder(permission=permission)

        with pytest.raises(PermissionDenied):
            await recorder.start()

        assert recorder.state is RecorderState.IDLE
        assert not recorder.is_active
        assert microphone.opened == []

    asyncio.run(scenario())


def test_start_failure_when_microphone_cannot_open():
    async def scenario():
        recorder, _ = _recorder(microphone=FakeMicrophone(error=OSError("device busy")))

        with pytest.raises(RecordingFailed) as excinfo:
            await recorder.start()

        assert isinstance(excinfo.value.__cause__, OSError)
        assert recorder.state is RecorderState.IDLE

    asyncio.run(scenario())


def test_start_failure_when_permission_check_errors():
    async def scenario():
        recorder, _ = _recorder(permission=FakePermission(error=RuntimeError("boom")))

        with pytest.raises(RecordingFailed):
            await recorder.start()

        assert recorder.state is RecorderState.IDLE

    asyncio.run(scenario())


def test_stop_returns_captured_audio():
    async def scenario():
        handle = FakeHandle(location="/tmp/a.wav")
        recorder, _ = _recorder([handle])
        await recorder.start()
        recorder.elapsed_seconds = 42

        captured = await recorder.stop()

        assert captured == CapturedAudio(location="/tmp/a.wav", duration_seconds=42)
        assert recorder.state is RecorderState.STOPPED
        assert recorder.last_outcome is StopOutcome.SUCCESS
        assert handle.stop_calls == 1

    asyncio.run(scenario())


def test_stop_when_idle_is_noop():
    async def scenario():
        recorder, _ = _recorder()
        assert await recorder.stop() is None
        assert recorder.state is RecorderState.IDLE

    asyncio.run(scenario())


def test_stop_without_location_is_incomplete():
    async def scenario():
        recorder, _ = _recorder([FakeHandle(location=None)])
        await recorder.start()

        with pytest.raises(CaptureIncomplete):
            await recorder.stop()

        assert recorder.last_outcome is StopOutcome.INCOMPLETE
        assert recorder.state is RecorderState.STOPPED

    asyncio.run(scenario())


def test_double_stop_tears_down_once():
    async def scenario():
        handle = FakeHandle()
        recorder, _ = _recorder([handle])
        await recorder.start()
        recorder.elapsed_seconds = 31

        first, second = await asyncio.gather(recorder.stop(), recorder.stop())

        results = [r for r in (first, second) if r is not None]
        assert len(results) == 1
        assert handle.stop_calls == 1

    asyncio.run(scenario())


def test_stop_clears_active_flag_before_teardown_finishes():
    async def scenario():
        handle = FakeHandle()
        handle.release = asyncio.Event()
        recorder, _ = _recorder([handle])
        await recorder.start()

        pending = asyncio.ensure_future(recorder.stop())
        await asyncio.sleep(0)

        assert not recorder.is_active
        assert recorder.state is RecorderState.STOPPING
        assert await recorder.stop() is None

        handle.release.set()
        captured = await pending
        assert captured is not None
        assert handle.stop_calls == 1

    asyncio.run(scenario())


def test_stop_error_recovers_when_file_is_long_enough():
    async def scenario():
        handle = FakeHandle(location="/tmp/b.wav", stop_error=RuntimeError("driver"))
        recorder, _ = _recorder([handle])
        await recorder.start()
        recorder.elapsed_seconds = 35

        captured = await recorder.stop()

        assert captured.location == "/tmp/b.wav"
        assert captured.duration_seconds == 35
        assert captured.recovered is True
        assert recorder.last_outcome is StopOutcome.RECOVERED

    asyncio.run(scenario())


def test_stop_error_fails_when_too_short_to_recover():
    async def scenario():
        error = RuntimeError("driver")
        recorder, _ = _recorder([FakeHandle(stop_error=error)])
        await recorder.start()
        recorder.elapsed_seconds = 10

        with pytest.raises(RecordingFailed) as excinfo:
            await recorder.stop()

        assert excinfo.value.__cause__ is error
        assert recorder.last_outcome is StopOutcome.FAILED
        assert not recorder.is_active

    asyncio.run(scenario())


def test_stop_error_fails_when_location_unreadable():
    async def scenario():
        handle = FakeHandle(stop_error=RuntimeError("driver"), location_error=ValueError("gone"))
        recorder, _ = _recorder([handle])
        await recorder.start()
        recorder.elapsed_seconds = 45

        with pytest.raises(RecordingFailed):
            await recorder.stop()

    asyncio.run(scenario())


def test_start_while_active_discards_previous_session():
    async def scenario():
        first, second = FakeHandle(location="/tmp/1.wav"), FakeHandle(location="/tmp/2.wav")
        recorder, microphone = _recorder([first, second])
        ceiling_calls = []

        async def on_ceiling():
            ceiling_calls.append(True)

        recorder.on_ceiling = on_ceiling
        await recorder.start()
        recorder.elapsed_seconds = 40

        await recorder.start()

        assert first.stop_calls == 1
        assert microphone.opened == [first, second]
        assert recorder.is_active
        assert recorder.elapsed_seconds == 0
        assert ceiling_calls == []

        captured = await recorder.stop()
        assert captured.location == "/tmp/2.wav"

    asyncio.run(scenario())


def test_abort_discards_without_raising():
    async def scenario():
        handle = FakeHandle(stop_error=RuntimeError("driver"))
        recorder, _ = _recorder([handle])
        await recorder.start()
        recorder.elapsed_seconds = 12

        await recorder.abort()

        assert handle.stop_calls == 1
        assert recorder.state is RecorderState.IDLE
        assert recorder.elapsed_seconds == 0
        assert recorder.last_outcome is StopOutcome.ABORTED
        assert await recorder.stop() is None

    asyncio.run(scenario())


def test_timer_ticks_increment_elapsed():
    async def scenario():
        ticks = []
        recorder, _ = _recorder(tick_seconds=0, on_tick=ticks.append)
        await recorder.start()

        while recorder.elapsed_seconds < 3:
            await asyncio.sleep(0)
        await recorder.abort()

        assert ticks[:3] == [1, 2, 3]

    asyncio.run(scenario())


def test_auto_stop_at_ceiling():
    async def scenario():
        ticks = []
        results = []
        done = asyncio.Event()
        recorder, _ = _recorder(tick_seconds=0, on_tick=ticks.append)

        async def on_ceiling():
            results.append(await recorder.stop())
            done.set()

        recorder.on_ceiling = on_ceiling
        await recorder.start()
        await asyncio.wait_for(done.wait(), timeout=5)

        assert results[0].duration_seconds == 60
        assert ticks[-1] == 60
        assert len(ticks) == 60
        assert not recorder.is_active
        assert recorder.state is RecorderState.STOPPED

    asyncio.run(scenario())


def test_auto_stop_without_handler_stops_itself():
    async def scenario():
        handle = FakeHandle()
        recorder, _ = _recorder([handle], tick_seconds=0, max_duration_seconds=5)
        await recorder.start()

        async def wait_stopped():
            while recorder.state is not RecorderState.STOPPED:
                await asyncio.sleep(0)

        await asyncio.wait_for(wait_stopped(), timeout=5)

        assert recorder.elapsed_seconds == 5
        assert recorder.last_outcome is StopOutcome.SUCCESS
        assert handle.stop_calls == 1

    asyncio.run(scenario())


def test_start_while_stop_is_finishing():
    async def scenario():
        first, second = FakeHandle(location="/tmp/1.wav"), FakeHandle(location="/tmp/2.wav")
        recorder, microphone = _recorder([first, second])
        await recorder.start()
        recorder.elapsed_seconds = 40

        pending = asyncio.ensure_future(recorder.stop())
        # Hardware released, stop() not yet resumed
        for _ in range(50):
            if recorder._teardown is None and recorder.state is RecorderState.STOPPING:
                break
            await asyncio.sleep(0)
        assert recorder.state is RecorderState.STOPPING

        await recorder.start()

        assert recorder.is_active
        assert recorder.state is RecorderState.ACTIVE
        assert microphone.opened == [first, second]

        captured = await pending
        assert captured.location == "/tmp/1.wav"
        assert recorder.state is RecorderState.ACTIVE
        await recorder.abort()

    asyncio.run(scenario())

import asyncio

import pytest

from reqbridge.domain.errors import ConfigurationError, PeerDisconnected
from reqbridge.infrastructure.streaming.event_stream import (
    CancellationToken,
    StreamSession,
    StreamState,
    encode_frame,
)
from reqbridge.infrastructure.web.response_builder import ResponseContext
from tests.unit._fakes_http import FakeWriter, disconnect_after


def counting_producer():
    state = {"k": 0}
    def produce():
        state["k"] += 1
        return {"n": state["k"]}
    return produce


@pytest.mark.parametrize("cadence", [0, 301, -5, 1.5, True])
def test_out_of_range_cadence_is_rejected(cadence):
    with pytest.raises(ConfigurationError):
        StreamSession(counting_producer(), cadence=cadence)


@pytest.mark.parametrize("cadence", [1, 300])
def test_cadence_bounds_are_inclusive(cadence):
    assert StreamSession(counting_producer(), cadence=cadence).cadence == cadence


def test_three_ticks_then_disconnect_emits_three_frames_in_order():
    slept = []
    writer = FakeWriter()
    session = StreamSession(counting_producer(), cadence=2, sleep=slept.append)
    written = session.run(writer, disconnect_after(3))
    assert written == 3
    assert writer.chunks == ['data: {"n":1}\n\n', 'data: {"n":2}\n\n', 'data: {"n":3}\n\n']
    assert writer.flushes == 3
    assert slept == [2, 2, 2]
    assert session.state is StreamState.CLOSED


def test_closed_session_cannot_be_reused():
    session = StreamSession(counting_producer(), sleep=lambda s: None)
    session.run(FakeWriter(), disconnect_after(0))
    with pytest.raises(PeerDisconnected):
        session.run(FakeWriter())


def test_cancellation_token_stops_the_next_iteration():
    token = CancellationToken()
    writer = FakeWriter()

    def produce():
        token.cancel()
        return "last"

    session = StreamSession(produce, sleep=lambda s: None)
    session.run(writer, token=token)
    assert writer.chunks == ['data: "last"\n\n']


def test_buffering_is_off_while_streaming_and_restored_after():
    ctx = ResponseContext()
    seen = []
    session = StreamSession(lambda: seen.append(ctx.buffering), sleep=lambda s: None)
    session.run(FakeWriter(), disconnect_after(1), context=ctx)
    assert seen == [False]
    assert ctx.buffering is True


def test_prepare_sets_event_stream_headers():
    ctx = StreamSession(counting_producer(), subtype="application").prepare(ResponseContext())
    assert ctx.get_header("Content-Type") == "application/event-stream"
    assert ctx.get_header("Cache-Control") == "no-cache"
    assert ctx.get_header("Connection") == "keep-alive"


def test_invalid_subtype_is_rejected():
    with pytest.raises(ConfigurationError):
        StreamSession(counting_producer(), subtype="text/plain")


def test_async_frames_follow_the_same_lifecycle():
    async def no_sleep(_):
        return None

    checks = disconnect_after(3)

    async def is_disconnected():
        return checks()

    async def collect():
        session = StreamSession(counting_producer(), async_sleep=no_sleep)
        return [frame async for frame in session.frames(is_disconnected)], session

    frames, session = asyncio.run(collect())
    assert frames == [encode_frame({"n": 1}), encode_frame({"n": 2}), encode_frame({"n": 3})]
    assert session.state is StreamState.CLOSED


def test_non_json_values_fall_back_to_str():
    class Thing:
        def __str__(self):
            return "thing"

    assert encode_frame({"t": Thing()}) == 'data: {"t":"thing"}\n\n'


def test_non_finite_numbers_are_framed_as_null():
    assert encode_frame(float("nan")) == "data: null\n\n"
    assert encode_frame({"a": [1.5, float("inf")], "b": -float("inf")}) == 'data: {"a":[1.5,null],"b":null}\n\n'

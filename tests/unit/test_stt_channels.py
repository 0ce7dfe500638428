"""
Unit Tests for Transcription Channels

Runs SttStream end to end against local WebSocket and gRPC servers.
"""

import asyncio
import base64
import json

import pytest
import pytest_asyncio
import websockets

from unbound.stt import SttStream, WebSocketChannel

grpc = pytest.importorskip("grpc")
pytest.importorskip("google.protobuf")

from unbound.stt.grpc_channel import (  # noqa: E402
    TranscribeRequest,
    TranscribeResponse,
    fill_message,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def websocket_server():
    """JSON transcription peer; answers once the last chunk arrives."""
    received = []

    async def handler(websocket):
        async for message in websocket:
            frame = json.loads(message)
            received.append(frame)
            if frame["is_last_chunk"]:
                await websocket.send(json.dumps({"transcript": "hi", "is_final": True, "sip_call_id": "c1"}))
                break

    async with websockets.serve(handler, "127.0.0.1", 0) as server:
        port = next(iter(server.sockets)).getsockname()[1]
        yield f"ws://127.0.0.1:{port}", received


@pytest_asyncio.fixture
async def grpc_server():
    """TranscriptionService peer; answers after the client half-closes."""
    received = []

    async def stream_transcribe(request_iterator, context):
        async for request in request_iterator:
            received.append(request)
        yield TranscribeResponse(transcript="hello", is_final=False)
        yield TranscribeResponse(transcript="hello there", is_final=True, confidence=0.75, sip_call_id="c1")

    server = grpc.aio.server()
    server.add_generic_rpc_handlers((
        grpc.method_handlers_generic_handler(
            "transcription.TranscriptionService",
            {
                "StreamTranscribe": grpc.stream_stream_rpc_method_handler(
                    stream_transcribe,
                    request_deserializer=TranscribeRequest.FromString,
                    response_serializer=TranscribeResponse.SerializeToString,
                ),
            },
        ),
    ))
    port = server.add_insecure_port("127.0.0.1:0")
    await server.start()
    try:
        yield port, received
    finally:
        await server.stop(None)


def collect(stream, event):
    items = []
    stream.on(event, items.append)
    return items


# =============================================================================
# WebSocket
# =============================================================================


class TestWebSocketChannel:
    """Tests for the JSON-over-WebSocket channel."""

    @pytest.mark.asyncio
    async def test_session_url_streams_over_websocket(self, websocket_server):
        url, received = websocket_server
        stream = SttStream(object(), {"sessionId": "s1", "token": "t1", "url": url})
        finals = collect(stream, "final-transcript")

        assert await stream.wait_ready() is True
        assert isinstance(stream.call, WebSocketChannel)
        stream.write(b"\x00\x01", {"sipCallId": "c1", "side": "send"})
        stream.end()
        await asyncio.wait_for(stream.wait_closed(), timeout=5)

        first, last = received
        assert base64.b64decode(first["audio_chunk"]) == b"\x00\x01"
        assert first["token"] == "t1"
        assert first["is_first_chunk"] is True
        assert first["sip_call_id"] == "c1"
        assert last["is_last_chunk"] is True
        assert last["audio_chunk"] == ""

        assert [t.text for t in finals] == ["hi"]
        assert finals[0].sip_call_id == "c1"

    @pytest.mark.asyncio
    async def test_refused_connection_fails_stream(self):
        stream = SttStream(object(), {"sessionId": "s1", "url": "ws://127.0.0.1:9"})
        errors = collect(stream, "error")

        assert await stream.wait_ready() is False
        assert errors[0].message.startswith("Failed to initialize streaming connection")


# =============================================================================
# gRPC
# =============================================================================


class TestGrpcChannel:
    """Tests for the StreamTranscribe channel."""

    @pytest.mark.asyncio
    async def test_grpc_coordinates_stream_over_grpc(self, grpc_server):
        port, received = grpc_server
        stream = SttStream(
            object(),
            {"sessionId": "s1", "token": "t1", "grpcHost": "127.0.0.1", "grpcPort": str(port)},
            {"languageCode": "de-DE", "playbookId": "pb1"},
        )
        transcripts = collect(stream, "transcript")
        finals = collect(stream, "final-transcript")

        assert await stream.wait_ready() is True
        stream.write(b"pcm-1", {"sipCallId": "c1", "side": "send"})
        stream.write(b"pcm-2", {"sipCallId": "c1", "vad_event": "speech_end", "vad_timestamp": 1.5})
        stream.end()
        await asyncio.wait_for(stream.wait_closed(), timeout=10)

        first, second, last = received
        assert first.audio_chunk == b"pcm-1"
        assert first.token == "t1"
        assert first.session_id == "s1"
        assert first.language == "de-DE"
        assert first.playbook_id == "pb1"
        assert first.config.sample_rate_hertz == 16000
        assert first.config.min_silence_duration_ms == 500
        assert first.is_first_chunk is True
        assert second.audio_chunk == b"pcm-2"
        assert second.token == ""
        assert second.vad_event == "speech_end"
        assert second.vad_timestamp == 1.5
        assert last.is_last_chunk is True
        assert last.audio_chunk == b""

        assert [t.text for t in transcripts] == ["hello", "hello there"]
        assert len(finals) == 1
        assert finals[0].confidence == pytest.approx(0.75)
        assert finals[0].sip_call_id == "c1"


class TestFillMessage:
    """Tests for copying frames onto protobuf messages."""

    def test_nested_config_and_unknown_fields(self):
        message = fill_message(
            TranscribeRequest(),
            {
                "session_id": "s1",
                "config": {"encoding": "MULAW", "vad_enabled": True},
                "unknown_field": "dropped",
                "role": None,
            },
        )

        assert message.session_id == "s1"
        assert message.config.encoding == "MULAW"
        assert message.config.vad_enabled is True
        assert message.role == ""

"""
Unbound Python SDK - Streaming Transcription Session

Long-lived bidirectional session that carries audio frames upstream and
transcript events downstream.

Events:
    ready: Channel connected; audio can flow
    transcript: Every partial or final result (a Transcript)
    final-transcript: Final results only
    error: Fatal error (an SttStreamError); the stream closes right after
    close: The stream is closed; emitted at most once
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Mapping, Optional, Set, Tuple, Union

from unbound.events import EventEmitter
from unbound.exceptions import SttStreamClosedError, SttStreamError, UnboundError
from unbound.stt.channel import Connector, StreamChannel, WebSocketChannel
from unbound.stt.codec import FrameCodec, TranscriptionFrameCodec
from unbound.stt.grpc_channel import GrpcChannel
from unbound.stt.models import FrameMetadata, SttOptions, SttSession

logger = logging.getLogger("unbound.stt")


_END_OF_AUDIO = object()


async def connect_default(session: SttSession) -> StreamChannel:
    """Open a WebSocket when the session carries a URL, otherwise gRPC to host:port."""
    if session.url:
        return await WebSocketChannel.connect(session)
    return await GrpcChannel.connect(session)


class SttStream(EventEmitter):
    """
    Speech-to-text streaming session.

    Must be created while an event loop is running; the connection is opened
    in the background and ``ready`` fires once it is up. Writes issued before
    that are held back and sent, in order, as soon as the channel is ready.

    Example:
        >>> stream = await client.ai.stt.stream(language_code="en-US")
        >>> stream.on("transcript", lambda t: print(t.text))
        >>> stream.write(pcm_chunk, {"sipCallId": "c1", "side": "send"})
        >>> stream.end()
        >>> await stream.wait_closed()
    """

    def __init__(
        self,
        client: Any,
        session: Union[SttSession, Mapping[str, Any]],
        options: Union[SttOptions, Mapping[str, Any], None] = None,
        codec: Optional[FrameCodec] = None,
        connector: Optional[Connector] = None,
    ) -> None:
        super().__init__()

        self.client = client
        self.session = SttSession.coerce(session)
        self.options = SttOptions.coerce(options)
        self.codec = codec or TranscriptionFrameCodec()
        self._connector = connector or connect_default

        # Connection state
        self.is_ready = False
        self.is_closed = False
        self.first_chunk_sent = False
        self.call: Optional[StreamChannel] = None

        self._deferred: List[Tuple[bytes, FrameMetadata]] = []
        self._end_requested = False
        self._outbox: asyncio.Queue = asyncio.Queue()
        self._ready_event = asyncio.Event()
        self._closed_event = asyncio.Event()
        self._tasks: Set[asyncio.Task] = set()

        self._loop = asyncio.get_running_loop()
        self._init_task = self._spawn(self._initialize())

    @property
    def ready(self) -> bool:
        """True while the stream can accept audio."""
        return self.is_ready and not self.is_closed

    @property
    def session_id(self) -> str:
        return self.session.id

    def _spawn(self, coro: Any) -> asyncio.Task:
        task = self._loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _initialize(self) -> None:
        try:
            channel = await self._connector(self.session)
        except Exception as e:
            self._fail(SttStreamError(
                f"Failed to initialize streaming connection: {e}",
                session_id=self.session.id,
            ))
            return

        if self.is_closed:
            await channel.close()
            return

        self.call = channel
        self._spawn(self._drain_outbox(channel))
        self._spawn(self._read_transcripts(channel))
        self.is_ready = True

        # Replay writes (and an end) issued while connecting, in call order
        deferred, self._deferred = self._deferred, []
        for audio_chunk, metadata in deferred:
            self._enqueue(audio_chunk, metadata)
        if self._end_requested:
            self._enqueue_end()

        logger.debug(f"Transcription stream {self.session.id} ready")
        self._ready_event.set()
        self.emit("ready")

    def _enqueue(self, audio_chunk: bytes, metadata: FrameMetadata) -> None:
        if not self.first_chunk_sent:
            frame = self.codec.first_frame(audio_chunk, metadata, self.session, self.options)
            self.first_chunk_sent = True
        else:
            frame = self.codec.next_frame(audio_chunk, metadata, self.session)
        self._outbox.put_nowait(frame)

    def _enqueue_end(self) -> None:
        if self.first_chunk_sent:
            self._outbox.put_nowait(self.codec.last_frame(self.session))
        self._outbox.put_nowait(_END_OF_AUDIO)

    async def _drain_outbox(self, channel: StreamChannel) -> None:
        try:
            while True:
                frame = await self._outbox.get()
                if frame is _END_OF_AUDIO:
                    await channel.done_writing()
                    return
                await channel.send(frame)
        except Exception as e:
            self._fail(SttStreamError(
                f"Failed to write audio chunk: {e}",
                session_id=self.session.id,
            ))

    async def _read_transcripts(self, channel: StreamChannel) -> None:
        try:
            async for message in channel:
                self._handle_message(message)
        except Exception as e:
            if isinstance(e, UnboundError):
                error = e
            else:
                error = SttStreamError(f"Transcription stream failed: {e}", session_id=self.session.id)
                error.__cause__ = e
            self._fail(error)
            return

        logger.debug(f"Transcription stream {self.session.id} ended by server")
        self.close()

    def _handle_message(self, message: Mapping[str, Any]) -> None:
        transcript = self.codec.parse(message)
        if transcript is None:
            return
        self.emit("transcript", transcript)
        if transcript.is_final:
            self.emit("final-transcript", transcript)

    def _fail(self, error: Exception) -> None:
        if self.is_closed:
            return
        if not self.emit("error", error):
            logger.error(f"Transcription stream {self.session.id} error: {error}")
        self.close()

    def write(
        self,
        audio_chunk: Union[bytes, bytearray, memoryview],
        metadata: Union[FrameMetadata, Mapping[str, Any], None] = None,
    ) -> bool:
        """
        Queue one audio frame.

        Args:
            audio_chunk: Raw audio bytes
            metadata: Stream identification (``sipCallId``, ``side``, ``role``,
                ``isLastChunk``, ``bridgeId``) and optional VAD fields

        Returns:
            True if the frame was accepted (sent or held until ready)
        """
        if self.is_closed:
            self.emit("error", SttStreamClosedError(session_id=self.session.id))
            return False

        if self._end_requested:
            self.emit("error", SttStreamError("Stream has ended", session_id=self.session.id))
            return False

        try:
            frame_metadata = FrameMetadata.coerce(metadata)
            if not self.is_ready:
                self._deferred.append((bytes(audio_chunk), frame_metadata))
                return True
            self._enqueue(audio_chunk, frame_metadata)
        except Exception as e:
            self._fail(SttStreamError(f"Failed to write audio chunk: {e}", session_id=self.session.id))
            return False

        return True

    def end(self) -> None:
        """
        Finish the audio: send the zero-length last-chunk frame and close the
        upstream half. Transcripts keep arriving until the server closes.
        """
        if self.is_closed or self._end_requested:
            return
        self._end_requested = True
        if self.is_ready:
            self._enqueue_end()

    def close(self) -> None:
        """Tear the stream down. Safe to call more than once."""
        if self.is_closed:
            return

        self.is_closed = True
        self.is_ready = False

        current = asyncio.current_task(self._loop)
        for task in list(self._tasks):
            if task is not current and not task.done():
                task.cancel()

        channel, self.call = self.call, None
        if channel is not None:
            self._spawn(self._close_channel(channel))

        logger.debug(f"Transcription stream {self.session.id} closed")
        self._closed_event.set()
        self.emit("close")
        self.remove_all_listeners()

    async def _close_channel(self, channel: StreamChannel) -> None:
        try:
            await channel.close()
        except Exception as e:
            logger.debug(f"Error while closing transcription channel: {e}")

    async def wait_ready(self) -> bool:
        """Wait until the stream is ready or closed; return ``self.ready``."""
        waiters = [
            self._loop.create_task(self._ready_event.wait()),
            self._loop.create_task(self._closed_event.wait()),
        ]
        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                waiter.cancel()
        return self.ready

    async def wait_closed(self) -> None:
        await self._closed_event.wait()

    def __repr__(self) -> str:
        state = "closed" if self.is_closed else "ready" if self.is_ready else "connecting"
        return f"SttStream(session_id='{self.session.id}', state='{state}')"

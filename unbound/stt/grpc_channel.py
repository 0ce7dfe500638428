"""
Unbound Python SDK - gRPC Transcription Channel

Speaks the platform's ``transcription.TranscriptionService/StreamTranscribe``
bidirectional call. Message types are built at import time from a
descriptor, so no generated ``_pb2`` module has to ship with the SDK; pass
``request_type``/``response_type`` to use generated classes instead.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Tuple

try:
    import grpc
    from google.protobuf import descriptor_pb2, descriptor_pool, json_format, message_factory
    HAS_GRPC = True
except ImportError:
    HAS_GRPC = False

from unbound.exceptions import SttStreamError
from unbound.stt.channel import StreamChannel
from unbound.stt.models import SttSession

logger = logging.getLogger("unbound.stt")


STREAM_TRANSCRIBE = "/transcription.TranscriptionService/StreamTranscribe"

# (name, number, type, repeated, message type)
_Field = Tuple[str, int, str, bool, Optional[str]]

_MESSAGES: Dict[str, List[_Field]] = {
    "AudioConfig": [
        ("encoding", 1, "string", False, None),
        ("sample_rate_hertz", 2, "int32", False, None),
        ("audio_channel_count", 3, "int32", False, None),
        ("vad_enabled", 4, "bool", False, None),
        ("min_silence_duration_ms", 5, "int32", False, None),
        ("speech_pad_ms", 6, "int32", False, None),
    ],
    "TranscribeRequest": [
        ("audio_chunk", 1, "bytes", False, None),
        ("token", 2, "string", False, None),
        ("session_id", 3, "string", False, None),
        ("language", 4, "string", False, None),
        ("engine", 5, "string", False, None),
        ("config", 6, "message", False, "AudioConfig"),
        ("is_first_chunk", 7, "bool", False, None),
        ("is_last_chunk", 8, "bool", False, None),
        ("sip_call_id", 9, "string", False, None),
        ("side", 10, "string", False, None),
        ("role", 11, "string", False, None),
        ("playbook_id", 12, "string", False, None),
        ("task_id", 13, "string", False, None),
        ("worker_id", 14, "string", False, None),
        ("generate_subject", 15, "bool", False, None),
        ("generate_transcript_summary", 16, "bool", False, None),
        ("generate_sentiment", 17, "bool", False, None),
        ("bridge_id", 18, "string", False, None),
        ("vad_event", 19, "string", False, None),
        ("vad_timestamp", 20, "double", False, None),
        ("vad_energy", 21, "double", False, None),
        ("vad_duration", 22, "double", False, None),
    ],
    "Word": [
        ("word", 1, "string", False, None),
        ("start_time", 2, "float", False, None),
        ("end_time", 3, "float", False, None),
        ("confidence", 4, "float", False, None),
    ],
    "TranscribeResponse": [
        ("transcript", 1, "string", False, None),
        ("is_final", 2, "bool", False, None),
        ("confidence", 3, "float", False, None),
        ("language", 4, "string", False, None),
        ("timestamp", 5, "int64", False, None),
        ("words", 6, "message", True, "Word"),
        ("start_time", 7, "float", False, None),
        ("end_time", 8, "float", False, None),
        ("sip_call_id", 9, "string", False, None),
        ("side", 10, "string", False, None),
        ("role", 11, "string", False, None),
    ],
}


def _build_message_types() -> Dict[str, Any]:
    proto = descriptor_pb2.FileDescriptorProto(
        name="unbound/transcription.proto",
        package="transcription",
        syntax="proto3",
    )
    field_types = descriptor_pb2.FieldDescriptorProto

    for message_name, message_fields in _MESSAGES.items():
        message = proto.message_type.add(name=message_name)
        for name, number, kind, repeated, type_name in message_fields:
            field = message.field.add(
                name=name,
                number=number,
                type=getattr(field_types, f"TYPE_{kind.upper()}"),
                label=field_types.LABEL_REPEATED if repeated else field_types.LABEL_OPTIONAL,
            )
            if type_name:
                field.type_name = f".transcription.{type_name}"

    pool = descriptor_pool.DescriptorPool()
    pool.Add(proto)
    return {
        name: message_factory.GetMessageClass(pool.FindMessageTypeByName(f"transcription.{name}"))
        for name in _MESSAGES
    }


if HAS_GRPC:
    MESSAGE_TYPES = _build_message_types()
    TranscribeRequest = MESSAGE_TYPES["TranscribeRequest"]
    TranscribeResponse = MESSAGE_TYPES["TranscribeResponse"]
else:
    MESSAGE_TYPES = {}
    TranscribeRequest = None
    TranscribeResponse = None


def fill_message(message: Any, values: Mapping[str, Any]) -> Any:
    """Copy a frame mapping onto a protobuf message, recursing into sub-messages."""
    fields_by_name = message.DESCRIPTOR.fields_by_name
    for key, value in values.items():
        field = fields_by_name.get(key)
        if field is None:
            logger.debug(f"Dropping unknown transcription frame field: {key}")
            continue
        if value is None:
            continue
        if field.message_type is not None:
            fill_message(getattr(message, key), value)
        else:
            setattr(message, key, value)
    return message


class GrpcChannel(StreamChannel):
    """
    Channel backed by a ``grpc.aio`` stream-stream call.

    Example:
        >>> channel = await GrpcChannel.connect(session)
        >>> await channel.send(frame)
        >>> async for message in channel:
        ...     print(message.get("transcript"))
    """

    def __init__(self, channel: Any, call: Any) -> None:
        self._channel = channel
        self._call = call

    @classmethod
    async def connect(
        cls,
        session: SttSession,
        secure: bool = False,
        request_type: Any = None,
        response_type: Any = None,
        method: str = STREAM_TRANSCRIBE,
    ) -> "GrpcChannel":
        if not HAS_GRPC:
            raise SttStreamError(
                "grpcio and protobuf are required for streaming transcription. "
                "Install them with: pip install unbound-sdk[grpc]",
                session_id=session.id,
            )
        if not session.host:
            raise SttStreamError("Transcription session has no streaming endpoint", session_id=session.id)

        request_type = request_type or TranscribeRequest
        response_type = response_type or TranscribeResponse
        target = f"{session.host}:{session.port}" if session.port else session.host

        if secure:
            channel = grpc.aio.secure_channel(target, grpc.ssl_channel_credentials())
        else:
            channel = grpc.aio.insecure_channel(target)

        stream_transcribe = channel.stream_stream(
            method,
            request_serializer=lambda frame: fill_message(request_type(), frame).SerializeToString(),
            response_deserializer=lambda data: json_format.MessageToDict(
                response_type.FromString(data),
                preserving_proto_field_name=True,
            ),
        )
        logger.info(f"Opening transcription stream: {target}")
        return cls(channel, stream_transcribe())

    async def send(self, frame: Dict[str, Any]) -> None:
        await self._call.write(frame)

    async def done_writing(self) -> None:
        await self._call.done_writing()

    async def __aiter__(self) -> AsyncIterator[Mapping[str, Any]]:
        async for message in self._call:
            yield message

    async def close(self) -> None:
        self._call.cancel()
        await self._channel.close()

"""
Streaming speech-to-text for the Unbound SDK.
"""

from unbound.stt.channel import StreamChannel, WebSocketChannel, encode_frame
from unbound.stt.codec import FrameCodec, TranscriptionFrameCodec
from unbound.stt.grpc_channel import GrpcChannel
from unbound.stt.models import FrameMetadata, SttOptions, SttSession, Transcript
from unbound.stt.stream import SttStream, connect_default

__all__ = [
    "SttStream",
    "SttSession",
    "SttOptions",
    "FrameMetadata",
    "Transcript",
    "FrameCodec",
    "TranscriptionFrameCodec",
    "StreamChannel",
    "WebSocketChannel",
    "GrpcChannel",
    "connect_default",
    "encode_frame",
]

"""
Unbound Python SDK

Python client for the Unbound communications platform. Every call goes
through a single pipeline: parameter validation, optional transport
plugins (lowest priority first) and a plain HTTPS fallback.

Example:
    >>> from unbound import Unbound
    >>> async with Unbound(namespace="acme", token="secret") as client:
    ...     await client.messaging.sms.send(to="+15550001111", message="Hello")
    ...     stream = await client.ai.stt.stream(language_code="en-US")
    ...     stream.on("final-transcript", lambda t: print(t.text))
"""

__version__ = "1.0.0"
__author__ = "Unbound Team"
__license__ = "MIT"

from unbound.client import Unbound, create_client
from unbound.config import ClientConfig, DEFAULT_CONFIG, Endpoints
from unbound.environment import Environment
from unbound.types import Envelope, RequestContext
from unbound.transports import Transport, TransportRegistry
from unbound.multipart import FilePart, MultipartBody, MultipartEncoder, encode_multipart
from unbound.validation import validate
from unbound.exceptions import (
    UnboundError,
    ValidationError,
    MissingRequiredParameterError,
    InvalidParameterTypeError,
    TransportError,
    APIError,
    AuthenticationError,
    NotFoundError,
    ConflictError,
    RateLimitError,
    ServerError,
    ExtensionError,
    SttStreamError,
    SttStreamClosedError,
)
from unbound.stt import (
    SttStream,
    SttSession,
    SttOptions,
    FrameMetadata,
    Transcript,
    FrameCodec,
    TranscriptionFrameCodec,
    StreamChannel,
    WebSocketChannel,
)

__all__ = [
    # Main client
    "Unbound",
    "create_client",

    # Configuration
    "ClientConfig",
    "DEFAULT_CONFIG",
    "Endpoints",
    "Environment",

    # Request pipeline
    "Envelope",
    "RequestContext",
    "Transport",
    "TransportRegistry",
    "validate",

    # Multipart
    "FilePart",
    "MultipartBody",
    "MultipartEncoder",
    "encode_multipart",

    # Exceptions
    "UnboundError",
    "ValidationError",
    "MissingRequiredParameterError",
    "InvalidParameterTypeError",
    "TransportError",
    "APIError",
    "AuthenticationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "ServerError",
    "ExtensionError",
    "SttStreamError",
    "SttStreamClosedError",

    # Streaming speech-to-text
    "SttStream",
    "SttSession",
    "SttOptions",
    "FrameMetadata",
    "Transcript",
    "FrameCodec",
    "TranscriptionFrameCodec",
    "StreamChannel",
    "WebSocketChannel",
]

"""
Unbound Python SDK - Speech-to-Text Models

Session coordinates, stream options, per-frame metadata and transcript
results for streaming transcription.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First value present (and not None) under any of ``keys``."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


@dataclass
class SttSession:
    """
    Coordinates of an already-established transcription session.

    Attributes:
        id: Session ID issued by the platform
        token: Session token sent with the first audio frame
        host: Streaming host
        port: Streaming port
        url: Full streaming URL, when the platform hands one out
    """
    id: str
    token: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SttSession":
        session_id = _pick(data, "id", "sessionId", "session_id")
        if not session_id:
            raise ValueError("Transcription session is missing its id")
        port = _pick(data, "port", "grpcPort", "grpc_port")
        return cls(
            id=session_id,
            token=_pick(data, "token"),
            host=_pick(data, "host", "grpcHost", "grpc_host"),
            port=int(port) if port is not None else None,
            url=_pick(data, "url", "streamUrl", "stream_url"),
        )

    @classmethod
    def coerce(cls, value: Union["SttSession", Mapping[str, Any]]) -> "SttSession":
        if isinstance(value, SttSession):
            return value
        return cls.from_dict(value)


OPTION_ALIASES = {
    "languageCode": "language_code",
    "sampleRateHertz": "sample_rate_hertz",
    "audioChannelCount": "audio_channel_count",
    "vadEnabled": "vad_enabled",
    "minSilenceDuration": "min_silence_duration",
    "speechPadMs": "speech_pad_ms",
    "playbookId": "playbook_id",
    "taskId": "task_id",
    "workerId": "worker_id",
    "generateSubject": "generate_subject",
    "generateTranscriptSummary": "generate_transcript_summary",
    "generateSentiment": "generate_sentiment",
}


@dataclass
class SttOptions:
    """
    Transcription options sent with the first audio frame.

    Keys the stream does not know about (for example ``model`` or
    ``interim_results``) are kept in ``extra`` and forwarded when the
    session is created.
    """
    engine: str = "google"
    language_code: str = "en-US"
    encoding: str = "LINEAR16"
    sample_rate_hertz: int = 16000
    audio_channel_count: int = 1
    # Voice activity detection
    vad_enabled: bool = False
    min_silence_duration: int = 500
    speech_pad_ms: int = 400
    # Correlation
    playbook_id: str = ""
    task_id: str = ""
    worker_id: str = ""
    # Post-processing
    generate_subject: bool = False
    generate_transcript_summary: bool = False
    generate_sentiment: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SttOptions":
        known = {f.name for f in fields(cls)} - {"extra"}
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in data.items():
            name = OPTION_ALIASES.get(key, key)
            if value is None:
                continue
            if name in known:
                values[name] = value
            else:
                extra[key] = value
        return cls(extra=extra, **values)

    @classmethod
    def coerce(cls, value: Union["SttOptions", Mapping[str, Any], None]) -> "SttOptions":
        if value is None:
            return cls()
        if isinstance(value, SttOptions):
            return value
        return cls.from_dict(value)

    def to_request(self) -> Dict[str, Any]:
        """Body of the session-creation request, in the platform's casing."""
        body: Dict[str, Any] = {}
        reverse = {snake: camel for camel, snake in OPTION_ALIASES.items()}
        for f in fields(self):
            if f.name == "extra":
                continue
            body[reverse.get(f.name, f.name)] = getattr(self, f.name)
        body.update(self.extra)
        return body


@dataclass
class FrameMetadata:
    """
    Per-frame stream identification and optional VAD data.

    Attributes:
        sip_call_id: SIP call identifier
        side: ``"send"`` or ``"recv"``
        role: Speaker role (customer, agent, system)
        is_last_chunk: Marks this particular stream as complete
        bridge_id: Bridge identifier for multi-party calls
    """
    sip_call_id: str = ""
    side: str = ""
    role: str = ""
    is_last_chunk: bool = False
    bridge_id: str = ""
    vad_event: Optional[str] = None
    vad_timestamp: Any = None
    vad_energy: Optional[float] = None
    vad_duration: Optional[float] = None

    @classmethod
    def coerce(cls, value: Union["FrameMetadata", Mapping[str, Any], None]) -> "FrameMetadata":
        if value is None:
            return cls()
        if isinstance(value, FrameMetadata):
            return value
        return cls(
            sip_call_id=_pick(value, "sipCallId", "sip_call_id", default=""),
            side=_pick(value, "side", default=""),
            role=_pick(value, "role", default=""),
            is_last_chunk=bool(_pick(value, "isLastChunk", "is_last_chunk", default=False)),
            bridge_id=_pick(value, "bridgeId", "bridge_id", default=""),
            vad_event=_pick(value, "vad_event", "vadEvent"),
            vad_timestamp=_pick(value, "vad_timestamp", "vadTimestamp"),
            vad_energy=_pick(value, "vad_energy", "vadEnergy"),
            vad_duration=_pick(value, "vad_duration", "vadDuration"),
        )


@dataclass
class Transcript:
    """A partial or final transcription result."""
    text: str
    is_final: bool = False
    confidence: float = 0.0
    language_code: Optional[str] = None
    words: List[Dict[str, Any]] = field(default_factory=list)
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    sip_call_id: str = ""
    side: str = ""
    role: str = ""

    @classmethod
    def from_message(cls, message: Mapping[str, Any]) -> Optional["Transcript"]:
        """
        Parse a downstream message; snake_case and camelCase keys are both
        accepted. Messages without transcript text yield None.
        """
        text = message.get("transcript")
        if not text:
            return None
        return cls(
            text=text,
            is_final=bool(message.get("isFinal") or message.get("is_final")),
            confidence=_pick(message, "confidence", default=0.0),
            language_code=_pick(message, "language", "languageCode", "language_code"),
            words=list(_pick(message, "words", default=[])),
            start_time=_pick(message, "startTime", "start_time"),
            end_time=_pick(message, "endTime", "end_time"),
            sip_call_id=_pick(message, "sipCallId", "sip_call_id", default=""),
            side=_pick(message, "side", default=""),
            role=_pick(message, "role", default=""),
        )

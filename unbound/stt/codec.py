"""
Unbound Python SDK - Transcription Frame Codec

Decides what goes into each upstream audio frame and how downstream
messages become transcripts. The session state machine only asks the codec
for frames, so another wire schema can be plugged in without touching it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from unbound.stt.models import FrameMetadata, SttOptions, SttSession, Transcript


class FrameCodec(ABC):
    """Frame schema used by a transcription stream."""

    @abstractmethod
    def first_frame(
        self,
        audio_chunk: bytes,
        metadata: FrameMetadata,
        session: SttSession,
        options: SttOptions,
    ) -> Dict[str, Any]:
        """Frame that opens the stream; carries credentials and configuration."""

    @abstractmethod
    def next_frame(
        self,
        audio_chunk: bytes,
        metadata: FrameMetadata,
        session: SttSession,
    ) -> Dict[str, Any]:
        """Any later audio frame."""

    @abstractmethod
    def last_frame(self, session: SttSession) -> Dict[str, Any]:
        """Zero-length frame that marks the end of the audio."""

    @abstractmethod
    def parse(self, message: Mapping[str, Any]) -> Optional[Transcript]:
        """Turn a downstream message into a transcript, or None to skip it."""


class TranscriptionFrameCodec(FrameCodec):
    """Frame schema of the platform's transcription service."""

    def first_frame(
        self,
        audio_chunk: bytes,
        metadata: FrameMetadata,
        session: SttSession,
        options: SttOptions,
    ) -> Dict[str, Any]:
        return {
            "audio_chunk": bytes(audio_chunk),
            "token": session.token,
            "session_id": session.id,
            "language": options.language_code,
            "engine": options.engine,
            "config": {
                "encoding": options.encoding,
                "sample_rate_hertz": options.sample_rate_hertz,
                "audio_channel_count": options.audio_channel_count,
                "vad_enabled": options.vad_enabled,
                "min_silence_duration_ms": options.min_silence_duration,
                "speech_pad_ms": options.speech_pad_ms,
            },
            "is_first_chunk": True,
            "is_last_chunk": metadata.is_last_chunk,
            "sip_call_id": metadata.sip_call_id,
            "side": metadata.side,
            "role": metadata.role,
            "playbook_id": options.playbook_id,
            "task_id": options.task_id,
            "worker_id": options.worker_id,
            "generate_subject": options.generate_subject,
            "generate_transcript_summary": options.generate_transcript_summary,
            "generate_sentiment": options.generate_sentiment,
            "bridge_id": metadata.bridge_id,
        }

    def next_frame(
        self,
        audio_chunk: bytes,
        metadata: FrameMetadata,
        session: SttSession,
    ) -> Dict[str, Any]:
        frame: Dict[str, Any] = {
            "audio_chunk": bytes(audio_chunk),
            "session_id": session.id,
            "is_first_chunk": False,
            "is_last_chunk": metadata.is_last_chunk,
            # Resent on every frame so the server can demultiplex parties
            "sip_call_id": metadata.sip_call_id,
            "side": metadata.side,
            "role": metadata.role,
            "bridge_id": metadata.bridge_id,
        }

        if metadata.vad_event:
            frame["vad_event"] = metadata.vad_event
            frame["vad_timestamp"] = metadata.vad_timestamp
            if metadata.vad_energy is not None:
                frame["vad_energy"] = metadata.vad_energy
            if metadata.vad_duration is not None:
                frame["vad_duration"] = metadata.vad_duration

        return frame

    def last_frame(self, session: SttSession) -> Dict[str, Any]:
        return {
            "audio_chunk": b"",
            "session_id": session.id,
            "is_first_chunk": False,
            "is_last_chunk": True,
        }

    def parse(self, message: Mapping[str, Any]) -> Optional[Transcript]:
        return Transcript.from_message(message)

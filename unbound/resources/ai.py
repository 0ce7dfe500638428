"""
Unbound Python SDK - AI Resource

Generative chat, text-to-speech and streaming speech-to-text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from unbound.config import Endpoints
from unbound.resources.base import BaseResource
from unbound.stt import FrameCodec, SttOptions, SttSession, SttStream
from unbound.stt.channel import Connector

if TYPE_CHECKING:
    from unbound.client import Unbound


CHAT_SCHEMA = {
    "prompt": {"type": "string", "required": False},
    "messages": {"type": "array", "required": False},
    "relatedId": {"type": "string", "required": False},
    "model": {"type": "string", "required": False},
    "temperature": {"type": "number", "required": False},
    "subscriptionId": {"type": "string", "required": False},
    "stream": {"type": "boolean", "required": False},
}


class GenerativeResource(BaseResource):
    """Generative AI chat and playbooks."""

    async def chat(
        self,
        method: str,
        prompt: Optional[str] = None,
        messages: Optional[List[Dict[str, Any]]] = None,
        related_id: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        subscription_id: Optional[str] = None,
        stream: Optional[bool] = None,
    ) -> Any:
        """
        Run a generative chat completion.

        Args:
            method: Generation method to use
            prompt: Single prompt text
            messages: Chat history
            related_id: Record the conversation relates to
            model: Model name
            temperature: Sampling temperature
            subscription_id: Subscription to bill
            stream: Ask the server to stream the answer

        Example:
            >>> await client.ai.generative.chat(method="openai", prompt="Summarize this call")
        """
        body = self._compact(
            prompt=prompt,
            messages=messages,
            relatedId=related_id,
            model=model,
            temperature=temperature,
            subscriptionId=subscription_id,
            stream=stream,
            method=method,
        )
        self._validate(body, {**CHAT_SCHEMA, "method": {"type": "string", "required": True}})
        return await self._post(Endpoints.AI_CHAT, body)

    async def playbook(
        self,
        playbook_id: str,
        prompt: Optional[str] = None,
        messages: Optional[List[Dict[str, Any]]] = None,
        related_id: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        subscription_id: Optional[str] = None,
        stream: Optional[bool] = None,
        session_id: Optional[str] = None,
    ) -> Any:
        """Run a generative playbook."""
        body = self._compact(
            prompt=prompt,
            messages=messages,
            relatedId=related_id,
            model=model,
            temperature=temperature,
            subscriptionId=subscription_id,
            stream=stream,
            playbookId=playbook_id,
            sessionId=session_id,
        )
        self._validate(
            body,
            {
                **CHAT_SCHEMA,
                "playbookId": {"type": "string", "required": True},
                "sessionId": {"type": "string", "required": False},
            },
        )
        return await self._post(Endpoints.AI_PLAYBOOK, body)


class TextToSpeechResource(BaseResource):
    """Text-to-speech synthesis."""

    async def create(
        self,
        text: str,
        voice: Optional[str] = None,
        language_code: Optional[str] = None,
        ssml_gender: Optional[str] = None,
        audio_encoding: Optional[str] = None,
        speaking_rate: Optional[float] = None,
        pitch: Optional[float] = None,
        volume_gain_db: Optional[float] = None,
        effects_profile_ids: Optional[List[str]] = None,
    ) -> Any:
        body = self._compact(
            text=text,
            voice=voice,
            languageCode=language_code,
            ssmlGender=ssml_gender,
            audioEncoding=audio_encoding,
            speakingRate=speaking_rate,
            pitch=pitch,
            volumeGainDb=volume_gain_db,
            effectsProfileIds=effects_profile_ids,
        )
        self._validate(
            body,
            {
                "text": {"type": "string", "required": True},
                "voice": {"type": "string", "required": False},
                "languageCode": {"type": "string", "required": False},
                "ssmlGender": {"type": "string", "required": False},
                "audioEncoding": {"type": "string", "required": False},
                "speakingRate": {"type": "number", "required": False},
                "pitch": {"type": "number", "required": False},
                "volumeGainDb": {"type": "number", "required": False},
                "effectsProfileIds": {"type": "array", "required": False},
            },
        )
        return await self._post(Endpoints.AI_TTS, body)


class SpeechToTextResource(BaseResource):
    """
    Streaming speech-to-text.

    Example:
        >>> stream = await client.ai.stt.stream(engine="google", language_code="en-US")
        >>> stream.on("final-transcript", lambda t: print(t.text))
    """

    async def stream(
        self,
        codec: Optional[FrameCodec] = None,
        connector: Optional[Connector] = None,
        **options: Any,
    ) -> SttStream:
        """
        Open a transcription session and return its stream.

        The session coordinates are requested over the normal request path;
        audio then flows over the stream's own channel.
        """
        stt_options = SttOptions.from_dict(options)
        self._validate(
            {
                "engine": stt_options.engine,
                "languageCode": stt_options.language_code,
                "encoding": stt_options.encoding,
                "sampleRateHertz": stt_options.sample_rate_hertz,
                "audioChannelCount": stt_options.audio_channel_count,
                "vadEnabled": stt_options.vad_enabled,
            },
            {
                "engine": {"type": "string", "required": True},
                "languageCode": {"type": "string", "required": True},
                "encoding": {"type": "string", "required": True},
                "sampleRateHertz": {"type": "number", "required": True},
                "audioChannelCount": {"type": "number", "required": True},
                "vadEnabled": {"type": "boolean", "required": False},
            },
        )
        session = await self._post(Endpoints.AI_STT_STREAM, stt_options.to_request())
        return SttStream(
            self._client,
            SttSession.from_dict(session),
            stt_options,
            codec=codec,
            connector=connector,
        )

    async def get(self, session_id: str) -> Any:
        """Fetch the stored transcript of a finished session."""
        self._validate({"sessionId": session_id}, {"sessionId": {"type": "string", "required": True}})
        return await self._get(Endpoints.AI_STT_SESSION.format(session_id=session_id))


class AIResource:
    """Container for the AI sub-resources."""

    def __init__(self, client: "Unbound") -> None:
        self.generative = GenerativeResource(client)
        self.tts = TextToSpeechResource(client)
        self.stt = SpeechToTextResource(client)

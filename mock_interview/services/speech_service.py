# speech_service.py
"""Optional speech capability for the chat: Google TTS and STT."""

import base64
import logging
from typing import List, Optional

from google.cloud import speech_v2
from google.cloud import texttospeech

from mock_interview.config import settings

logger = logging.getLogger(__name__)

_stt_client = None
_tts_client = None


def _get_stt_client():
    global _stt_client
    if _stt_client is None:
        _stt_client = speech_v2.SpeechClient()
    return _stt_client


def _get_tts_client():
    global _tts_client
    if _tts_client is None:
        _tts_client = texttospeech.TextToSpeechClient()
    return _tts_client


def detect_audio_signature_prefix(b: bytes) -> str:
    if not b:
        return "empty"
    head = b[:64]
    if head.startswith(b"data:"):
        return "data-uri"
    if head.startswith(b"ID3") or head[:2] in (b"\xff\xfb", b"\xff\xf3", b"\xff\xf2"):
        return "mp3"
    if head[:4] == b"RIFF":
        return "wav"
    if head[:4] == b"OggS":
        return "ogg"
    if b"\x1A\x45\xDF\xA3" in head:
        return "webm"
    return "unknown"


class SpeechService:
    """Speech plug-in used by ChatService when ENABLE_SPEECH is set."""

    # Maximum raw bytes we'll accept for synchronous STT
    MAX_IN_MEMORY_BYTES = 6 * 1024 * 1024

    def __init__(self, voice_name: Optional[str] = None, stt_client=None, tts_client=None):
        self.voice_name = voice_name or settings.VOICE_NAME
        self._stt_client = stt_client
        self._tts_client = tts_client

    @property
    def stt_client(self):
        return self._stt_client or _get_stt_client()

    @property
    def tts_client(self):
        return self._tts_client or _get_tts_client()

    def transcribe_audio(self, audio_bytes: bytes, filename_hint: Optional[str] = None) -> str:
        """Transcribe a browser recording; returns the top transcript, trimmed."""
        if not audio_bytes:
            raise ValueError("Empty audio bytes provided to transcribe_audio")

        if audio_bytes.startswith(b"data:"):
            _, b64 = audio_bytes.split(b",", 1)
            audio_bytes = base64.b64decode(b64)

        logger.info(
            "transcribe_audio: signature=%s filename_hint=%s size=%d",
            detect_audio_signature_prefix(audio_bytes), filename_hint, len(audio_bytes),
        )
        if len(audio_bytes) > self.MAX_IN_MEMORY_BYTES:
            raise ValueError("Audio too large for synchronous transcription")

        recognizer_path = f"projects/{settings.PROJECT_ID}/locations/global/recognizers/_"
        config = speech_v2.RecognitionConfig(
            auto_decoding_config=speech_v2.AutoDetectDecodingConfig(),
            language_codes=[settings.LANG_STT],
            model="latest_short",
            features=speech_v2.RecognitionFeatures(enable_automatic_punctuation=True),
        )
        req = speech_v2.RecognizeRequest(recognizer=recognizer_path, config=config, content=audio_bytes)
        stt_resp = self.stt_client.recognize(request=req)

        if not stt_resp.results:
            raise ValueError("No speech detected (STT returned no results)")
        return stt_resp.results[0].alternatives[0].transcript.strip()

    def synthesize_speech(self, text: str) -> str:
        """Synthesize text -> base64 MP3 data URI."""
        text = (text or "").strip()
        if not text:
            raise RuntimeError("TTS input text is empty")
        if len(text) > 3000:
            text = text[:3000]

        resp = self.tts_client.synthesize_speech(
            input=texttospeech.SynthesisInput(text=text),
            voice=texttospeech.VoiceSelectionParams(language_code=settings.LANG_TTS, name=self.voice_name),
            audio_config=texttospeech.AudioConfig(
                audio_encoding=texttospeech.AudioEncoding.MP3,
                speaking_rate=1.0,
                pitch=0.0,
            ),
        )
        audio_content = getattr(resp, "audio_content", b"") or b""
        if not audio_content:
            raise RuntimeError("TTS produced no audio")
        b64 = base64.b64encode(audio_content).decode("utf-8")
        return f"data:audio/mp3;base64,{b64}"

    def list_studio_voice_names(self) -> List[str]:
        resp = self.tts_client.list_voices(language_code=settings.LANG_TTS)
        return [v.name for v in getattr(resp, "voices", []) or [] if "Studio" in (v.name or "")]

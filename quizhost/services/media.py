"""
Speech synthesis and transcription paths behind the media caches

Both return None when the capability is unconfigured or the external call
fails, so callers fall back to silent display / manual text entry. A cache
write failure is logged and the fresh result is still returned.
"""
import logging
from typing import Optional

from quizhost.core.media_cache import MediaCache


logger = logging.getLogger(__name__)


class MediaService:

    def __init__(self, cache: MediaCache, tts_client, stt_client, tts_max_chars: int = 600):
        self.cache = cache
        self.tts_client = tts_client
        self.stt_client = stt_client
        self.tts_max_chars = tts_max_chars

    def get_tts_audio(self, text: str) -> Optional[str]:
        if not self.tts_client.available or not text.strip():
            return None

        cached = self.cache.get_speech(text)
        if cached:
            return cached

        try:
            audio = self.tts_client.synthesize(text[:self.tts_max_chars])
        except Exception as e:
            # transport errors and malformed replies alike resolve to None
            logger.warning(f"🔇 Speech synthesis failed: {type(e).__name__}: {e}", exc_info=True)
            return None
        if not audio:
            return None

        try:
            self.cache.put_speech(text, audio)
        except OSError as e:
            logger.warning(f"⚠️ Speech cache write failed: {e}")
        return audio

    def transcribe(self, audio: bytes, mime_type: str = "audio/webm") -> Optional[str]:
        if not self.stt_client.available or not audio:
            return None

        cached = self.cache.get_transcript(audio)
        if cached:
            return cached

        try:
            transcript = self.stt_client.transcribe(audio, mime_type)
        except Exception as e:
            # transport errors and malformed replies alike resolve to None
            logger.warning(f"🎙️ Transcription failed: {type(e).__name__}: {e}", exc_info=True)
            return None

        if not transcript:
            return None
        try:
            self.cache.put_transcript(audio, transcript)
        except OSError as e:
            logger.warning(f"⚠️ Transcript cache write failed: {e}")
        return transcript

    def purge(self) -> None:
        self.cache.purge()

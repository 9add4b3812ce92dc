"""
Content-addressed media caches

- speech cache: normalized text -> synthesized audio (data URL)
- transcript cache: SHA-256 of the audio bytes -> transcript text

Both are JSON objects in key-value storage, never evicted, and cleared
together by purge().
"""
import hashlib
import json
import logging
import threading
from typing import Dict, Optional


logger = logging.getLogger(__name__)

TTS_CACHE_KEY = "askai_tts_cache_v1"
TRANSCRIPT_CACHE_KEY = "askai_transcript_cache_v1"


def speech_key(text: str) -> str:
    return text.strip().casefold()


def audio_fingerprint(audio: bytes) -> str:
    return hashlib.sha256(audio).hexdigest()


class MediaCache:

    def __init__(self, storage):
        self.storage = storage
        # guards read-update-write of a whole cache object
        self._lock = threading.Lock()

    def _read(self, key: str) -> Dict[str, str]:
        try:
            raw = json.loads(self.storage.get(key) or "{}")
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Cache {key} unreadable, treating as empty: {e}")
            return {}
        return raw if isinstance(raw, dict) else {}

    def _write(self, key: str, entry_key: str, value: str) -> None:
        with self._lock:
            cache = self._read(key)
            cache[entry_key] = value
            self.storage.set(key, json.dumps(cache))

    def get_speech(self, text: str) -> Optional[str]:
        return self._read(TTS_CACHE_KEY).get(speech_key(text))

    def put_speech(self, text: str, audio: str) -> None:
        self._write(TTS_CACHE_KEY, speech_key(text), audio)

    def get_transcript(self, audio: bytes) -> Optional[str]:
        return self._read(TRANSCRIPT_CACHE_KEY).get(audio_fingerprint(audio))

    def put_transcript(self, audio: bytes, transcript: str) -> None:
        self._write(TRANSCRIPT_CACHE_KEY, audio_fingerprint(audio), transcript)

    def purge(self) -> None:
        with self._lock:
            self.storage.remove(TTS_CACHE_KEY)
            self.storage.remove(TRANSCRIPT_CACHE_KEY)
        logger.info("🧹 Media caches purged")

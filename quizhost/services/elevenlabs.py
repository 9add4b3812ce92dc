"""
ElevenLabs text-to-speech REST client
"""
import base64
from typing import Optional

import requests

from quizhost.config import ElevenLabsSettings


class ElevenLabsClient:

    def __init__(self, config: Optional[ElevenLabsSettings] = None, timeout_seconds: int = 45):
        self.config = config or ElevenLabsSettings()
        self.timeout_seconds = timeout_seconds
        self._session = requests.Session()

    @property
    def available(self) -> bool:
        return bool(self.config.api_key and self.config.voice_id)

    def synthesize(self, text: str) -> str:
        """
        Synthesize speech for text

        Returns:
            Audio as a data URL (data:audio/mpeg;base64,...)

        Raises:
            requests.RequestException: Transport error or non-success status
        """
        endpoint = f"{self.config.base_url.rstrip('/')}/v1/text-to-speech/{self.config.voice_id}"
        response = self._session.post(
            endpoint,
            params={"output_format": self.config.output_format},
            headers={
                "xi-api-key": self.config.api_key,
                "Content-Type": "application/json",
            },
            json={"text": text, "model_id": self.config.model_id},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        encoded = base64.b64encode(response.content).decode("ascii")
        return f"data:audio/mpeg;base64,{encoded}"

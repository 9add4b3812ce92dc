"""
Gemini REST client - text generation with search grounding, and
speech-to-text through inline audio
"""
import base64
from typing import Any, Dict, List, Optional

import requests

from quizhost.config import GeminiSettings
from quizhost.models import GenerationResult, GroundingLink


TRANSCRIBE_INSTRUCTION = "Transcribe this short quiz question audio accurately in plain English only."


class GeminiError(Exception):
    """Malformed or empty Gemini response"""


class GeminiClient:

    def __init__(self, config: Optional[GeminiSettings] = None, timeout_seconds: int = 45):
        self.config = config or GeminiSettings()
        self.timeout_seconds = timeout_seconds
        self._session = requests.Session()

    @property
    def available(self) -> bool:
        return bool(self.config.api_key)

    def generate(self, prompt: str, system_instruction: str, use_search: bool = True) -> GenerationResult:
        """
        One generateContent call

        Returns:
            GenerationResult with the reply text and the grounding citations
            that carry a link

        Raises:
            requests.RequestException: Transport error or non-success status
            GeminiError: Response without candidates or with a malformed candidate
        """
        payload: Dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if use_search:
            payload["tools"] = [{"google_search": {}}]

        data = self._generate_content(payload)
        candidate = self._first_candidate(data)
        return GenerationResult(
            text=self._candidate_text(candidate),
            citations=self._grounding_links(candidate),
        )

    def transcribe(self, audio: bytes, mime_type: str = "audio/webm") -> str:
        payload = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": TRANSCRIBE_INSTRUCTION},
                        {
                            "inlineData": {
                                "mimeType": mime_type or "audio/webm",
                                "data": base64.b64encode(audio).decode("ascii"),
                            }
                        },
                    ],
                }
            ],
        }
        data = self._generate_content(payload)
        return self._candidate_text(self._first_candidate(data)).strip()

    def _generate_content(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        endpoint = f"{self.config.base_url.rstrip('/')}/models/{self.config.model}:generateContent"
        response = self._session.post(
            endpoint,
            params={"key": self.config.api_key},
            json=payload,
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise GeminiError("Gemini response is not a JSON object")
        return data

    @staticmethod
    def _first_candidate(data: Dict[str, Any]) -> Dict[str, Any]:
        candidates = data.get("candidates") or []
        if not isinstance(candidates, list) or not candidates:
            raise GeminiError("No candidates in Gemini response")
        if not isinstance(candidates[0], dict):
            raise GeminiError("Gemini candidate is not a JSON object")
        return candidates[0]

    @staticmethod
    def _candidate_text(candidate: Dict[str, Any]) -> str:
        content = candidate.get("content") or {}
        if not isinstance(content, dict):
            raise GeminiError("Gemini candidate content is not a JSON object")
        parts = content.get("parts") or []
        if not isinstance(parts, list):
            raise GeminiError("Gemini candidate parts is not a list")
        return "".join(p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str))

    @staticmethod
    def _grounding_links(candidate: Dict[str, Any]) -> List[GroundingLink]:
        metadata = candidate.get("groundingMetadata") or {}
        chunks = (metadata.get("groundingChunks") if isinstance(metadata, dict) else None) or []
        links = []
        for chunk in chunks if isinstance(chunks, list) else []:
            web = chunk.get("web") if isinstance(chunk, dict) else None
            if isinstance(web, dict) and isinstance(web.get("uri"), str) and web["uri"]:
                links.append(GroundingLink(title=str(web.get("title") or ""), uri=web["uri"]))
        return links

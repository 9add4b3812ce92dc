"""
Ask-AI endpoints: question submission, transcription and speech synthesis

These call external services, so they are plain (threadpool) handlers.
"""
import base64
import binascii
import logging

from fastapi import APIRouter, HTTPException

from quizhost import state
from quizhost.api.common import require


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ask-ai", tags=["ask-ai"])


@router.post("/question")
def submit_question(request: dict):
    """
    Submit the active team's question and wait for the AI answer

    Request:
        {"question": "Who discovered penicillin?"}

    Response: the session record, normally in ANSWERING state
    """
    question = require(request, "question")
    return state.ORCHESTRATOR.submit_question(str(question)).to_record()


@router.post("/transcribe")
def transcribe(request: dict):
    """
    Convert recorded audio to question text

    Request:
        {"audio": "<base64>", "mime_type": "audio/webm"}

    Response:
        {"transcript": "..." | null}
    """
    encoded = require(request, "audio")
    mime_type = request.get("mime_type") or request.get("mimeType") or "audio/webm"
    try:
        audio = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError, TypeError):
        raise HTTPException(status_code=400, detail="audio must be base64 encoded")

    return {"transcript": state.ORCHESTRATOR.transcribe(audio, mime_type)}


@router.post("/tts")
def text_to_speech(request: dict):
    """
    Synthesize host speech

    Request:
        {"text": "Team 1, your mic is now enabled."}

    Response:
        {"audio": "data:audio/mpeg;base64,..." | null}
    """
    text = require(request, "text")
    return {"audio": state.MEDIA.get_tts_audio(str(text))}

"""
Configuration endpoints
"""
import logging
from fastapi import APIRouter, HTTPException

from quizhost import state


logger = logging.getLogger(__name__)

router = APIRouter(tags=["config"])


@router.get("/config")
async def get_config():
    """Non-secret configuration the front ends need (poll cadence, round setup)"""
    if state.SETTINGS is None:
        raise HTTPException(status_code=500, detail="Settings are not loaded")

    settings = state.SETTINGS
    session = state.SESSION_SERVICE.get_session()

    return {
        "poll_interval_ms": settings.poll_interval_ms,
        "classification_policy": settings.classification_policy.value,
        "rejudge_policy": settings.rejudge_policy.value,
        "use_search_grounding": settings.use_search_grounding,
        "question": session.current_question.to_record() if session.current_question else None,
        "teams": [{"id": team.id, "name": team.name} for team in session.teams],
        "gemini_model": settings.gemini.model,
        "tts_voice_configured": bool(settings.elevenlabs.voice_id),
    }

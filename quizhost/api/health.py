"""
Health check and system status endpoints
"""
from fastapi import APIRouter
from quizhost import state


router = APIRouter(tags=["health"])


@router.get("/")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "message": "Ask-AI Quiz Host",
        "version": "1.0.0",
        "ai_configured": state.ORCHESTRATOR.generator.available if state.ORCHESTRATOR else False,
        "tts_configured": state.MEDIA.tts_client.available if state.MEDIA else False,
    }

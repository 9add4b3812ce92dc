"""
Admin endpoints for session control
"""
from fastapi import APIRouter
import logging

from quizhost import state
from quizhost.api.common import parse_enum, require
from quizhost.models import AskAiState, QuizStatus, Verdict


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/status")
async def update_status(request: dict):
    """
    Admin: Change round status

    Request:
        {"status": "PREVIEW" | "LIVE" | "LOCKED" | "REVEALED"}
    """
    status = parse_enum(QuizStatus, require(request, "status"))
    return state.SESSION_SERVICE.update_status(status).to_record()


@router.post("/reset")
async def reset_session():
    """Reset the session between rounds (team scores zeroed)"""
    return state.SESSION_SERVICE.reset_session().to_record()


@router.post("/purge")
async def purge_media_cache():
    """Clear the speech and transcript caches"""
    state.MEDIA.purge()
    return state.SESSION_SERVICE.get_session().to_record()


@router.post("/active-team")
async def set_active_team(request: dict):
    """
    Admin: Select the team that gets the microphone

    Request:
        {"team_id": "t1"}

    Unknown team ids leave the session unchanged.
    """
    team_id = require(request, "team_id", "teamId")
    return state.SESSION_SERVICE.set_active_team(str(team_id)).to_record()


@router.post("/ask-ai-state")
async def set_ask_ai_state(request: dict):
    """
    Admin: Move the Ask-AI state machine (e.g. enable mic -> LISTENING)

    Request:
        {"state": "LISTENING"}
    """
    ask_ai_state = parse_enum(AskAiState, require(request, "state"))
    return state.SESSION_SERVICE.set_ask_ai_state(ask_ai_state).to_record()


@router.post("/judge")
async def judge_ask_ai(request: dict):
    """
    Admin: Rule on the AI's answer

    Request:
        {"verdict": "AI_CORRECT" | "AI_WRONG"}
    """
    verdict = parse_enum(Verdict, require(request, "verdict"))
    return state.SESSION_SERVICE.judge_ask_ai(verdict).to_record()

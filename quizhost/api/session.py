"""
Session read endpoint polled by every front end
"""
from fastapi import APIRouter

from quizhost import state


router = APIRouter(tags=["session"])


@router.get("/api/session")
async def get_session():
    """Current session record (whole snapshot)"""
    return state.SESSION_SERVICE.get_session().to_record()

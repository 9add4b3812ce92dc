"""
Leaderboard endpoint for the public display
"""
from fastapi import APIRouter

from quizhost import state
from quizhost.services.leaderboard import get_leaderboard_data


router = APIRouter(tags=["leaderboard"])


@router.get("/api/leaderboard-data")
async def leaderboard_data():
    """Scoreboard sorted by score, highest first"""
    return get_leaderboard_data(state.SESSION_SERVICE.get_session())

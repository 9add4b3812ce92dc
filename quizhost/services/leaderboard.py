"""
Leaderboard service - Assemble scoreboard data for the public display
"""
from typing import Dict

from quizhost.models import Session


def get_leaderboard_data(session: Session) -> Dict:
    """
    Teams sorted by score (desc); ties keep roster order

    Returns:
        {"teams": [{"rank", "team_id", "team_name", "score", "is_active"}], ...}
    """
    ordered = sorted(enumerate(session.teams), key=lambda item: (-item[1].score, item[0]))

    teams = []
    for idx, (_, team) in enumerate(ordered):
        teams.append({
            "rank": idx + 1,
            "team_id": team.id,
            "team_name": team.name,
            "score": team.score,
            "is_active": team.id == session.active_team_id,
        })

    return {
        "status": session.status.value,
        "active_team_id": session.active_team_id,
        "teams": teams,
        "total_teams": len(teams),
    }

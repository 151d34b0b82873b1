"""
Game view service.

Builds the read-only projection of a game (status, teams, slots) so the
frontend can render the lobby and the scoreboard straight from the server.
"""
from typing import Any, Dict, List, Optional

from models import Game, Team, Slot, GameStatus
from core.storage import Storage


def get_game_view(storage: Storage, game_id: str) -> Dict[str, Any]:
    """
    Return the game with its teams (creator's side first) and each team's
    slots in roster order.

    Raises GameNotFound when the id is unknown.
    """
    game = storage.get(Game, game_id)

    teams: List[Dict[str, Any]] = []
    for team in storage.list_children(Game, game.id, Team):
        slots = [
            {
                "slot_id": slot.id,
                "user_id": slot.user_id,
                "is_open": slot.is_open,
                "is_vacant": slot.is_vacant,
            }
            for slot in storage.list_children(Team, team.id, Slot)
        ]
        teams.append({
            "team_id": team.id,
            "score": team.score,
            "slots": slots,
        })

    return {
        "game_id": game.id,
        "status": game.status,
        "team_players": game.team_players,
        "start_time": game.start_time,
        "teams": teams,
    }


def list_games(storage: Storage, status: Optional[GameStatus] = None) -> List[Game]:
    """Newest games first, optionally filtered by status."""
    if status is None:
        return storage.list(Game, order_by=Game.start_time.desc())
    return storage.list(Game, order_by=Game.start_time.desc(), status=status)

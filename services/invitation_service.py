"""
Invitation service.

Answers "which games can this player join right now": every invitation on a
vacant slot that is either open to everyone or reserved for the player.
"""
from typing import Any, Dict, List

from sqlalchemy import or_

from models import Invitation, Slot, Team, User
from core.storage import Storage


def get_user_invitations(storage: Storage, user_id: str) -> List[Dict[str, Any]]:
    """
    Return pending invitations visible to the user, oldest first.

    Raises UserNotFound when the user does not exist.
    """
    storage.get(User, user_id)

    rows = (
        storage.session.query(Invitation, Slot, Team.game_id)
        .join(Slot, Invitation.slot_id == Slot.id)
        .join(Team, Slot.team_id == Team.id)
        .filter(
            Slot.is_vacant == True,  # noqa: E712
            or_(Slot.is_open == True, Slot.user_id == user_id)  # noqa: E712
        )
        .order_by(Invitation.created_at, Invitation.id)
        .all()
    )

    return [
        {
            "invitation_id": invitation.id,
            "slot_id": slot.id,
            "team_id": slot.team_id,
            "game_id": game_id,
            "all_players_invited": invitation.all_players_invited,
        }
        for invitation, slot, game_id in rows
    ]

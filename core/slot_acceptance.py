"""
Slot Acceptance：玩家接受名額

職責：
1. 判斷玩家是否可以接受某個名額
2. 認領名額並刪除該名額的所有 Invitation
3. 名額全部額滿時，把比賽推進到 confirmed

並發安全：
- 先鎖定 Game，同一場比賽的接受動作依序執行
- 名額認領使用條件式 UPDATE，兩個請求不可能同時成功
"""
import logging

from models import Game, Team, Slot, Invitation, User, GameStatus
from core.storage import Storage
from core.locks import with_game_lock, claim_vacant_slot
from core.state_machine import GameStateMachine
from core.exceptions import GameNotFound, SlotNotAvailable
from database import transactional

logger = logging.getLogger(__name__)


class SlotAcceptanceCoordinator:
    """名額接受流程"""

    @staticmethod
    def can_accept(slot: Slot, user_id: str) -> bool:
        """
        接受條件：名額空缺，且（名額開放，或名額保留給這位玩家）
        """
        return slot.is_vacant and (slot.is_open or slot.user_id == user_id)

    @staticmethod
    @transactional
    def accept_slot(storage: Storage, slot_id: str, acting_user_id: str) -> Slot:
        """
        接受名額

        流程：
        1. 找到 Slot、Team 與 User
        2. 鎖定 Game
        3. 檢查接受條件並以 compare-and-set 認領
        4. 刪除該名額所有 Invitation
        5. 全部名額額滿 -> Game 轉為 confirmed

        參數：
            storage: Storage
            slot_id: Slot id
            acting_user_id: 接受名額的玩家

        返回：
            更新後的 Slot

        異常：
            SlotNotFound: 名額不存在
            UserNotFound: 玩家不存在
            SlotNotAvailable: 名額已被佔用，或保留給其他玩家
        """
        # 1. 找到名額與玩家
        slot = storage.get(Slot, slot_id)
        storage.get(User, acting_user_id)
        team = storage.get(Team, slot.team_id)

        # 2. 鎖定比賽
        game = with_game_lock(team.game_id, storage).first()
        if not game:
            raise GameNotFound(team.game_id)

        # 3. 認領名額
        if not SlotAcceptanceCoordinator.can_accept(slot, acting_user_id):
            raise SlotNotAvailable(slot_id, acting_user_id)

        if not claim_vacant_slot(slot_id, acting_user_id, storage):
            # 讀取之後被其他請求搶先
            logger.warning(f"Slot {slot_id} was claimed concurrently, rejecting {acting_user_id}")
            raise SlotNotAvailable(slot_id, acting_user_id)

        storage.refresh(slot)
        logger.info(f"User {acting_user_id} accepted slot {slot_id} in game {game.id}")

        # 4. 刪除邀請
        invitations = storage.list_children(Slot, slot.id, Invitation)
        for invitation in invitations:
            storage.delete(invitation)

        # 5. 是否全部額滿
        if game.status == GameStatus.PENDING and no_slots_are_vacant(storage, game):
            GameStateMachine.transition(game, GameStatus.CONFIRMED, storage)

        return slot


def no_slots_are_vacant(storage: Storage, game: Game) -> bool:
    """檢查比賽所有隊伍的所有名額是否都已被接受"""
    for team in storage.list_children(Game, game.id, Team):
        for slot in storage.list_children(Team, team.id, Slot):
            if slot.is_vacant:
                return False
    return True

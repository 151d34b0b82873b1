"""
Game 狀態機：集中管理所有狀態轉換

pending ──(所有名額額滿)──> confirmed ──(提交分數)──> finished

狀態只會前進，不會倒退。
"""
import logging

from models import Game, GameStatus
from core.exceptions import InvalidStateTransition
from core.storage import Storage

logger = logging.getLogger(__name__)


class GameStateMachine:
    """Game 狀態轉換"""

    TRANSITIONS = {
        GameStatus.PENDING: {GameStatus.CONFIRMED},
        GameStatus.CONFIRMED: {GameStatus.FINISHED},
        GameStatus.FINISHED: set(),
    }

    @classmethod
    def can_transition(cls, current: GameStatus, target: GameStatus) -> bool:
        return target in cls.TRANSITIONS[current]

    @classmethod
    def transition(cls, game: Game, target: GameStatus, storage: Storage) -> Game:
        """
        轉換 Game 狀態

        參數：
            game: 已鎖定（或剛建立）的 Game
            target: 目標狀態
            storage: Storage

        返回：
            更新後的 Game

        異常：
            InvalidStateTransition: 不允許的轉換（例如 finished -> confirmed）
        """
        current = game.status
        if not cls.can_transition(current, target):
            raise InvalidStateTransition(
                f"Game {game.id} cannot go from {current.value} to {target.value}"
            )

        game.status = target
        storage.save(game)

        logger.info(f"Game {game.id} state changed: {current.value} -> {target.value}")
        return game

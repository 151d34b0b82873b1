"""
並發控制工具

提供 Database-level 的鎖定機制，防止競態條件（Race Condition）

- 比賽層級：SELECT ... FOR UPDATE 悲觀鎖（PostgreSQL），同一場比賽的
  接受名額 / 結算依序執行
- 名額 / 結算：條件式 UPDATE（compare-and-set），只有一個請求能把
  is_vacant 從 True 改成 False，或把 status 從 confirmed 改成 finished

SQLite 不支援 FOR UPDATE（SQLAlchemy 會省略），但 SQLite 本身的寫入是
序列化的，條件式 UPDATE 仍然保證同一名額只會被接受一次、同一場比賽
只會被結算一次。
"""
from sqlalchemy import or_
from sqlalchemy.orm import Query

from models import Game, GameStatus, Slot
from core.storage import Storage


def with_game_lock(game_id: str, storage: Storage) -> Query:
    """
    鎖定一個 Game（行級鎖）

    使用場景：
    - 接受名額後判斷是否全部額滿（需要一致的快照）
    - 結算分數時（防止重複結算）

    範例：
        game = with_game_lock(game_id, storage).first()
        if not game:
            raise GameNotFound(game_id)

    參數：
        game_id: Game id
        storage: Storage

    返回：
        Query object（需要呼叫 .first() 或 .one() 來取得結果）

    注意：
        - nowait=False 表示如果鎖被佔用，會等待
        - 必須在 transaction 內使用（確保有 commit 或 rollback）
    """
    return storage.session.query(Game).filter(
        Game.id == game_id
    ).with_for_update(nowait=False)


def claim_vacant_slot(slot_id: str, user_id: str, storage: Storage) -> bool:
    """
    以單一條件式 UPDATE 認領名額（compare-and-set）

    條件：
        is_vacant = True AND (is_open = True OR user_id = 認領者)

    參數：
        slot_id: Slot id
        user_id: 認領者的 User id
        storage: Storage

    返回：
        True 如果這次請求成功認領，False 表示名額已被佔用或不符資格
    """
    updated = storage.session.query(Slot).filter(
        Slot.id == slot_id,
        Slot.is_vacant == True,  # noqa: E712
        or_(Slot.is_open == True, Slot.user_id == user_id)  # noqa: E712
    ).update(
        {Slot.user_id: user_id, Slot.is_vacant: False},
        synchronize_session=False
    )
    return updated == 1


def finish_confirmed_game(game_id: str, storage: Storage) -> bool:
    """
    以單一條件式 UPDATE 把比賽從 confirmed 改成 finished（compare-and-set）

    使用場景：
    - 結算分數時，在寫入分數與 Rating 之前呼叫
    - 兩個請求同時通過狀態檢查時，只有一個能成功

    參數：
        game_id: Game id
        storage: Storage

    返回：
        True 如果這次請求成功結束比賽，False 表示比賽已被結算（或不是 confirmed）
    """
    updated = storage.session.query(Game).filter(
        Game.id == game_id,
        Game.status == GameStatus.CONFIRMED
    ).update(
        {Game.status: GameStatus.FINISHED},
        synchronize_session=False
    )
    return updated == 1

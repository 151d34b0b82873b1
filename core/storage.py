"""
Storage：核心邏輯唯一的持久化入口

所有 coordinator 都透過注入的 Storage 存取資料，不直接呼叫 db.query()。
Storage 只負責讀寫，commit / rollback 由 @transactional 決定時機。
"""
from typing import List, Optional, Type

from sqlalchemy.orm import Session

from models import Game, Team, Slot, Invitation, User
from core.exceptions import (
    GameNotFound,
    TeamNotFound,
    SlotNotFound,
    UserNotFound,
)

# 父子關係：(parent, child) -> child 上指向 parent 的外鍵欄位
_CHILD_LINKS = {
    (Game, Team): Team.game_id,
    (Team, Slot): Slot.team_id,
    (Slot, Invitation): Invitation.slot_id,
}

_NOT_FOUND = {
    Game: GameNotFound,
    Team: TeamNotFound,
    Slot: SlotNotFound,
    User: UserNotFound,
}


class Storage:
    """SQLAlchemy Session 的薄包裝"""

    def __init__(self, session: Session):
        self.session = session

    def find(self, model: Type, entity_id) -> Optional[object]:
        """依 id 取得實體，不存在時回傳 None"""
        if entity_id is None:
            return None
        return self.session.get(model, entity_id)

    def get(self, model: Type, entity_id):
        """
        依 id 取得實體，不存在時拋出對應的 NotFound 異常

        異常：
            GameNotFound / TeamNotFound / SlotNotFound / UserNotFound
        """
        entity = self.find(model, entity_id)
        if entity is None:
            raise _NOT_FOUND[model](entity_id)
        return entity

    def save(self, entity):
        self.session.add(entity)
        # flush 取得 id，但不 commit
        self.session.flush()
        return entity

    def delete(self, entity) -> None:
        self.session.delete(entity)
        self.session.flush()

    def list(self, model: Type, order_by=None, limit: Optional[int] = None, **filters) -> List:
        """依欄位等值條件列出實體"""
        query = self.session.query(model).filter_by(**filters)
        if order_by is not None:
            query = query.order_by(order_by)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def list_children(self, parent_model: Type, parent_id, child_model: Type) -> List:
        """
        列出某個父實體底下的子實體

        排序：
            Team / Slot 依 position，Invitation 依建立時間
            同一次讀取內順序固定
        """
        link = _CHILD_LINKS.get((parent_model, child_model))
        if link is None:
            raise ValueError(
                f"{child_model.__name__} is not a child of {parent_model.__name__}"
            )

        query = self.session.query(child_model).filter(link == parent_id)
        if hasattr(child_model, "position"):
            query = query.order_by(child_model.position, child_model.id)
        else:
            query = query.order_by(child_model.created_at, child_model.id)
        return query.all()

    def flush(self) -> None:
        self.session.flush()

    def refresh(self, entity) -> None:
        self.session.refresh(entity)

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

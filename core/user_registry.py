"""
User Registry：玩家註冊與查詢

Rating 只能由結算流程修改，這裡只會在註冊時寫入預設值。
"""
from typing import List, Optional
import logging

from models import User
from core.storage import Storage
from core.exceptions import UsernameTaken
from database import transactional, get_settings

logger = logging.getLogger(__name__)


class UserRegistry:
    """玩家註冊與查詢"""

    @staticmethod
    @transactional
    def register_user(storage: Storage, username: str, email: Optional[str] = None) -> User:
        """
        註冊新玩家

        異常：
            UsernameTaken: 使用者名稱已存在
        """
        if storage.list(User, username=username):
            raise UsernameTaken(username)

        user = storage.save(User(
            username=username,
            email=email,
            rating=get_settings().default_rating
        ))
        logger.info(f"Registered user {user.id} ({username})")
        return user

    @staticmethod
    def get_user(storage: Storage, user_id: str) -> User:
        return storage.get(User, user_id)

    @staticmethod
    def leaderboard(storage: Storage, limit: int = 50) -> List[User]:
        """依 Rating 由高到低列出玩家"""
        return storage.list(User, order_by=User.rating.desc(), limit=limit)

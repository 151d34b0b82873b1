"""
User API Endpoints

職責：
1. 註冊玩家
2. 查詢玩家 / 排行榜
3. 查詢玩家目前可加入的邀請
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
import logging

from database import get_db
from schemas import UserCreate, UserResponse, InvitationResponse
from core.storage import Storage
from core.user_registry import UserRegistry
from core.exceptions import UserNotFound, UsernameTaken
from services.invitation_service import get_user_invitations

router = APIRouter(prefix="/api/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.post("", response_model=UserResponse)
def register_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """註冊玩家（Rating 使用預設值）"""
    try:
        return UserRegistry.register_user(Storage(db), user_data.username, user_data.email)

    except UsernameTaken as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to register user: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/leaderboard", response_model=List[UserResponse])
def get_leaderboard(limit: int = Query(50, ge=1, le=500), db: Session = Depends(get_db)):
    return UserRegistry.leaderboard(Storage(db), limit)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db)):
    try:
        return UserRegistry.get_user(Storage(db), user_id)

    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")


@router.get("/{user_id}/invitations", response_model=List[InvitationResponse])
def get_invitations(user_id: str, db: Session = Depends(get_db)):
    """
    取得玩家可接受的邀請

    包含：
    - 開放給所有人的名額
    - 指定給這位玩家的名額
    """
    try:
        return get_user_invitations(Storage(db), user_id)

    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    except Exception as e:
        logger.error(f"Failed to get invitations: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")

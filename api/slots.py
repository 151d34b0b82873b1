"""
Slot API Endpoints

職責：
1. 玩家接受名額（最後一個名額被接受時比賽自動轉為 confirmed）
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from database import get_db
from schemas import SlotAccept, SlotResponse
from core.storage import Storage
from core.slot_acceptance import SlotAcceptanceCoordinator
from core.exceptions import NotFoundError, SlotNotAvailable

router = APIRouter(prefix="/api/slots", tags=["slots"])
logger = logging.getLogger(__name__)


@router.post("/{slot_id}/accept", response_model=SlotResponse)
def accept_slot(slot_id: str, accept_data: SlotAccept, db: Session = Depends(get_db)):
    """
    接受名額

    前置條件：
    - 名額必須空缺
    - 名額開放給所有人，或保留給這位玩家

    失敗時回傳 409，前端可重新查詢比賽狀態
    """
    try:
        return SlotAcceptanceCoordinator.accept_slot(
            Storage(db),
            slot_id,
            accept_data.user_id
        )

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SlotNotAvailable as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to accept slot: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Internal error")

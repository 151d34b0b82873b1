"""
Game API Endpoints

職責：
1. 建立單打 / 雙打比賽
2. 查詢比賽（含隊伍與名額）
3. 提交比分並結算 Rating
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
import logging

from database import get_db
from models import GameStatus
from schemas import (
    SingleMatchCreate,
    DoubleMatchCreate,
    GameResponse,
    GameViewResponse,
    ScoreSubmit,
)
from core.storage import Storage
from core.roster_factory import MatchRosterFactory
from core.score_settlement import ScoreSettlementCoordinator
from core.exceptions import (
    ValidationError,
    NotFoundError,
    ConflictError,
    IntegrityError,
)
from services.game_view_service import get_game_view, list_games

router = APIRouter(prefix="/api/games", tags=["games"])
logger = logging.getLogger(__name__)


@router.post("/single", response_model=GameResponse)
def create_single_game(game_data: SingleMatchCreate, db: Session = Depends(get_db)):
    """
    建立單打比賽

    rival：
        - 對手的 User id：只有該玩家可以接受
        - "all"：任何玩家都可以接受
    """
    try:
        return MatchRosterFactory.create_single_match(
            Storage(db),
            game_data.creator_user_id,
            game_data.rival
        )

    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to create single game: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/double", response_model=GameResponse)
def create_double_game(game_data: DoubleMatchCreate, db: Session = Depends(get_db)):
    """
    建立雙打比賽

    前置條件：
    - rivals 必須剛好兩個
    """
    try:
        return MatchRosterFactory.create_double_match(
            Storage(db),
            game_data.creator_user_id,
            game_data.partner,
            game_data.rivals
        )

    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to create double game: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("", response_model=List[GameResponse])
def get_games(status: Optional[GameStatus] = Query(None), db: Session = Depends(get_db)):
    """列出比賽，可用 ?status=pending|confirmed|finished 過濾"""
    return list_games(Storage(db), status)


@router.get("/{game_id}", response_model=GameViewResponse)
def get_game(game_id: str, db: Session = Depends(get_db)):
    """
    取得比賽檢視

    返回：
        - status / team_players / start_time
        - teams：每隊的分數與名額
    """
    try:
        return get_game_view(Storage(db), game_id)

    except NotFoundError:
        raise HTTPException(status_code=404, detail="Game not found")
    except Exception as e:
        logger.error(f"Failed to get game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{game_id}/score", response_model=GameResponse)
def submit_score(game_id: str, score_data: ScoreSubmit, db: Session = Depends(get_db)):
    """
    提交比分（結算）

    效果：
    - 寫入兩隊分數
    - 狀態轉換 confirmed -> finished
    - 更新所有參賽者的 Rating

    重複提交會回傳 409，不會重複調整 Rating
    """
    first, second = score_data.teams
    try:
        game = ScoreSettlementCoordinator.submit_score(
            Storage(db),
            game_id,
            first.team_id,
            first.score,
            second.team_id,
            second.score
        )
        return game

    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except IntegrityError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to submit score: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Internal error")

"""
API Request / Response schemas（pydantic）
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models import GameStatus, OPEN_SELECTOR


# ============ User ============

class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    email: Optional[str] = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: Optional[str] = None
    rating: float


# ============ Game 建立 ============

class SingleMatchCreate(BaseModel):
    creator_user_id: str
    # 對手的 User id，或 "all" 開放給所有人
    rival: str = OPEN_SELECTOR


class DoubleMatchCreate(BaseModel):
    creator_user_id: str
    partner: str = OPEN_SELECTOR
    rivals: List[str] = Field(default_factory=lambda: [OPEN_SELECTOR, OPEN_SELECTOR])


class GameResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    team_players: int
    start_time: datetime
    status: GameStatus


# ============ Game 檢視 ============

class SlotView(BaseModel):
    slot_id: str
    user_id: Optional[str] = None
    is_open: bool
    is_vacant: bool


class TeamView(BaseModel):
    team_id: str
    score: int
    slots: List[SlotView]


class GameViewResponse(BaseModel):
    game_id: str
    status: GameStatus
    team_players: int
    start_time: datetime
    teams: List[TeamView]


# ============ Slot ============

class SlotAccept(BaseModel):
    user_id: str


class SlotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    team_id: str
    user_id: Optional[str] = None
    is_open: bool
    is_vacant: bool


# ============ Score ============

class TeamScore(BaseModel):
    team_id: str
    score: int = Field(..., ge=0)


class ScoreSubmit(BaseModel):
    teams: List[TeamScore] = Field(..., min_length=2, max_length=2)


# ============ Invitation ============

class InvitationResponse(BaseModel):
    invitation_id: str
    slot_id: str
    team_id: str
    game_id: str
    all_players_invited: bool

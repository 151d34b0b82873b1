"""
SQLAlchemy 資料模型

Game ─┬─ Team (position 0，建立者一方) ─── Slot ─── Invitation
      └─ Team (position 1，對手一方)   ─── Slot ─── Invitation

User 只透過 rating_service 的計算結果更新 rating
"""
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from database import Base

# 開放給所有玩家的 selector
OPEN_SELECTOR = "all"


def _uuid() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GameStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FINISHED = "finished"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    username = Column(String(64), nullable=False, unique=True)
    email = Column(String(255), nullable=True)
    rating = Column(Float, nullable=False, default=1200.0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)


class Game(Base):
    __tablename__ = "games"

    id = Column(String(36), primary_key=True, default=_uuid)
    team_players = Column(Integer, nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    status = Column(Enum(GameStatus), nullable=False, default=GameStatus.PENDING)

    teams = relationship("Team", back_populates="game", order_by="Team.position")


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=_uuid)
    game_id = Column(String(36), ForeignKey("games.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    score = Column(Integer, nullable=False, default=0)

    game = relationship("Game", back_populates="teams")
    slots = relationship("Slot", back_populates="team", order_by="Slot.position")


class Slot(Base):
    __tablename__ = "slots"

    id = Column(String(36), primary_key=True, default=_uuid)
    team_id = Column(String(36), ForeignKey("teams.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    # None：尚未指定玩家（開放名額，或指定的玩家不存在）
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    is_open = Column(Boolean, nullable=False, default=False)
    is_vacant = Column(Boolean, nullable=False, default=True)

    team = relationship("Team", back_populates="slots")
    invitations = relationship("Invitation", back_populates="slot")


class Invitation(Base):
    __tablename__ = "invitations"

    id = Column(String(36), primary_key=True, default=_uuid)
    slot_id = Column(String(36), ForeignKey("slots.id"), nullable=False, index=True)
    all_players_invited = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    slot = relationship("Slot", back_populates="invitations")

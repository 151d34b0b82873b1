"""
Roster Factory：建立一場比賽的完整結構

職責：
1. 建立單打（1v1）比賽
2. 建立雙打（2v2）比賽

一次建立 Game、兩個 Team、所有 Slot 與 Invitation，全部在同一個
transaction 內完成（任何一步失敗都不會留下半套資料）。

Selector：
- "all"（OPEN_SELECTOR）：開放給任何玩家
- 其他字串：指定某位玩家的 User id
"""
from datetime import datetime, timezone
from typing import List, Optional
import logging

from models import Game, Team, Slot, Invitation, User, GameStatus, OPEN_SELECTOR
from core.storage import Storage
from core.exceptions import (
    InvalidSelectorCount,
    MissingIdentity,
    UserNotFound,
)
from database import transactional, get_settings

logger = logging.getLogger(__name__)


class MatchRosterFactory:
    """比賽結構建立器"""

    @staticmethod
    @transactional
    def create_single_match(storage: Storage, creator_user_id: str, rival_selector: str) -> Game:
        """
        建立單打比賽

        結構：
            Team A：建立者（已佔用，不發邀請）
            Team B：對手名額（空缺，附一張 Invitation）

        參數：
            storage: Storage
            creator_user_id: 建立者的 User id
            rival_selector: 對手 User id 或 "all"

        返回：
            新建立的 Game（status = pending）

        異常：
            MissingIdentity: 缺少建立者或對手
            UserNotFound: 建立者不存在（或 strict 模式下對手不存在）
        """
        MatchRosterFactory._require_creator(storage, creator_user_id)
        if not rival_selector:
            raise MissingIdentity("Single match needs a rival selector")

        game = MatchRosterFactory._new_game(storage, team_players=1)

        first_team = MatchRosterFactory._new_team(storage, game, position=0)
        MatchRosterFactory._occupied_slot(storage, first_team, creator_user_id)

        second_team = MatchRosterFactory._new_team(storage, game, position=1)
        MatchRosterFactory._invited_slot(storage, second_team, rival_selector, position=0)

        logger.info(
            f"Created single game {game.id} by {creator_user_id} (rival={rival_selector})"
        )
        return game

    @staticmethod
    @transactional
    def create_double_match(
        storage: Storage,
        creator_user_id: str,
        partner_selector: str,
        rival_selectors: List[str]
    ) -> Game:
        """
        建立雙打比賽

        結構：
            Team A：建立者（已佔用）+ 隊友名額（空缺，附 Invitation）
            Team B：兩個對手名額（各自空缺，各自附 Invitation）

        異常：
            InvalidSelectorCount: 對手不是剛好兩位
            MissingIdentity: 缺少建立者或隊友
            UserNotFound: 建立者不存在（或 strict 模式下被指定者不存在）
        """
        rival_selectors = list(rival_selectors or [])
        if len(rival_selectors) != 2:
            raise InvalidSelectorCount(len(rival_selectors))
        if not all(rival_selectors):
            raise MissingIdentity("Rival selectors must not be empty")

        MatchRosterFactory._require_creator(storage, creator_user_id)
        if not partner_selector:
            raise MissingIdentity("Double match needs a partner selector")

        game = MatchRosterFactory._new_game(storage, team_players=2)

        first_team = MatchRosterFactory._new_team(storage, game, position=0)
        MatchRosterFactory._occupied_slot(storage, first_team, creator_user_id)
        MatchRosterFactory._invited_slot(storage, first_team, partner_selector, position=1)

        second_team = MatchRosterFactory._new_team(storage, game, position=1)
        for position, rival_selector in enumerate(rival_selectors):
            MatchRosterFactory._invited_slot(storage, second_team, rival_selector, position)

        logger.info(
            f"Created double game {game.id} by {creator_user_id} "
            f"(partner={partner_selector}, rivals={rival_selectors})"
        )
        return game

    @staticmethod
    def _require_creator(storage: Storage, creator_user_id: Optional[str]) -> User:
        if not creator_user_id:
            raise MissingIdentity("Match creator is required")
        return storage.get(User, creator_user_id)

    @staticmethod
    def _new_game(storage: Storage, team_players: int) -> Game:
        game = Game(
            team_players=team_players,
            start_time=datetime.now(timezone.utc),
            status=GameStatus.PENDING
        )
        return storage.save(game)

    @staticmethod
    def _new_team(storage: Storage, game: Game, position: int) -> Team:
        return storage.save(Team(game_id=game.id, position=position, score=0))

    @staticmethod
    def _occupied_slot(storage: Storage, team: Team, user_id: str) -> Slot:
        slot = Slot(
            team_id=team.id,
            position=0,
            user_id=user_id,
            is_open=False,
            is_vacant=False
        )
        return storage.save(slot)

    @staticmethod
    def _invited_slot(storage: Storage, team: Team, selector: str, position: int) -> Slot:
        """建立空缺名額與對應的 Invitation"""
        is_open = selector == OPEN_SELECTOR
        user_id = None if is_open else resolve_selector(storage, selector)

        slot = storage.save(Slot(
            team_id=team.id,
            position=position,
            user_id=user_id,
            is_open=is_open,
            is_vacant=True
        ))
        storage.save(Invitation(slot_id=slot.id, all_players_invited=is_open))
        return slot


def resolve_selector(storage: Storage, selector: str) -> Optional[str]:
    """
    把指定玩家的 selector 轉成 User id

    找不到玩家時：
        - 預設：回傳 None，名額沒有 user_id 也不開放（沿用既有行為）
        - strict_selector_resolution=True：拋出 UserNotFound
    """
    user = storage.find(User, selector)
    if user is not None:
        return user.id

    if get_settings().strict_selector_resolution:
        raise UserNotFound(selector)

    logger.warning(f"Selector {selector} does not match any user, slot left unassigned")
    return None

"""
Score Settlement：提交比分、結束比賽、更新 Rating

職責：
1. 驗證比分與隊伍
2. 寫入兩隊分數，Game 轉為 finished
3. 依 team_players 呼叫單打或雙打的 Rating 計算
4. 寫回所有參賽者的 Rating

整個流程在同一個 transaction 內：分數、狀態、Rating 一起 commit，
任何一步失敗全部 rollback。
"""
from typing import List, Tuple
import logging

from models import Game, Team, Slot, User, GameStatus
from core.storage import Storage
from core.locks import with_game_lock, finish_confirmed_game
from core.exceptions import (
    GameNotFound,
    TeamNotFound,
    InvalidScore,
    TiedScore,
    GameAlreadyFinished,
    InvalidStateTransition,
    RosterSizeMismatch,
    UnresolvedParticipant,
)
from services.rating_service import single_match_update, double_match_update
from database import transactional, get_settings

logger = logging.getLogger(__name__)


class ScoreSettlementCoordinator:
    """比分結算流程"""

    @staticmethod
    @transactional
    def submit_score(
        storage: Storage,
        game_id: str,
        team_a_id: str,
        team_a_score: int,
        team_b_id: str,
        team_b_score: int
    ) -> Game:
        """
        提交比分並結算

        前置條件：
        1. Game 存在且狀態為 confirmed
        2. 兩個 Team 都屬於這場比賽，且不是同一隊
        3. 分數不可為負、不可平手

        參數：
            storage: Storage
            game_id: Game id
            team_a_id / team_a_score: 第一隊與分數
            team_b_id / team_b_score: 第二隊與分數

        返回：
            結算後的 Game（status = finished）

        異常：
            GameNotFound / TeamNotFound
            InvalidScore / TiedScore
            GameAlreadyFinished: 重複提交
            InvalidStateTransition: 比賽尚未額滿
            RosterSizeMismatch / UnresolvedParticipant
        """
        # 1. 驗證分數
        if team_a_score < 0 or team_b_score < 0:
            raise InvalidScore(
                f"Scores must be non-negative, got {team_a_score} and {team_b_score}"
            )
        if team_a_score == team_b_score:
            raise TiedScore(team_a_score)

        # 2. 鎖定比賽
        game = with_game_lock(game_id, storage).first()
        if not game:
            raise GameNotFound(game_id)

        if game.status == GameStatus.FINISHED:
            raise GameAlreadyFinished(game_id)
        if game.status != GameStatus.CONFIRMED:
            raise InvalidStateTransition(
                f"Game {game_id} is {game.status.value}, all slots must be accepted before scoring"
            )

        # 3. 驗證隊伍
        team_a = _team_of_game(storage, game, team_a_id)
        team_b = _team_of_game(storage, game, team_b_id)
        if team_a.id == team_b.id:
            raise TeamNotFound(team_b_id)

        # 4. 決定勝負
        if team_a_score > team_b_score:
            winner_team, loser_team = team_a, team_b
        else:
            winner_team, loser_team = team_b, team_a
        winner_score = max(team_a_score, team_b_score)
        loser_score = min(team_a_score, team_b_score)

        # 5. 以 compare-and-set 結束比賽（同一場比賽只有一個請求能通過）
        if not finish_confirmed_game(game_id, storage):
            storage.refresh(game)
            logger.warning(f"Game {game_id} was settled concurrently, rejecting submission")
            if game.status == GameStatus.FINISHED:
                raise GameAlreadyFinished(game_id)
            raise InvalidStateTransition(
                f"Game {game_id} is {game.status.value}, cannot be finished"
            )
        storage.refresh(game)
        logger.info(f"Game {game_id} state changed: confirmed -> finished")

        # 6. 寫入分數
        team_a.score = team_a_score
        team_b.score = team_b_score
        storage.save(team_a)
        storage.save(team_b)

        # 7. 更新 Rating
        winners = _participants(storage, game, winner_team)
        losers = _participants(storage, game, loser_team)
        k = get_settings().rating_k_factor

        if game.team_players == 1:
            update_single_ratings(winners[0], losers[0], winner_score, loser_score, k)
        else:
            update_double_ratings(winners, losers, winner_score, loser_score, k)

        for user in winners + losers:
            storage.save(user)

        logger.info(
            f"Game {game_id} settled {winner_score}:{loser_score}, "
            f"winners={[u.id for u in winners]}, losers={[u.id for u in losers]}"
        )
        return game


def _team_of_game(storage: Storage, game: Game, team_id: str) -> Team:
    team = storage.find(Team, team_id)
    if team is None or team.game_id != game.id:
        raise TeamNotFound(team_id)
    return team


def _participants(storage: Storage, game: Game, team: Team) -> List[User]:
    """
    取得隊伍的所有參賽者（依名額順序）

    異常：
        RosterSizeMismatch: 名額數量不等於 team_players
        UnresolvedParticipant: 名額沒有玩家，或玩家資料不存在
    """
    slots = storage.list_children(Team, team.id, Slot)
    if len(slots) != game.team_players:
        raise RosterSizeMismatch(team.id, game.team_players, len(slots))

    users = []
    for slot in slots:
        user = storage.find(User, slot.user_id)
        if user is None:
            raise UnresolvedParticipant(slot.id)
        users.append(user)
    return users


def update_single_ratings(
    winner: User,
    loser: User,
    winner_score: int,
    loser_score: int,
    k: float
) -> Tuple[float, float]:
    winner.rating, loser.rating = single_match_update(
        winner.rating, loser.rating, float(winner_score), float(loser_score), k
    )
    return winner.rating, loser.rating


def update_double_ratings(
    winners: List[User],
    losers: List[User],
    winner_score: int,
    loser_score: int,
    k: float
) -> Tuple[float, float, float, float]:
    first_winner, second_winner = winners
    first_loser, second_loser = losers

    (
        first_winner.rating,
        second_winner.rating,
        first_loser.rating,
        second_loser.rating,
    ) = double_match_update(
        first_winner.rating,
        second_winner.rating,
        first_loser.rating,
        second_loser.rating,
        float(winner_score),
        float(loser_score),
        k
    )
    return first_winner.rating, second_winner.rating, first_loser.rating, second_loser.rating

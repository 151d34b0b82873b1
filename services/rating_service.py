"""
評分服務：比賽結束後的 Rating 計算邏輯

純計算邏輯，不碰資料庫

這不是標準 Elo：實際得分比例（winner_score / 總分）取代了 1 / 0 的勝負，
雙打則把四組對位的差值平均後，對兩隊每位玩家套用同一個調整量並無條件進位。
"""
import math
from typing import Tuple

DEFAULT_K = 32.0


def transformed_rating(rating: float) -> float:
    return 10 ** (rating / 400.0)


def single_match_update(
    winner_rating: float,
    loser_rating: float,
    winner_score: float,
    loser_score: float,
    k: float = DEFAULT_K
) -> Tuple[float, float]:
    """
    計算單打比賽後雙方的新 Rating

    公式：
        expected_winner = T(w) / (T(w) + T(l))，T(r) = 10^(r/400)
        actual_winner   = winner_score / (winner_score + loser_score)
        new_winner      = w + k * (actual_winner - expected_winner)
        new_loser       = l + k * (actual_loser - expected_loser)

    不做四捨五入。

    前置條件（由呼叫者保證）：
        分數不可為負，且不可兩者皆為 0（否則會除以零）

    參數：
        winner_rating: 勝方目前 Rating
        loser_rating: 敗方目前 Rating
        winner_score: 勝方得分
        loser_score: 敗方得分
        k: K 值

    返回：
        (new_winner_rating, new_loser_rating)

    範例：
        single_match_update(1200, 1200, 1, 0, 32) -> (1216.0, 1184.0)
    """
    winner_transformed = transformed_rating(winner_rating)
    loser_transformed = transformed_rating(loser_rating)
    total_transformed = winner_transformed + loser_transformed

    expected_winner_share = winner_transformed / total_transformed
    expected_loser_share = 1 - expected_winner_share

    actual_winner_share = winner_score / (winner_score + loser_score)
    actual_loser_share = 1 - actual_winner_share

    new_winner_rating = winner_rating + k * (actual_winner_share - expected_winner_share)
    new_loser_rating = loser_rating + k * (actual_loser_share - expected_loser_share)

    return new_winner_rating, new_loser_rating


def double_match_update(
    first_winner_rating: float,
    second_winner_rating: float,
    first_loser_rating: float,
    second_loser_rating: float,
    winner_score: float,
    loser_score: float,
    k: float = DEFAULT_K
) -> Tuple[int, int, int, int]:
    """
    計算雙打比賽後四位玩家的新 Rating

    流程：
    1. 四組對位：(勝1, 敗1)、(勝2, 敗2)、(勝1, 敗2)、(勝2, 敗1)
    2. 每組跑一次 single_match_update，取 |新勝方 - 新敗方| 作為差值
    3. 取四個差值的平均
    4. 勝方：ceil(原 Rating + 平均差值)，敗方：ceil(原 Rating - 平均差值)

    注意：
        敗方同樣使用 ceil（往上取整），不是 floor

    返回：
        (first_winner, second_winner, first_loser, second_loser)
    """
    winners = [first_winner_rating, second_winner_rating]
    losers = [first_loser_rating, second_loser_rating]

    pairings = list(zip(winners, losers)) + list(zip(winners, reversed(losers)))

    deltas = []
    for winner_rating, loser_rating in pairings:
        new_winner, new_loser = single_match_update(
            winner_rating, loser_rating, winner_score, loser_score, k
        )
        deltas.append(abs(new_winner - new_loser))

    average_delta = sum(deltas) / len(deltas)

    return (
        math.ceil(first_winner_rating + average_delta),
        math.ceil(second_winner_rating + average_delta),
        math.ceil(first_loser_rating - average_delta),
        math.ceil(second_loser_rating - average_delta),
    )

"""
自定義異常類別

集中管理所有業務邏輯異常，方便 API 層統一處理

四個分類（API 層依分類決定 HTTP status）：
- ValidationError：指令內容不合法（400）
- NotFoundError：引用的 Game / Team / Slot / User 不存在（404）
- ConflictError：動作被拒絕，呼叫端可重新查詢狀態（409）
- IntegrityError：結算前置條件不成立，整筆 transaction 回滾（422）
"""


class MatchmakingException(Exception):
    """所有配對異常的基類"""
    pass


class ValidationError(MatchmakingException):
    pass


class NotFoundError(MatchmakingException):
    pass


class ConflictError(MatchmakingException):
    pass


class IntegrityError(MatchmakingException):
    pass


# ============ 指令驗證異常 ============

class MissingIdentity(ValidationError):
    """缺少建立者或隊友的身分"""
    pass


class InvalidSelectorCount(ValidationError):
    """雙打必須剛好指定兩位對手"""
    def __init__(self, count):
        self.count = count
        super().__init__(f"Double match needs exactly 2 rival selectors, got {count}")


class InvalidScore(ValidationError):
    """分數不合法（負數）"""
    pass


class TiedScore(ValidationError):
    """雙方分數相同，無法決定勝負"""
    def __init__(self, score):
        self.score = score
        super().__init__(f"Both teams scored {score}, ties are not accepted")


# ============ 查無資料異常 ============

class GameNotFound(NotFoundError):
    """比賽不存在"""
    def __init__(self, game_id):
        self.game_id = game_id
        super().__init__(f"Game {game_id} not found")


class TeamNotFound(NotFoundError):
    """隊伍不存在（或不屬於該比賽）"""
    def __init__(self, team_id):
        self.team_id = team_id
        super().__init__(f"Team {team_id} not found")


class SlotNotFound(NotFoundError):
    """名額不存在"""
    def __init__(self, slot_id):
        self.slot_id = slot_id
        super().__init__(f"Slot {slot_id} not found")


class UserNotFound(NotFoundError):
    """玩家不存在"""
    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


# ============ 衝突異常 ============

class SlotNotAvailable(ConflictError):
    """名額已被佔用，或保留給其他玩家"""
    def __init__(self, slot_id, user_id):
        self.slot_id = slot_id
        self.user_id = user_id
        super().__init__(f"Slot {slot_id} cannot be accepted by user {user_id}")


class GameAlreadyFinished(ConflictError):
    """比賽已結算，不可重複提交分數"""
    def __init__(self, game_id):
        self.game_id = game_id
        super().__init__(f"Game {game_id} is already finished")


class InvalidStateTransition(ConflictError):
    """非法的狀態轉換"""
    pass


class UsernameTaken(ConflictError):
    def __init__(self, username):
        self.username = username
        super().__init__(f"Username {username} is already taken")


# ============ 結算完整性異常 ============

class RosterSizeMismatch(IntegrityError):
    """隊伍名額數量與 team_players 不符"""
    def __init__(self, team_id, expected, actual):
        self.team_id = team_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Team {team_id} has {actual} slots, expected {expected}"
        )


class UnresolvedParticipant(IntegrityError):
    """名額沒有對應的玩家，無法計算評分"""
    def __init__(self, slot_id):
        self.slot_id = slot_id
        super().__init__(f"Slot {slot_id} has no resolved participant")

"""
服務層

這個 package 包含純計算邏輯與唯讀查詢，不負責狀態轉換：
- RatingService：單打 / 雙打 Rating 計算
- GameViewService：比賽檢視與列表
- InvitationService：玩家可加入的邀請
"""

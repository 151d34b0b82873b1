"""
核心業務邏輯層

這個 package 包含比賽生命週期的核心邏輯，包括：
- Storage：唯一的持久化入口
- 狀態機：集中管理 Game 狀態轉換
- Roster Factory / Slot Acceptance / Score Settlement：建立、接受名額、結算
- Locks：並發控制工具
"""

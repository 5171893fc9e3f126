from .achievement_service import AchievementService
from .user_service import UserService, UserPage

__all__ = ['AchievementService', 'UserService', 'UserPage']

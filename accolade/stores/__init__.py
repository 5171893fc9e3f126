from .achievements import (
    Achievement,
    AchievementStore,
    STATUSES,
    STATUS_DRAFT,
    STATUS_REJECTED,
    STATUS_SUBMITTED,
    STATUS_VERIFIED,
)

__all__ = [
    'Achievement',
    'AchievementStore',
    'STATUSES',
    'STATUS_DRAFT',
    'STATUS_SUBMITTED',
    'STATUS_VERIFIED',
    'STATUS_REJECTED',
]

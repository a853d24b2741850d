from .notification import (
    AffectedRead,
    BatchResultRead,
    BulkReadRequest,
    FailedIdRead,
    NotificationAnalyticsRead,
    NotificationCountsRead,
    NotificationCreate,
    NotificationIdsRequest,
    NotificationPageRead,
    NotificationRead,
    NotificationStatsRead,
    UnreadCountRead,
)
from .preferences import (
    DeliveryDecisionRead,
    PreferencesPatch,
    PreferencesRead,
    QuietHoursRead,
)

__all__ = [
    "AffectedRead",
    "BatchResultRead",
    "BulkReadRequest",
    "DeliveryDecisionRead",
    "FailedIdRead",
    "NotificationAnalyticsRead",
    "NotificationCountsRead",
    "NotificationCreate",
    "NotificationIdsRequest",
    "NotificationPageRead",
    "NotificationRead",
    "NotificationStatsRead",
    "PreferencesPatch",
    "PreferencesRead",
    "QuietHoursRead",
    "UnreadCountRead",
]

from ouracoach.schemas.conversation import (
    ConversationCreate,
    ConversationRead,
    ConversationUpdate,
    MessageRead,
)
from ouracoach.schemas.dashboard import (
    ActivitySummary,
    DashboardSnapshot,
    DashboardWeek,
    DayActivity,
    DayScore,
    DaySleepDetails,
    HeartRateSample,
    HeartRateSummary,
    ScoreSummary,
    SleepDetails,
    Spo2Summary,
    StressSummary,
    SyncResponse,
    YesterdaySummary,
)
from ouracoach.schemas.system import EnvCheckResponse, SessionUser, StatusResponse
from ouracoach.schemas.user_settings import (
    OuraTokenSaved,
    OuraTokenStatus,
    OuraTokenUpdate,
    ProfileRead,
)
from ouracoach.schemas.voice import QuickReply, TTSRequest, VoiceInfo, VoiceReply

__all__ = [
    "ActivitySummary",
    "ConversationCreate",
    "ConversationRead",
    "ConversationUpdate",
    "DashboardSnapshot",
    "DashboardWeek",
    "DayActivity",
    "DayScore",
    "DaySleepDetails",
    "EnvCheckResponse",
    "HeartRateSample",
    "HeartRateSummary",
    "MessageRead",
    "OuraTokenSaved",
    "OuraTokenStatus",
    "OuraTokenUpdate",
    "ProfileRead",
    "QuickReply",
    "ScoreSummary",
    "SessionUser",
    "SleepDetails",
    "Spo2Summary",
    "StatusResponse",
    "StressSummary",
    "SyncResponse",
    "TTSRequest",
    "VoiceInfo",
    "VoiceReply",
    "YesterdaySummary",
]

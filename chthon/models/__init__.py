from chthon.models.base import IDModel, TimestampModel
from chthon.models.user import User
from chthon.models.refresh_token import RefreshToken
from chthon.models.chat_session import ChatSession
from chthon.models.chat_message import ChatMessage
from chthon.models.analytics_record import AnalyticsRecord

__all__ = [
    'IDModel',
    'TimestampModel',
    'User',
    'RefreshToken',
    'ChatSession',
    'ChatMessage',
    'AnalyticsRecord',
]

# realtime/__init__.py
from .hub import Inbox, RealtimeHub
from .transport import HubTransport, Transport
from .channel import ConnectionStatus, PushChannel, SendResult, Subscription
from .fallback import RestFallback
from .destinations import (
     chat_read,
     chat_send,
     conversation_id_of,
     conversation_topic,
     notification_owner_of,
     notification_queue,
)

__all__ = [
     "Inbox",
     "RealtimeHub",
     "HubTransport",
     "Transport",
     "ConnectionStatus",
     "PushChannel",
     "SendResult",
     "Subscription",
     "RestFallback",
     "chat_read",
     "chat_send",
     "conversation_id_of",
     "conversation_topic",
     "notification_owner_of",
     "notification_queue",
]

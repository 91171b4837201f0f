# realtime/destinations.py
"""
Push-channel addressing.

Subscribers listen on ``/topic/conversations/{id}`` for chat messages and on
``/user/{user_id}/queue/notifications`` for their own notifications. Clients
publish to ``/app/chat.send/{id}`` and ``/app/chat.read/{id}``.
"""
import re
from typing import Optional

CONVERSATION_TOPIC = "/topic/conversations/{conversation_id}"
NOTIFICATION_QUEUE = "/user/{user_id}/queue/notifications"
CHAT_SEND = "/app/chat.send/{conversation_id}"
CHAT_READ = "/app/chat.read/{conversation_id}"

_CONVERSATION_RE = re.compile(r"^/(?:topic/conversations|app/chat\.send|app/chat\.read)/(\d+)$")
_NOTIFICATION_RE = re.compile(r"^/user/(\d+)/queue/notifications$")


def conversation_topic(conversation_id: int) -> str:
     return CONVERSATION_TOPIC.format(conversation_id=conversation_id)


def notification_queue(user_id: int) -> str:
     return NOTIFICATION_QUEUE.format(user_id=user_id)


def chat_send(conversation_id: int) -> str:
     return CHAT_SEND.format(conversation_id=conversation_id)


def chat_read(conversation_id: int) -> str:
     return CHAT_READ.format(conversation_id=conversation_id)


def conversation_id_of(destination: str) -> Optional[int]:
     match = _CONVERSATION_RE.match(destination)
     return int(match.group(1)) if match else None


def notification_owner_of(destination: str) -> Optional[int]:
     match = _NOTIFICATION_RE.match(destination)
     return int(match.group(1)) if match else None

# realtime/hub.py
"""
In-process publish/subscribe broker behind the /ws endpoint.

Each connection owns an ``Inbox`` bound to the event loop that reads it.
``publish`` may be called from any thread (sync request handlers run in a
worker pool), so delivery goes through ``loop.call_soon_threadsafe``.
Nothing is buffered for absent subscribers: a message published while nobody
listens on a destination is dropped.
"""
import asyncio
import json
import logging
import threading
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


def _encode(obj: Any) -> Any:
     if isinstance(obj, (datetime, date)):
          return obj.isoformat()
     if isinstance(obj, Decimal):
          return str(obj)
     raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class Inbox:
     """Queue of ``(destination, body)`` frames for one connection."""

     def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
          self.loop = loop or asyncio.get_running_loop()
          self.queue: "asyncio.Queue[Tuple[str, str]]" = asyncio.Queue()

     def deliver(self, destination: str, body: str) -> None:
          self.loop.call_soon_threadsafe(self.queue.put_nowait, (destination, body))

     async def get(self) -> Tuple[str, str]:
          return await self.queue.get()


class RealtimeHub:

     def __init__(self):
          self._subscribers: Dict[str, Dict[int, Inbox]] = {}
          self._lock = threading.Lock()

     def subscribe(self, destination: str, inbox: Inbox) -> bool:
          """Register ``inbox`` on ``destination``. Returns False if it already was."""
          with self._lock:
               inboxes = self._subscribers.setdefault(destination, {})
               if id(inbox) in inboxes:
                    return False
               inboxes[id(inbox)] = inbox
          logger.debug("Subscribed inbox to %s", destination)
          return True

     def unsubscribe(self, destination: str, inbox: Inbox) -> None:
          with self._lock:
               inboxes = self._subscribers.get(destination)
               if inboxes is None:
                    return
               inboxes.pop(id(inbox), None)
               if not inboxes:
                    del self._subscribers[destination]

     def drop(self, inbox: Inbox) -> None:
          """Remove ``inbox`` from every destination (connection closed)."""
          with self._lock:
               for destination in list(self._subscribers):
                    inboxes = self._subscribers[destination]
                    inboxes.pop(id(inbox), None)
                    if not inboxes:
                         del self._subscribers[destination]

     def subscriber_count(self, destination: str) -> int:
          with self._lock:
               return len(self._subscribers.get(destination, {}))

     def publish(self, destination: str, payload: Any) -> int:
          """JSON-encode ``payload`` and hand it to every inbox on ``destination``."""
          body = json.dumps(payload, default=_encode)
          with self._lock:
               inboxes = list(self._subscribers.get(destination, {}).values())

          delivered = 0
          for inbox in inboxes:
               try:
                    inbox.deliver(destination, body)
                    delivered += 1
               except RuntimeError:
                    # Loop already closed: the connection is gone.
                    logger.warning("Dropping dead subscriber on %s", destination)
                    self.drop(inbox)
          logger.debug("Published to %s (%d subscribers)", destination, delivered)
          return delivered

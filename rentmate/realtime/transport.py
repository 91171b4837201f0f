# realtime/transport.py
"""
Wire-level side of the push channel.

``PushChannel`` talks to a ``Transport``; the transport owns the actual
connection. ``HubTransport`` connects straight to an in-process
``RealtimeHub`` and is what the tests and the local demo use.
"""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Tuple

from rentmate.exceptions import RentmateError, TransportError
from .hub import Inbox, RealtimeHub

logger = logging.getLogger(__name__)

# Put on an inbox to make a pending receive() fail.
_CLOSED = "__closed__"


class Transport(ABC):

     @property
     @abstractmethod
     def connected(self) -> bool:
          ...

     @abstractmethod
     async def connect(self, token: str) -> None:
          """Open the connection. Raises TransportError on failure."""
          ...

     @abstractmethod
     async def subscribe(self, destination: str) -> None:
          ...

     @abstractmethod
     async def unsubscribe(self, destination: str) -> None:
          ...

     @abstractmethod
     async def publish(self, destination: str, payload: dict) -> None:
          ...

     @abstractmethod
     async def receive(self) -> Tuple[str, Any]:
          """Wait for the next ``(destination, payload)``. Raises TransportError on loss."""
          ...

     @abstractmethod
     async def close(self) -> None:
          ...


class HubTransport(Transport):
     """
     Transport bound to a RealtimeHub in the same process.

     ``authenticate`` maps a token to a user id (raising on a bad token);
     ``authorize(user_id, destination)`` gates subscriptions; ``on_publish``
     handles client frames sent to ``/app/...`` destinations. Without
     ``on_publish``, publishes go straight to the hub.
     """

     def __init__(
          self,
          hub: RealtimeHub,
          authenticate: Optional[Callable[[str], int]] = None,
          authorize: Optional[Callable[[int, str], bool]] = None,
          on_publish: Optional[Callable[[int, str, dict], Awaitable[None]]] = None,
     ):
          self.hub = hub
          self._authenticate = authenticate
          self._authorize = authorize
          self._on_publish = on_publish
          self._inbox: Optional[Inbox] = None
          self.user_id: Optional[int] = None

     @property
     def connected(self) -> bool:
          return self._inbox is not None

     async def connect(self, token: str) -> None:
          if self._authenticate is not None:
               try:
                    self.user_id = self._authenticate(token)
               except RentmateError as exc:
                    raise TransportError(f"Connection refused: {exc.message}") from exc
          if self._inbox is not None:
               self.hub.drop(self._inbox)
          self._inbox = Inbox()

     def _require_inbox(self) -> Inbox:
          if self._inbox is None:
               raise TransportError("Transport is not connected")
          return self._inbox

     async def subscribe(self, destination: str) -> None:
          inbox = self._require_inbox()
          if self._authorize is not None and not self._authorize(self.user_id, destination):
               raise TransportError(f"Subscription to {destination} refused")
          self.hub.subscribe(destination, inbox)

     async def unsubscribe(self, destination: str) -> None:
          if self._inbox is not None:
               self.hub.unsubscribe(destination, self._inbox)

     async def publish(self, destination: str, payload: dict) -> None:
          self._require_inbox()
          if self._on_publish is not None:
               await self._on_publish(self.user_id, destination, payload)
          else:
               self.hub.publish(destination, payload)

     async def receive(self) -> Tuple[str, Any]:
          inbox = self._require_inbox()
          destination, body = await inbox.get()
          if destination == _CLOSED:
               raise TransportError(body)
          return destination, json.loads(body)

     def abort(self, reason: str = "Connection lost") -> None:
          """Drop the connection the way a network failure would."""
          inbox = self._inbox
          if inbox is None:
               return
          self.hub.drop(inbox)
          self._inbox = None
          inbox.queue.put_nowait((_CLOSED, reason))
          logger.info("Transport aborted: %s", reason)

     async def close(self) -> None:
          self.abort("Connection closed")
